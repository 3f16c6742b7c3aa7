"""
Database management for the Security Console
Holds the in-memory SQLite store owned by one application context
"""
import logging
import sqlite3
import threading

from config import (DATABASE_NAME, DEFAULT_PASSWORD, PERMISSION_CATALOG, ROLES,
                    ROLE_PERMISSIONS, SEED_CONTACTS, SEED_PROJECTS, SEED_USERS)

logger = logging.getLogger(__name__)


class Database:
    """
    Single SQLite connection plus the lock that serializes write sections
    Nothing outlives the process when DATABASE_NAME is ':memory:'
    """

    def __init__(self, database_name=DATABASE_NAME):
        self.database_name = database_name
        self.conn = sqlite3.connect(database_name, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.lock = threading.RLock()

    def get_connection(self):
        """Return the shared connection"""
        return self.conn

    def close(self):
        self.conn.close()

    def init_database(self, seed_users=True):
        """
        Initialize tables for roles, permissions, users, events, uploads, projects and contacts
        Seeds the catalog, default role grants, sample records and optionally sample users
        """
        from catalog import validate_configuration
        validate_configuration()

        cursor = self.conn.cursor()

        # Create roles table
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS roles (
                name TEXT PRIMARY KEY,
                description TEXT
            )
        """)

        # Create permissions table (position keeps catalog order)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS permissions (
                name TEXT PRIMARY KEY,
                label TEXT NOT NULL,
                area TEXT NOT NULL,
                position INTEGER NOT NULL
            )
        """)

        # Create role_permissions table (set semantics per role)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS role_permissions (
                role TEXT NOT NULL,
                permission TEXT NOT NULL,
                PRIMARY KEY (role, permission),
                FOREIGN KEY (role) REFERENCES roles (name),
                FOREIGN KEY (permission) REFERENCES permissions (name)
            )
        """)

        # Create users table
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT UNIQUE NOT NULL,
                role TEXT NOT NULL,
                avatar_url TEXT,
                password_hash TEXT NOT NULL,
                force_password_change BOOLEAN NOT NULL DEFAULT 0,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (role) REFERENCES roles (name)
            )
        """)

        # Create security events table (seq gives insertion order)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS security_events (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT UNIQUE NOT NULL,
                timestamp TEXT NOT NULL,
                user TEXT NOT NULL,
                action TEXT NOT NULL,
                details TEXT,
                risk_level TEXT NOT NULL,
                authorized_by TEXT,
                authorized_at TEXT,
                justification TEXT
            )
        """)

        # Create uploads table
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS uploads (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                kind TEXT NOT NULL,
                file_name TEXT NOT NULL,
                amount REAL,
                uploaded_by TEXT NOT NULL,
                uploaded_at TEXT NOT NULL,
                event_id TEXT NOT NULL,
                FOREIGN KEY (event_id) REFERENCES security_events (id)
            )
        """)

        # Create projects table
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS projects (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                manager TEXT NOT NULL,
                start_date TEXT NOT NULL,
                end_date TEXT NOT NULL,
                status TEXT NOT NULL,
                budget REAL NOT NULL
            )
        """)

        # Create contacts table
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS contacts (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT NOT NULL,
                role TEXT,
                organization TEXT
            )
        """)

        # Insert default roles
        for role, description in ROLES.items():
            cursor.execute("""
                INSERT OR IGNORE INTO roles (name, description)
                VALUES (?, ?)
            """, (role.value, description))

        # Insert permission catalog
        for position, entry in enumerate(PERMISSION_CATALOG):
            cursor.execute("""
                INSERT OR IGNORE INTO permissions (name, label, area, position)
                VALUES (?, ?, ?, ?)
            """, (entry.id.value, entry.label, entry.area, position))

        self.seed_role_permissions(cursor)

        for project in SEED_PROJECTS:
            cursor.execute("""
                INSERT OR IGNORE INTO projects (id, name, manager, start_date, end_date, status, budget)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (project['id'], project['name'], project['manager'],
                  project['start_date'].isoformat(), project['end_date'].isoformat(),
                  project['status'].value, project['budget']))

        for contact in SEED_CONTACTS:
            cursor.execute("""
                INSERT OR IGNORE INTO contacts (id, name, email, role, organization)
                VALUES (?, ?, ?, ?, ?)
            """, (contact['id'], contact['name'], contact['email'],
                  contact['role'], contact['organization']))

        if seed_users:
            self.seed_users(cursor)

        self.conn.commit()
        logger.info("Security console database initialized (%s)", self.database_name)

    def seed_role_permissions(self, cursor):
        """Assign default permissions to roles"""
        for role, permissions in ROLE_PERMISSIONS.items():
            for permission in permissions:
                cursor.execute("""
                    INSERT OR IGNORE INTO role_permissions (role, permission)
                    VALUES (?, ?)
                """, (role.value, permission.value))

    def seed_users(self, cursor):
        """Create the sample users when the directory is empty"""
        from auth import hash_password

        cursor.execute("SELECT COUNT(*) FROM users")
        if cursor.fetchone()[0] > 0:
            return

        password_hash = hash_password(DEFAULT_PASSWORD)
        for user in SEED_USERS:
            cursor.execute("""
                INSERT INTO users (id, name, email, role, avatar_url,
                                   password_hash, force_password_change)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (user['id'], user['name'], user['email'], user['role'].value,
                  user.get('avatar_url'), password_hash, user['force_password_change']))

        logger.info("Seeded %d sample users", len(SEED_USERS))
