"""
User Manager for the Security Console
Handles the user directory with administrative permission checks
"""
import logging
import uuid

from catalog import parse_role
from config import AUDIT_EVENTS
from enums import Permission
from errors import NotFoundError, ValidationError
from models import User
from risk_classifier import ActionKind, classify_risk

logger = logging.getLogger(__name__)


class UserManager:
    """
    User management system with administrative functions
    Requires the manage_users permission for directory changes
    """

    def __init__(self, db, security_log, permission_checker):
        self.db = db
        self.security_log = security_log
        self.permission_checker = permission_checker

    def list_users(self):
        """List all users in the system"""
        cursor = self.db.get_connection().cursor()
        cursor.execute("SELECT * FROM users ORDER BY id ASC")
        return [self._row_to_user(row) for row in cursor.fetchall()]

    def get_user(self, user_id):
        """Get user by id or raise NotFoundError"""
        cursor = self.db.get_connection().cursor()
        cursor.execute("SELECT * FROM users WHERE id = ?", (user_id,))
        row = cursor.fetchone()

        if not row:
            raise NotFoundError(f"User '{user_id}' not found")
        return self._row_to_user(row)

    def get_user_by_email(self, email):
        """Get user by email, None if absent"""
        cursor = self.db.get_connection().cursor()
        cursor.execute("SELECT * FROM users WHERE email = ?", (_normalize_email(email),))
        row = cursor.fetchone()
        return self._row_to_user(row) if row else None

    def get_password_hash(self, user_id):
        cursor = self.db.get_connection().cursor()
        cursor.execute("SELECT password_hash FROM users WHERE id = ?", (user_id,))
        row = cursor.fetchone()
        return row['password_hash'] if row else None

    def create_user(self, actor, name, email, role, password):
        """
        Create a new user account
        New accounts start with a temporary password that must be changed
        """
        from auth import hash_password

        self.permission_checker.require_permission(actor, Permission.MANAGE_USERS)

        role = parse_role(role)
        name = _require_name(name)
        email = _normalize_email(email)
        if not email:
            raise ValidationError("Email is required")
        if not password:
            raise ValidationError("A temporary password is required")
        if self.get_user_by_email(email):
            raise ValidationError(f"A user with email '{email}' already exists")

        user_id = f"user-{uuid.uuid4().hex[:8]}"

        with self.db.lock:
            conn = self.db.get_connection()
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO users (id, name, email, role, password_hash, force_password_change)
                VALUES (?, ?, ?, ?, ?, 1)
            """, (user_id, name, email, role.value, hash_password(password)))
            conn.commit()

        self.security_log.append(
            actor.email,
            AUDIT_EVENTS["USER_CREATE"],
            f"Created user {email} with role {role.value}",
            classify_risk(ActionKind.USER_CREATE),
        )
        logger.info("User %s created by %s", email, actor.email)
        return self.get_user(user_id)

    def update_user(self, actor, user_id, name=None, role=None):
        """Change a user's name and/or role"""
        self.permission_checker.require_permission(actor, Permission.MANAGE_USERS)

        user = self.get_user(user_id)
        changes = []

        if name is not None:
            name = _require_name(name)
            if name != user.name:
                changes.append(f"name '{user.name}' -> '{name}'")
                user.name = name

        if role is not None:
            role = parse_role(role)
            if role is not user.role:
                changes.append(f"role {user.role.value} -> {role.value}")
                user.role = role

        if not changes:
            return user

        with self.db.lock:
            conn = self.db.get_connection()
            conn.execute("UPDATE users SET name = ?, role = ? WHERE id = ?",
                         (user.name, user.role.value, user_id))
            conn.commit()

        self.security_log.append(
            actor.email,
            AUDIT_EVENTS["USER_UPDATE"],
            f"Updated user {user.email}: {', '.join(changes)}",
            classify_risk(ActionKind.USER_UPDATE),
        )
        return user

    def delete_user(self, actor, user_id):
        """Delete a user account; administrators cannot delete themselves"""
        self.permission_checker.require_permission(actor, Permission.MANAGE_USERS)

        user = self.get_user(user_id)
        if user.id == actor.id:
            raise ValidationError("Cannot delete your own account")

        with self.db.lock:
            conn = self.db.get_connection()
            conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            conn.commit()

        self.security_log.append(
            actor.email,
            AUDIT_EVENTS["USER_DELETE"],
            f"Deleted user {user.email}",
            classify_risk(ActionKind.USER_DELETE),
        )
        logger.info("User %s deleted by %s", user.email, actor.email)
        return user

    def update_profile(self, user, name):
        """Users may rename themselves without administrative rights"""
        name = _require_name(name)

        with self.db.lock:
            conn = self.db.get_connection()
            conn.execute("UPDATE users SET name = ? WHERE id = ?", (name, user.id))
            conn.commit()

        user.name = name
        return user

    def set_password(self, user_id, password_hash, clear_force_flag=True):
        with self.db.lock:
            conn = self.db.get_connection()
            if clear_force_flag:
                conn.execute("""
                    UPDATE users SET password_hash = ?, force_password_change = 0
                    WHERE id = ?
                """, (password_hash, user_id))
            else:
                conn.execute("UPDATE users SET password_hash = ? WHERE id = ?",
                             (password_hash, user_id))
            conn.commit()

    def _row_to_user(self, row):
        return User(
            id=row['id'],
            name=row['name'],
            email=row['email'],
            role=parse_role(row['role']),
            avatar_url=row['avatar_url'],
            force_password_change=bool(row['force_password_change']),
        )


def _normalize_email(email):
    return (email or "").strip().lower()


def _require_name(name):
    if not name or not name.strip():
        raise ValidationError("Name cannot be empty")
    return name.strip()
