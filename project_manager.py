"""
Project Manager for the Security Console
Read-only access to projects and administrative contacts
"""
from datetime import date

from enums import Permission, ProjectStatus
from errors import NotFoundError, ValidationError
from models import Contact, Project


def parse_project_status(value):
    """Resolve a ProjectStatus from a member, its value or its name"""
    if isinstance(value, ProjectStatus):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        for status in ProjectStatus:
            if key in (status.value.lower(), status.name.lower()):
                return status
    raise ValidationError(f"Unknown project status: {value!r}")


class ProjectManager:
    """
    Lists the seeded projects and contacts
    Projects need view_projects; contacts live in the administrative area
    """

    def __init__(self, db, permission_checker):
        self.db = db
        self.permission_checker = permission_checker

    def list_projects(self, actor, status=None):
        """List projects ordered by id, optionally of one status"""
        self.permission_checker.require_permission(actor, Permission.VIEW_PROJECTS)

        query = "SELECT * FROM projects"
        params = []
        if status is not None:
            query += " WHERE status = ?"
            params.append(parse_project_status(status).value)
        query += " ORDER BY id ASC"

        cursor = self.db.get_connection().cursor()
        cursor.execute(query, params)
        return [self._row_to_project(row) for row in cursor.fetchall()]

    def get_project(self, actor, project_id):
        self.permission_checker.require_permission(actor, Permission.VIEW_PROJECTS)

        cursor = self.db.get_connection().cursor()
        cursor.execute("SELECT * FROM projects WHERE id = ?", (project_id,))
        row = cursor.fetchone()

        if not row:
            raise NotFoundError(f"Project '{project_id}' not found")
        return self._row_to_project(row)

    def list_contacts(self, actor):
        """List administrative contacts ordered by name"""
        self.permission_checker.require_permission(actor, Permission.VIEW_ADMINISTRATIVE)

        cursor = self.db.get_connection().cursor()
        cursor.execute("SELECT * FROM contacts ORDER BY name ASC")
        return [
            Contact(
                id=row['id'],
                name=row['name'],
                email=row['email'],
                role=row['role'] or "",
                organization=row['organization'] or "",
            )
            for row in cursor.fetchall()
        ]

    def _row_to_project(self, row):
        return Project(
            id=row['id'],
            name=row['name'],
            manager=row['manager'],
            start_date=date.fromisoformat(row['start_date']),
            end_date=date.fromisoformat(row['end_date']),
            status=parse_project_status(row['status']),
            budget=row['budget'],
        )
