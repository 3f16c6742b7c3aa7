"""
Role Manager for the Security Console
Owns the role-permission map and logs the security-relevant changes
"""
import logging

from catalog import parse_permission, parse_role
from config import AUDIT_EVENTS, ROLES, SYSTEM_ACTOR
from enums import Permission, Role
from errors import ValidationError
from risk_classifier import ActionKind, classify_risk

logger = logging.getLogger(__name__)


class RoleManager:
    """
    Manages the permissions granted to each role
    Mutations apply immediately; save only acknowledges them in the log
    """

    def __init__(self, db, security_log):
        self.db = db
        self.security_log = security_log

    def get_role_permissions(self, role):
        """
        Get all permissions for a specific role
        Returns a set of Permission members (empty if none granted)
        """
        role = parse_role(role)

        cursor = self.db.get_connection().cursor()
        cursor.execute("""
            SELECT permission FROM role_permissions WHERE role = ?
        """, (role.value,))

        return {Permission(row['permission']) for row in cursor.fetchall()}

    def grant_permission(self, role, permission, actor=SYSTEM_ACTOR):
        """
        Grant a permission to a role (idempotent)
        Granting permission management raises a privilege escalation event
        The grant and its escalation event are committed together or not at all
        Returns True if the role did not hold the permission before
        """
        role = parse_role(role)
        permission = parse_permission(permission)
        if not actor or not str(actor).strip():
            raise ValidationError("Permission grants require the acting user")

        with self.db.lock:
            conn = self.db.get_connection()
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    INSERT OR IGNORE INTO role_permissions (role, permission)
                    VALUES (?, ?)
                """, (role.value, permission.value))
                granted = cursor.rowcount == 1

                if granted and permission is Permission.MANAGE_PERMISSIONS:
                    self.security_log.append(
                        actor,
                        AUDIT_EVENTS["PRIVILEGE_ESCALATION"],
                        f"Role '{role.value}' was granted '{permission.value}'",
                        classify_risk(ActionKind.PERMISSION_GRANT, permission),
                    )
                conn.commit()
            except Exception:
                conn.rollback()
                raise

        if granted:
            logger.info("Granted %s to %s (by %s)", permission.value, role.value, actor)
        return granted

    def revoke_permission(self, role, permission, actor=SYSTEM_ACTOR):
        """
        Remove a permission from a role (idempotent)
        Returns True if the role held the permission
        """
        role = parse_role(role)
        permission = parse_permission(permission)

        with self.db.lock:
            conn = self.db.get_connection()
            cursor = conn.cursor()
            cursor.execute("""
                DELETE FROM role_permissions
                WHERE role = ? AND permission = ?
            """, (role.value, permission.value))
            revoked = cursor.rowcount == 1
            conn.commit()

        if revoked:
            logger.info("Revoked %s from %s (by %s)", permission.value, role.value, actor)
        return revoked

    def save_permissions(self, actor):
        """
        Acknowledge the current permission matrix
        Returns the logged 'permission matrix changed' event
        """
        summary = ", ".join(
            f"{role.value}={len(permissions)}"
            for role, permissions in self.get_permission_matrix().items()
        )

        return self.security_log.append(
            actor,
            AUDIT_EVENTS["PERMISSION_SAVE"],
            f"Permission matrix saved: {summary}",
            classify_risk(ActionKind.PERMISSION_SAVE),
        )

    def get_permission_matrix(self):
        """Return role -> set of permissions for every role"""
        return {role: self.get_role_permissions(role) for role in Role}

    def get_all_roles(self):
        """
        Get all roles with their descriptions and permissions
        Returns list of role information
        """
        roles = []
        for role in Role:
            permissions = sorted(p.value for p in self.get_role_permissions(role))
            roles.append({
                'name': role.value,
                'description': ROLES[role],
                'permissions': permissions,
            })
        return roles

    def reset_to_defaults(self):
        """Discard runtime edits and reseed the default grants"""
        with self.db.lock:
            conn = self.db.get_connection()
            cursor = conn.cursor()
            cursor.execute("DELETE FROM role_permissions")
            self.db.seed_role_permissions(cursor)
            conn.commit()

        logger.info("Role permissions reset to defaults")
