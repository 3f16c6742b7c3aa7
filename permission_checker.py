"""
Permission Checker for the Security Console
Answers access questions against the live role-permission map
"""
import logging

from catalog import parse_permission, parse_role
from config import LOCKED_ALLOWED_ACTIONS, NAV_ITEMS
from enums import View
from errors import PermissionDenied
from models import NavEntry

logger = logging.getLogger(__name__)


class PermissionChecker:
    """
    Verifies role permissions and gates navigation
    Holds no state of its own; every answer reads the current map
    """

    def __init__(self, role_manager):
        self.role_manager = role_manager

    def has_permission(self, role, permission):
        """Check if role currently holds the permission"""
        permission = parse_permission(permission)
        return permission in self.role_manager.get_role_permissions(role)

    def filter_permissions(self, role, candidates):
        """Return the candidates held by role, in candidate order"""
        held = self.role_manager.get_role_permissions(role)
        return [p for p in candidates if parse_permission(p) in held]

    def visible_nav_items(self, role, candidates=NAV_ITEMS, locked=False):
        """
        Filter navigation items by the role's permissions
        When locked, every kept item except the profile is disabled
        """
        role = parse_role(role)
        held = self.role_manager.get_role_permissions(role)

        entries = []
        for item in candidates:
            if item.permission is not None and item.permission not in held:
                continue
            disabled = locked and item.view is not View.PROFILE
            entries.append(NavEntry(item=item, disabled=disabled))

        return entries

    def navigation_for(self, user, candidates=NAV_ITEMS):
        """Navigation entries for a user, honoring the temporary-password lock"""
        return self.visible_nav_items(user.role, candidates, locked=self.is_role_locked(user))

    def is_role_locked(self, user):
        """True while the user must still replace a temporary password"""
        return bool(user.force_password_change)

    def is_action_allowed(self, user, action):
        """Locked users may only reach their profile, change password or log out"""
        if not self.is_role_locked(user):
            return True
        return action in LOCKED_ALLOWED_ACTIONS

    def require_permission(self, user, permission):
        """
        Raise PermissionDenied unless user may exercise the permission
        Locked users are refused every permission-guarded action
        """
        permission = parse_permission(permission)

        if self.is_role_locked(user):
            logger.warning("Locked account %s attempted %s", user.email, permission.value)
            raise PermissionDenied("Change your temporary password before using the system")

        if not self.has_permission(user.role, permission):
            logger.warning("Permission denied: %s (%s) lacks %s",
                           user.email, user.role.value, permission.value)
            raise PermissionDenied(f"Insufficient permissions: '{permission.value}' required")
