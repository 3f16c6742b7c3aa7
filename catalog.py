"""
Permission catalog for the Security Console
Read-only access to the capability list and identifier parsing
"""
from config import AUTHORIZER_ROLES, NAV_ITEMS, PERMISSION_CATALOG, ROLE_PERMISSIONS, ROLES
from enums import Permission, Role
from errors import ConfigurationError, ValidationError


def enumerate_all():
    """Return every catalog entry in declaration order"""
    return list(PERMISSION_CATALOG)


def group_by_area():
    """
    Group catalog entries by functional area
    Areas keep first-appearance order, entries keep declaration order
    """
    grouped = {}
    for entry in PERMISSION_CATALOG:
        grouped.setdefault(entry.area, []).append(entry)
    return grouped


def get_entry(permission):
    """Return the catalog entry for a permission"""
    permission = parse_permission(permission)
    for entry in PERMISSION_CATALOG:
        if entry.id is permission:
            return entry
    raise ConfigurationError(f"Permission '{permission.value}' is not catalogued")


def _parse(enum_cls, value, kind):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip()
        for member in enum_cls:
            if key == member.value or key.upper() == member.name:
                return member
    raise ValidationError(f"Unknown {kind} identifier: {value!r}")


def parse_role(value):
    """Resolve a Role from a member, its value or its name"""
    return _parse(Role, value, "role")


def parse_permission(value):
    """Resolve a Permission from a member, its value or its name"""
    return _parse(Permission, value, "permission")


def validate_configuration():
    """
    Check the static configuration before seeding
    Raises ConfigurationError on the first inconsistency found
    """
    catalogued = [entry.id for entry in PERMISSION_CATALOG]

    for permission in Permission:
        count = catalogued.count(permission)
        if count != 1:
            raise ConfigurationError(
                f"Permission '{permission.value}' appears {count} times in the catalog")

    for role in Role:
        if role not in ROLES:
            raise ConfigurationError(f"Role '{role.value}' has no description")
        if role not in ROLE_PERMISSIONS:
            raise ConfigurationError(f"Role '{role.value}' has no default permissions")

    for role, permissions in ROLE_PERMISSIONS.items():
        for permission in permissions:
            if permission not in catalogued:
                raise ConfigurationError(
                    f"Default grant '{permission}' for role '{role}' is not catalogued")

    for item in NAV_ITEMS:
        if item.permission is not None and item.permission not in catalogued:
            raise ConfigurationError(
                f"Navigation item '{item.label}' requires an uncatalogued permission")

    for role in AUTHORIZER_ROLES:
        if not isinstance(role, Role):
            raise ConfigurationError(f"Authorizer role {role!r} is not a Role")
