"""
Risk classification for the Security Console
Deterministic rules assigning a risk level to a logged action
"""
import math
from enum import Enum
from numbers import Real

from config import ANOMALY_THRESHOLD
from enums import Permission, RiskLevel
from errors import ValidationError


class ActionKind(Enum):
    LOGIN = 'login'
    PASSWORD_CHANGE = 'password_change'
    DOCUMENT_UPLOAD = 'document_upload'
    INVOICE_UPLOAD = 'invoice_upload'
    USER_CREATE = 'user_create'
    USER_UPDATE = 'user_update'
    USER_DELETE = 'user_delete'
    PERMISSION_SAVE = 'permission_save'
    PERMISSION_GRANT = 'permission_grant'
    PERMISSION_REVOKE = 'permission_revoke'
    REPORT_GENERATION = 'report_generation'
    DATA_EXPORT = 'data_export'
    ALERT_SETTINGS_CHANGE = 'alert_settings_change'


UPLOAD_KINDS = frozenset({ActionKind.DOCUMENT_UPLOAD, ActionKind.INVOICE_UPLOAD})

ADMINISTRATIVE_KINDS = frozenset({
    ActionKind.USER_CREATE, ActionKind.USER_UPDATE, ActionKind.USER_DELETE,
    ActionKind.PERMISSION_SAVE, ActionKind.PERMISSION_GRANT, ActionKind.PERMISSION_REVOKE,
    ActionKind.ALERT_SETTINGS_CHANGE,
})

REPORTING_KINDS = frozenset({ActionKind.REPORT_GENERATION, ActionKind.DATA_EXPORT})

ROUTINE_KINDS = frozenset({ActionKind.LOGIN, ActionKind.PASSWORD_CHANGE}) | UPLOAD_KINDS


def _grants_permission_management(value, threshold):
    return value is Permission.MANAGE_PERMISSIONS or value == Permission.MANAGE_PERMISSIONS.value


def _exceeds_threshold(value, threshold):
    if value is None:
        return False
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(f"Monetary amount must be numeric, got {value!r}")
    if not math.isfinite(value):
        raise ValidationError(f"Monetary amount must be finite, got {value!r}")
    return value > threshold


def _always(value, threshold):
    return True


# (priority, action kinds, condition, level); highest priority that matches wins
RISK_RULES = (
    (100, frozenset({ActionKind.PERMISSION_GRANT}), _grants_permission_management, RiskLevel.HIGH),
    (90, UPLOAD_KINDS, _exceeds_threshold, RiskLevel.HIGH),
    (50, ADMINISTRATIVE_KINDS, _always, RiskLevel.MEDIUM),
    (50, REPORTING_KINDS, _always, RiskLevel.MEDIUM),
    (10, ROUTINE_KINDS, _always, RiskLevel.LOW),
)


def parse_action_kind(value):
    if isinstance(value, ActionKind):
        return value
    try:
        return ActionKind(value)
    except ValueError:
        raise ValidationError(f"Unknown action kind: {value!r}") from None


def classify_risk(action_kind, value=None, threshold=ANOMALY_THRESHOLD):
    """
    Assign a risk level to an action
    value is the contextual datum: an amount for uploads, the permission for grants
    """
    action_kind = parse_action_kind(action_kind)

    for _priority, kinds, condition, level in sorted(RISK_RULES, key=lambda rule: -rule[0]):
        if action_kind in kinds and condition(value, threshold):
            return level

    raise ValidationError(f"No risk rule covers action kind '{action_kind.value}'")
