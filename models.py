"""
Record types for the Security Console
Plain dataclasses shared by the managers and consoles
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from enums import Permission, ProjectStatus, RiskLevel, Role, View


@dataclass(frozen=True)
class PermissionEntry:
    """Catalog entry: capability id with its label and functional area"""
    id: Permission
    label: str
    area: str


@dataclass(frozen=True)
class NavItem:
    view: View
    label: str
    permission: Optional[Permission] = None


@dataclass(frozen=True)
class NavEntry:
    """Navigation item after filtering, with its lock state"""
    item: NavItem
    disabled: bool = False


@dataclass
class User:
    id: str
    name: str
    email: str
    role: Role
    avatar_url: Optional[str] = None
    force_password_change: bool = False


@dataclass(frozen=True)
class AuthorizationInfo:
    authorized_by: str
    timestamp: datetime
    justification: str


@dataclass(frozen=True)
class SecurityEvent:
    """
    Audit record snapshot
    Only the authorization columns may change after creation, once
    """
    id: str
    timestamp: datetime
    user: str
    action: str
    details: str
    risk_level: RiskLevel
    authorization_info: Optional[AuthorizationInfo] = None

    @property
    def requires_authorization(self):
        return self.risk_level is RiskLevel.HIGH

    @property
    def is_authorized(self):
        return self.authorization_info is not None

    @property
    def is_pending(self):
        return self.requires_authorization and not self.is_authorized


@dataclass(frozen=True)
class Alert:
    """High-risk notification presented to security viewers"""
    event: SecurityEvent
    email: str


@dataclass(frozen=True)
class Upload:
    id: int
    kind: str
    file_name: str
    amount: Optional[float]
    uploaded_by: str
    uploaded_at: datetime
    event_id: str


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    manager: str
    start_date: date
    end_date: date
    status: ProjectStatus
    budget: float


@dataclass(frozen=True)
class Contact:
    """External partner or supplier kept in the administrative area"""
    id: str
    name: str
    email: str
    role: str
    organization: str
