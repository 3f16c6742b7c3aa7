"""
Configuration file for the Security Console
Defines roles, permissions, navigation and system constants
"""
import logging
from datetime import date

from enums import Permission, ProjectStatus, Role, View
from models import NavItem, PermissionEntry


# System roles configuration
ROLES = {
    Role.NETWORK_ADMIN: 'Network Administrator - full access to all functions',
    Role.SUPERINTENDENT: 'Superintendent - oversees projects, finance and security',
    Role.MANAGER: 'Manager - runs projects and approves financial operations',
    Role.COLLABORATOR: 'Collaborator - works on projects and uploads documents',
    Role.AUDITOR: 'Auditor - read-only access to records and the security log',
}

# Permission catalog, in display order
PERMISSION_CATALOG = (
    PermissionEntry(Permission.VIEW_DASHBOARD, 'View dashboard', 'General'),
    PermissionEntry(Permission.VIEW_PROJECTS, 'View projects', 'Projects'),
    PermissionEntry(Permission.CREATE_PROJECTS, 'Create new projects', 'Projects'),
    PermissionEntry(Permission.EDIT_PROJECTS, 'Edit projects', 'Projects'),
    PermissionEntry(Permission.DELETE_PROJECTS, 'Delete projects', 'Projects'),
    PermissionEntry(Permission.VIEW_ADMINISTRATIVE, 'View administrative area', 'Administrative'),
    PermissionEntry(Permission.UPLOAD_DOCUMENTS, 'Upload documents', 'Administrative'),
    PermissionEntry(Permission.MANAGE_CONTACTS, 'Manage contacts', 'Administrative'),
    PermissionEntry(Permission.VIEW_FINANCE, 'View finance', 'Finance'),
    PermissionEntry(Permission.CREATE_INVOICES, 'Create invoices', 'Finance'),
    PermissionEntry(Permission.MANAGE_INVOICES, 'Manage invoices', 'Finance'),
    PermissionEntry(Permission.GENERATE_REPORTS, 'Generate reports', 'Finance'),
    PermissionEntry(Permission.MANAGE_PERMISSIONS, 'Manage permissions', 'System'),
    PermissionEntry(Permission.MANAGE_USERS, 'Manage users', 'System'),
    PermissionEntry(Permission.VIEW_SECURITY, 'View security center', 'Security'),
    PermissionEntry(Permission.MANAGE_ANTI_FRAUD_SETTINGS, 'Manage anti-fraud settings', 'Security'),
)

# Role-Permission mappings seeded at startup
ROLE_PERMISSIONS = {
    Role.NETWORK_ADMIN: [
        Permission.VIEW_DASHBOARD, Permission.VIEW_PROJECTS, Permission.CREATE_PROJECTS,
        Permission.EDIT_PROJECTS, Permission.DELETE_PROJECTS, Permission.VIEW_ADMINISTRATIVE,
        Permission.UPLOAD_DOCUMENTS, Permission.MANAGE_CONTACTS, Permission.VIEW_FINANCE,
        Permission.CREATE_INVOICES, Permission.MANAGE_INVOICES, Permission.GENERATE_REPORTS,
        Permission.MANAGE_PERMISSIONS, Permission.MANAGE_USERS, Permission.VIEW_SECURITY,
        Permission.MANAGE_ANTI_FRAUD_SETTINGS,
    ],
    Role.SUPERINTENDENT: [
        Permission.VIEW_DASHBOARD, Permission.VIEW_PROJECTS, Permission.CREATE_PROJECTS,
        Permission.EDIT_PROJECTS, Permission.DELETE_PROJECTS, Permission.VIEW_ADMINISTRATIVE,
        Permission.UPLOAD_DOCUMENTS, Permission.MANAGE_CONTACTS, Permission.VIEW_FINANCE,
        Permission.CREATE_INVOICES, Permission.MANAGE_INVOICES, Permission.GENERATE_REPORTS,
        Permission.VIEW_SECURITY,
    ],
    Role.MANAGER: [
        Permission.VIEW_DASHBOARD, Permission.VIEW_PROJECTS, Permission.CREATE_PROJECTS,
        Permission.EDIT_PROJECTS, Permission.VIEW_ADMINISTRATIVE, Permission.UPLOAD_DOCUMENTS,
        Permission.MANAGE_CONTACTS, Permission.VIEW_FINANCE, Permission.CREATE_INVOICES,
        Permission.MANAGE_INVOICES, Permission.GENERATE_REPORTS, Permission.VIEW_SECURITY,
    ],
    Role.COLLABORATOR: [
        Permission.VIEW_DASHBOARD, Permission.VIEW_PROJECTS, Permission.EDIT_PROJECTS,
        Permission.VIEW_ADMINISTRATIVE, Permission.UPLOAD_DOCUMENTS,
    ],
    Role.AUDITOR: [
        Permission.VIEW_DASHBOARD, Permission.VIEW_PROJECTS, Permission.VIEW_ADMINISTRATIVE,
        Permission.VIEW_FINANCE, Permission.VIEW_SECURITY,
    ],
}

# Roles allowed to authorize high-risk events
AUTHORIZER_ROLES = (Role.NETWORK_ADMIN, Role.SUPERINTENDENT, Role.MANAGER)

# Sidebar navigation, in display order (None = always available)
NAV_ITEMS = (
    NavItem(View.DASHBOARD, 'Dashboard', Permission.VIEW_DASHBOARD),
    NavItem(View.PROJECTS, 'Projects', Permission.VIEW_PROJECTS),
    NavItem(View.ADMINISTRATIVE, 'Administrative', Permission.VIEW_ADMINISTRATIVE),
    NavItem(View.FINANCE, 'Finance', Permission.VIEW_FINANCE),
    NavItem(View.PERMISSIONS, 'Permissions', Permission.MANAGE_PERMISSIONS),
    NavItem(View.SECURITY, 'Security Center', Permission.VIEW_SECURITY),
    NavItem(View.PROFILE, 'My Profile', None),
)

# Actions still reachable while a temporary password is in use
LOCKED_ALLOWED_ACTIONS = ('profile', 'change_password', 'logout')

# Sample users (password for all: DEFAULT_PASSWORD)
SEED_USERS = [
    {'id': 'user-1', 'name': 'Admin User', 'email': 'admin@femar.org.br',
     'role': Role.NETWORK_ADMIN, 'force_password_change': False},
    {'id': 'user-2', 'name': 'Ana Silva', 'email': 'ana.silva@femar.org.br',
     'role': Role.MANAGER, 'force_password_change': True},
    {'id': 'user-3', 'name': 'Carlos Pereira', 'email': 'carlos.pereira@femar.org.br',
     'role': Role.COLLABORATOR, 'force_password_change': True},
    {'id': 'user-4', 'name': 'Joao Mendes', 'email': 'joao.mendes@femar.org.br',
     'role': Role.SUPERINTENDENT, 'force_password_change': False},
    {'id': 'user-5', 'name': 'Sandra Gomes', 'email': 'sandra.gomes@femar.org.br',
     'role': Role.AUDITOR, 'force_password_change': False},
]

# Sample projects shown in the projects area
SEED_PROJECTS = [
    {'id': 'proj-001', 'name': 'Sistema de Monitoramento Marinho', 'manager': 'Ana Silva',
     'start_date': date(2023, 1, 15), 'end_date': date(2024, 6, 30),
     'status': ProjectStatus.ON_TRACK, 'budget': 150000},
    {'id': 'proj-002', 'name': 'Analise de Viabilidade de Projetos Costeiros',
     'manager': 'Joao Mendes', 'start_date': date(2023, 3, 1), 'end_date': date(2024, 9, 20),
     'status': ProjectStatus.AT_RISK, 'budget': 85000},
    {'id': 'proj-003', 'name': 'Digitalizacao de Arquivo Historico', 'manager': 'Fernanda Lima',
     'start_date': date(2022, 10, 10), 'end_date': date(2023, 12, 22),
     'status': ProjectStatus.COMPLETED, 'budget': 50000},
]

# Sample contacts shown in the administrative area
SEED_CONTACTS = [
    {'id': 'con-1', 'name': 'Instituto Oceanografico', 'email': 'contato@io.usp.br',
     'role': 'Partner', 'organization': 'USP'},
    {'id': 'con-2', 'name': 'Mariana Santos', 'email': 'mariana.s@marinha.mil.br',
     'role': 'Manager', 'organization': 'Marinha do Brasil'},
    {'id': 'con-3', 'name': 'Tech Solutions Ltda', 'email': 'comercial@techsolutions.com',
     'role': 'Supplier', 'organization': 'Tech Solutions'},
]

# System settings
DATABASE_NAME = ":memory:"
DEFAULT_PASSWORD = "password123"
MIN_PASSWORD_LENGTH = 8
ANOMALY_THRESHOLD = 20000
DEFAULT_ALERT_EMAIL = "seguranca@femar.org.br"
SYSTEM_ACTOR = "system"
AUDIT_PAGE_SIZE = 50

# Logging
LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Audit action labels
AUDIT_EVENTS = {
    "LOGIN": "Login",
    "PASSWORD_CHANGE": "Password changed",
    "DOCUMENT_UPLOAD": "Document upload",
    "INVOICE_UPLOAD": "Invoice upload",
    "USER_CREATE": "User created",
    "USER_UPDATE": "User updated",
    "USER_DELETE": "User deleted",
    "PERMISSION_SAVE": "Permission matrix changed",
    "PRIVILEGE_ESCALATION": "Potential privilege escalation",
    "REPORT_GENERATION": "Report generated",
    "DATA_EXPORT": "Security report exported",
    "ALERT_SETTINGS_CHANGE": "Alert settings changed",
}
