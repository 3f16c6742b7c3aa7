"""
Identifier enums for the Security Console
Closed sets shared by config, records and managers
"""
from enum import Enum


class Role(Enum):
    NETWORK_ADMIN = 'network_admin'
    SUPERINTENDENT = 'superintendent'
    MANAGER = 'manager'
    COLLABORATOR = 'collaborator'
    AUDITOR = 'auditor'


class Permission(Enum):
    VIEW_DASHBOARD = 'view_dashboard'
    VIEW_PROJECTS = 'view_projects'
    CREATE_PROJECTS = 'create_projects'
    EDIT_PROJECTS = 'edit_projects'
    DELETE_PROJECTS = 'delete_projects'
    VIEW_ADMINISTRATIVE = 'view_administrative'
    UPLOAD_DOCUMENTS = 'upload_documents'
    MANAGE_CONTACTS = 'manage_contacts'
    VIEW_FINANCE = 'view_finance'
    CREATE_INVOICES = 'create_invoices'
    MANAGE_INVOICES = 'manage_invoices'
    GENERATE_REPORTS = 'generate_reports'
    MANAGE_PERMISSIONS = 'manage_permissions'
    MANAGE_USERS = 'manage_users'
    VIEW_SECURITY = 'view_security'
    MANAGE_ANTI_FRAUD_SETTINGS = 'manage_anti_fraud_settings'


class RiskLevel(Enum):
    LOW = 'Low'
    MEDIUM = 'Medium'
    HIGH = 'High'


class View(Enum):
    DASHBOARD = 'dashboard'
    PROJECTS = 'projects'
    ADMINISTRATIVE = 'administrative'
    FINANCE = 'finance'
    PERMISSIONS = 'permissions'
    SECURITY = 'security'
    PROFILE = 'profile'


class ProjectStatus(Enum):
    ON_TRACK = 'On Track'
    AT_RISK = 'At Risk'
    OFF_TRACK = 'Off Track'
    COMPLETED = 'Completed'
