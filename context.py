"""
Application context for the Security Console
Owns the database and wires every manager to the same state
"""
from alerts import AlertNotifier
from audit import SecurityLog
from authorization import AuthorizationWorkflow
from config import ANOMALY_THRESHOLD, AUTHORIZER_ROLES, DATABASE_NAME, DEFAULT_ALERT_EMAIL
from database import Database
from permission_checker import PermissionChecker
from project_manager import ProjectManager
from role_manager import RoleManager
from upload_manager import UploadManager
from user_manager import UserManager


class AppContext:
    """One console process: state objects passed by reference, no module singletons"""

    def __init__(self, database_name=DATABASE_NAME, anomaly_threshold=ANOMALY_THRESHOLD,
                 alert_email=DEFAULT_ALERT_EMAIL, clock=None, seed_users=True):
        self.db = Database(database_name)
        self.db.init_database(seed_users=seed_users)

        self.anomaly_threshold = anomaly_threshold
        self.security_log = SecurityLog(self.db, clock=clock)
        self.notifier = AlertNotifier(self.security_log, alert_email)
        self.role_manager = RoleManager(self.db, self.security_log)
        self.permission_checker = PermissionChecker(self.role_manager)
        self.workflow = AuthorizationWorkflow(self.security_log, AUTHORIZER_ROLES)
        self.user_manager = UserManager(self.db, self.security_log, self.permission_checker)
        self.project_manager = ProjectManager(self.db, self.permission_checker)
        self.upload_manager = UploadManager(self.db, self.security_log,
                                            self.permission_checker, anomaly_threshold)

    def close(self):
        self.db.close()
