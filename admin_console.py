"""
Admin Console for the Security Console
Permission matrix, user directory and security center
"""
import logging
import re

from tabulate import tabulate

from authorization import state_of
from catalog import group_by_area, parse_permission, parse_role
from config import AUDIT_PAGE_SIZE
from enums import Permission, RiskLevel, Role
from errors import ConsoleError
from reports import export_security_report, format_timestamp, security_event_rows

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# command -> (handler name, required permission)
ADMIN_COMMANDS = {
    'permission_matrix': ('handle_permission_matrix', Permission.MANAGE_PERMISSIONS),
    'grant': ('handle_grant', Permission.MANAGE_PERMISSIONS),
    'revoke': ('handle_revoke', Permission.MANAGE_PERMISSIONS),
    'save_permissions': ('handle_save_permissions', Permission.MANAGE_PERMISSIONS),
    'discard_changes': ('handle_discard_changes', Permission.MANAGE_PERMISSIONS),
    'list_users': ('handle_list_users', Permission.MANAGE_USERS),
    'create_user': ('handle_create_user', Permission.MANAGE_USERS),
    'update_user': ('handle_update_user', Permission.MANAGE_USERS),
    'delete_user': ('handle_delete_user', Permission.MANAGE_USERS),
    'view_audit': ('handle_view_audit', Permission.VIEW_SECURITY),
    'event_details': ('handle_event_details', Permission.VIEW_SECURITY),
    'pending': ('handle_pending', Permission.VIEW_SECURITY),
    'authorize': ('handle_authorize', Permission.VIEW_SECURITY),
    'audit_stats': ('handle_audit_stats', Permission.VIEW_SECURITY),
    'export_report': ('handle_export_report', Permission.VIEW_SECURITY),
    'dismiss_alert': ('handle_dismiss_alert', Permission.VIEW_SECURITY),
    'alert_email': ('handle_alert_email', Permission.MANAGE_ANTI_FRAUD_SETTINGS),
}


class AdminConsole:
    """
    Administrative interface for the security console
    Sections appear only for users holding their permission
    """

    def __init__(self, context):
        self.context = context
        self.checker = context.permission_checker

    def display_admin_menu(self, user):
        """Display administrative menu options for user's permissions"""
        sections = []

        if self.checker.has_permission(user.role, Permission.MANAGE_PERMISSIONS):
            sections.append("""PERMISSIONS:
  permission_matrix - Show permissions per role, grouped by area
  grant             - Grant permission to role
  revoke            - Revoke permission from role
  save_permissions  - Save the permission matrix
  discard_changes   - Restore the default permission matrix""")

        if self.checker.has_permission(user.role, Permission.MANAGE_USERS):
            sections.append("""USER MANAGEMENT:
  list_users        - List all users in system
  create_user       - Create new user account
  update_user       - Change user name or role
  delete_user       - Delete user account""")

        if self.checker.has_permission(user.role, Permission.VIEW_SECURITY):
            sections.append("""SECURITY CENTER:
  view_audit        - View security event log
  event_details     - Show one event in full
  pending           - Events awaiting authorization
  authorize         - Authorize a high-risk event
  audit_stats       - Security event statistics
  export_report     - Export the security report
  dismiss_alert     - Hide the active alert banner""")

        if self.checker.has_permission(user.role, Permission.MANAGE_ANTI_FRAUD_SETTINGS):
            sections.append("""ANTI-FRAUD SETTINGS:
  alert_email       - Change the high-risk alert email""")

        sections.append("""SYSTEM:
  help              - Show this menu
  back              - Return to user console""")

        print("\nADMINISTRATIVE CONSOLE - Available Commands:\n")
        print("\n\n".join(sections))

    def handle_permission_matrix(self, user):
        """Display the permission matrix grouped by area"""
        matrix = self.context.role_manager.get_permission_matrix()
        roles = list(Role)

        table_data = []
        for area, entries in group_by_area().items():
            table_data.append([f"[{area}]"] + [""] * len(roles))
            for entry in entries:
                table_data.append(
                    [entry.label] + ["x" if entry.id in matrix[role] else "" for role in roles])

        headers = ["Permission"] + [role.value for role in roles]
        print(tabulate(table_data, headers=headers, tablefmt="grid"))

    def _prompt_role_and_permission(self):
        print("Roles: " + ", ".join(role.value for role in Role))
        role = parse_role(input("Enter role: ").strip())
        permission = parse_permission(input("Enter permission: ").strip())
        return role, permission

    def handle_grant(self, user):
        """Grant permission to role"""
        role, permission = self._prompt_role_and_permission()
        changed = self.context.role_manager.grant_permission(role, permission, actor=user.email)

        if changed:
            print(f"Success: '{permission.value}' granted to '{role.value}'")
            if permission is Permission.MANAGE_PERMISSIONS:
                print("Warning: privilege escalation logged as a high-risk event")
        else:
            print(f"Role '{role.value}' already holds '{permission.value}'")

    def handle_revoke(self, user):
        """Revoke permission from role"""
        role, permission = self._prompt_role_and_permission()
        changed = self.context.role_manager.revoke_permission(role, permission, actor=user.email)

        if changed:
            print(f"Success: '{permission.value}' revoked from '{role.value}'")
        else:
            print(f"Role '{role.value}' does not hold '{permission.value}'")

    def handle_save_permissions(self, user):
        self.context.role_manager.save_permissions(user.email)
        print("Permissions saved successfully")

    def handle_discard_changes(self, user):
        confirm = input("Restore the default permission matrix? (yes/no): ").strip().lower()
        if confirm != 'yes':
            print("Discard cancelled")
            return
        self.context.role_manager.reset_to_defaults()
        print("Default permissions restored")

    def handle_list_users(self, user):
        """Display all users in the system"""
        users = self.context.user_manager.list_users()
        if not users:
            print("No users found in system")
            return

        table_data = [
            [u.id, u.name, u.email, u.role.value,
             "Temporary password" if u.force_password_change else "Active"]
            for u in users
        ]

        headers = ["ID", "Name", "Email", "Role", "Status"]
        print(tabulate(table_data, headers=headers, tablefmt="grid"))
        print(f"\nTotal users: {len(users)}")

    def handle_create_user(self, user):
        """Create new user account"""
        name = input("Enter name: ").strip()
        email = input("Enter email: ").strip()
        if not EMAIL_PATTERN.match(email):
            print("Error: Please enter a valid email address")
            return
        role = input("Enter role: ").strip()
        password = input("Enter temporary password: ").strip()

        created = self.context.user_manager.create_user(user, name, email, role, password)
        print(f"User '{created.email}' created with ID: {created.id}")
        print("The user must change the temporary password at first login.")

    def handle_update_user(self, user):
        """Change user name or role"""
        user_id = input("Enter user ID: ").strip()
        name = input("New name (blank to keep): ").strip() or None
        role = input("New role (blank to keep): ").strip() or None

        updated = self.context.user_manager.update_user(user, user_id, name=name, role=role)
        print(f"User '{updated.email}' is now {updated.name} ({updated.role.value})")

    def handle_delete_user(self, user):
        """Delete user account"""
        user_id = input("Enter user ID to delete: ").strip()

        confirm = input("Are you sure you want to delete this user? (yes/no): ").strip().lower()
        if confirm != 'yes':
            print("Deletion cancelled")
            return

        deleted = self.context.user_manager.delete_user(user, user_id)
        print(f"User '{deleted.email}' deleted")

    def handle_view_audit(self, user):
        """Display security events with filtering options"""
        print("\nSecurity Log Filter Options:")
        print("1 - All events")
        print("2 - High risk only")
        print("3 - Awaiting authorization")
        print("4 - Authorized events")
        print("5 - Events by user")

        choice = input("Select filter (1-5): ").strip()

        filters = {}
        if choice == "2":
            filters['risk_level'] = RiskLevel.HIGH
        elif choice == "3":
            filters['pending'] = True
        elif choice == "4":
            filters['authorized'] = True
        elif choice == "5":
            filters['user'] = input("Enter user email: ").strip().lower()

        try:
            limit = int(input(f"Enter number of records to show (default {AUDIT_PAGE_SIZE}): ")
                        or AUDIT_PAGE_SIZE)
        except ValueError:
            limit = AUDIT_PAGE_SIZE

        events = self.context.security_log.get_security_events(filters, limit=limit)
        if not events:
            print("No security events found matching criteria")
            return

        table_data = [[event.id] + row for event, row in zip(events, security_event_rows(events))]
        headers = ["ID", "Timestamp", "User", "Action", "Risk", "Authorized"]
        print(tabulate(table_data, headers=headers, tablefmt="grid"))
        print(f"\nShowing {len(events)} security events")

    def handle_event_details(self, user):
        """Show one event in full"""
        event = self.context.security_log.get_event(input("Enter event ID: ").strip())

        print("\nSECURITY EVENT DETAILS:")
        print("=" * 50)
        print(f"Event ID: {event.id}")
        print(f"Timestamp: {format_timestamp(event.timestamp)}")
        print(f"User: {event.user}")
        print(f"Action: {event.action}")
        print(f"Details: {event.details or 'N/A'}")
        print(f"Risk Level: {event.risk_level.value}")
        print(f"State: {state_of(event).value.replace('_', ' ')}")

        if event.authorization_info:
            info = event.authorization_info
            print(f"Authorized By: {info.authorized_by}")
            print(f"Authorized At: {format_timestamp(info.timestamp)}")
            print(f"Justification: {info.justification}")

    def handle_pending(self, user):
        events = self.context.workflow.pending_events()
        if not events:
            print("No events awaiting authorization")
            return

        table_data = [
            [event.id, format_timestamp(event.timestamp), event.user, event.action, event.details]
            for event in events
        ]
        headers = ["ID", "Timestamp", "User", "Action", "Details"]
        print(tabulate(table_data, headers=headers, tablefmt="grid"))
        print(f"\nAwaiting authorization: {len(events)}")

    def handle_authorize(self, user):
        """Authorize a high-risk event with a justification"""
        workflow = self.context.workflow
        if not workflow.can_authorize(user):
            print(f"Error: Role '{user.role.value}' cannot authorize security events")
            return

        event_id = input("Enter event ID to authorize: ").strip()
        event = self.context.security_log.get_event(event_id)
        print(f"Action \"{event.action}\" by {event.user} was flagged as {event.risk_level.value} risk.")

        justification = input("Justification: ").strip()
        if not justification:
            print("Error: A justification is required")
            return

        authorized = workflow.authorize(user, event_id, justification)
        print(f"Event {authorized.id} authorized by {authorized.authorization_info.authorized_by}")

    def handle_audit_stats(self, user):
        """Display security event statistics"""
        stats = self.context.security_log.get_audit_statistics()

        print("\nSECURITY STATISTICS:")
        print("=" * 40)
        print(f"Total Events: {stats['total_events']}")
        for level, count in stats['by_risk_level'].items():
            print(f"{level.value} Risk: {count}")
        print(f"Awaiting Authorization: {stats['pending_authorization']}")
        print(f"Authorized: {stats['authorized_events']}")
        print(f"Last 24h Activity: {stats['last_24h_activity']}")

        print("\nEvents by Action:")
        for action, count in stats['events_by_action']:
            print(f"  {action}: {count}")

    def handle_export_report(self, user):
        print(export_security_report(self.context, user))

    def handle_dismiss_alert(self, user):
        if self.context.notifier.dismiss():
            print("Alert dismissed. The event remains pending in the security log.")
        else:
            print("No active alert")

    def handle_alert_email(self, user):
        """Change the destination of high-risk alerts"""
        print(f"Current alert email: {self.context.notifier.alert_email}")
        email = input("New alert email: ").strip()
        if not EMAIL_PATTERN.match(email):
            print("Error: Please enter a valid email address")
            return

        self.context.notifier.set_alert_email(user, email, self.checker)
        print("Alert email updated successfully")

    def dispatch(self, user, command):
        """
        Run one admin command after permission checks
        Returns False for unknown commands
        """
        if command not in ADMIN_COMMANDS:
            return False

        handler_name, permission = ADMIN_COMMANDS[command]
        try:
            self.checker.require_permission(user, permission)
            getattr(self, handler_name)(user)
        except ConsoleError as e:
            print(f"Error: {e.message}")
        return True

    def run_admin_console(self, user):
        """Run administrative console interface"""
        print("\n" + "=" * 60)
        print("          SECURITY CONSOLE - ADMINISTRATIVE CONSOLE")
        print("=" * 60)
        self.display_admin_menu(user)

        while True:
            try:
                command = input("\nadmin> ").strip().lower()

                if command == "":
                    continue
                elif command == "help":
                    self.display_admin_menu(user)
                elif command == "back":
                    print("Returning to user console...")
                    break
                elif not self.dispatch(user, command):
                    print("Unknown command. Type 'help' for available commands.")

            except KeyboardInterrupt:
                print("\n\nExiting admin console.")
                break
            except EOFError:
                break
            except Exception as e:
                logger.exception("Admin console command failed")
                print(f"Admin console error: {e}")
