"""
User Console for the Security Console
Navigation gated by role permissions, profile and day-to-day operations
"""
import logging
import math

from tabulate import tabulate

from admin_console import AdminConsole
from alerts import format_banner
from auth import change_password, logout_user
from enums import Permission, View
from errors import ConsoleError
from reports import format_timestamp, generate_financial_report
from upload_manager import document_type_for

logger = logging.getLogger(__name__)

# Operations reachable from a view, with the permission each one needs
VIEW_ACTIONS = {
    'upload_document': (View.ADMINISTRATIVE, Permission.UPLOAD_DOCUMENTS),
    'upload_invoice': (View.FINANCE, Permission.CREATE_INVOICES),
    'finance_report': (View.FINANCE, Permission.GENERATE_REPORTS),
    'edit_profile': (View.PROFILE, None),
    'change_password': (View.PROFILE, None),
}


class UserConsole:
    """
    User interface for the security console
    A temporary password disables everything but the profile and logout
    """

    def __init__(self, context):
        self.context = context
        self.checker = context.permission_checker
        self.admin_console = AdminConsole(context)

    def display_user_menu(self, user):
        """Display navigation built from the user's permissions"""
        entries = self.checker.navigation_for(user)

        print(f"\nSECURITY CONSOLE - Welcome {user.name}")
        print(f"Role: {user.role.value}")
        if self.checker.is_role_locked(user):
            print("\nYour password is temporary. Change it to unlock navigation "
                  "(profile -> change_password).")

        print("\nNAVIGATION:")
        for entry in entries:
            status = "  [locked]" if entry.disabled else ""
            print(f"  {entry.item.view.value:<15} - {entry.item.label}{status}")

        print("""
ACTIONS:
  upload_document - Upload a document (administrative)
  upload_invoice  - Upload an invoice (finance)
  finance_report  - Generate the financial report
  edit_profile    - Change my display name
  change_password - Change my password

SYSTEM:
  help            - Show this menu
  logout          - Logout and return to main menu
""")

    def show_alert_banner(self, user):
        """Print the active high-risk alert for security viewers"""
        if not self.checker.has_permission(user.role, Permission.VIEW_SECURITY):
            return
        alert = self.context.notifier.current_alert()
        if alert:
            print(format_banner(alert, self.context.notifier.pending_count()))

    def _nav_entry(self, user, view):
        for entry in self.checker.navigation_for(user):
            if entry.item.view is view:
                return entry
        return None

    def can_open(self, user, view):
        """View must be visible for the role and not disabled"""
        entry = self._nav_entry(user, view)
        return entry is not None and not entry.disabled

    def handle_dashboard(self, user):
        """Summary of activity visible to the user"""
        uploads = self.context.upload_manager.list_uploads()
        print("\nDASHBOARD:")
        print("=" * 40)
        print(f"Documents uploaded: {len([u for u in uploads if u.kind == 'document'])}")
        print(f"Invoices uploaded: {len([u for u in uploads if u.kind == 'invoice'])}")

        if self.checker.has_permission(user.role, Permission.VIEW_SECURITY):
            stats = self.context.security_log.get_audit_statistics()
            print(f"Security events: {stats['total_events']}")
            print(f"Awaiting authorization: {stats['pending_authorization']}")

    def handle_projects(self, user):
        """List projects with their status and budget"""
        projects = self.context.project_manager.list_projects(user)
        if not projects:
            print("No projects registered")
            return

        table_data = [
            [p.id, p.name, p.manager, p.status.value, p.end_date.isoformat(), f"{p.budget:,.2f}"]
            for p in projects
        ]
        headers = ["ID", "Name", "Manager", "Status", "End Date", "Budget"]
        print(tabulate(table_data, headers=headers, tablefmt="grid"))

    def handle_administrative(self, user):
        """List uploaded documents and administrative contacts"""
        documents = self.context.upload_manager.list_uploads('document')
        if not documents:
            print("No documents uploaded")
        else:
            table_data = [
                [doc.id, doc.file_name, document_type_for(doc.file_name), doc.uploaded_by,
                 format_timestamp(doc.uploaded_at)]
                for doc in documents
            ]
            headers = ["ID", "Name", "Type", "Uploaded By", "Uploaded"]
            print(tabulate(table_data, headers=headers, tablefmt="grid"))

        contacts = self.context.project_manager.list_contacts(user)
        if contacts:
            print("\nCONTACTS:")
            table_data = [[c.name, c.email, c.role, c.organization] for c in contacts]
            headers = ["Name", "Email", "Role", "Organization"]
            print(tabulate(table_data, headers=headers, tablefmt="grid"))

    def handle_finance(self, user):
        """List uploaded invoices"""
        invoices = self.context.upload_manager.list_uploads('invoice')
        if not invoices:
            print("No invoices uploaded")
            return

        table_data = [
            [inv.id, inv.file_name, f"{inv.amount:.2f}", inv.uploaded_by,
             format_timestamp(inv.uploaded_at)]
            for inv in invoices
        ]
        headers = ["ID", "File", "Amount", "Uploaded By", "Uploaded"]
        print(tabulate(table_data, headers=headers, tablefmt="grid"))

    def handle_profile(self, user):
        print(f"\nName: {user.name}")
        print(f"Email: {user.email}")
        print(f"Role: {user.role.value}")
        print(f"Password: {'temporary - change required' if user.force_password_change else 'set'}")

    def handle_edit_profile(self, user):
        name = input("Enter new name: ").strip()
        self.context.user_manager.update_profile(user, name)
        print("Profile saved successfully")

    def handle_change_password(self, user):
        """Change password; clears the temporary-password lock"""
        current = input("Current password: ")
        new = input("New password: ")
        confirm = input("Confirm new password: ")

        change_password(self.context, user, current, new, confirm)
        print("Password changed successfully! You can now navigate the system.")

    def handle_upload_document(self, user):
        file_name = input("Enter file name: ").strip()
        amount = self._prompt_amount("Monetary amount (blank if none): ", required=False)
        upload, event = self.context.upload_manager.upload_document(user, file_name, amount)
        self._report_upload(upload, event)

    def handle_upload_invoice(self, user):
        file_name = input("Enter invoice file name: ").strip()
        amount = self._prompt_amount("Invoice amount: ", required=True)
        if amount is None:
            return
        upload, event = self.context.upload_manager.upload_invoice(user, file_name, amount)
        self._report_upload(upload, event)

    def handle_finance_report(self, user):
        print(generate_financial_report(self.context, user))

    def _prompt_amount(self, prompt, required):
        raw = input(prompt).strip().replace(",", "")
        if not raw:
            if required:
                print("Error: An amount is required")
            return None
        try:
            amount = float(raw)
        except ValueError:
            amount = None
        if amount is None or not math.isfinite(amount):
            print("Error: Please enter a valid amount")
            return None
        return amount

    def _report_upload(self, upload, event):
        print(f"Uploaded '{upload.file_name}' (ID: {upload.id})")
        if event.is_pending:
            print(f"Amount above the anomaly threshold: event {event.id} awaits authorization")

    def dispatch(self, user, command):
        """
        Run one user command after lock and permission checks
        Returns False for unknown commands
        """
        views = {view.value: view for view in View}

        try:
            if command in views:
                view = views[command]
                if not self.can_open(user, view):
                    print("Access denied: this area is not available to you right now")
                    return True
                if view in (View.PERMISSIONS, View.SECURITY):
                    self.admin_console.run_admin_console(user)
                else:
                    getattr(self, f"handle_{view.value}")(user)
                return True

            if command in VIEW_ACTIONS:
                view, permission = VIEW_ACTIONS[command]
                if not self.checker.is_action_allowed(user, command) or not self.can_open(user, view):
                    print("Access denied: this action is not available to you right now")
                    return True
                if permission is not None:
                    self.checker.require_permission(user, permission)
                getattr(self, f"handle_{command}")(user)
                return True

        except ConsoleError as e:
            print(f"Error: {e.message}")
            return True

        return False

    def run_user_console(self, user):
        """
        Run the console for a logged in user
        Returns True if the whole program should exit
        """
        self.display_user_menu(user)

        while True:
            try:
                self.show_alert_banner(user)
                command = input(f"\n{user.email}> ").strip().lower()

                if command == "":
                    continue
                elif command == "help":
                    self.display_user_menu(user)
                elif command == "logout":
                    logout_user(self.context, user)
                    print("Logout successful")
                    return False
                elif command == "exit":
                    logout_user(self.context, user)
                    return True
                elif not self.dispatch(user, command):
                    print("Unknown command. Type 'help' for available commands.")

            except KeyboardInterrupt:
                print("\n\nExiting console.")
                return True
            except EOFError:
                return True
            except Exception as e:
                logger.exception("User console command failed")
                print(f"Console error: {e}")
