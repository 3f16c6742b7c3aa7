"""
Main entry point for the Security Console
Role-based access control with an audited security-event workflow
"""
import logging

from auth import login_user
from config import DEFAULT_PASSWORD, LOG_FORMAT, LOG_LEVEL
from context import AppContext
from user_console import UserConsole


def display_welcome():
    """Display welcome message and system information"""
    print("\n" + "=" * 70)
    print("                 SECURITY & ACCESS CONSOLE")
    print("=" * 70)
    print("System Features:")
    print("  • Role-based permissions with 5 predefined roles")
    print("  • Navigation gated by permissions and temporary-password lock")
    print("  • Security event log with risk classification")
    print("  • Justified authorization of high-risk events")
    print("  • High-risk alerts and exportable security report")
    print(f"\nSample accounts use the password: {DEFAULT_PASSWORD}")
    print("  admin@femar.org.br (network admin), ana.silva@femar.org.br (manager)")
    print("=" * 70)


def display_main_menu():
    """Display main menu options"""
    menu = """
MAIN MENU - Available Commands:

  login    - Login to system
  help     - Show this menu
  exit     - Exit system
"""
    print(menu)


def main():
    """
    Main function - builds the application context and handles login
    """
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    try:
        print("Initializing Security Console...")
        context = AppContext()
    except Exception as e:
        print(f"Fatal error during system startup: {e}")
        print("Please check system configuration and try again.")
        raise SystemExit(1)

    display_welcome()
    display_main_menu()

    user_console = UserConsole(context)

    while True:
        try:
            command = input("\nsystem> ").strip().lower()

            if command == "":
                continue
            elif command == "help":
                display_main_menu()
            elif command == "exit":
                print("Exiting Security Console. Goodbye!")
                break

            elif command == "login":
                email = input("Email: ").strip()
                password = input("Password: ").strip()

                user = login_user(context, email, password)
                if user:
                    print(f"Login successful. Role: {user.role.value}")
                    should_exit = user_console.run_user_console(user)
                    if should_exit:
                        break
                    display_main_menu()
                else:
                    print("Invalid email or password. Please try again.")

            else:
                print("Unknown command. Type 'help' for available commands.")

        except (KeyboardInterrupt, EOFError):
            print("\n\nExiting Security Console. Goodbye!")
            break
        except Exception as e:
            logging.getLogger(__name__).exception("Unexpected error")
            print(f"System error: {e}")

    context.close()


if __name__ == "__main__":
    main()
