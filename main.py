import sys
from typing import List, Optional

from rich.console import Console

from config import build_db_config
from database.core import DatabaseManager
from ui.console import display_error, display_greeting
from ui.menus import MenuSystem

console = Console()

USAGE = "Usage: chitter-chatter <dbname> <port> <user>"


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 3:
        console.print(f"[red]{USAGE}[/red]")
        return 0

    dbname, port, user = args
    db_config = build_db_config(dbname, port, user)

    display_greeting()
    console.print(
        f"Connecting to {db_config['host']}:{port}/{dbname} as {user}...", markup=False
    )
    try:
        db_manager = DatabaseManager(db_config)
    except ConnectionError as e:
        display_error(str(e))
        console.print("Make sure you started postgres on this machine")
        return 1

    menu_system = MenuSystem(db_manager)

    try:
        menu_system.main_menu()
    except (KeyboardInterrupt, EOFError):
        console.print("\nOperation cancelled by user")
    finally:
        console.print("Disconnecting from database...")
        db_manager.close()
        console.print("Done.\n\nBye !")
    return 0


if __name__ == "__main__":
    sys.exit(main())
