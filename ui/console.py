from typing import Dict, Iterable, Optional, Tuple, Any

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, InvalidResponse, Prompt
from rich.box import SIMPLE
from rich.markup import escape

console = Console()

LOGO = r"""
-------|--------------------------------------------------|---------
    ___|___                                            ___|___
   ////////\   _                                  _   /\\\\\\\\
  ////////  \ ('<        Chitter Chatter         >') /  \\\\\\\\
  | (_)  |  | (^)                                (^) |  | (_)  |
  |______|./==''==                              ==''===.|______|
--------------------------------------------------------------------"""

BAR = "======================"


def display_error(message: str) -> None:
    """Display an error message in a red panel"""
    console.print(
        Panel.fit(f"[bold]❌ Error:[/] {escape(message)}", style="red", border_style="red")
    )


def display_panel(message: str, style: str = "green") -> None:
    """Display a message in a styled panel"""
    console.print(Panel.fit(escape(message), style=style, border_style=style))


def display_table(title: str, columns: list, data: list, expand: bool = False) -> None:
    """Display data in a rich table format"""
    table = Table(title=title, box=SIMPLE, header_style="bold magenta", expand=expand)

    for col in columns:
        table.add_column(escape(str(col)), style="cyan")

    for row in data:
        table.add_row(*[escape(str(item)) for item in row])

    console.print(table)


def display_lines(lines: Iterable[str]) -> None:
    """Print lines verbatim, without rich markup or highlighting"""
    for line in lines:
        console.print(line, markup=False, highlight=False)


def display_logo() -> None:
    console.print(LOGO, markup=False, highlight=False, style="bold cyan")


def display_greeting() -> None:
    console.print(
        Panel.fit("[bold cyan]Chitter Chatter[/]\n[dim]User Interface[/]", style="blue")
    )


def display_title(title: str) -> None:
    """Open a section, e.g. ======Your Contacts======"""
    console.print(f"\n{BAR}{title}{BAR}\n", markup=False, highlight=False)


def display_end_title(title: str) -> None:
    """Close a section with a bar as wide as its title bar"""
    console.print(f"{BAR}{'=' * len(title)}{BAR}\n", markup=False, highlight=False)


def display_menu(title: str, options: Dict[int, Tuple[str, Any]]) -> None:
    """Print a numbered menu; option 9 is always set apart at the bottom"""
    console.print(f"\n\t[bold]{'=' * 35}[/]")
    console.print(f"\t\t[bold cyan]{escape(title)}[/]")
    console.print(f"\t[bold]{'=' * 35}[/]")
    for key, (label, _) in options.items():
        if key == 9:
            console.print(f"\t[bold]{'=' * 35}[/]")
        console.print(f"\t{key}. {label}", markup=False)


def read_choice() -> int:
    """Ask for a menu choice until an integer is entered"""
    return IntPrompt.ask("\nPlease make your choice")


def read_line(prompt: str, password: bool = False) -> str:
    return Prompt.ask(f"\t{prompt}", password=password, default="", show_default=False)


def pause(message: Optional[str] = None) -> None:
    Prompt.ask(message or "\nPress Enter to continue", default="", show_default=False)


class YesNoPrompt(Confirm):
    """Confirm that also takes "yes" and "no" spelled out"""

    def process_response(self, value: str) -> bool:
        value = value.strip().lower()
        if value in ("y", "yes"):
            return True
        if value in ("n", "no"):
            return False
        raise InvalidResponse(self.validate_error_message)


def confirm(prompt: str, default: bool = False) -> bool:
    return YesNoPrompt.ask(prompt, default=default)
