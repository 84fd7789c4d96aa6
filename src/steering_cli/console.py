"""Console output utilities.

Usage:
    from steering_cli.console import console, print_success, print_error

    console.print("Hello world", style="bold")
    print_success("Catalog is valid")
    print_error("Something went wrong")
    print_panel("Title", "Content here")

Messages are escaped before printing; catalog text such as "[pattern-syntax]"
or "[a-z]" is shown literally instead of being read as rich markup.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message (green checkmark)."""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message (red X) to stderr."""
    err_console.print(f"[red]✗[/red] {escape(message)}")


def print_panel(title: str, content: str, style: str = "blue") -> None:
    """Print content in a panel/box."""
    console.print(Panel(escape(content), title=escape(title), border_style=style))


def create_table(title: str = "") -> Table:
    """Create a rich table."""
    return Table(title=title) if title else Table()


def print_table(table: Table) -> None:
    console.print(table)


__all__ = [
    "console",
    "err_console",
    "escape",
    "print_success",
    "print_error",
    "print_panel",
    "create_table",
    "print_table",
]
