"""Session CLI commands for inspecting and resetting loaded-document state."""

from pathlib import Path

import typer

from steering.config import get_session_store_dir, load_config
from steering.session import FileSessionStore

from .console import console, create_table, print_success, print_table

app = typer.Typer(
    name="session",
    help="Inspect and reset steering sessions",
    no_args_is_help=True,
)


def _get_store(project: Path) -> FileSessionStore:
    config = load_config(project_dir=project)
    return FileSessionStore(get_session_store_dir(config, project))


@app.command(name="list")
def list_sessions(
    project: Path = typer.Option(
        Path("."),
        "--project",
        "-p",
        help="Project directory holding the session store",
    ),
) -> None:
    """List sessions and the documents each has loaded."""
    store = _get_store(project)
    session_ids = store.session_ids()

    if not session_ids:
        console.print("[dim]No sessions found.[/dim]")
        return

    table = create_table("Steering Sessions")
    table.add_column("Session", style="cyan")
    table.add_column("Loaded", justify="right")
    table.add_column("Documents", style="green")

    for session_id in session_ids:
        loaded = sorted(store.get(session_id).already_loaded)
        table.add_row(session_id, str(len(loaded)), ", ".join(loaded) or "-")

    print_table(table)


@app.command(name="clear")
def clear_session(
    session_id: str = typer.Argument(..., help="Session to reset"),
    project: Path = typer.Option(
        Path("."),
        "--project",
        "-p",
        help="Project directory holding the session store",
    ),
) -> None:
    """End a session so its documents can be loaded again."""
    store = _get_store(project)
    store.clear(session_id)
    print_success(f"Session '{session_id}' cleared")
