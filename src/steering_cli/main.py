"""Steering CLI entry point."""

import json
from pathlib import Path

import typer

from steering import __version__
from steering.catalog import build_registry, get_catalog_base
from steering.config import configure_logging, get_catalog_path, get_workspace_config, load_config
from steering.content import FileContentLoader
from steering.errors import SteeringError
from steering.registry import TriggerRegistry
from steering.resolver import RequestContext, Resolver
from steering.session import LoadedSet
from steering.workspace import scan_workspace

from .console import console, create_table, escape, print_error, print_panel, print_success, print_table
from .sessions import app as session_app

app = typer.Typer(
    name="steering",
    help="Flutter Steering - select guidance documents for the current request",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"steering version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Flutter Steering - select guidance documents for the current request."""
    pass


def _load_registry(catalog: Path | None) -> tuple[TriggerRegistry, Path | None, dict]:
    """Load config and registry; exit with status 1 on any steering error."""
    try:
        config = load_config()
        configure_logging(config)
        catalog_path = catalog or get_catalog_path(config)
        return build_registry(catalog_path), catalog_path, config
    except SteeringError as e:
        print_error(str(e))
        raise typer.Exit(1)


CATALOG_OPTION = typer.Option(
    None,
    "--catalog",
    "-c",
    help="catalog.yaml or steering directory (default: configured or bundled catalog)",
)


@app.command(name="resolve")
def resolve_command(
    signal: str = typer.Argument("", help="What the user is asking about"),
    paths: list[str] = typer.Option(
        [],
        "--path",
        help="Workspace path known to exist (repeatable)",
    ),
    workspace: Path | None = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Scan this directory for workspace paths",
    ),
    loaded: list[str] = typer.Option(
        [],
        "--loaded",
        "-l",
        help="Document already loaded in this session (repeatable)",
    ),
    catalog: Path | None = CATALOG_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print the resolution as JSON"),
) -> None:
    """Show which documents would be loaded for a request."""
    registry, _, config = _load_registry(catalog)

    workspace_paths = set(paths)
    if workspace:
        workspace_paths |= scan_workspace(workspace, **get_workspace_config(config))

    context = RequestContext.create(signal, workspace_paths)
    resolution = Resolver(registry).explain(context, LoadedSet.of(loaded))

    if as_json:
        typer.echo(json.dumps(resolution.to_dict(), indent=2))
        return

    if not resolution.document_ids:
        console.print("[dim]No steering documents selected (base profile only).[/dim]")
    else:
        table = create_table("Selected Steering Documents")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Document", style="cyan")
        table.add_column("Trigger", style="magenta")
        table.add_column("Evidence", style="green")

        for position, document_id in enumerate(resolution.document_ids, start=1):
            evidence = resolution.matched_paths.get(document_id) or resolution.matched_keywords.get(
                document_id, []
            )
            shown = ", ".join(evidence[:3])
            if len(evidence) > 3:
                shown += f" (+{len(evidence) - 3} more)"
            table.add_row(str(position), document_id, resolution.sources[document_id], escape(shown))

        print_table(table)

    if resolution.suppressed:
        console.print(f"[dim]Already loaded: {escape(', '.join(resolution.suppressed))}[/dim]")


@app.command(name="validate")
def validate_command(catalog: Path | None = CATALOG_OPTION) -> None:
    """Validate a catalog and check every document's content is reachable."""
    registry, catalog_path, _ = _load_registry(catalog)
    loader = FileContentLoader(registry, get_catalog_base(catalog_path))

    missing = []
    for document in registry:
        try:
            loader.load(document.id)
        except SteeringError as e:
            missing.append(str(e))

    if missing:
        for message in missing:
            print_error(message)
        raise typer.Exit(1)

    print_success(
        f"Catalog is valid: {len(registry)} documents, {len(registry.vocabulary)} keywords"
    )


@app.command(name="list")
def list_command(catalog: Path | None = CATALOG_OPTION) -> None:
    """List catalog documents and their triggers."""
    registry, _, _ = _load_registry(catalog)

    table = create_table("Steering Catalog")
    table.add_column("Document", style="cyan")
    table.add_column("Keywords", style="green")
    table.add_column("Patterns", style="blue")
    table.add_column("Description", style="dim")

    for document in registry:
        table.add_row(
            document.id,
            escape(", ".join(sorted(document.manual_triggers))) or "-",
            escape(", ".join(document.auto_trigger_patterns)) or "-",
            escape(document.description),
        )

    print_table(table)


@app.command(name="show")
def show_command(
    document_id: str = typer.Argument(..., help="Document to display"),
    catalog: Path | None = CATALOG_OPTION,
) -> None:
    """Print a document's content."""
    registry, catalog_path, _ = _load_registry(catalog)
    loader = FileContentLoader(registry, get_catalog_base(catalog_path))

    try:
        content = loader.load(document_id)
    except SteeringError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_panel(document_id, content)


# Register the session subcommand group
app.add_typer(session_app, name="session")


if __name__ == "__main__":
    app()
