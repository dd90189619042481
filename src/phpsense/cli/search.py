"""phpsense search command - find classes, methods and functions by name."""

import json
from dataclasses import asdict
from pathlib import Path

import click
from rich.table import Table

from phpsense.cli.utils import find_project_root, load_cli_config, resolve_source_root, run_index
from phpsense.core.progress import get_console, pluralize, status
from phpsense.index import IndexCoordinator, SearchKind


@click.command()
@click.argument("query")
@click.option(
    "--kind",
    "-k",
    type=click.Choice([k.value for k in SearchKind]),
    default=None,
    help="Only return this kind of symbol",
)
@click.option(
    "--source",
    "-s",
    type=click.Path(file_okay=False, path_type=Path),
    help="PHP source directory (default: configured source_path)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search_command(query: str, kind: str | None, source: Path | None, as_json: bool) -> None:
    """Search symbol names containing QUERY (case-insensitive)."""
    project_root = find_project_root()
    config = load_cli_config(project_root)
    source_root = resolve_source_root(config, project_root, source)

    coordinator = IndexCoordinator.from_config(config.index)
    run_index(coordinator, source_root, show_progress=not as_json)
    results = coordinator.search(query, SearchKind(kind) if kind else None)

    if as_json:
        click.echo(json.dumps([{**asdict(r), "kind": r.kind.value} for r in results], indent=2))
        return

    if not results:
        status(f"No symbols matching '{query}'", style="info")
        return

    table = Table(box=None, padding=(0, 2))
    table.add_column("Kind", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Location", style="dim")
    for r in results:
        table.add_row(r.kind.value, r.full_name, f"{r.file}:{r.line}")
    console = get_console()
    console.print(table)
    status(pluralize(len(results), "match", "matches"), style="info")
