"""phpsense index command - build the symbol index and report its size."""

from pathlib import Path

import click
from rich.table import Table

from phpsense.cli.utils import find_project_root, load_cli_config, resolve_source_root, run_index
from phpsense.core.progress import get_console, pluralize, status, task
from phpsense.index import IndexCoordinator, IndexStats


def stats_table(stats: IndexStats) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("What", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Classes", str(stats.classes))
    table.add_row("Functions", str(stats.functions))
    table.add_row("Namespaces", str(stats.namespaces))
    table.add_row("Files", str(stats.files))
    table.add_row("Methods", str(stats.total_methods))
    table.add_row("Properties", str(stats.total_properties))
    return table


@click.command()
@click.argument(
    "source",
    default=None,
    required=False,
    type=click.Path(file_okay=False, path_type=Path),
)
def index_command(source: Path | None) -> None:
    """Index a PHP source tree.

    SOURCE is the directory to scan. If not specified, uses source_path from
    the project config.
    """
    project_root = find_project_root()
    config = load_cli_config(project_root)
    source_root = resolve_source_root(config, project_root, source)

    coordinator = IndexCoordinator.from_config(config.index)
    with task(f"Indexing {source_root}"):
        result = run_index(coordinator, source_root)

    status(f"{pluralize(result.files_indexed, 'file')} indexed", style="info")
    if result.files_failed:
        status(f"{pluralize(result.files_failed, 'file')} could not be read", style="warning")

    console = get_console()
    console.print()
    console.print(stats_table(coordinator.stats()))
