"""phpsense stats command - show index statistics."""

import json
from dataclasses import asdict
from pathlib import Path

import click

from phpsense.cli.index import stats_table
from phpsense.cli.utils import find_project_root, load_cli_config, resolve_source_root, run_index
from phpsense.core.progress import get_console
from phpsense.index import IndexCoordinator


@click.command()
@click.option(
    "--source",
    "-s",
    type=click.Path(file_okay=False, path_type=Path),
    help="PHP source directory (default: configured source_path)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats_command(source: Path | None, as_json: bool) -> None:
    """Show how many classes, functions and members the sources declare."""
    project_root = find_project_root()
    config = load_cli_config(project_root)
    source_root = resolve_source_root(config, project_root, source)

    coordinator = IndexCoordinator.from_config(config.index)
    run_index(coordinator, source_root, show_progress=not as_json)
    stats = coordinator.stats()

    if as_json:
        click.echo(json.dumps(asdict(stats)))
        return
    get_console().print(stats_table(stats))
