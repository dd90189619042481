"""phpsense complete command - run one completion query from the shell."""

import json
import re
from pathlib import Path

import click
from rich.table import Table

from phpsense.cli.utils import find_project_root, load_cli_config, resolve_source_root, run_index
from phpsense.completion import CompletionEngine, complete
from phpsense.core.progress import get_console, status
from phpsense.index import IndexCoordinator

_TRAILING_WORD = re.compile(r"[\w\\]*$")


@click.command()
@click.argument("line")
@click.option("--prefix", "-p", default="", help="Word being completed (default: last word of LINE)")
@click.option("--column", "-c", type=int, default=None, help="Cursor column within LINE")
@click.option(
    "--source",
    "-s",
    type=click.Path(file_okay=False, path_type=Path),
    help="PHP source directory (default: configured source_path)",
)
@click.option(
    "--file",
    "-f",
    "file_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Source file the line belongs to, for namespace and use-alias context",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def complete_command(
    line: str,
    prefix: str,
    column: int | None,
    source: Path | None,
    file_path: Path | None,
    as_json: bool,
) -> None:
    """Print ranked completions for LINE.

    LINE is the source line up to the cursor, e.g. '$x = new Fo'.
    """
    project_root = find_project_root()
    config = load_cli_config(project_root)

    coordinator = IndexCoordinator.from_config(config.index)
    if config.index.auto_index:
        source_root = resolve_source_root(config, project_root, source)
        run_index(coordinator, source_root, show_progress=not as_json)
    elif not as_json:
        status("auto_index is disabled; nothing has been indexed", style="warning")

    if not prefix:
        text = line[:column] if column is not None else line
        prefix = _TRAILING_WORD.search(text).group().lstrip("\\")

    engine = CompletionEngine(coordinator.table, show_info=config.completion.show_info)
    items = complete(
        engine,
        line,
        prefix,
        column,
        max_items=config.completion.max_items,
        file_path=str(file_path.resolve()) if file_path else None,
    )

    if as_json:
        click.echo(json.dumps([item.to_dict() for item in items], indent=2))
        return

    if not items:
        status("No completions", style="info")
        return

    table = Table(box=None, padding=(0, 2))
    table.add_column("Item", style="bold")
    table.add_column("Insert")
    table.add_column("Kind", style="cyan")
    table.add_column("Score", justify="right", style="dim")
    for item in items:
        table.add_row(item.display, item.insert_text, item.category, str(item.score))
    get_console().print(table)
