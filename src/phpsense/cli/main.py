"""phpsense CLI - PHP code completion from the command line."""

import click

from phpsense import __version__
from phpsense.cli.clear import clear_command
from phpsense.cli.complete import complete_command
from phpsense.cli.index import index_command
from phpsense.cli.init import init_command
from phpsense.cli.search import search_command
from phpsense.cli.stats import stats_command
from phpsense.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="phpsense")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """phpsense - context-aware completion over an indexed PHP source tree."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(init_command, name="init")
cli.add_command(index_command, name="index")
cli.add_command(complete_command, name="complete")
cli.add_command(search_command, name="search")
cli.add_command(stats_command, name="stats")
cli.add_command(clear_command, name="clear")


if __name__ == "__main__":
    cli()
