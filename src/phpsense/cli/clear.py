"""phpsense clear command - remove phpsense data from a project."""

import shutil
from pathlib import Path

import click
import questionary
from rich.console import Console

from phpsense.cli.utils import find_project_root
from phpsense.config.loader import PROJECT_DIR_NAME


def clear_project(project_root: Path, *, yes: bool = False) -> bool:
    """Remove the .phpsense/ directory of a project.

    Returns True if cleared successfully, False if cancelled or nothing to clear.
    """
    console = Console(stderr=True)
    phpsense_dir = project_root / PROJECT_DIR_NAME

    if not phpsense_dir.exists():
        console.print("[yellow]Nothing to clear[/yellow] - no phpsense data found")
        return False

    console.print("\n[bold]The following will be permanently deleted:[/bold]\n")
    console.print(f"  [cyan]•[/cyan] {phpsense_dir}")
    console.print()

    if not yes:
        answer = questionary.confirm(
            "This action cannot be undone. Are you sure?",
            default=False,
        ).ask()

        if not answer:
            console.print("[dim]Cancelled[/dim]")
            return False

    try:
        shutil.rmtree(phpsense_dir)
    except OSError as e:
        console.print(f"  [red]✗[/red] Failed to remove {phpsense_dir}: {e}")
        return False

    console.print(f"  [green]✓[/green] Removed {phpsense_dir}")
    return True


@click.command()
@click.argument("path", default=None, required=False, type=click.Path(exists=True, path_type=Path))
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
def clear_command(path: Path | None, yes: bool) -> None:
    """Remove phpsense data from a project.

    PATH is the project root. If not specified, walks up from the current
    directory to the nearest .phpsense/ directory.
    """
    project_root = find_project_root(path)

    if not clear_project(project_root, yes=yes):
        if not yes:
            return  # Cancelled or nothing to clear
        if (project_root / PROJECT_DIR_NAME).exists():
            raise click.ClickException("Failed to clear phpsense data")
