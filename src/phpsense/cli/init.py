"""phpsense init command - create a project config."""

import shutil
from pathlib import Path

import click

from phpsense.config.loader import PROJECT_DIR_NAME
from phpsense.config.user_config import UserConfig, write_user_config
from phpsense.core.progress import get_console, status


def initialize_project(project_root: Path, *, source: Path | None = None, force: bool = False) -> bool:
    """Write .phpsense/config.yaml, returning True on success.

    Args:
        project_root: Directory that will hold .phpsense/
        source: PHP source tree to record as source_path
        force: Overwrite an existing .phpsense directory
    """
    phpsense_dir = project_root / PROJECT_DIR_NAME

    if phpsense_dir.exists() and not force:
        status(f"Already initialized: {phpsense_dir}", style="info")
        status("Use --force to reinitialize", style="info")
        return False

    if force and phpsense_dir.exists():
        shutil.rmtree(phpsense_dir)

    source_path: str | None = None
    if source is not None:
        resolved = source.resolve()
        # Keep the config portable when the sources live inside the project
        try:
            source_path = resolved.relative_to(project_root.resolve()).as_posix() or "."
        except ValueError:
            source_path = str(resolved)

    config_path = phpsense_dir / "config.yaml"
    write_user_config(config_path, UserConfig(source_path=source_path))

    get_console().print()
    status(f"Initialized phpsense in {project_root}", style="success")
    status(f"Config: {config_path}", style="info")
    if source_path is None:
        status("No source path set; edit source_path or pass --source", style="warning")
    return True


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--source",
    "-s",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="PHP source directory to index",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init_command(path: Path, source: Path | None, force: bool) -> None:
    """Initialize a project for phpsense.

    PATH is the project root (default: current directory).
    """
    initialize_project(path.resolve(), source=source, force=force)
