"""CLI utilities."""

import asyncio
from pathlib import Path

import click

from phpsense.config import PhpSenseConfig, load_config
from phpsense.config.loader import PROJECT_DIR_NAME
from phpsense.core.errors import IndexingError, PhpSenseError
from phpsense.core.logging import configure_logging
from phpsense.core.progress import index_progress
from phpsense.index import IndexCoordinator, IndexRunResult


def find_project_root(start_path: Path | None = None) -> Path:
    """Find the directory holding .phpsense/ from the given path.

    Walks up the directory tree looking for a .phpsense directory. Falls back
    to the starting directory when none is found, so commands also work in
    projects that were never initialized.
    """
    if start_path is None:
        start_path = Path.cwd()

    start = start_path.resolve()
    current = start
    while current != current.parent:
        if (current / PROJECT_DIR_NAME).is_dir():
            return current
        current = current.parent

    if (current / PROJECT_DIR_NAME).is_dir():
        return current
    return start


def load_cli_config(project_root: Path) -> PhpSenseConfig:
    """load_config() with errors turned into click errors.

    Inside a command, the loaded logging section replaces the group's default
    logging setup unless --verbose was given.
    """
    try:
        config = load_config(project_root)
    except PhpSenseError as e:
        raise click.ClickException(str(e)) from e

    ctx = click.get_current_context(silent=True)
    if ctx is not None and not (ctx.find_root().obj or {}).get("verbose"):
        configure_logging(config=config.logging)
    return config


def resolve_source_root(config: PhpSenseConfig, project_root: Path, source: Path | None = None) -> Path:
    """Directory to index: ``source`` if given, else the configured source path.

    A relative configured path is taken relative to the project root.

    Raises:
        click.ClickException: Neither is set.
    """
    if source is not None:
        return source.resolve()
    if not config.index.source_path:
        raise click.ClickException(str(IndexingError.source_not_set()))

    configured = Path(config.index.source_path).expanduser()
    if not configured.is_absolute():
        configured = project_root / configured
    return configured.resolve()


def run_index(coordinator: IndexCoordinator, source_root: Path, *, show_progress: bool = True) -> IndexRunResult:
    """Run one indexing pass to completion, with a progress bar on a TTY."""
    try:
        if not show_progress:
            return asyncio.run(coordinator.index_directory(source_root))
        with index_progress("Indexing", unit="files") as on_progress:
            return asyncio.run(coordinator.index_directory(source_root, on_progress=on_progress))
    except PhpSenseError as e:
        raise click.ClickException(str(e)) from e
