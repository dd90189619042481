"""File-system collaborators for an indexing run.

The coordinator only talks to a FileSystem: list a directory, read a file.
LocalFileSystem runs the blocking os calls in the default executor so that
every listing and every read is an await point.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import structlog

from phpsense.core.errors import IndexingError
from phpsense.core.excludes import should_skip_directory

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class DirEntry:
    name: str
    is_directory: bool


class FileSystem(Protocol):
    async def list_directory(self, path: Path) -> list[DirEntry]: ...

    async def read_file(self, path: Path) -> str: ...


def _scan(path: Path) -> list[DirEntry]:
    with os.scandir(path) as it:
        entries = [DirEntry(e.name, e.is_dir()) for e in it]
    return sorted(entries, key=lambda e: e.name)


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    async def list_directory(self, path: Path) -> list[DirEntry]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, _scan, path)

    async def read_file(self, path: Path) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, _read, path)


async def find_source_files(
    fs: FileSystem,
    root: Path,
    *,
    extension: str = ".php",
    extra_skip_dirs: frozenset[str] | None = None,
) -> list[Path]:
    """Collect every file under ``root`` whose name ends with ``extension``.

    A directory that cannot be listed is logged and skipped, except the root
    itself: failing to list the root raises IndexingError.

    Raises:
        IndexingError: root does not exist or cannot be listed.
    """
    found: list[Path] = []
    visited: set[str] = set()

    async def walk(directory: Path, is_root: bool) -> None:
        key = os.path.realpath(directory)
        if key in visited:
            return
        visited.add(key)

        try:
            entries = await fs.list_directory(directory)
        except OSError as e:
            if not is_root:
                logger.warning("directory_unreadable", path=str(directory), error=str(e))
                return
            if isinstance(e, (FileNotFoundError, NotADirectoryError)):
                raise IndexingError.root_not_found(str(directory)) from e
            raise IndexingError.root_unreadable(str(directory), str(e)) from e

        for entry in entries:
            if entry.is_directory:
                if not should_skip_directory(entry.name, extra_skip_dirs):
                    await walk(directory / entry.name, False)
            elif entry.name.endswith(extension):
                found.append(directory / entry.name)

    await walk(root, True)
    logger.debug("source_files_found", root=str(root), count=len(found))
    return found
