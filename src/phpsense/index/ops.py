"""High-level orchestration of an indexing run.

This module implements the IndexCoordinator - the entry point for building
and querying the symbol index. One run is:

    clear -> discover files -> read+parse in batches -> resolve inheritance

Batches of ``batch_size`` files are read concurrently with asyncio.gather and
the run yields to the event loop between batches. Parsing a file never
suspends, so the shared SymbolTable needs no locking. Inheritance resolution
starts only after the last batch has finished.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from phpsense.core.logging import index_run
from phpsense.index.discovery import FileSystem, LocalFileSystem, find_source_files
from phpsense.index.lexer import tokenize
from phpsense.index.parser import parse
from phpsense.index.resolver import InheritanceResolver
from phpsense.index.symbols import SymbolTable

if TYPE_CHECKING:
    from phpsense.config.models import IndexConfig
    from phpsense.core.progress import ProgressCallback

logger = structlog.get_logger()


@dataclass
class IndexRunResult:
    """Result of one indexing run."""

    files_found: int
    files_indexed: int
    files_failed: int
    classes: int
    functions: int
    duration_seconds: float


@dataclass
class IndexStats:
    """Size of the current index."""

    classes: int
    functions: int
    namespaces: int
    files: int
    total_methods: int
    total_properties: int


class SearchKind(str, Enum):
    CLASS = "class"
    METHOD = "method"
    FUNCTION = "function"


@dataclass
class SearchResult:
    """Result from a name search."""

    kind: SearchKind
    name: str
    full_name: str
    class_name: str | None
    namespace: str
    file: str
    line: int


class IndexCoordinator:
    """
    Owns the SymbolTable and every operation that writes to it.

    Usage::

        coordinator = IndexCoordinator(batch_size=10)
        result = await coordinator.index_directory(Path("src"))

        # Queries are synchronous
        hits = coordinator.search("logger", SearchKind.CLASS)
    """

    def __init__(
        self,
        fs: FileSystem | None = None,
        *,
        batch_size: int = 10,
        extension: str = ".php",
        extra_skip_dirs: tuple[str, ...] | list[str] = (),
    ) -> None:
        self.fs: FileSystem = fs or LocalFileSystem()
        self.batch_size = max(1, batch_size)
        self.extension = extension
        self.extra_skip_dirs = frozenset(extra_skip_dirs)
        self.table = SymbolTable()
        self._resolver = InheritanceResolver(self.table)

    @classmethod
    def from_config(cls, config: IndexConfig, fs: FileSystem | None = None) -> IndexCoordinator:
        return cls(
            fs,
            batch_size=config.batch_size,
            extension=config.extension,
            extra_skip_dirs=config.extra_skip_dirs,
        )

    @property
    def is_indexed(self) -> bool:
        return bool(self.table.files)

    async def index_directory(
        self,
        root: Path,
        on_progress: ProgressCallback | None = None,
    ) -> IndexRunResult:
        """Rebuild the index from every source file under ``root``.

        Args:
            root: Directory to scan.
            on_progress: Called with ``(processed, total)`` after each batch.

        Raises:
            IndexingError: ``root`` does not exist or cannot be listed.
        """
        start = time.perf_counter()
        with index_run(root):
            self.clear()
            files = await find_source_files(
                self.fs,
                root,
                extension=self.extension,
                extra_skip_dirs=self.extra_skip_dirs,
            )
            total = len(files)
            indexed = 0

            for batch_start in range(0, total, self.batch_size):
                batch = files[batch_start : batch_start + self.batch_size]
                results = await asyncio.gather(*(self._index_file(path) for path in batch))
                indexed += sum(results)

                processed = min(batch_start + self.batch_size, total)
                logger.debug("index_batch_done", processed=processed, total=total)
                if on_progress is not None:
                    on_progress(processed, total)
                # Let the host loop run between batches
                await asyncio.sleep(0)

            self._resolver.resolve_all()

            result = IndexRunResult(
                files_found=total,
                files_indexed=indexed,
                files_failed=total - indexed,
                classes=len(self.table.classes),
                functions=len(self.table.functions),
                duration_seconds=time.perf_counter() - start,
            )
            logger.info(
                "index_complete",
                files=indexed,
                failed=result.files_failed,
                classes=result.classes,
                functions=result.functions,
                elapsed_s=round(result.duration_seconds, 3),
            )
            return result

    async def _index_file(self, path: Path) -> bool:
        try:
            content = await self.fs.read_file(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("file_read_failed", path=str(path), error=str(e))
            return False
        self.index_source(str(path), content)
        return True

    def index_source(self, path: str, content: str) -> None:
        """Tokenize and parse one file's content into the table.

        Does not resolve inheritance; call resolve() once all files are in.
        """
        record = self.table.new_file(path)
        parse(tokenize(content), record, self.table)

    def resolve(self) -> int:
        return self._resolver.resolve_all()

    def clear(self) -> None:
        self.table.clear()

    def stats(self) -> IndexStats:
        classes = self.table.classes.values()
        return IndexStats(
            classes=len(self.table.classes),
            functions=len(self.table.functions),
            namespaces=len(self.table.namespaces),
            files=len(self.table.files),
            total_methods=sum(len(c.methods) for c in classes),
            total_properties=sum(len(c.properties) for c in classes),
        )

    def search(self, query: str, kind: SearchKind | None = None) -> list[SearchResult]:
        """Case-insensitive substring search over class, method and function names."""
        needle = query.lower()
        results: list[SearchResult] = []

        for cls in self.table.classes.values():
            if kind in (None, SearchKind.CLASS) and needle in cls.name.lower():
                results.append(
                    SearchResult(
                        kind=SearchKind.CLASS,
                        name=cls.name,
                        full_name=cls.fqn,
                        class_name=None,
                        namespace=cls.namespace,
                        file=cls.file,
                        line=cls.line,
                    )
                )
            if kind not in (None, SearchKind.METHOD):
                continue
            for method in cls.methods.values():
                if method.inherited or needle not in method.name.lower():
                    continue
                results.append(
                    SearchResult(
                        kind=SearchKind.METHOD,
                        name=method.name,
                        full_name=f"{cls.fqn}::{method.name}",
                        class_name=cls.name,
                        namespace=cls.namespace,
                        file=method.file,
                        line=method.line,
                    )
                )

        if kind in (None, SearchKind.FUNCTION):
            for fqn, fn in self.table.functions.items():
                if needle in fn.name.lower():
                    namespace = fqn.rpartition("\\")[0]
                    results.append(
                        SearchResult(
                            kind=SearchKind.FUNCTION,
                            name=fn.name,
                            full_name=fqn,
                            class_name=None,
                            namespace=namespace,
                            file=fn.file,
                            line=fn.line,
                        )
                    )

        return results
