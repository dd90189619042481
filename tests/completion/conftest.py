"""Shared fixtures for completion tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from phpsense.completion import CompletionEngine
from phpsense.index import IndexCoordinator


@pytest.fixture
def coordinator(php_project: Path) -> IndexCoordinator:
    """The sample project indexed synchronously, inheritance resolved."""
    coordinator = IndexCoordinator()
    for path in sorted(php_project.rglob("*.php")):
        if "vendor" not in path.parts:
            coordinator.index_source(str(path), path.read_text())
    coordinator.resolve()
    return coordinator


@pytest.fixture
def engine(coordinator: IndexCoordinator) -> CompletionEngine:
    return CompletionEngine(coordinator.table)


@pytest.fixture
def user_file(php_project: Path) -> str:
    return str(php_project / "App" / "User.php")
