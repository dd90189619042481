"""Shared fixtures for CLI tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def project(php_project: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Project root holding the sample sources under src/, used as the working directory."""
    root = php_project.parent
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def project_config(project: Path) -> Callable[[str], Path]:
    """Write .phpsense/config.yaml in the project root."""

    def write(text: str) -> Path:
        config_dir = project / ".phpsense"
        config_dir.mkdir(exist_ok=True)
        path = config_dir / "config.yaml"
        path.write_text(text)
        return path

    return write


@pytest.fixture
def configured_project(project: Path, project_config: Callable[[str], Path]) -> Path:
    """Sample project with source_path set in its config."""
    project_config("source_path: src\n")
    return project
