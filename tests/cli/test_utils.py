"""Tests for CLI utilities.

Covers:
- find_project_root()
- load_cli_config() error conversion
- resolve_source_root()
- run_index()
"""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from phpsense.cli.utils import find_project_root, load_cli_config, resolve_source_root, run_index
from phpsense.config import PhpSenseConfig
from phpsense.config.models import IndexConfig
from phpsense.index import IndexCoordinator


class TestFindProjectRoot:
    """Tests for find_project_root function."""

    def test_finds_root_from_root(self, tmp_path: Path) -> None:
        (tmp_path / ".phpsense").mkdir()
        assert find_project_root(tmp_path) == tmp_path.resolve()

    def test_finds_root_from_subdirectory(self, tmp_path: Path) -> None:
        (tmp_path / ".phpsense").mkdir()
        nested = tmp_path / "a" / "b" / "c"
        nested.mkdir(parents=True)

        assert find_project_root(nested) == tmp_path.resolve()

    def test_falls_back_to_start(self, tmp_path: Path) -> None:
        """Without a .phpsense directory the start path is the root."""
        nested = tmp_path / "plain"
        nested.mkdir()
        assert find_project_root(nested) == nested.resolve()

    def test_file_named_like_marker_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / ".phpsense").write_text("not a directory")
        nested = tmp_path / "x"
        nested.mkdir()
        assert find_project_root(nested) == nested.resolve()

    def test_defaults_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert find_project_root() == tmp_path.resolve()


class TestLoadCliConfig:
    """Tests for load_cli_config function."""

    def test_config_error_becomes_click_exception(self, tmp_path: Path, isolated_global_config: Path) -> None:
        isolated_global_config.write_text("index: [unclosed")

        with pytest.raises(click.ClickException) as exc_info:
            load_cli_config(tmp_path)

        assert "CONFIG_PARSE_ERROR" in exc_info.value.message


class TestResolveSourceRoot:
    """Tests for resolve_source_root function."""

    def test_explicit_source_wins(self, tmp_path: Path) -> None:
        config = PhpSenseConfig(index=IndexConfig(source_path="/elsewhere"))
        assert resolve_source_root(config, tmp_path, tmp_path / "src") == (tmp_path / "src").resolve()

    def test_relative_config_path_is_project_relative(self, tmp_path: Path) -> None:
        config = PhpSenseConfig(index=IndexConfig(source_path="lib/php"))
        assert resolve_source_root(config, tmp_path) == (tmp_path / "lib" / "php").resolve()

    def test_absolute_config_path(self, tmp_path: Path) -> None:
        target = tmp_path / "abs"
        config = PhpSenseConfig(index=IndexConfig(source_path=str(target)))
        assert resolve_source_root(config, tmp_path / "project") == target.resolve()

    def test_raises_when_nothing_set(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException) as exc_info:
            resolve_source_root(PhpSenseConfig(), tmp_path)
        assert "phpsense init --source" in exc_info.value.message


class TestRunIndex:
    """Tests for run_index function."""

    def test_returns_run_result(self, php_project: Path) -> None:
        coordinator = IndexCoordinator()
        result = run_index(coordinator, php_project, show_progress=False)
        assert result.files_indexed == 4
        assert coordinator.is_indexed

    def test_with_progress_outside_tty(self, php_project: Path) -> None:
        """Progress mode falls back to logging when stderr is not a terminal."""
        result = run_index(IndexCoordinator(), php_project)
        assert result.classes == 3

    def test_indexing_error_becomes_click_exception(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException) as exc_info:
            run_index(IndexCoordinator(), tmp_path / "missing", show_progress=False)
        assert "does not exist" in exc_info.value.message
