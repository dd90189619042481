"""Tests for core/progress.py module.

Covers:
- _is_tty() function
- status() function
- index_progress() context manager
- task() context manager
- pluralize() function
- suppress_console_logs() / is_console_suppressed()
"""

from __future__ import annotations

import sys
from io import StringIO
from unittest.mock import patch

import pytest

from phpsense.core.progress import (
    _STYLES,
    _is_tty,
    index_progress,
    is_console_suppressed,
    pluralize,
    status,
    suppress_console_logs,
    task,
)


class TestIsTty:
    """Tests for _is_tty function."""

    def test_false_for_stringio(self) -> None:
        """Returns False for non-TTY stderr."""
        original = sys.stderr
        try:
            sys.stderr = StringIO()
            assert _is_tty() is False
        finally:
            sys.stderr = original


class TestStyles:
    """Tests for _STYLES constant."""

    def test_has_expected_styles(self) -> None:
        """Contains expected style keys."""
        assert set(_STYLES.keys()) == {"success", "error", "info", "warning", "none"}


class TestStatus:
    """Tests for status function."""

    def test_prints_message(self) -> None:
        """Prints a message to console."""
        with patch("phpsense.core.progress._console") as mock_console:
            status("Test message")
            mock_console.print.assert_called_once()

    def test_success_style(self) -> None:
        """Applies success style."""
        with patch("phpsense.core.progress._console") as mock_console:
            status("Done", style="success")
            assert "✓" in mock_console.print.call_args[0][0]

    def test_with_indent(self) -> None:
        """Applies indentation."""
        with patch("phpsense.core.progress._console") as mock_console:
            status("Indented", indent=4)
            assert "    Indented" in mock_console.print.call_args[0][0]


class TestIndexProgress:
    """Tests for index_progress context manager."""

    def test_non_tty_yields_callable(self) -> None:
        """Outside a terminal the callback only logs."""
        with patch("phpsense.core.progress._is_tty", return_value=False), index_progress() as on_progress:
            on_progress(10, 25)
            on_progress(25, 25)

    def test_tty_drives_progress_bar(self) -> None:
        """On a terminal the callback updates a Rich bar and suppresses console logs."""
        with (
            patch("phpsense.core.progress._is_tty", return_value=True),
            patch("phpsense.core.progress.Progress") as mock_progress,
        ):
            pbar = mock_progress.return_value.__enter__.return_value
            pbar.add_task.return_value = 7

            with index_progress("Indexing") as on_progress:
                assert is_console_suppressed() is True
                on_progress(10, 30)

            pbar.update.assert_called_once_with(7, completed=10, total=30)
        assert is_console_suppressed() is False


class TestTask:
    """Tests for task context manager."""

    def test_completes_successfully(self) -> None:
        """Task prints a start and a success line."""
        with patch("phpsense.core.progress.status") as mock_status:
            with task("Indexing"):
                pass

            assert mock_status.call_args_list[-1][1].get("style") == "success"
            assert "s)" in mock_status.call_args_list[-1][0][0]

    def test_prints_error_on_failure(self) -> None:
        """Task prints error on exception and re-raises."""
        with patch("phpsense.core.progress.status") as mock_status:
            with pytest.raises(ValueError, match="boom"), task("Failing task"):
                raise ValueError("boom")

            assert mock_status.call_args_list[-1][1].get("style") == "error"


class TestSuppressConsoleLogs:
    """Tests for console suppression flag."""

    def test_flag_scoped_to_block(self) -> None:
        """Flag is set only inside the block."""
        assert is_console_suppressed() is False
        with suppress_console_logs():
            assert is_console_suppressed() is True
        assert is_console_suppressed() is False


class TestPluralize:
    """Tests for pluralize function."""

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "0 files"), (1, "1 file"), (3, "3 files")],
    )
    def test_default_plural(self, count: int, expected: str) -> None:
        """Appends 's' unless count is 1."""
        assert pluralize(count, "file") == expected

    def test_custom_plural(self) -> None:
        """Custom plural form is used."""
        assert pluralize(2, "match", "matches") == "2 matches"
