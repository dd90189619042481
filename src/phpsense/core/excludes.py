"""Directory names never descended into while collecting source files.

Any name starting with "." is skipped as well, so hidden tool directories
(.git, .idea, .vscode, ...) are covered even if they are not listed here.
"""

from __future__ import annotations

SKIPPED_DIRS: frozenset[str] = frozenset(
    (
        # Dependencies
        "node_modules",
        "vendor",
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        # Caches and scratch space
        "cache",
        "tmp",
        "temp",
        "__pycache__",
        # Logs
        "logs",
        "log",
        # Build output
        "build",
        "dist",
        # Editor state
        ".idea",
        ".vscode",
    )
)


def should_skip_directory(name: str, extra: frozenset[str] | None = None) -> bool:
    """Return True if a directory with this name must not be traversed."""
    if name.startswith("."):
        return True
    if name in SKIPPED_DIRS:
        return True
    return extra is not None and name in extra
