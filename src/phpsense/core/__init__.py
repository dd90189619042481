"""Core module exports."""

from phpsense.core.errors import (
    ConfigError,
    ErrorCode,
    IndexingError,
    PhpSenseError,
)
from phpsense.core.logging import (
    configure_logging,
    current_run_id,
    get_logger,
    index_run,
)
from phpsense.core.progress import index_progress, status, task

__all__ = [
    # Errors
    "PhpSenseError",
    "ConfigError",
    "ErrorCode",
    "IndexingError",
    # Logging
    "configure_logging",
    "current_run_id",
    "get_logger",
    "index_run",
    # Progress
    "index_progress",
    "status",
    "task",
]
