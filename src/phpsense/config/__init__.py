"""Config module exports."""

from phpsense.config.loader import PhpSenseSettings, load_config
from phpsense.config.models import (
    CompletionConfig,
    IndexConfig,
    LoggingConfig,
    PhpSenseConfig,
)

__all__ = [
    "load_config",
    "PhpSenseConfig",
    "PhpSenseSettings",
    "IndexConfig",
    "CompletionConfig",
    "LoggingConfig",
]
