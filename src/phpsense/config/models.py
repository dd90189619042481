"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (PHPSENSE__SECTION__KEY)
3. Project YAML (.phpsense/config.yaml)
4. Global YAML (~/.config/phpsense/config.yaml)
5. Built-in defaults (this file)

Examples:
    PHPSENSE__LOGGING__LEVEL=DEBUG
    PHPSENSE__INDEX__SOURCE_PATH=/srv/pocketmine/src
    PHPSENSE__COMPLETION__MAX_ITEMS=100
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        PHPSENSE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG logs every file read and batch.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class IndexConfig(BaseModel):
    """Indexing configuration.

    Env vars:
        PHPSENSE__INDEX__SOURCE_PATH: Root directory of the PHP sources
        PHPSENSE__INDEX__AUTO_INDEX: Build the index before completion queries
        PHPSENSE__INDEX__BATCH_SIZE: Files read concurrently per batch
    """

    source_path: str | None = Field(
        default=None,
        description="Root directory scanned for source files.",
    )
    auto_index: bool = Field(
        default=True,
        description="Index automatically before answering completion queries.",
    )
    batch_size: int = Field(
        default=10,
        description="Files read and parsed concurrently before yielding to the event loop.",
    )
    extension: str = Field(
        default=".php",
        description="Only files ending with this suffix are indexed.",
    )
    extra_skip_dirs: list[str] = Field(
        default_factory=list,
        description="Directory names skipped in addition to the built-in list.",
    )

    @field_validator("batch_size")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Batch size must be at least 1, got {v}")
        return v


class CompletionConfig(BaseModel):
    """Completion query configuration.

    Env vars:
        PHPSENSE__COMPLETION__MAX_ITEMS: Maximum items returned per query
        PHPSENSE__COMPLETION__SHOW_INFO: Attach documentation text to items
    """

    max_items: int = Field(
        default=50,
        description="Maximum number of items returned per query (10-200).",
    )
    show_info: bool = Field(
        default=True,
        description="Attach documentation text to completion items.",
    )

    @field_validator("max_items")
    @classmethod
    def validate_max_items(cls, v: int) -> int:
        if not (10 <= v <= 200):
            raise ValueError(f"Max items must be 10-200, got {v}")
        return v


class PhpSenseConfig(BaseModel):
    """Root configuration model (for type hints)."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    completion: CompletionConfig = Field(default_factory=CompletionConfig)
