"""phpsense error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Index
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Index (3xxx)
    INDEX_ROOT_NOT_FOUND = 3001
    INDEX_ROOT_UNREADABLE = 3002
    INDEX_SOURCE_NOT_SET = 3003


@dataclass(frozen=True, slots=True)
class PhpSenseError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(PhpSenseError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class IndexingError(PhpSenseError):
    """Fatal failures of an indexing run."""

    @classmethod
    def root_not_found(cls, path: str) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_ROOT_NOT_FOUND,
            message=f"Source directory does not exist: {path}",
            details={"path": path},
        )

    @classmethod
    def root_unreadable(cls, path: str, reason: str) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_ROOT_UNREADABLE,
            message=f"Cannot list source directory {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )

    @classmethod
    def source_not_set(cls) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_SOURCE_NOT_SET,
            message="No source path configured. Run 'phpsense init --source DIR' first.",
        )

