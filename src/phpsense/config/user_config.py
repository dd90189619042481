"""Minimal user-facing configuration.

User config is stored in .phpsense/config.yaml and holds the handful of
settings people actually change: where the sources live, whether to index
automatically, and how completion results are presented.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from phpsense.config.models import LogLevel

DEFAULT_AUTO_INDEX = True
DEFAULT_SHOW_COMPLETION_INFO = True
DEFAULT_MAX_COMPLETION_ITEMS = 50
DEFAULT_LOG_LEVEL: LogLevel = "WARNING"


class UserConfig(BaseModel):
    """User-facing configuration options."""

    source_path: str | None = Field(
        default=None,
        description="Path to the PHP source tree to index.",
    )
    auto_index: bool = Field(
        default=DEFAULT_AUTO_INDEX,
        description="Index automatically before completion queries.",
    )
    show_completion_info: bool = Field(
        default=DEFAULT_SHOW_COMPLETION_INFO,
        description="Show documentation text with completion items.",
    )
    max_completion_items: int = Field(
        default=DEFAULT_MAX_COMPLETION_ITEMS,
        description="Maximum number of completion items per query.",
    )
    log_level: LogLevel = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Log level. DEBUG is very verbose.",
    )


def write_user_config(path: Path, config: UserConfig | None = None) -> None:
    """Write user config file with helpful comments.

    Non-default optional values are written active, defaults as comments.
    """
    cfg = config or UserConfig()

    lines = [
        "# phpsense configuration",
        "",
        "# Root of the PHP source tree to index",
    ]
    if cfg.source_path:
        lines.append(f"source_path: {yaml.safe_dump(cfg.source_path).splitlines()[0]}")
    else:
        lines.append("# source_path: /path/to/src")
    lines.append("")

    lines.append("# Build the index automatically before answering completion queries")
    if cfg.auto_index != DEFAULT_AUTO_INDEX:
        lines.append(f"auto_index: {str(cfg.auto_index).lower()}")
    else:
        lines.append(f"# auto_index: {str(cfg.auto_index).lower()}")
    lines.append("")

    lines.append("# Attach documentation text to completion items")
    if cfg.show_completion_info != DEFAULT_SHOW_COMPLETION_INFO:
        lines.append(f"show_completion_info: {str(cfg.show_completion_info).lower()}")
    else:
        lines.append(f"# show_completion_info: {str(cfg.show_completion_info).lower()}")
    lines.append("")

    lines.append("# Maximum completion items per query (10-200)")
    if cfg.max_completion_items != DEFAULT_MAX_COMPLETION_ITEMS:
        lines.append(f"max_completion_items: {cfg.max_completion_items}")
    else:
        lines.append(f"# max_completion_items: {cfg.max_completion_items}")
    lines.append("")

    lines.append("# Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL")
    if cfg.log_level != DEFAULT_LOG_LEVEL:
        lines.append(f"log_level: {cfg.log_level}")
    else:
        lines.append(f"# log_level: {cfg.log_level}")
    lines.append("")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines))


def load_user_config(path: Path) -> UserConfig:
    """Load user config from YAML file, falling back to defaults."""
    if not path.exists():
        return UserConfig()
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
        return UserConfig(**data)
    except (OSError, yaml.YAMLError, ValidationError, TypeError):
        return UserConfig()
