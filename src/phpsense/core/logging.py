"""Logging for phpsense.

structlog renders every event through stdlib logging handlers. Console
output is written through the shared rich console, so log lines are printed
above a live progress bar instead of through it. While a bar is live only
warnings and errors reach the console; file outputs get everything.

Events emitted inside ``index_run()`` carry that run's ``run_id`` and
``root``, including events from tasks gathered within the run.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from rich.text import Text

if TYPE_CHECKING:
    from phpsense.config.models import LoggingConfig, LogOutputConfig


@contextmanager
def index_run(root: str | Path, run_id: str | None = None) -> Iterator[str]:
    """Bind ``run_id`` and ``root`` to every event logged inside the block."""
    rid = run_id or uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(run_id=rid, root=str(root)):
        yield rid


def current_run_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("run_id")


class ProgressAwareFilter(logging.Filter):
    """Hold back console records below WARNING while a progress bar is live."""

    def filter(self, record: logging.LogRecord) -> bool:
        from phpsense.core.progress import is_console_suppressed

        return record.levelno >= logging.WARNING or not is_console_suppressed()


class RichConsoleHandler(logging.Handler):
    """Write formatted records through the shared rich console (stderr)."""

    def emit(self, record: logging.LogRecord) -> None:
        from phpsense.core.progress import get_console

        try:
            get_console().print(Text.from_ansi(self.format(record)), soft_wrap=True)
        except Exception:
            self.handleError(record)


def _level(name: str | None, default: int) -> int:
    if not name:
        return default
    return logging.getLevelNamesMapping().get(name.upper(), default)


def _handler_for(output: LogOutputConfig) -> logging.Handler:
    if output.destination == "stderr":
        handler: logging.Handler = RichConsoleHandler()
        handler.addFilter(ProgressAwareFilter())
        return handler
    if output.destination == "stdout":
        return logging.StreamHandler(sys.stdout)

    path = Path(output.destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def _renderer(output: LogOutputConfig) -> structlog.types.Processor:
    if output.format == "json":
        return structlog.processors.JSONRenderer()
    if output.destination == "stderr":
        from phpsense.core.progress import get_console

        colors = get_console().is_terminal
    else:
        colors = output.destination == "stdout" and sys.stdout.isatty()
    return structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0, pad_level=False)


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "WARNING",
) -> None:
    """Install handlers for each configured output.

    ``level`` and ``json_format`` build a single stderr output and are
    ignored when ``config`` is given.
    """
    from phpsense.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level, logging.WARNING)
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # The CLI reconfigures once the project config is loaded
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)

    for output in config.outputs:
        handler = _handler_for(output)
        handler.setLevel(_level(output.level, root_level))
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(processor=_renderer(output), foreign_pre_chain=pre_chain)
        )
        root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
