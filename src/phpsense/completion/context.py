"""Query boundary: classify the line at the cursor and dispatch.

The line text decides which query runs:

- ``new Foo``       -> class completions
- ``use Foo\\Bar``  -> namespace completions
- ``$x->met``       -> method completions
- ``Foo::CON``      -> static member completions, with ``Foo`` as class context
- anything else     -> default completions

Patterns are tried in that order; the first one found anywhere in the line
wins.
"""

from __future__ import annotations

import re
from enum import Enum

import structlog

from phpsense.completion.engine import CompletionEngine
from phpsense.completion.models import CompletionItem, QueryContext

logger = structlog.get_logger()

_NEW = re.compile(r"new\s+(\w+)(\\\w+)*")
_USE = re.compile(r"use\s+(\w+)(\\\w+)*")
_ARROW = re.compile(r"->(\w+)")
_STATIC = re.compile(r"::(\w+)")
_STATIC_TARGET = re.compile(r"(\$?[\w\\]+)::\w+")

DEFAULT_MAX_ITEMS = 50


class QueryKind(str, Enum):
    CLASS = "class"
    NAMESPACE = "namespace"
    METHOD = "method"
    STATIC = "static"
    DEFAULT = "default"


def classify_line(line: str) -> QueryKind:
    if _NEW.search(line):
        return QueryKind.CLASS
    if _USE.search(line):
        return QueryKind.NAMESPACE
    if _ARROW.search(line):
        return QueryKind.METHOD
    if _STATIC.search(line):
        return QueryKind.STATIC
    return QueryKind.DEFAULT


def static_target(line: str) -> str | None:
    """The class reference written before ``::``, e.g. ``Foo`` in ``Foo::bar``."""
    m = _STATIC_TARGET.search(line)
    return m.group(1) if m else None


def complete(
    engine: CompletionEngine,
    line: str,
    prefix: str,
    column: int | None = None,
    *,
    max_items: int = DEFAULT_MAX_ITEMS,
    file_path: str | None = None,
) -> list[CompletionItem]:
    """Ranked completion items for the cursor, capped at ``max_items``.

    Only the text left of ``column`` is classified when a column is given.
    Returns an empty list when nothing has been indexed.
    """
    if not engine.table.classes and not engine.table.functions:
        return []

    text = line[:column] if column is not None else line
    kind = classify_line(text)
    logger.debug("completion_query", kind=kind.value, prefix=prefix)

    items: list[CompletionItem]
    if kind is QueryKind.CLASS:
        items = list(engine.class_completions(prefix))
    elif kind is QueryKind.NAMESPACE:
        items = list(engine.namespace_completions(prefix))
    elif kind is QueryKind.METHOD:
        items = list(engine.method_completions(prefix, QueryContext(file_path=file_path)))
    elif kind is QueryKind.STATIC:
        context = QueryContext(class_name=static_target(text), file_path=file_path)
        items = list(engine.static_member_completions(prefix, context))
    else:
        items = engine.default_completions(prefix)

    return items[:max_items]
