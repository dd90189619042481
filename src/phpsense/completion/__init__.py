"""Completion queries, ranking and the line-classifying query boundary."""

from phpsense.completion.context import QueryKind, classify_line, complete
from phpsense.completion.engine import CompletionEngine
from phpsense.completion.models import (
    ClassItem,
    CompletionItem,
    ConstantItem,
    FunctionItem,
    ItemKind,
    MethodItem,
    NamespaceItem,
    PropertyItem,
    QueryContext,
)
from phpsense.completion.scoring import rank, score

__all__ = [
    "ClassItem",
    "CompletionEngine",
    "CompletionItem",
    "ConstantItem",
    "FunctionItem",
    "ItemKind",
    "MethodItem",
    "NamespaceItem",
    "PropertyItem",
    "QueryContext",
    "QueryKind",
    "classify_line",
    "complete",
    "rank",
    "score",
]
