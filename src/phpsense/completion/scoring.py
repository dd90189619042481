"""Relevance scoring and ordering of completion items."""

from __future__ import annotations

from collections.abc import Collection, Iterable
from typing import TypeVar

from phpsense.completion.models import CompletionItemBase
from phpsense.index.models import Modifier

BASE_SCORE = 1000
EXACT_BONUS = 500
PREFIX_BONUS = 300
CONTAINS_BONUS = 100
PUBLIC_BONUS = 50
COMMON_NAME_BONUS = 25

# Names worth a small boost because they are requested so often
COMMON_NAMES = frozenset({"__construct", "getName", "getId", "toString", "getValue"})

_T = TypeVar("_T", bound=CompletionItemBase)


def score(name: str, prefix: str, modifiers: Collection[Modifier] = ()) -> int:
    """Score ``name`` against the typed ``prefix``.

    Match quality is case-insensitive: exact > starts with > contains.
    Public items and a handful of common method names get small bonuses.
    """
    lower_name = name.lower()
    lower_prefix = prefix.lower()

    value = BASE_SCORE
    if lower_name == lower_prefix:
        value += EXACT_BONUS
    elif lower_name.startswith(lower_prefix):
        value += PREFIX_BONUS
    elif lower_prefix in lower_name:
        value += CONTAINS_BONUS

    if Modifier.PUBLIC in modifiers:
        value += PUBLIC_BONUS
    if name in COMMON_NAMES:
        value += COMMON_NAME_BONUS
    return value


def sort_key(item: CompletionItemBase) -> tuple[int, int, str]:
    return (-item.score, len(item.display), item.display)


def rank(items: Iterable[_T]) -> list[_T]:
    """Highest score first, then shorter display text, then alphabetical."""
    return sorted(items, key=sort_key)
