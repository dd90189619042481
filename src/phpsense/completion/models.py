"""Completion item variants.

Every item has a display text, the text to insert, a category tag, a score
and optional documentation. Each variant adds only the fields that exist for
its kind, so callers can match on the type instead of probing optional keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class ItemKind(str, Enum):
    CLASS = "class"
    METHOD = "method"
    PROPERTY = "property"
    CONSTANT = "constant"
    NAMESPACE = "namespace"
    FUNCTION = "function"


@dataclass(frozen=True, slots=True)
class CompletionItemBase:
    display: str
    insert_text: str
    category: str
    score: int
    doc: str | None = None

    kind: ClassVar[ItemKind]

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind.value,
            "display": self.display,
            "insert_text": self.insert_text,
            "category": self.category,
            "score": self.score,
            "doc": self.doc,
        }


@dataclass(frozen=True, slots=True)
class ClassItem(CompletionItemBase):
    """A class-like; ``insert_text`` is a constructor call snippet."""

    fqn: str = ""

    kind: ClassVar[ItemKind] = ItemKind.CLASS


@dataclass(frozen=True, slots=True)
class MethodItem(CompletionItemBase):
    class_name: str | None = None
    is_static: bool = False

    kind: ClassVar[ItemKind] = ItemKind.METHOD


@dataclass(frozen=True, slots=True)
class PropertyItem(CompletionItemBase):
    is_static: bool = False

    kind: ClassVar[ItemKind] = ItemKind.PROPERTY


@dataclass(frozen=True, slots=True)
class ConstantItem(CompletionItemBase):
    value: str | None = None

    kind: ClassVar[ItemKind] = ItemKind.CONSTANT


@dataclass(frozen=True, slots=True)
class NamespaceItem(CompletionItemBase):
    class_count: int = 0

    kind: ClassVar[ItemKind] = ItemKind.NAMESPACE


@dataclass(frozen=True, slots=True)
class FunctionItem(CompletionItemBase):
    fqn: str = ""

    kind: ClassVar[ItemKind] = ItemKind.FUNCTION


CompletionItem = ClassItem | MethodItem | PropertyItem | ConstantItem | NamespaceItem | FunctionItem


@dataclass(frozen=True, slots=True)
class QueryContext:
    """What the caller knows about the cursor position.

    ``class_name`` is a class reference as written at the cursor (``Foo`` in
    ``Foo::``); ``in_same_class`` lifts the public-only filter.
    """

    class_name: str | None = None
    in_same_class: bool = False
    file_path: str | None = None
