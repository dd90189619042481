"""Data model for the in-memory symbol index.

Everything here is created during one indexing run and discarded when the
next run starts. Tokens are immutable; declaration records are mutable
because the inheritance resolver fills in members after parsing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TokenKind(str, Enum):
    """Closed set of token kinds produced by the lexer."""

    OPEN_TAG = "open_tag"
    NAMESPACE = "namespace"
    USE = "use"
    CLASS = "class"
    INTERFACE = "interface"
    TRAIT = "trait"
    FUNCTION = "function"
    VARIABLE = "variable"
    CONST = "const"
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    STATIC = "static"
    ABSTRACT = "abstract"
    FINAL = "final"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    STRING_LITERAL = "string_literal"
    COMMENT = "comment"
    DOC_COMMENT = "doc_comment"
    IDENTIFIER = "identifier"
    CHAR = "char"


# Keyword text (lowercased) -> token kind
KEYWORDS: dict[str, TokenKind] = {
    "namespace": TokenKind.NAMESPACE,
    "use": TokenKind.USE,
    "class": TokenKind.CLASS,
    "interface": TokenKind.INTERFACE,
    "trait": TokenKind.TRAIT,
    "function": TokenKind.FUNCTION,
    "const": TokenKind.CONST,
    "public": TokenKind.PUBLIC,
    "protected": TokenKind.PROTECTED,
    "private": TokenKind.PRIVATE,
    "static": TokenKind.STATIC,
    "abstract": TokenKind.ABSTRACT,
    "final": TokenKind.FINAL,
    "extends": TokenKind.EXTENDS,
    "implements": TokenKind.IMPLEMENTS,
}

CLASS_LIKE_KINDS = frozenset({TokenKind.CLASS, TokenKind.INTERFACE, TokenKind.TRAIT})


class Modifier(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    STATIC = "static"
    ABSTRACT = "abstract"
    FINAL = "final"
    CONST = "const"


MODIFIER_KINDS: dict[TokenKind, Modifier] = {
    TokenKind.PUBLIC: Modifier.PUBLIC,
    TokenKind.PROTECTED: Modifier.PROTECTED,
    TokenKind.PRIVATE: Modifier.PRIVATE,
    TokenKind.STATIC: Modifier.STATIC,
    TokenKind.ABSTRACT: Modifier.ABSTRACT,
    TokenKind.FINAL: Modifier.FINAL,
    TokenKind.CONST: Modifier.CONST,
}

VISIBILITY = frozenset({Modifier.PUBLIC, Modifier.PROTECTED, Modifier.PRIVATE})


class ClassKind(str, Enum):
    CLASS = "class"
    INTERFACE = "interface"
    TRAIT = "trait"


class ResolutionState(str, Enum):
    """Inheritance resolution progress of a class-like."""

    UNRESOLVED = "unresolved"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexed token. Line and column are 1-based and point at its first character."""

    kind: TokenKind
    text: str
    line: int
    column: int

    @property
    def end(self) -> tuple[int, int]:
        """(line, column) just past the last character."""
        newlines = self.text.count("\n")
        if not newlines:
            return self.line, self.column + len(self.text)
        return self.line + newlines, len(self.text) - self.text.rfind("\n")


@dataclass
class DocComment:
    """Parsed ``/** ... */`` block."""

    summary: str = ""
    description: str = ""
    tags: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class Parameter:
    name: str
    type: str | None = None
    default: str | None = None
    is_reference: bool = False
    is_variadic: bool = False


@dataclass
class FunctionLike:
    """A free function or a method."""

    name: str
    modifiers: set[Modifier] = field(default_factory=lambda: {Modifier.PUBLIC})
    parameters: list[Parameter] = field(default_factory=list)
    return_type: str | None = None
    doc: DocComment | None = None
    file: str = ""
    line: int = 0
    class_name: str | None = None  # None for free functions
    inherited: bool = False

    @property
    def is_static(self) -> bool:
        return Modifier.STATIC in self.modifiers


@dataclass
class PropertyOrConstant:
    """A class property or class constant (constants carry Modifier.CONST)."""

    name: str
    modifiers: set[Modifier] = field(default_factory=set)
    value: str | None = None
    doc: DocComment | None = None
    file: str = ""
    line: int = 0
    inherited: bool = False

    @property
    def is_static(self) -> bool:
        return Modifier.STATIC in self.modifiers

    @property
    def is_constant(self) -> bool:
        return Modifier.CONST in self.modifiers


@dataclass
class ClassLike:
    """A class, interface or trait declaration."""

    name: str
    fqn: str
    namespace: str = ""
    kind: ClassKind = ClassKind.CLASS
    modifiers: set[Modifier] = field(default_factory=set)
    extends: list[str] = field(default_factory=list)
    implements: list[str] = field(default_factory=list)
    methods: dict[str, FunctionLike] = field(default_factory=dict)
    properties: dict[str, PropertyOrConstant] = field(default_factory=dict)
    constants: dict[str, PropertyOrConstant] = field(default_factory=dict)
    doc: DocComment | None = None
    file: str = ""
    line: int = 0
    resolution: ResolutionState = ResolutionState.UNRESOLVED


@dataclass
class FileRecord:
    """Per-file view of the index."""

    path: str
    namespace: str = ""
    uses: dict[str, str] = field(default_factory=dict)  # alias -> fully-qualified name
    classes: dict[str, ClassLike] = field(default_factory=dict)  # short name -> class
    functions: dict[str, FunctionLike] = field(default_factory=dict)
    indexed_at: float = 0.0


def qualify(namespace: str, name: str) -> str:
    """Join a namespace and a short name with the namespace separator."""
    return f"{namespace}\\{name}" if namespace else name


def normalize_path(path: str) -> str:
    """Key form of a file path: forward slashes only."""
    return path.replace("\\", "/")
