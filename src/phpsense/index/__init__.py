"""Symbol index: lexer, declaration parser, symbol table and inheritance resolver."""

from phpsense.index.lexer import tokenize
from phpsense.index.ops import (
    IndexCoordinator,
    IndexRunResult,
    IndexStats,
    SearchKind,
    SearchResult,
)
from phpsense.index.symbols import SymbolTable

__all__ = [
    "IndexCoordinator",
    "IndexRunResult",
    "IndexStats",
    "SearchKind",
    "SearchResult",
    "SymbolTable",
    "tokenize",
]
