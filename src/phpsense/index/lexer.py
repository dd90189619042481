"""Tokenizer for PHP declaration scanning.

This is not a full PHP lexer. It recognises exactly what the declaration
parser needs (tags, comments, strings, variables, identifiers/keywords) and
turns every other character into a single-character token. Whitespace is
skipped, so concatenating token texts with the whitespace put back yields the
input again.

tokenize() is total: every loop iteration consumes at least one character
and nothing in here raises on malformed input.
"""

from __future__ import annotations

import re

from phpsense.index.models import KEYWORDS, Token, TokenKind

_BOM = "\ufeff"
_OPEN_TAG = "<?php"

_WHITESPACE = re.compile(r"\s+")
_LINE_COMMENT = re.compile(r"(?://|#)[^\n]*")
# Unterminated block comments run to end of input
_BLOCK_COMMENT = re.compile(r"/\*.*?(?:\*/|\Z)", re.DOTALL)
_STRINGS = {
    '"': re.compile(r'"(?:[^"\\]|\\.)*(?:"|\Z)', re.DOTALL),
    "'": re.compile(r"'(?:[^'\\]|\\.)*(?:'|\Z)", re.DOTALL),
}
_VARIABLE = re.compile(r"\$[A-Za-z0-9_]*")
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_\\]*")


def _is_doc_comment(text: str) -> bool:
    # "/**/" is an empty plain comment, not a doc block
    return text.startswith("/**") and not text.startswith("/**/")


class Lexer:
    """Single-use scanner over one source text."""

    def __init__(self, source: str) -> None:
        if source.startswith(_BOM):
            source = source[1:]
        self._src = source
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []

    def _advance(self, text: str) -> None:
        self._pos += len(text)
        newlines = text.count("\n")
        if newlines:
            self._line += newlines
            self._col = len(text) - text.rfind("\n")
        else:
            self._col += len(text)

    def _match(self, pattern: re.Pattern[str]) -> str:
        m = pattern.match(self._src, self._pos)
        return m.group() if m else self._src[self._pos]

    def _emit(self, kind: TokenKind, text: str) -> None:
        self._tokens.append(Token(kind, text, self._line, self._col))
        self._advance(text)

    def tokenize(self) -> list[Token]:
        src = self._src
        length = len(src)

        while self._pos < length:
            pos = self._pos
            char = src[pos]

            if char.isspace():
                self._advance(self._match(_WHITESPACE))
                continue

            if src.startswith(_OPEN_TAG, pos):
                self._emit(TokenKind.OPEN_TAG, _OPEN_TAG)
                continue

            if char == "#" or src.startswith("//", pos):
                self._emit(TokenKind.COMMENT, self._match(_LINE_COMMENT))
                continue

            if src.startswith("/*", pos):
                text = self._match(_BLOCK_COMMENT)
                self._emit(TokenKind.DOC_COMMENT if _is_doc_comment(text) else TokenKind.COMMENT, text)
                continue

            if char in _STRINGS:
                self._emit(TokenKind.STRING_LITERAL, self._match(_STRINGS[char]))
                continue

            if char == "$":
                self._emit(TokenKind.VARIABLE, self._match(_VARIABLE))
                continue

            m = _IDENTIFIER.match(src, pos)
            if m:
                word = m.group()
                self._emit(KEYWORDS.get(word.lower(), TokenKind.IDENTIFIER), word)
                continue

            self._emit(TokenKind.CHAR, char)

        return self._tokens


def tokenize(source: str) -> list[Token]:
    """Convert source text into an ordered token list. Never raises."""
    return Lexer(source).tokenize()


def join_tokens(tokens: list[Token]) -> str:
    """Rebuild source text for a token run.

    A single space is inserted wherever the source had whitespace between
    two tokens, so ``int $x = 5`` comes back as written.
    """
    parts: list[str] = []
    prev_end: tuple[int, int] | None = None
    for tok in tokens:
        if prev_end is not None and (tok.line, tok.column) != prev_end:
            parts.append(" ")
        parts.append(tok.text)
        prev_end = tok.end
    return "".join(parts).strip()
