"""Declaration parser.

A single left-to-right pass over the token list of one file that records
namespaces, use aliases, class-likes with their members, and free functions
into the SymbolTable and the file's FileRecord.

The parser never raises on unexpected input. Every branch has a
forward-progress fallback (skip to the next ``;`` or the matching closing
delimiter), so partially understood source yields partial declarations.

Parser state:
- namespace: sticky for the rest of the file once declared
- current class: one level only; brace depth finds the end of its body
- pending doc comment: attached to the next declaration, then cleared
- pending modifiers: modifier keywords seen since the last single-character
  token, consumed by the next class or function header
"""

from __future__ import annotations

from phpsense.index.docblock import parse_doc_comment
from phpsense.index.lexer import join_tokens
from phpsense.index.models import (
    CLASS_LIKE_KINDS,
    KEYWORDS,
    MODIFIER_KINDS,
    VISIBILITY,
    ClassKind,
    ClassLike,
    DocComment,
    FileRecord,
    FunctionLike,
    Modifier,
    Parameter,
    PropertyOrConstant,
    Token,
    TokenKind,
    qualify,
)
from phpsense.index.symbols import SymbolTable

_TRIVIA = frozenset({TokenKind.COMMENT, TokenKind.DOC_COMMENT})
_NAME_KINDS = frozenset({TokenKind.IDENTIFIER})
_KEYWORD_KINDS = frozenset(KEYWORDS.values())
_OPENERS = frozenset("([{")
_CLOSERS = frozenset(")]}")
# Tokens allowed in a return type besides identifiers
_TYPE_CHARS = frozenset("\\?|")
# Tokens that may sit between property modifiers and the variable (type hints)
_PROPERTY_TYPE_CHARS = frozenset("\\?|&()")
# Constructor promotion keywords that are not part of a parameter's type
_PROMOTION_WORDS = frozenset({"public", "protected", "private", "readonly"})
# Braced declarations whose members are not indexed
_OPAQUE_DECLARATIONS = frozenset({"enum"})


def _is_char(tok: Token, text: str) -> bool:
    return tok.kind is TokenKind.CHAR and tok.text == text


def parse_parameter(text: str) -> Parameter:
    """Split one parameter declaration like ``?Foo &$bar = null``."""
    is_reference = False
    is_variadic = False

    main, sep, default = text.strip().partition("=")

    parts: list[str] = []
    for part in main.split():
        while True:
            if part.startswith("&"):
                is_reference = True
                part = part[1:]
            elif part.startswith("..."):
                is_variadic = True
                part = part[3:]
            else:
                break
        if part:
            parts.append(part)

    name = parts[-1] if parts else ""
    type_parts = [p for p in parts[:-1] if p.lower() not in _PROMOTION_WORDS]

    return Parameter(
        name=name[1:] if name.startswith("$") else name,
        type="".join(type_parts) or None,
        default=(default.strip() or None) if sep else None,
        is_reference=is_reference,
        is_variadic=is_variadic,
    )


class DeclarationParser:
    """Parses one file's tokens into the symbol table."""

    def __init__(self, table: SymbolTable, record: FileRecord) -> None:
        self.table = table
        self.record = record
        self.namespace = ""
        self.current_class: ClassLike | None = None
        self.pending_doc: DocComment | None = None
        self._tokens: list[Token] = []

    def parse(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        n = len(tokens)
        header_modifiers: set[Modifier] = set()
        i = 0

        while i < n:
            tok = tokens[i]
            kind = tok.kind

            if kind is TokenKind.NAMESPACE:
                i = self._parse_namespace(i)
            elif kind is TokenKind.USE:
                i = self._parse_use(i)
            elif kind in CLASS_LIKE_KINDS:
                i = self._parse_class(i, header_modifiers)
                header_modifiers = set()
            elif kind is TokenKind.FUNCTION:
                i = self._parse_function(i, header_modifiers)
                header_modifiers = set()
            elif kind is TokenKind.DOC_COMMENT:
                self.pending_doc = parse_doc_comment(tok.text)
                i += 1
            elif kind is TokenKind.IDENTIFIER and tok.text.lower() in _OPAQUE_DECLARATIONS:
                i = self._skip_opaque_declaration(i)
                header_modifiers = set()
            elif kind in MODIFIER_KINDS:
                header_modifiers.add(MODIFIER_KINDS[kind])
                i += 1
            else:
                if kind is TokenKind.CHAR:
                    header_modifiers = set()
                i += 1

    # -- helpers --------------------------------------------------------

    def _skip_trivia(self, i: int) -> int:
        tokens = self._tokens
        while i < len(tokens) and tokens[i].kind in _TRIVIA:
            i += 1
        return i

    def _skip_to_semicolon(self, i: int) -> int:
        """Return the index just past the next ``;`` (or the end)."""
        tokens = self._tokens
        while i < len(tokens) and not _is_char(tokens[i], ";"):
            i += 1
        return min(i + 1, len(tokens))

    def _skip_block(self, i: int) -> int:
        """From an opening ``{`` at ``i``, return the index past its matching ``}``."""
        tokens = self._tokens
        depth = 0
        while i < len(tokens):
            tok = tokens[i]
            if _is_char(tok, "{"):
                depth += 1
            elif _is_char(tok, "}"):
                depth -= 1
                if depth == 0:
                    return i + 1
            i += 1
        return i

    def _skip_opaque_declaration(self, start: int) -> int:
        """Skip ``enum Name [: type] [implements ...] { ... }`` as a whole.

        Anything else starting with the same word (a call, a constant) is
        left to the main loop.
        """
        tokens = self._tokens
        i = self._skip_trivia(start + 1)
        if i >= len(tokens) or tokens[i].kind is not TokenKind.IDENTIFIER:
            return start + 1

        while i < len(tokens) and not any(_is_char(tokens[i], c) for c in "{;(="):
            i += 1
        if i >= len(tokens) or not _is_char(tokens[i], "{"):
            return start + 1

        self.pending_doc = None
        return self._skip_block(i)

    def _take_doc(self) -> DocComment | None:
        doc, self.pending_doc = self.pending_doc, None
        return doc

    # -- namespace / use ------------------------------------------------

    def _parse_namespace(self, start: int) -> int:
        tokens = self._tokens
        i = self._skip_trivia(start + 1)
        name = ""
        while i < len(tokens) and (tokens[i].kind in _NAME_KINDS or _is_char(tokens[i], "\\")):
            name += tokens[i].text
            i += 1

        if name:
            self.namespace = name
            self.record.namespace = name
            self.table.add_namespace(name)
        return i

    def _parse_use(self, start: int) -> int:
        """Parse ``use A\\B [as C][, D\\E];`` including ``use A\\{B, C as D};``."""
        tokens = self._tokens
        i = start + 1
        group_prefix = ""
        name = ""
        alias = ""
        in_alias = False

        def flush() -> None:
            target = (group_prefix + name).lstrip("\\")
            if name:
                self.record.uses[alias or target.rsplit("\\", 1)[-1]] = target

        while i < len(tokens) and not _is_char(tokens[i], ";"):
            tok = tokens[i]
            if tok.kind is TokenKind.IDENTIFIER and tok.text.lower() == "as":
                in_alias = True
            elif _is_char(tok, "{"):
                group_prefix, name = name, ""
            elif _is_char(tok, ",") or _is_char(tok, "}"):
                flush()
                name, alias, in_alias = "", "", False
            elif tok.kind in _NAME_KINDS or _is_char(tok, "\\"):
                if in_alias:
                    alias += tok.text
                else:
                    name += tok.text
            i += 1

        flush()
        return min(i + 1, len(tokens))

    # -- class-likes ----------------------------------------------------

    def _parse_header_names(self, i: int) -> tuple[list[str], list[str], int]:
        """Collect ``extends`` / ``implements`` lists up to ``{`` or ``;``."""
        tokens = self._tokens
        extends: list[str] = []
        implements: list[str] = []
        target: list[str] | None = None
        name = ""

        def flush() -> None:
            nonlocal name
            if name and target is not None:
                target.append(name)
            name = ""

        while i < len(tokens) and not (_is_char(tokens[i], "{") or _is_char(tokens[i], ";")):
            tok = tokens[i]
            if tok.kind is TokenKind.EXTENDS:
                flush()
                target = extends
            elif tok.kind is TokenKind.IMPLEMENTS:
                flush()
                target = implements
            elif tok.kind in _NAME_KINDS or _is_char(tok, "\\"):
                name += tok.text
            elif tok.kind not in _TRIVIA:
                flush()
            i += 1

        flush()
        return extends, implements, i

    def _parse_class(self, start: int, modifiers: set[Modifier]) -> int:
        tokens = self._tokens
        kind = ClassKind(tokens[start].text.lower())
        i = self._skip_trivia(start + 1)

        if i >= len(tokens) or tokens[i].kind is not TokenKind.IDENTIFIER:
            # "Foo::class" is a name lookup, not a declaration
            if start > 0 and _is_char(tokens[start - 1], ":"):
                return start + 1
            return self._skip_anonymous_class(i)

        name = tokens[i].text
        extends, implements, i = self._parse_header_names(i + 1)

        cls = ClassLike(
            name=name,
            fqn=qualify(self.namespace, name),
            namespace=self.namespace,
            kind=kind,
            modifiers=modifiers & {Modifier.ABSTRACT, Modifier.FINAL},
            extends=extends,
            implements=implements,
            doc=self._take_doc(),
            file=self.record.path,
            line=tokens[start].line,
        )
        self.table.add_class(cls, self.record)

        if i >= len(tokens) or not _is_char(tokens[i], "{"):
            return i

        self.current_class = cls
        try:
            return self._parse_class_body(i + 1, cls)
        finally:
            self.current_class = None

    def _skip_anonymous_class(self, i: int) -> int:
        """Skip ``new class(...) extends X { ... }`` without declaring anything."""
        tokens = self._tokens
        depth = 0
        while i < len(tokens):
            tok = tokens[i]
            if _is_char(tok, "("):
                depth += 1
            elif _is_char(tok, ")"):
                depth -= 1
            elif depth <= 0 and _is_char(tok, ";"):
                return i + 1
            elif depth <= 0 and _is_char(tok, "{"):
                return self._skip_block(i)
            i += 1
        return i

    def _parse_class_body(self, i: int, cls: ClassLike) -> int:
        tokens = self._tokens
        depth = 1
        while i < len(tokens) and depth > 0:
            tok = tokens[i]
            if _is_char(tok, "{"):
                depth += 1
                i += 1
            elif _is_char(tok, "}"):
                depth -= 1
                i += 1
            elif tok.kind is TokenKind.DOC_COMMENT:
                self.pending_doc = parse_doc_comment(tok.text)
                i += 1
            elif tok.kind is TokenKind.FUNCTION:
                i = self._parse_function(i, set())
            elif tok.kind in MODIFIER_KINDS:
                i = self._parse_member(i, cls)
            else:
                i += 1
        return i

    # -- members --------------------------------------------------------

    def _parse_member(self, start: int, cls: ClassLike) -> int:
        """Property, class constant, or a method introduced by modifiers."""
        tokens = self._tokens
        modifiers: set[Modifier] = set()
        i = start
        while i < len(tokens):
            tok = tokens[i]
            if tok.kind in MODIFIER_KINDS:
                modifiers.add(MODIFIER_KINDS[tok.kind])
                i += 1
                if tok.kind is TokenKind.CONST:
                    break
            elif tok.kind is TokenKind.COMMENT:
                i += 1
            else:
                break

        if Modifier.CONST not in modifiers and i < len(tokens) and tokens[i].kind is TokenKind.FUNCTION:
            return self._parse_function(i, modifiers)

        if not modifiers & VISIBILITY:
            modifiers.add(Modifier.PUBLIC)

        if Modifier.CONST in modifiers:
            return self._parse_constant(i, cls, modifiers, tokens[start].line)
        return self._parse_properties(i, cls, modifiers)

    def _parse_constant(self, i: int, cls: ClassLike, modifiers: set[Modifier], line: int) -> int:
        tokens = self._tokens
        name = ""
        while i < len(tokens) and not (_is_char(tokens[i], "=") or _is_char(tokens[i], ";")):
            if tokens[i].kind is TokenKind.IDENTIFIER or tokens[i].kind in _KEYWORD_KINDS:
                # typed constants: the name is the last word before "="
                name = tokens[i].text
            i += 1

        if not name or i >= len(tokens) or not _is_char(tokens[i], "="):
            self.pending_doc = None
            return self._skip_to_semicolon(i)

        i += 1
        value_start = i
        while i < len(tokens) and not _is_char(tokens[i], ";"):
            i += 1
        value = join_tokens([t for t in tokens[value_start:i] if t.kind not in _TRIVIA])

        cls.constants[name] = PropertyOrConstant(
            name=name,
            modifiers=modifiers,
            value=value,
            doc=self._take_doc(),
            file=self.record.path,
            line=line,
        )
        return min(i + 1, len(tokens))

    def _parse_properties(self, i: int, cls: ClassLike, modifiers: set[Modifier]) -> int:
        """Parse ``[type] $a [= x], $b [= y];``."""
        tokens = self._tokens
        doc = self._take_doc()

        while i < len(tokens):
            while i < len(tokens) and (
                tokens[i].kind in _TRIVIA
                or tokens[i].kind is TokenKind.IDENTIFIER
                or (tokens[i].kind is TokenKind.CHAR and tokens[i].text in _PROPERTY_TYPE_CHARS)
            ):
                i += 1

            if i >= len(tokens) or tokens[i].kind is not TokenKind.VARIABLE:
                return self._skip_to_semicolon(i)

            var = tokens[i]
            i += 1
            default: str | None = None
            i = self._skip_trivia(i)
            if i < len(tokens) and _is_char(tokens[i], "="):
                i, default = self._read_initializer(i + 1)

            cls.properties[var.text[1:]] = PropertyOrConstant(
                name=var.text[1:],
                modifiers=set(modifiers),
                value=default,
                doc=doc,
                file=self.record.path,
                line=var.line,
            )

            if i < len(tokens) and _is_char(tokens[i], ","):
                i += 1
                continue
            return self._skip_to_semicolon(i)

        return i

    def _read_initializer(self, i: int) -> tuple[int, str | None]:
        """Read an initializer up to a top-level ``,`` or ``;``."""
        tokens = self._tokens
        start = i
        depth = 0
        while i < len(tokens):
            tok = tokens[i]
            if tok.kind is TokenKind.CHAR:
                if tok.text in _OPENERS:
                    depth += 1
                elif tok.text in _CLOSERS:
                    depth -= 1
                elif tok.text in ",;" and depth <= 0:
                    break
            i += 1
        text = join_tokens([t for t in tokens[start:i] if t.kind not in _TRIVIA])
        return i, text or None

    # -- functions ------------------------------------------------------

    def _skip_closure(self, i: int) -> int:
        """Skip an anonymous function header: params, then up to ``{`` or past ``;``."""
        tokens = self._tokens
        while i < len(tokens) and not _is_char(tokens[i], "("):
            i += 1
        depth = 0
        while i < len(tokens):
            if _is_char(tokens[i], "("):
                depth += 1
            elif _is_char(tokens[i], ")"):
                depth -= 1
                if depth == 0:
                    i += 1
                    break
            i += 1
        while i < len(tokens) and not (_is_char(tokens[i], "{") or _is_char(tokens[i], ";")):
            i += 1
        if i < len(tokens) and _is_char(tokens[i], ";"):
            i += 1
        return i

    def _parse_parameters(self, i: int) -> tuple[list[Parameter], int]:
        """Parse ``( ... )`` starting at ``i``; returns params and the index past ``)``."""
        tokens = self._tokens
        if i >= len(tokens) or not _is_char(tokens[i], "("):
            return [], i

        params: list[Parameter] = []
        current: list[Token] = []
        depth = 0
        while i < len(tokens):
            tok = tokens[i]
            i += 1
            if tok.kind in _TRIVIA:
                continue
            if tok.kind is TokenKind.CHAR and tok.text in _OPENERS:
                depth += 1
                if depth == 1:
                    continue
            elif tok.kind is TokenKind.CHAR and tok.text in _CLOSERS:
                depth -= 1
                if depth == 0:
                    break
            elif depth == 1 and _is_char(tok, ","):
                if current:
                    params.append(parse_parameter(join_tokens(current)))
                current = []
                continue
            current.append(tok)

        if current:
            params.append(parse_parameter(join_tokens(current)))
        return params, i

    def _parse_return_type(self, i: int) -> tuple[str | None, int]:
        tokens = self._tokens
        i = self._skip_trivia(i)
        if i >= len(tokens) or not _is_char(tokens[i], ":"):
            return None, i

        i = self._skip_trivia(i + 1)
        text = ""
        while i < len(tokens):
            tok = tokens[i]
            if tok.kind in (TokenKind.IDENTIFIER, TokenKind.STATIC) or (
                tok.kind is TokenKind.CHAR and tok.text in _TYPE_CHARS
            ):
                text += tok.text
                i += 1
            else:
                break
        return text or None, i

    def _parse_function(self, start: int, modifiers: set[Modifier]) -> int:
        tokens = self._tokens
        modifiers = set(modifiers)
        if not modifiers & VISIBILITY:
            modifiers.add(Modifier.PUBLIC)

        i = self._skip_trivia(start + 1)
        if i < len(tokens) and _is_char(tokens[i], "&"):
            i = self._skip_trivia(i + 1)

        # Methods may be named after reserved words ("function list()")
        is_name = i < len(tokens) and (
            tokens[i].kind is TokenKind.IDENTIFIER
            or (self.current_class is not None and tokens[i].kind in _KEYWORD_KINDS)
        )
        if not is_name:
            return max(self._skip_closure(i), start + 1)

        name = tokens[i].text
        params, i = self._parse_parameters(self._skip_trivia(i + 1))
        return_type, i = self._parse_return_type(i)

        fn = FunctionLike(
            name=name,
            modifiers=modifiers,
            parameters=params,
            return_type=return_type,
            doc=self._take_doc(),
            file=self.record.path,
            line=tokens[start].line,
            class_name=self.current_class.name if self.current_class else None,
        )

        if self.current_class is not None:
            self.current_class.methods[name] = fn
            i = self._skip_trivia(i)
            if i < len(tokens) and _is_char(tokens[i], "{"):
                i = self._skip_block(i)
        else:
            self.table.add_function(qualify(self.namespace, name), fn, self.record)
        return i


def parse(tokens: list[Token], record: FileRecord, table: SymbolTable) -> None:
    """Parse one file's tokens, writing into ``table`` and ``record``."""
    DeclarationParser(table, record).parse(tokens)
