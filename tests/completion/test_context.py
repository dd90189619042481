"""Tests for completion/context.py - the line-classifying query boundary."""

from __future__ import annotations

import pytest

from phpsense.completion import CompletionEngine, QueryKind, classify_line, complete
from phpsense.completion.context import DEFAULT_MAX_ITEMS, static_target
from phpsense.index import IndexCoordinator, SymbolTable


class TestClassifyLine:
    """Tests for classify_line()."""

    @pytest.mark.parametrize(
        ("line", "kind"),
        [
            ("$x = new Foo", QueryKind.CLASS),
            ("$x = new App\\Models\\Us", QueryKind.CLASS),
            ("use Foo\\Bar", QueryKind.NAMESPACE),
            ("$x->met", QueryKind.METHOD),
            ("Foo::CON", QueryKind.STATIC),
            ("$x->", QueryKind.DEFAULT),
            ("Foo::", QueryKind.DEFAULT),
            ("greet", QueryKind.DEFAULT),
            ("", QueryKind.DEFAULT),
        ],
    )
    def test_routing(self, line: str, kind: QueryKind) -> None:
        assert classify_line(line) is kind

    def test_first_pattern_wins(self) -> None:
        """'new' is checked before '->' and '::'."""
        assert classify_line("$a->b(new Foo") is QueryKind.CLASS
        assert classify_line("$a->b(Foo::BAR") is QueryKind.METHOD

    def test_word_containing_use_is_not_a_use_statement(self) -> None:
        assert classify_line("$user->na") is QueryKind.METHOD


class TestStaticTarget:
    """Tests for static_target()."""

    @pytest.mark.parametrize(
        ("line", "target"),
        [
            ("Foo::CON", "Foo"),
            ("return \\App\\Base::create", "\\App\\Base"),
            ("$obj::KEY", "$obj"),
            ("self::x", "self"),
            ("nothing here", None),
        ],
    )
    def test_target(self, line: str, target: str | None) -> None:
        assert static_target(line) == target


class TestComplete:
    """Tests for complete()."""

    def test_empty_index_gives_nothing(self) -> None:
        assert complete(CompletionEngine(SymbolTable()), "$x = new Foo", "Foo") == []

    def test_dispatch_by_line(self, engine: CompletionEngine, user_file: str) -> None:
        assert [i.display for i in complete(engine, "$x = new Us", "Us")] == ["User"]
        assert [i.display for i in complete(engine, "use App\\Con", "Con")] == [
            "App\\Contracts",
            "App\\Contracts\\Renderable",
        ]
        assert [i.display for i in complete(engine, "$u->getN", "getN")] == ["getName"]
        assert [i.display for i in complete(engine, "Base::cr", "cr", file_path=user_file)] == ["create"]
        assert [i.display for i in complete(engine, "gre", "gre")] == ["greet"]

    def test_static_without_resolvable_class(self, engine: CompletionEngine) -> None:
        assert complete(engine, "Base::cr", "cr") == []
        assert [i.display for i in complete(engine, "\\App\\Base::cr", "cr")] == ["create"]

    def test_column_limits_classified_text(self, engine: CompletionEngine) -> None:
        """Text right of the cursor is ignored."""
        line = "$u->getN; $x = new Foo"
        assert [i.display for i in complete(engine, line, "getN", column=8)] == ["getName"]

    def test_results_are_capped(self) -> None:
        coordinator = IndexCoordinator()
        coordinator.index_source("many.php", "<?php " + " ".join(f"class C{n} {{}}" for n in range(80)))
        engine = CompletionEngine(coordinator.table)

        assert len(complete(engine, "new C", "C")) == DEFAULT_MAX_ITEMS
        assert len(complete(engine, "new C", "C", max_items=10)) == 10
        assert [i.display for i in complete(engine, "new C", "C", max_items=3)] == ["C0", "C1", "C2"]
