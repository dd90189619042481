"""Tests for index/parser.py.

Covers:
- parse_parameter()
- namespace and use declarations
- class-like headers, members and doc attachment
- free functions, closures and anonymous classes
- forward progress on malformed input
"""

from __future__ import annotations

import pytest

from phpsense.index.lexer import tokenize
from phpsense.index.models import ClassKind, FileRecord, Modifier, Parameter
from phpsense.index.parser import parse, parse_parameter
from phpsense.index.symbols import SymbolTable


def parse_source(source: str, path: str = "src/test.php") -> tuple[SymbolTable, FileRecord]:
    table = SymbolTable()
    record = table.new_file(path)
    parse(tokenize(source), record, table)
    return table, record


class TestParseParameter:
    """Tests for parse_parameter()."""

    def test_typed(self) -> None:
        assert parse_parameter("int $a") == Parameter(name="a", type="int")

    def test_untyped(self) -> None:
        assert parse_parameter("$a") == Parameter(name="a")

    def test_nullable_reference_with_default(self) -> None:
        """Type, by-reference marker and default are all split out."""
        param = parse_parameter("?Foo &$b = null")
        assert param == Parameter(name="b", type="?Foo", default="null", is_reference=True)

    def test_variadic(self) -> None:
        param = parse_parameter("...$rest")
        assert param.name == "rest"
        assert param.is_variadic is True
        assert param.is_reference is False

    def test_reference_variadic(self) -> None:
        param = parse_parameter("string &...$parts")
        assert (param.type, param.is_reference, param.is_variadic) == ("string", True, True)

    def test_default_split_on_first_equals(self) -> None:
        """An '=' inside the default value stays in the default."""
        assert parse_parameter("$x = 'a=b'").default == "'a=b'"

    def test_union_type_with_spaces(self) -> None:
        """Spaces inside a union type are dropped."""
        assert parse_parameter("int | string $v").type == "int|string"

    def test_constructor_promotion_words_are_not_type(self) -> None:
        """Visibility and readonly are stripped from the type."""
        assert parse_parameter("private readonly int $id").type == "int"
        assert parse_parameter("public $name").type is None


class TestNamespaceAndUse:
    """Namespace and use-alias declarations."""

    def test_namespace_is_recorded(self) -> None:
        table, record = parse_source("<?php\nnamespace App\\Models;\nclass User {}")
        assert record.namespace == "App\\Models"
        assert "App\\Models" in table.namespaces
        assert "App\\Models\\User" in table.classes

    def test_simple_use(self) -> None:
        """The alias defaults to the last name segment."""
        _, record = parse_source("<?php use App\\Models\\User;")
        assert record.uses == {"User": "App\\Models\\User"}

    def test_use_with_alias_and_commas(self) -> None:
        _, record = parse_source("<?php use Foo\\Bar as Baz, Qux\\Quux;")
        assert record.uses == {"Baz": "Foo\\Bar", "Quux": "Qux\\Quux"}

    def test_group_use(self) -> None:
        """Group prefixes apply to every entry in braces."""
        _, record = parse_source("<?php use App\\Models\\{User, Post as P};")
        assert record.uses == {"User": "App\\Models\\User", "P": "App\\Models\\Post"}

    def test_leading_separator_is_stripped(self) -> None:
        _, record = parse_source("<?php use \\Psr\\Log\\LoggerInterface;")
        assert record.uses == {"LoggerInterface": "Psr\\Log\\LoggerInterface"}

    def test_global_namespace(self) -> None:
        """Without a namespace, the short name is the key."""
        table, record = parse_source("<?php class Plain {}")
        assert record.namespace == ""
        assert table.classes["Plain"].namespace == ""
        assert table.namespaces == {}


class TestClassHeaders:
    """Class, interface and trait declarations."""

    def test_class_with_extends_and_implements(self) -> None:
        table, _ = parse_source(
            "<?php namespace App;\nabstract class Foo extends Bar implements A, \\B\\C {}"
        )
        cls = table.classes["App\\Foo"]
        assert cls.name == "Foo"
        assert cls.kind is ClassKind.CLASS
        assert cls.modifiers == {Modifier.ABSTRACT}
        assert cls.extends == ["Bar"]
        assert cls.implements == ["A", "\\B\\C"]
        assert cls.line == 2

    def test_interface_keeps_every_extends_entry(self) -> None:
        table, _ = parse_source("<?php interface I extends J, K {}")
        cls = table.classes["I"]
        assert cls.kind is ClassKind.INTERFACE
        assert cls.extends == ["J", "K"]

    def test_trait(self) -> None:
        table, _ = parse_source("<?php trait Greets { public function hi() {} }")
        assert table.classes["Greets"].kind is ClassKind.TRAIT
        assert "hi" in table.classes["Greets"].methods

    def test_modifiers_do_not_leak_to_next_class(self) -> None:
        table, _ = parse_source("<?php final class A {} class B {}")
        assert table.classes["A"].modifiers == {Modifier.FINAL}
        assert table.classes["B"].modifiers == set()

    def test_class_registered_in_file_record_and_namespace(self) -> None:
        table, record = parse_source("<?php namespace N; class A {} interface B {}")
        assert set(record.classes) == {"A", "B"}
        assert table.namespaces["N"] == {"N\\A", "N\\B"}
        assert table.classes["N\\A"].file == "src/test.php"

    def test_class_constant_lookup_is_not_a_declaration(self) -> None:
        """'Foo::class' does not declare a class."""
        table, _ = parse_source("<?php $name = Foo::class; function after() {}")
        assert table.classes == {}
        assert "after" in table.functions

    def test_anonymous_class_is_skipped(self) -> None:
        """Neither the anonymous class nor its methods are recorded."""
        table, _ = parse_source(
            "<?php $o = new class(1) extends Base { public function hidden() {} };\nfunction visible() {}"
        )
        assert table.classes == {}
        assert set(table.functions) == {"visible"}

    def test_duplicate_declaration_replaces_first(self) -> None:
        table, _ = parse_source("<?php class A { function one() {} } class A { function two() {} }")
        assert set(table.classes["A"].methods) == {"two"}


class TestClassMembers:
    """Constants, properties and methods inside class bodies."""

    SOURCE = """<?php
namespace App;

class Account
{
    const KIND = 'basic';
    private const SECRET = 42;
    public const LABEL = 'a' . 'b';
    const int TYPED = 3;

    public int $count = 0;
    protected static ?array $cache = null, $other;
    public readonly string $name;
    public $list = [1, 2];

    public function __construct(int $id, string $name = 'x') {
        $f = function ($a) { return $a; };
        if ($id) { $this->count++; }
    }

    public static function create(...$args): static
    {
        return new static(...$args);
    }

    private function &ref(array &$a = [1, 2], $b): ?array {}

    function plain() {}

    abstract protected function run(): void;

    public function use(): \\App\\Result|null {}
}
"""

    @pytest.fixture
    def account(self):
        table, _ = parse_source(self.SOURCE)
        return table.classes["App\\Account"]

    def test_constants(self, account) -> None:
        """Constants default to public and keep their value text."""
        assert set(account.constants) == {"KIND", "SECRET", "LABEL", "TYPED"}
        assert account.constants["KIND"].value == "'basic'"
        assert account.constants["KIND"].modifiers == {Modifier.CONST, Modifier.PUBLIC}
        assert account.constants["SECRET"].modifiers == {Modifier.CONST, Modifier.PRIVATE}
        assert account.constants["LABEL"].value == "'a' . 'b'"
        assert account.constants["TYPED"].value == "3"

    def test_typed_property_with_default(self, account) -> None:
        prop = account.properties["count"]
        assert prop.modifiers == {Modifier.PUBLIC}
        assert prop.value == "0"
        assert prop.is_static is False

    def test_comma_separated_properties_share_modifiers(self, account) -> None:
        assert account.properties["cache"].modifiers == {Modifier.PROTECTED, Modifier.STATIC}
        assert account.properties["cache"].value == "null"
        assert account.properties["other"].modifiers == {Modifier.PROTECTED, Modifier.STATIC}
        assert account.properties["other"].value is None

    def test_readonly_and_array_default(self, account) -> None:
        assert account.properties["name"].value is None
        assert account.properties["list"].value == "[1, 2]"

    def test_method_names(self, account) -> None:
        """Closures inside bodies are not methods; reserved words may be names."""
        assert set(account.methods) == {"__construct", "create", "ref", "plain", "run", "use"}

    def test_constructor_parameters(self, account) -> None:
        params = account.methods["__construct"].parameters
        assert params == [
            Parameter(name="id", type="int"),
            Parameter(name="name", type="string", default="'x'"),
        ]

    def test_static_method_with_return_type(self, account) -> None:
        create = account.methods["create"]
        assert create.is_static is True
        assert create.return_type == "static"
        assert create.parameters[0].is_variadic is True
        assert create.class_name == "Account"

    def test_nested_brackets_in_parameter_defaults(self, account) -> None:
        ref = account.methods["ref"]
        assert ref.modifiers == {Modifier.PRIVATE}
        assert ref.return_type == "?array"
        assert [p.name for p in ref.parameters] == ["a", "b"]
        assert ref.parameters[0].default == "[1, 2]"
        assert ref.parameters[0].is_reference is True

    def test_method_without_modifiers_is_public(self, account) -> None:
        assert account.methods["plain"].modifiers == {Modifier.PUBLIC}

    def test_abstract_method(self, account) -> None:
        run = account.methods["run"]
        assert run.modifiers == {Modifier.ABSTRACT, Modifier.PROTECTED}
        assert run.return_type == "void"

    def test_qualified_union_return_type(self, account) -> None:
        assert account.methods["use"].return_type == "\\App\\Result|null"

    def test_methods_are_not_free_functions(self) -> None:
        table, _ = parse_source(self.SOURCE)
        assert table.functions == {}

    def test_members_of_following_class_are_separate(self) -> None:
        table, _ = parse_source("<?php class A { public $a; } class B { public $b; }")
        assert set(table.classes["A"].properties) == {"a"}
        assert set(table.classes["B"].properties) == {"b"}


class TestDocAttachment:
    """Doc comments attach to the next declaration only."""

    def test_class_and_member_docs(self) -> None:
        table, _ = parse_source(
            "<?php\n"
            "/** A thing. */\n"
            "class Thing {\n"
            "    /** The id. */\n"
            "    public $id;\n"
            "    /** Run it. */\n"
            "    public function run() {}\n"
            "    public function bare() {}\n"
            "}\n"
            "class Other {}\n"
        )
        thing = table.classes["Thing"]
        assert thing.doc is not None and thing.doc.summary == "A thing."
        assert thing.properties["id"].doc.summary == "The id."
        assert thing.methods["run"].doc.summary == "Run it."
        assert thing.methods["bare"].doc is None
        assert table.classes["Other"].doc is None

    def test_function_doc_tags(self) -> None:
        table, _ = parse_source(
            "<?php\n/**\n * Say hi.\n * @param string $name who\n * @return string\n */\nfunction hi($name) {}"
        )
        doc = table.functions["hi"].doc
        assert doc.summary == "Say hi."
        assert doc.tags["param"] == ["string $name who"]


class TestFreeFunctions:
    """Top-level function declarations."""

    def test_namespaced_function(self) -> None:
        table, record = parse_source("<?php namespace App\\Util;\nfunction greet(string $who): string {}")
        fn = table.functions["App\\Util\\greet"]
        assert fn.name == "greet"
        assert fn.class_name is None
        assert fn.return_type == "string"
        assert fn.line == 2
        assert record.functions == {"greet": fn}

    def test_by_reference_function(self) -> None:
        table, _ = parse_source("<?php function &registry() {}")
        assert "registry" in table.functions

    def test_closures_are_skipped(self) -> None:
        """Anonymous functions, with or without use clauses, declare nothing."""
        table, record = parse_source(
            "<?php\n$f = function ($a) use ($b) { return $a; };\n$g = static function () {};\nfunction real() {}"
        )
        assert set(table.functions) == {"real"}
        assert record.uses == {}

    def test_keyword_named_free_function_is_not_declared(self) -> None:
        """Reserved words name methods only."""
        table, _ = parse_source("<?php function class() {} function ok() {}")
        assert "ok" in table.functions


class TestForwardProgress:
    """Malformed or truncated input never raises."""

    @pytest.mark.parametrize(
        "source",
        [
            "",
            "<?php class",
            "<?php function",
            "<?php namespace",
            "<?php use",
            "<?php abstract",
            "<?php class A extends",
            "<?php class A { public",
            "<?php class A { const X",
            "<?php class A { public $x = ",
            "<?php class A { public function",
            "<?php class A { public function foo() { ",
            "<?php class { function ( } ) ;;",
            "<?php } } ) ] ; class",
            "<?php new class",
        ],
    )
    def test_does_not_raise(self, source: str) -> None:
        parse_source(source)

    def test_partial_declarations_survive(self) -> None:
        """Declarations before the broken part are kept."""
        table, _ = parse_source("<?php class A { public function ok() {} public function broken( ")
        assert {"ok", "broken"} <= set(table.classes["A"].methods)

    def test_unparseable_constant_is_skipped(self) -> None:
        table, _ = parse_source("<?php class A { const ; public $after; }")
        assert table.classes["A"].constants == {}
        assert "after" in table.classes["A"].properties


class TestEnums:
    """Enum bodies are skipped without declaring anything."""

    def test_enum_methods_do_not_become_functions(self) -> None:
        table, _ = parse_source(
            "<?php enum Suit: string implements HasLabel {\n"
            "    case Hearts = 'H';\n"
            "    public function label(): string { return 'x'; }\n"
            "}\n"
            "function after() {}\n"
        )
        assert set(table.functions) == {"after"}
        assert table.classes == {}

    def test_enum_doc_does_not_attach_to_next_declaration(self) -> None:
        table, _ = parse_source("<?php /** Suits. */ enum Suit { case A; } class Card {}")
        assert table.classes["Card"].doc is None

    def test_enum_as_plain_word_is_not_a_declaration(self) -> None:
        """A call named enum() leaves the following function alone."""
        table, _ = parse_source("<?php enum($x); function keep() {}")
        assert set(table.functions) == {"keep"}

    @pytest.mark.parametrize("source", ["<?php enum", "<?php enum Suit", "<?php enum Suit {", "<?php enum Suit;"])
    def test_truncated_enum_does_not_raise(self, source: str) -> None:
        parse_source(source)
