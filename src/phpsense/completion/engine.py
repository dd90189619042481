"""Completion queries against a finished symbol index.

Queries are synchronous and never raise. Each public query starts with its
own empty ``seen`` set and passes it to the helpers it calls, so a name is
emitted at most once per call and nothing is remembered between calls.
"""

from __future__ import annotations

from collections.abc import Iterator

from phpsense.completion.models import (
    ClassItem,
    CompletionItem,
    ConstantItem,
    FunctionItem,
    MethodItem,
    NamespaceItem,
    PropertyItem,
    QueryContext,
)
from phpsense.completion.scoring import rank, score
from phpsense.index.models import ClassLike, DocComment, FunctionLike, Modifier, Parameter
from phpsense.index.symbols import SymbolTable

# Class references that need a variable/scope analysis we do not do
_UNRESOLVABLE_REFERENCES = frozenset({"self", "static", "parent"})


def format_parameter(param: Parameter) -> str:
    text = f"{param.type} " if param.type else ""
    if param.is_reference:
        text += "&"
    if param.is_variadic:
        text += "..."
    text += f"${param.name}"
    if param.default is not None:
        text += f" = {param.default}"
    return text


def format_signature(params: list[Parameter]) -> str:
    return ", ".join(format_parameter(p) for p in params)


def format_call(name: str, params: list[Parameter]) -> str:
    """Insertion text for a call: ``name($a, $b)``."""
    return f"{name}({', '.join(f'${p.name}' for p in params)})"


def format_doc(doc: DocComment | None, name: str) -> str:
    """Render a doc comment as plain text; the bare name when there is none."""
    if doc is None:
        return name

    parts = [doc.summary, doc.description]
    if doc.tags.get("param"):
        parts.append("Parameters:\n" + "\n".join(f"  {p}" for p in doc.tags["param"]))
    if doc.tags.get("return"):
        parts.append(f"Returns: {doc.tags['return'][0]}")
    return "\n\n".join(p for p in parts if p) or name


class CompletionEngine:
    """Answers completion queries from a SymbolTable."""

    def __init__(self, table: SymbolTable, *, show_info: bool = True) -> None:
        self.table = table
        self.show_info = show_info

    def _doc(self, text: str) -> str | None:
        return text if self.show_info else None

    # -- context -------------------------------------------------------

    def infer_class_context(self, context: QueryContext | None) -> ClassLike | None:
        """Resolve the class a query is about, if the caller named one.

        Variables and ``self``/``static``/``parent`` give no context; callers
        then get the all-classes fallback.
        """
        if context is None or not context.class_name:
            return None
        name = context.class_name
        if name.startswith("$") or name.lower() in _UNRESOLVABLE_REFERENCES:
            return None
        record = self.table.file_for(context.file_path) if context.file_path else None
        return self.table.resolve_class_name(name, record)

    # -- item builders -------------------------------------------------

    def _class_item(self, cls: ClassLike, prefix: str) -> ClassItem:
        doc = format_doc(cls.doc, cls.name)
        constructor = cls.methods.get("__construct")
        # Only the class's own constructor shapes the snippet
        if constructor is not None and not constructor.inherited:
            snippet = format_call(cls.name, constructor.parameters)
            doc += f"\n\nConstructor: {format_signature(constructor.parameters)}"
        else:
            snippet = f"{cls.name}()"
        if cls.namespace:
            doc += f"\n\nNamespace: {cls.namespace}"

        return ClassItem(
            display=cls.name,
            insert_text=snippet,
            category=cls.kind.value,
            score=score(cls.name, prefix, cls.modifiers),
            doc=self._doc(doc),
            fqn=cls.fqn,
        )

    def _method_item(self, method: FunctionLike, prefix: str, owner: ClassLike | None = None) -> MethodItem:
        doc = format_doc(method.doc, method.name)
        doc += f"\n\nSignature: {method.name}({format_signature(method.parameters)})"
        if owner is not None:
            doc += f"\n\nClass: {owner.fqn}"

        return MethodItem(
            display=method.name,
            insert_text=format_call(method.name, method.parameters),
            category="static method" if method.is_static else "method",
            score=score(method.name, prefix, method.modifiers),
            doc=self._doc(doc),
            class_name=method.class_name,
            is_static=method.is_static,
        )

    # -- queries -------------------------------------------------------

    def class_completions(self, prefix: str) -> list[ClassItem]:
        """Classes whose short name contains ``prefix`` (case-insensitive)."""
        seen: set[str] = set()
        return rank(self._classes_matching(prefix, seen))

    def _classes_matching(self, prefix: str, seen: set[str]) -> Iterator[ClassItem]:
        needle = prefix.lower()
        for cls in self.table.classes.values():
            if needle not in cls.name.lower() or cls.name in seen:
                continue
            seen.add(cls.name)
            yield self._class_item(cls, prefix)

    def namespace_completions(self, prefix: str) -> list[NamespaceItem | ClassItem]:
        """Namespaces and fully-qualified class names containing ``prefix``."""
        seen: set[str] = set()
        needle = prefix.lower()
        items: list[NamespaceItem | ClassItem] = []

        for namespace, members in self.table.namespaces.items():
            if needle not in namespace.lower() or namespace in seen:
                continue
            seen.add(namespace)
            items.append(
                NamespaceItem(
                    display=namespace,
                    insert_text=namespace,
                    category="namespace",
                    score=score(namespace, prefix),
                    doc=self._doc(f"Namespace containing {len(members)} classes"),
                    class_count=len(members),
                )
            )

        for fqn, cls in self.table.classes.items():
            if needle not in fqn.lower() or fqn in seen:
                continue
            seen.add(fqn)
            items.append(
                ClassItem(
                    display=fqn,
                    insert_text=fqn,
                    category=f"use {cls.kind.value}",
                    score=score(fqn, prefix, cls.modifiers),
                    doc=self._doc(format_doc(cls.doc, cls.name)),
                    fqn=fqn,
                )
            )

        return rank(items)

    def method_completions(
        self,
        prefix: str,
        context: QueryContext | None = None,
    ) -> list[MethodItem | PropertyItem]:
        """Instance members after ``->``.

        With a known class: its methods and non-static properties starting
        with ``prefix``, public only unless ``in_same_class``. Without one:
        public methods of every class.
        """
        seen: set[str] = set()
        cls = self.infer_class_context(context)
        if cls is None:
            return rank(self._all_public_methods(prefix, seen))

        same_class = context is not None and context.in_same_class
        items: list[MethodItem | PropertyItem] = []
        items.extend(self._methods_of(cls, prefix, seen, same_class=same_class))

        needle = prefix.lower()
        for name, prop in cls.properties.items():
            if not name.lower().startswith(needle) or prop.is_static or name in seen:
                continue
            if Modifier.PUBLIC not in prop.modifiers and not same_class:
                continue
            seen.add(name)
            items.append(
                PropertyItem(
                    display=name,
                    insert_text=name,
                    category="property",
                    score=score(name, prefix, prop.modifiers),
                    doc=self._doc(format_doc(prop.doc, name)),
                )
            )

        return rank(items)

    def _methods_of(
        self,
        cls: ClassLike,
        prefix: str,
        seen: set[str],
        *,
        same_class: bool,
        static_only: bool = False,
    ) -> Iterator[MethodItem]:
        needle = prefix.lower()
        for name, method in cls.methods.items():
            if not name.lower().startswith(needle) or name in seen:
                continue
            if static_only and not method.is_static:
                continue
            if Modifier.PUBLIC not in method.modifiers and not same_class:
                continue
            seen.add(name)
            yield self._method_item(method, prefix)

    def _all_public_methods(self, prefix: str, seen: set[str]) -> Iterator[MethodItem]:
        needle = prefix.lower()
        for cls in self.table.classes.values():
            for name, method in cls.methods.items():
                if not name.lower().startswith(needle) or name in seen:
                    continue
                if Modifier.PUBLIC not in method.modifiers:
                    continue
                seen.add(name)
                yield self._method_item(method, prefix, owner=cls)

    def static_member_completions(
        self,
        prefix: str,
        context: QueryContext | None = None,
    ) -> list[MethodItem | PropertyItem | ConstantItem]:
        """Static methods, static properties and constants after ``::``.

        Empty when no class context can be inferred.
        """
        seen: set[str] = set()
        cls = self.infer_class_context(context)
        if cls is None:
            return []

        same_class = context is not None and context.in_same_class
        needle = prefix.lower()
        items: list[MethodItem | PropertyItem | ConstantItem] = []
        items.extend(self._methods_of(cls, prefix, seen, same_class=same_class, static_only=True))

        for name, prop in cls.properties.items():
            if not name.lower().startswith(needle) or not prop.is_static or name in seen:
                continue
            if Modifier.PUBLIC not in prop.modifiers and not same_class:
                continue
            seen.add(name)
            items.append(
                PropertyItem(
                    display=name,
                    insert_text=f"${name}",
                    category="static property",
                    score=score(name, prefix, prop.modifiers),
                    doc=self._doc(format_doc(prop.doc, name)),
                    is_static=True,
                )
            )

        for name, const in cls.constants.items():
            if not name.lower().startswith(needle) or name in seen:
                continue
            if Modifier.PUBLIC not in const.modifiers and not same_class:
                continue
            seen.add(name)
            items.append(
                ConstantItem(
                    display=name,
                    insert_text=name,
                    category="constant",
                    score=score(name, prefix, const.modifiers),
                    doc=self._doc(format_doc(const.doc, name)),
                    value=const.value,
                )
            )

        return rank(items)

    def function_completions(self, prefix: str) -> list[FunctionItem]:
        """Global functions whose name starts with ``prefix``."""
        seen: set[str] = set()
        needle = prefix.lower()
        items: list[FunctionItem] = []

        for fqn, fn in self.table.functions.items():
            if not fn.name.lower().startswith(needle) or fn.name in seen:
                continue
            seen.add(fn.name)
            doc = format_doc(fn.doc, fn.name)
            doc += f"\n\nSignature: {fn.name}({format_signature(fn.parameters)})"
            items.append(
                FunctionItem(
                    display=fn.name,
                    insert_text=format_call(fn.name, fn.parameters),
                    category="function",
                    score=score(fn.name, prefix, fn.modifiers),
                    doc=self._doc(doc),
                    fqn=fqn,
                )
            )

        return rank(items)

    def default_completions(self, prefix: str) -> list[CompletionItem]:
        """Class completions followed by function completions."""
        return [*self.class_completions(prefix), *self.function_completions(prefix)]
