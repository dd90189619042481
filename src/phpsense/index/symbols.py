"""Symbol table: the mutable in-memory index.

Global maps are keyed by fully-qualified name. A second declaration under
the same key replaces the first; there is no error for duplicates.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from phpsense.index.models import ClassLike, FileRecord, FunctionLike, normalize_path


@dataclass
class SymbolTable:
    classes: dict[str, ClassLike] = field(default_factory=dict)
    functions: dict[str, FunctionLike] = field(default_factory=dict)
    namespaces: dict[str, set[str]] = field(default_factory=dict)
    files: dict[str, FileRecord] = field(default_factory=dict)

    def clear(self) -> None:
        self.classes.clear()
        self.functions.clear()
        self.namespaces.clear()
        self.files.clear()

    def new_file(self, path: str) -> FileRecord:
        """Create (or replace) the record for a file about to be parsed."""
        record = FileRecord(path=path, indexed_at=time.time())
        self.files[normalize_path(path)] = record
        return record

    def file_for(self, path: str) -> FileRecord | None:
        return self.files.get(normalize_path(path))

    def add_namespace(self, namespace: str) -> None:
        self.namespaces.setdefault(namespace, set())

    def add_class(self, cls: ClassLike, record: FileRecord) -> None:
        self.classes[cls.fqn] = cls
        record.classes[cls.name] = cls
        if cls.namespace:
            self.namespaces.setdefault(cls.namespace, set()).add(cls.fqn)

    def add_function(self, fqn: str, fn: FunctionLike, record: FileRecord) -> None:
        self.functions[fqn] = fn
        record.functions[fn.name] = fn

    def resolve_class_name(
        self,
        name: str,
        context: FileRecord | None = None,
        namespace: str | None = None,
    ) -> ClassLike | None:
        """Find the class a name refers to from inside ``context``.

        Lookup order, first hit wins:
        1. the name as a fully-qualified key
        2. the name inside the current namespace
        3. the context file's use aliases

        ``namespace`` overrides the file's namespace when the caller knows
        the declaring namespace more precisely. A leading ``\\`` marks the
        name as fully qualified and skips steps 2 and 3.
        """
        if not name:
            return None
        if name.startswith("\\"):
            return self.classes.get(name.lstrip("\\"))

        if name in self.classes:
            return self.classes[name]

        current_ns = namespace if namespace is not None else (context.namespace if context else "")
        if current_ns:
            cls = self.classes.get(f"{current_ns}\\{name}")
            if cls is not None:
                return cls

        if context is not None and name in context.uses:
            return self.classes.get(context.uses[name])

        return None
