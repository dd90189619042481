"""Inheritance resolution.

Runs once per indexing run, after every file has been parsed. Each class
copies the public and protected methods/properties of its parents that it
does not declare itself; copies are tagged ``inherited``. The per-class
ResolutionState doubles as the cycle guard: no class on an extends cycle
copies members from another class of that cycle, so all of them keep only
their own declarations.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TypeVar

import structlog

from phpsense.index.models import (
    ClassLike,
    FunctionLike,
    Modifier,
    PropertyOrConstant,
    ResolutionState,
)
from phpsense.index.symbols import SymbolTable

logger = structlog.get_logger()

_INHERITABLE = frozenset({Modifier.PUBLIC, Modifier.PROTECTED})

_M = TypeVar("_M", FunctionLike, PropertyOrConstant)


def _inherit(own: dict[str, _M], parent: dict[str, _M]) -> int:
    copied = 0
    for name, member in parent.items():
        if name in own or not (member.modifiers & _INHERITABLE):
            continue
        own[name] = replace(member, inherited=True)
        copied += 1
    return copied


class InheritanceResolver:
    def __init__(self, table: SymbolTable) -> None:
        self.table = table

    def resolve_all(self) -> int:
        """Resolve every class-like in the table. Returns the class count."""
        for cls in list(self.table.classes.values()):
            self.resolve(cls)
        return len(self.table.classes)

    def resolve(self, cls: ClassLike) -> frozenset[str]:
        """Resolve ``cls`` and its ancestors.

        Returns the FQNs of classes still IN_PROGRESS that the ancestor chain
        ran into. A non-empty result means ``cls`` sits on an extends cycle
        whose entry point is still being resolved further up the stack.
        Members are never copied between classes of the same cycle, so each
        keeps only what it declares.
        """
        if cls.resolution is not ResolutionState.UNRESOLVED:
            return frozenset()
        cls.resolution = ResolutionState.IN_PROGRESS

        open_cycles: set[str] = set()
        context = self.table.file_for(cls.file)
        for parent_name in cls.extends:
            parent = self.table.resolve_class_name(parent_name, context, namespace=cls.namespace)
            if parent is None:
                logger.debug("parent_unresolved", cls=cls.fqn, parent=parent_name)
                continue
            if parent.resolution is ResolutionState.IN_PROGRESS:
                logger.debug("inheritance_cycle", cls=cls.fqn, parent=parent.fqn)
                open_cycles.add(parent.fqn)
                continue

            parent_cycles = self.resolve(parent)
            if parent_cycles:
                logger.debug("inheritance_cycle", cls=cls.fqn, parent=parent.fqn)
                open_cycles |= parent_cycles
                continue

            copied = _inherit(cls.methods, parent.methods) + _inherit(cls.properties, parent.properties)
            logger.debug("members_inherited", cls=cls.fqn, parent=parent.fqn, count=copied)

        cls.resolution = ResolutionState.RESOLVED
        open_cycles.discard(cls.fqn)
        return frozenset(open_cycles)
