"""Scoped symbol table with local-slot allocation."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Union

from .typesys import Type

ConstValue = Union[int, float, str, bool]


@dataclass
class SymEntry:
    """A variable, constant or function known to the compiler."""

    name: str
    type: Type = field(default_factory=Type)
    is_const: bool = False
    is_func: bool = False
    is_global: bool = False
    slot: int = -1
    value: ConstValue | None = None
    array_values: list[ConstValue | None] | None = None
    param_types: list[Type] | None = None
    return_type: Type | None = None


class SymbolTable:
    """A stack of scopes; the first scope is the global one."""

    def __init__(self) -> None:
        self._scopes: list[dict[str, SymEntry]] = [{}]
        self._next_local = 0
        self._saved_next_local: list[int] = []

    def enter_scope(self, is_function_scope: bool = False) -> None:
        """Open a scope; a function scope starts slot numbering from zero."""
        self._scopes.append({})
        if is_function_scope:
            self._saved_next_local.append(self._next_local)
            self._next_local = 0

    def exit_scope(self) -> None:
        """Close the innermost scope, restoring a saved slot counter if any."""
        if len(self._scopes) <= 1:
            raise RuntimeError("cannot pop global scope")
        self._scopes.pop()
        if self._saved_next_local:
            self._next_local = self._saved_next_local.pop()

    def insert(self, entry: SymEntry) -> SymEntry | None:
        """Store a copy of ``entry`` in the current scope.

        Returns the stored entry, or None if the name is already declared
        in the current scope.
        """
        current = self._scopes[-1]
        if entry.name in current:
            return None
        stored = copy.deepcopy(entry)
        if self.at_global_scope():
            stored.is_global = True
            stored.slot = -1
        elif not stored.is_func:
            stored.is_global = False
            stored.slot = self.allocate_slot()
        current[stored.name] = stored
        return stored

    def lookup(self, name: str) -> SymEntry | None:
        """Find ``name`` searching from the innermost scope outwards."""
        for scope in reversed(self._scopes):
            entry = scope.get(name)
            if entry is not None:
                return entry
        return None

    def allocate_slot(self) -> int:
        """Return the next free local slot and advance the counter."""
        slot = self._next_local
        self._next_local += 1
        return slot

    def current_local(self) -> int:
        """Return the next slot that would be allocated."""
        return self._next_local

    def reset_local(self, base: int = 0) -> None:
        """Set the slot counter to ``base``."""
        self._next_local = base

    def at_global_scope(self) -> bool:
        """Return True when only the global scope is open."""
        return len(self._scopes) == 1