"""Scope handles and captured expressions.

A Scope is a chain of name -> value bindings linked through ``outer``. Host
collaborators use it to hand the core an explicit environment rather than
the core reaching into ambient state. Captured pairs an Expression with the
Scope it was captured in, for later re-expansion.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterator, Optional

from exprtree import HostValue
from exprtree.types.errors import EmptySymbolLookup, ExprTypeError, UnboundName
from exprtree.types.node import Expression
from exprtree.types.symbol import Symbol


def _key(name) -> str:
    if isinstance(name, Symbol):
        return name.name
    if isinstance(name, str):
        return name
    raise ExprTypeError(f"Scope keys must be strings or Symbols, got {name!r}")


class Scope(Mapping):
    """Hierarchical mapping from names to values.

    Lookups walk outward through ``outer``; ``define`` always binds in this
    scope. Keys may be given as strings or Symbols.
    """

    __slots__ = ("vars", "outer")

    def __init__(self, bindings: Optional[Mapping] = None, outer: Optional[Scope] = None):
        self.vars: dict[str, HostValue] = {}
        self.outer: Scope | None = outer
        for name, value in (bindings or {}).items():
            self.define(name, value)

    def child(self, bindings: Optional[Mapping] = None) -> Scope:
        return Scope(bindings, outer=self)

    def define(self, name, value: HostValue) -> None:
        key = _key(name)
        if key == "":
            raise ExprTypeError("Cannot bind the empty symbol")
        self.vars[key] = value

    def find(self, name) -> Optional[Scope]:
        """Find the nearest scope in the chain that binds ``name``."""
        key = _key(name)
        scope = self
        while scope is not None:
            if key in scope.vars:
                return scope
            scope = scope.outer
        return None

    def lookup(self, name) -> HostValue:
        key = _key(name)
        if key == "":
            raise EmptySymbolLookup()
        scope = self.find(key)
        if scope is None:
            raise UnboundName(key)
        return scope.vars[key]

    def set(self, name, value: HostValue) -> None:
        """Update an existing binding for ``name`` wherever it lives in the chain."""
        scope = self.find(name)
        if scope is None:
            raise UnboundName(_key(name))
        scope.vars[_key(name)] = value

    # --- Mapping protocol ---

    def __getitem__(self, name) -> HostValue:
        key = _key(name)
        scope = self.find(key) if key else None
        if scope is None:
            raise KeyError(name)
        return scope.vars[key]

    def __contains__(self, name) -> bool:
        if not isinstance(name, (str, Symbol)):
            return False
        key = _key(name)
        return key != "" and self.find(key) is not None

    def __iter__(self) -> Iterator[str]:
        seen = set()
        scope = self
        while scope is not None:
            for key in scope.vars:
                if key not in seen:
                    seen.add(key)
                    yield key
            scope = scope.outer

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        depth = 0
        scope = self.outer
        while scope is not None:
            depth += 1
            scope = scope.outer
        return f"Scope({sorted(self.vars)}, depth={depth})"


class Captured:
    """An expression paired with the scope it was captured in."""

    __slots__ = ("expr", "scope")

    def __init__(self, expr: Expression, scope: Scope):
        if not isinstance(expr, Expression):
            raise ExprTypeError(f"Captured expression must be an Expression, got {expr!r}")
        if not isinstance(scope, Scope):
            raise ExprTypeError(f"Captured scope must be a Scope, got {scope!r}")
        self.expr = expr
        self.scope = scope

    def lookup(self, name) -> HostValue:
        return self.scope.lookup(name)

    def expand(self, markers=None, max_depth: Optional[int] = None) -> Expression:
        """Quasiquote the captured expression against its own scope."""
        from exprtree.quasiquote import DEFAULT_MARKERS, quasiquote
        return quasiquote(self.expr, self.scope, markers or DEFAULT_MARKERS, max_depth)

    def with_expr(self, expr: Expression) -> Captured:
        return Captured(expr, self.scope)

    def __eq__(self, other) -> bool:
        return isinstance(other, Captured) and self.expr == other.expr and self.scope is other.scope

    def __hash__(self) -> int:
        return hash((self.expr, id(self.scope)))

    def __repr__(self) -> str:
        return f"Captured({self.expr!r}, {self.scope!r})"
