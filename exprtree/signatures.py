"""Signature introspection: ``callable -> ParameterList``.

A SignatureRegistry resolves call heads to formal parameter lists, either from
signatures registered explicitly by name or by introspecting Python callables
with inspect.signature.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Optional

from exprtree.types.errors import ExprTypeError, SignatureUnavailable
from exprtree.types.expression import (
    VARIADIC,
    Call,
    Expression,
    Param,
    ParameterList,
    Symbol,
    lift,
)

logger = logging.getLogger(__name__)


def _lift_default(value: Any) -> Expression:
    try:
        return lift(value)
    except ExprTypeError:
        # Opaque default: record that one exists as a call to its type
        return Call(Symbol(type(value).__name__), [])


def signature_of(fn: Callable) -> ParameterList:
    """Describe a Python callable's parameters as a ParameterList.

    ``*args`` and ``**kwargs`` collapse into a single variadic ``...`` at the
    position of the first of them, so keyword-only parameters land after it
    and only match by exact name. Keyword-only parameters behind a bare ``*``
    are treated as ordinary formals.
    """
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError) as exc:
        raise SignatureUnavailable(fn, str(exc)) from exc

    entries: list[Param] = []
    for p in sig.parameters.values():
        if p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            if VARIADIC not in (e.name for e in entries):
                entries.append(Param(VARIADIC, None))
            continue
        default = None if p.default is inspect.Parameter.empty else _lift_default(p.default)
        entries.append(Param(p.name, default))
    return ParameterList(entries)


class SignatureRegistry:
    """Maps callable identities to formal parameter lists.

    Names (str or Symbol) map either to a ParameterList registered directly
    or to a Python callable that is introspected on lookup.
    """

    __slots__ = ("signatures", "callables")

    def __init__(self, signatures: Optional[dict] = None):
        self.signatures: dict[str, ParameterList] = {}
        self.callables: dict[str, Callable] = {}
        for name, sig in (signatures or {}).items():
            self.register(name, sig)

    @staticmethod
    def _name(target) -> str:
        if isinstance(target, Symbol):
            if target.is_empty:
                raise ExprTypeError("The empty symbol does not name a callable")
            return target.name
        if isinstance(target, str) and target:
            return target
        raise ExprTypeError(f"Callable names must be non-empty strings or Symbols, got {target!r}")

    def register(self, name, signature: ParameterList) -> None:
        if not isinstance(signature, ParameterList):
            raise ExprTypeError(f"Signature must be a ParameterList, got {signature!r}")
        self.signatures[self._name(name)] = signature

    def define(self, name, fn: Callable) -> None:
        """Bind ``name`` to a Python callable whose signature is introspected on lookup."""
        if not callable(fn):
            raise ExprTypeError(f"{fn!r} is not callable")
        self.callables[self._name(name)] = fn

    def __contains__(self, target) -> bool:
        try:
            name = self._name(target)
        except ExprTypeError:
            return False
        return name in self.signatures or name in self.callables

    def lookup(self, target) -> ParameterList:
        """Return the ParameterList for a name, Symbol or Python callable.

        Raises SignatureUnavailable when none can be produced, e.g. for a
        call head that is itself a Call or for callables without an
        introspectable signature.
        """
        if isinstance(target, Call):
            raise SignatureUnavailable(target, "call head is computed, not a name")
        if isinstance(target, (str, Symbol)):
            name = self._name(target)
            sig = self.signatures.get(name)
            if sig is not None:
                return sig
            fn = self.callables.get(name)
            if fn is None:
                raise SignatureUnavailable(name, "no signature registered")
            logger.debug("introspecting signature of %r for %r", fn, name)
            return signature_of(fn)
        if callable(target):
            return signature_of(target)
        raise SignatureUnavailable(target, "not a callable")
