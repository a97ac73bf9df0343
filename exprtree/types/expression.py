"""The expression model: a closed set of four node kinds.

- Constant(value):   atomic literal (int, float, complex, str, bool, Nil)
- Symbol(name):      reference to a binding; Symbol("") is the empty symbol
- Call(head, args):  application of head to an ordered tuple of Arg(name, value)
- ParameterList:     formal parameters, an ordered tuple of Param(name, default)

Aggregates are never Constants; lift() turns host lists, tuples and dicts into
calls to the list / tuple / dict constructors.
"""

from __future__ import annotations

import math
from typing import Iterable, NamedTuple, Optional

from exprtree import HostValue
from exprtree.types.errors import (
    ExprTypeError,
    MalformedExpression,
    UnsupportedNodeKind,
)
from exprtree.types.nil import Nil, NilType
from exprtree.types.node import Expression, Kind
from exprtree.types.symbol import EMPTY, Symbol

ATOMIC_TYPES = (bool, int, float, complex, str)

VARIADIC = "..."
FUNCTION = Symbol("function")


class Arg(NamedTuple):
    """One call argument. ``name`` is None for positional arguments."""

    name: Optional[str]
    value: Expression

    def __repr__(self):
        if self.name is None:
            return repr(self.value)
        return f"{self.name}={self.value!r}"


class Param(NamedTuple):
    """One formal parameter; ``default`` is None when there is no default."""

    name: str
    default: Optional[Expression] = None

    @property
    def is_variadic(self) -> bool:
        return self.name == VARIADIC


def _value_key(value):
    # NaN never equals itself; give every NaN the same key
    if isinstance(value, float) and math.isnan(value):
        return "nan"
    if isinstance(value, complex):
        return (_value_key(value.real), _value_key(value.imag))
    return value


class Constant(Expression):
    __slots__ = ("value",)

    kind = Kind.CONSTANT

    def __init__(self, value: HostValue):
        if value is None:
            value = Nil
        if not (isinstance(value, ATOMIC_TYPES) or isinstance(value, NilType)):
            raise MalformedExpression(
                f"Constant must hold an atomic value, not {type(value).__name__}; "
                "represent aggregates as a call to a constructor"
            )
        self._init_field("value", value)

    def __eq__(self, other) -> bool:
        # type-sensitive: Constant(1) is not Constant(True) nor Constant(1.0)
        return (
            isinstance(other, Constant)
            and type(self.value) is type(other.value)
            and _value_key(self.value) == _value_key(other.value)
        )

    def __hash__(self) -> int:
        return hash((Constant, type(self.value), _value_key(self.value)))

    def __repr__(self):
        return f"Constant({self.value!r})"

    def __reduce__(self):
        return (Constant, (self.value,))


def _check_expression(value, where: str) -> Expression:
    if not isinstance(value, Expression):
        raise MalformedExpression(f"{where} must be an Expression, got {value!r}")
    return value


def _coerce_arg(item) -> Arg:
    if isinstance(item, Arg):
        name, value = item
    elif isinstance(item, Expression):
        name, value = None, item
    elif isinstance(item, tuple) and len(item) == 2:
        name, value = item
    else:
        raise MalformedExpression(f"Expected an Arg or Expression, got {item!r}")
    if name is not None and (not isinstance(name, str) or name == ""):
        raise MalformedExpression(f"Argument name must be a non-empty string or None, got {name!r}")
    return Arg(name, _check_expression(value, "Argument value"))


class Call(Expression):
    """Application of ``head`` to ``args``.

    ``head`` is a Symbol or another Call (for function-returning-function
    application). Names in ``args`` need not be unique.
    """

    __slots__ = ("head", "args")

    kind = Kind.CALL

    def __init__(self, head: Expression, args: Iterable = ()):
        if not isinstance(head, (Symbol, Call)):
            raise MalformedExpression(f"Call head must be a Symbol or Call, got {head!r}")
        self._init_field("head", head)
        self._init_field("args", tuple(_coerce_arg(a) for a in args))

    @property
    def names(self) -> tuple:
        return tuple(a.name for a in self.args)

    @property
    def values(self) -> tuple:
        return tuple(a.value for a in self.args)

    def __eq__(self, other) -> bool:
        return isinstance(other, Call) and self.head == other.head and self.args == other.args

    def __hash__(self) -> int:
        return hash((Call, self.head, self.args))

    def __repr__(self):
        return f"Call({self.head!r}, {list(self.args)!r})"

    def __reduce__(self):
        return (Call, (self.head, self.args))


def _coerce_param(item) -> Param:
    if isinstance(item, str):
        return Param(item, None)
    if isinstance(item, tuple) and len(item) == 2:
        name, default = item
        if not isinstance(name, str) or name == "":
            raise MalformedExpression(f"Formal argument name must be a non-empty string, got {name!r}")
        if default is not None:
            _check_expression(default, f"Default of '{name}'")
        return Param(name, default)
    raise MalformedExpression(f"Expected a Param, got {item!r}")


class ParameterList(Expression):
    """Formal parameters of a function. The entry named ``...`` is the variadic capture."""

    __slots__ = ("entries",)

    kind = Kind.PARAMETER_LIST

    def __init__(self, entries: Iterable = ()):
        entries = tuple(_coerce_param(e) for e in entries)
        seen = set()
        for p in entries:
            if p.name in seen:
                raise MalformedExpression(f"Repeated formal argument '{p.name}'")
            seen.add(p.name)
        self._init_field("entries", entries)

    @property
    def names(self) -> tuple:
        return tuple(p.name for p in self.entries)

    @property
    def has_variadic(self) -> bool:
        return VARIADIC in self.names

    def __contains__(self, name) -> bool:
        return name in self.names

    def __eq__(self, other) -> bool:
        return isinstance(other, ParameterList) and self.entries == other.entries

    def __hash__(self) -> int:
        return hash((ParameterList, self.entries))

    def __repr__(self):
        return f"ParameterList({list(self.entries)!r})"

    def __reduce__(self):
        return (ParameterList, (self.entries,))


# --- Classification ---

_KINDS: dict[type, Kind] = {
    Constant: Kind.CONSTANT,
    Symbol: Kind.SYMBOL,
    Call: Kind.CALL,
    ParameterList: Kind.PARAMETER_LIST,
}


def kind(expr) -> Kind:
    """Return which of the four node kinds ``expr`` is.

    Raises UnsupportedNodeKind for anything else, including other subclasses
    of Expression.
    """
    for cls in type(expr).__mro__:
        k = _KINDS.get(cls)
        if k is not None:
            return k
    raise UnsupportedNodeKind(expr)


# --- Builders ---

def lift(value: HostValue) -> Expression:
    """Convert a host value into an Expression.

    Expressions pass through unchanged; atomic values become Constants;
    lists, tuples and dicts become calls to the matching constructor.
    """
    if isinstance(value, Expression):
        return value
    if value is None or isinstance(value, (NilType,) + ATOMIC_TYPES):
        return Constant(value)
    if isinstance(value, list):
        return Call(Symbol("list"), [lift(v) for v in value])
    if isinstance(value, tuple):
        return Call(Symbol("tuple"), [lift(v) for v in value])
    if isinstance(value, dict):
        args = []
        for k, v in value.items():
            if not isinstance(k, str):
                raise ExprTypeError(f"Cannot lift dict with non-string key {k!r}")
            args.append(Arg(k, lift(v)))
        return Call(Symbol("dict"), args)
    raise ExprTypeError(f"Cannot represent {type(value).__name__} as an expression")


def _as_head(head) -> Expression:
    return Symbol(head) if isinstance(head, str) else head


def call(head, *args, **named) -> Call:
    """Build a Call; ``head`` may be a string, positional args may be Args or host values.

    >>> call("f", 1, Symbol("x"), b=2)
    Call(Symbol('f'), [Constant(1), Symbol('x'), b=Constant(2)])
    """
    items = [a if isinstance(a, Arg) else Arg(None, lift(a)) for a in args]
    items.extend(Arg(k, lift(v)) for k, v in named.items())
    return Call(_as_head(head), items)


def params(*names, **defaults) -> ParameterList:
    """Build a ParameterList: bare names first, then ``name=default`` entries."""
    entries = [n if isinstance(n, Param) else Param(n, None) for n in names]
    entries.extend(Param(k, lift(v)) for k, v in defaults.items())
    return ParameterList(entries)


def function(parameters: ParameterList, body: Expression) -> Call:
    """The ``function(params) body`` form: a call binding ``parameters`` in ``body``."""
    return Call(FUNCTION, [Arg(None, parameters), Arg(None, body)])


__all__ = [
    "Arg", "Param", "Constant", "Symbol", "Call", "ParameterList", "Expression",
    "Kind", "Nil", "EMPTY", "VARIADIC", "FUNCTION",
    "kind", "lift", "call", "params", "function",
]
