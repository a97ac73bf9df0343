"""Quasiquotation: build a new tree from a template with explicit substitution sites.

Inside a template:

- ``.(x)``          unquote: replaced by the value bound to ``x``; ``.()`` with
                    any other number of arguments is an ordinary call
- ``..(xs)``        splice: the sequence bound to ``xs`` is spliced into the
                    surrounding argument list (zero or more arguments)
- ``:=(lhs, rhs)``  as an argument: the named argument ``lhs = rhs``, where
                    ``lhs`` may itself be an unquote, so names can be computed

Nothing else in the template is evaluated; it is copied structurally.
"""

from __future__ import annotations

import logging
from typing import NamedTuple, Optional

from exprtree import Bindings
from exprtree.types.errors import (
    EmptySymbolLookup,
    ExprArityError,
    ExprTypeError,
    InvalidSpliceContext,
    InvalidUnquotedName,
    UnboundName,
)
from exprtree.types.expression import Arg, Call, Constant, Expression, Symbol, lift
from exprtree.walker import DESCEND, Mapper, Slot, map_expr

logger = logging.getLogger(__name__)


class Markers(NamedTuple):
    """Head symbol names that mark unquote, splice and definition sites."""

    unquote: str = "."
    splice: str = ".."
    define: str = ":="


DEFAULT_MARKERS = Markers()


class _Splice:
    """Result standing in for a splice site until the parent call flattens it."""

    __slots__ = ("args",)

    def __init__(self, args: list[Arg]):
        self.args = args


class Quasiquoter(Mapper):
    """Mapper that resolves unquote / splice sites against ``env``."""

    def __init__(self, env: Bindings, markers: Markers = DEFAULT_MARKERS, max_depth: Optional[int] = None):
        self.env = env
        self.markers = markers
        self.max_depth = max_depth

    # --- Lookup ---

    def lookup(self, name: str):
        if name == "":
            raise EmptySymbolLookup()
        env = self.env
        if name in env:
            return env[name]
        sym = Symbol(name)
        if sym in env:
            return env[sym]
        raise UnboundName(name)

    def _operand(self, node: Call) -> Symbol:
        marker = node.head.name
        if len(node.args) != 1:
            raise ExprArityError(f"'{marker}' expects exactly 1 argument, got {len(node.args)}")
        operand = node.args[0].value
        if not isinstance(operand, Symbol):
            raise ExprTypeError(f"'{marker}' expects a symbol to look up, got {operand!r}")
        return operand

    def _copy(self, value) -> Expression:
        # Substituted values are copied so no node ends up with two parents
        return map_expr(lift(value), max_depth=self.max_depth)

    # --- Sites ---

    def unquote(self, node: Call) -> Expression:
        operand = self._operand(node)
        value = self.lookup(operand.name)
        logger.debug("unquote %s -> %r", operand.name, value)
        return self._copy(value)

    def splice(self, node: Call) -> _Splice:
        operand = self._operand(node)
        value = self.lookup(operand.name)
        logger.debug("splice %s -> %r", operand.name, value)
        if isinstance(value, dict):
            items = [Arg(k, v) for k, v in value.items()]
        elif isinstance(value, (list, tuple)):
            items = [v if isinstance(v, Arg) else Arg(None, v) for v in value]
        else:
            raise ExprTypeError(
                f"'{self.markers.splice}({operand.name})' requires a sequence, got {type(value).__name__}"
            )
        args = []
        for name, v in items:
            if name is not None and (not isinstance(name, str) or name == ""):
                raise InvalidUnquotedName(f"Spliced argument name must be a non-empty string, got {name!r}")
            args.append(Arg(name, self._copy(v)))
        return _Splice(args)

    def definition(self, node: Call) -> Arg:
        if len(node.args) != 2:
            raise ExprArityError(f"'{self.markers.define}' expects exactly 2 arguments, got {len(node.args)}")
        lhs, rhs = node.values
        if isinstance(lhs, Symbol) and not lhs.is_empty:
            return Arg(lhs.name, rhs)
        if isinstance(lhs, Constant) and isinstance(lhs.value, str) and lhs.value:
            return Arg(lhs.value, rhs)
        raise InvalidUnquotedName(f"Argument name must be a non-empty string, got {lhs!r}")

    # --- Mapper hooks ---

    def enter_call(self, node: Call, slot: Slot):
        head = node.head
        if isinstance(head, Symbol):
            # only a one-argument marker call is an unquote site
            if head.name == self.markers.unquote and len(node.args) == 1:
                return self.unquote(node)
            if head.name == self.markers.splice:
                if slot is not Slot.ARG:
                    raise InvalidSpliceContext(
                        f"'{self.markers.splice}()' can only appear as a call argument, not as {slot.value}"
                    )
                return self.splice(node)
        return DESCEND

    def on_call(self, node: Call, head_result, arg_results):
        define = self.markers.define
        args: list[Arg] = []
        for arg, result in zip(node.args, arg_results):
            if isinstance(result, _Splice):
                if arg.name is not None:
                    raise InvalidSpliceContext(
                        f"'{self.markers.splice}()' cannot be the value of named argument '{arg.name}'"
                    )
                args.extend(result.args)
            elif (
                arg.name is None
                and isinstance(arg.value, Call)
                and isinstance(arg.value.head, Symbol)
                and arg.value.head.name == define
            ):
                args.append(self.definition(result))
            else:
                args.append(Arg(arg.name, result))
        return Call(head_result, args)


def quasiquote(
    template: Expression,
    env: Optional[Bindings] = None,
    markers: Markers = DEFAULT_MARKERS,
    max_depth: Optional[int] = None,
) -> Expression:
    """Instantiate ``template``, resolving unquote and splice sites against ``env``.

    ``env`` maps names (str or Symbol) to Expressions or host values; splice
    sites need a list / tuple (items may be Args to carry names) or a dict.
    The result is a fresh tree: parts of the template without substitution
    sites compare equal to the originals but are new objects.
    """
    qq = Quasiquoter(env if env is not None else {}, markers, max_depth)
    return map_expr(template, qq, max_depth)


# --- Builders for template sites ---

def _symbol(name) -> Symbol:
    return name if isinstance(name, Symbol) else Symbol(name)


def unquote(name, markers: Markers = DEFAULT_MARKERS) -> Call:
    return Call(Symbol(markers.unquote), [_symbol(name)])


def splice(name, markers: Markers = DEFAULT_MARKERS) -> Call:
    return Call(Symbol(markers.splice), [_symbol(name)])


def define(lhs: Expression, rhs: Expression, markers: Markers = DEFAULT_MARKERS) -> Call:
    return Call(Symbol(markers.define), [lhs, rhs])
