"""Generic recursive walker over expression trees.

fold(expr, visitor) is a structural fold: the two atomic kinds (Constant,
Symbol) are handed to their callback directly; for the two recursive kinds
(Call, ParameterList) the children are folded first and the callback receives
their results.

- Call:           head first, then args left to right
- ParameterList:  defaults in declared order (None for entries without one)

map_expr is fold with a Mapper, whose callbacks rebuild every node.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from exprtree.config import get_max_depth
from exprtree.types.errors import DepthLimitExceeded
from exprtree.types.expression import (
    Arg,
    Call,
    Constant,
    Expression,
    Kind,
    Param,
    ParameterList,
    Symbol,
    kind,
)

R = TypeVar("R")


class Slot(Enum):
    """Position a node occupies in its parent."""

    ROOT = "root"
    HEAD = "head"
    ARG = "arg"
    DEFAULT = "default"


class _Descend:
    __slots__ = ()

    def __repr__(self):
        return "DESCEND"


# Returned by Visitor.enter_call to let the walker recurse normally
DESCEND = _Descend()


class Visitor(Generic[R]):
    """Callbacks for fold. Subclasses implement the four on_* methods."""

    def enter_call(self, node: Call, slot: Slot) -> Any:
        """Consulted before recursing into a Call.

        Return DESCEND to recurse as usual; any other value becomes the
        result for ``node`` and its children are not visited.
        """
        return DESCEND

    def on_constant(self, node: Constant) -> R:
        raise NotImplementedError

    def on_symbol(self, node: Symbol) -> R:
        raise NotImplementedError

    def on_call(self, node: Call, head_result: R, arg_results: list[R]) -> R:
        raise NotImplementedError

    def on_parameter_list(self, node: ParameterList, default_results: list[Optional[R]]) -> R:
        raise NotImplementedError


class CallbackVisitor(Visitor):
    """A Visitor assembled from plain functions."""

    def __init__(
        self,
        on_constant: Callable,
        on_symbol: Callable,
        on_call: Callable,
        on_parameter_list: Callable,
        enter_call: Optional[Callable] = None,
    ):
        self._on_constant = on_constant
        self._on_symbol = on_symbol
        self._on_call = on_call
        self._on_parameter_list = on_parameter_list
        self._enter_call = enter_call

    def enter_call(self, node, slot):
        if self._enter_call is None:
            return DESCEND
        return self._enter_call(node, slot)

    def on_constant(self, node):
        return self._on_constant(node)

    def on_symbol(self, node):
        return self._on_symbol(node)

    def on_call(self, node, head_result, arg_results):
        return self._on_call(node, head_result, arg_results)

    def on_parameter_list(self, node, default_results):
        return self._on_parameter_list(node, default_results)


def visitor(*, on_constant, on_symbol, on_call, on_parameter_list, enter_call=None) -> CallbackVisitor:
    return CallbackVisitor(on_constant, on_symbol, on_call, on_parameter_list, enter_call)


class _Walk:
    __slots__ = ("visitor", "limit")

    def __init__(self, visitor: Visitor, limit: int):
        self.visitor = visitor
        self.limit = limit

    def visit(self, node, slot: Slot, depth: int):
        # Classify before anything else so foreign input fails fast
        handler = _HANDLERS[kind(node)]
        if depth > self.limit:
            raise DepthLimitExceeded(self.limit)
        return handler(self, node, slot, depth)

    def _constant(self, node: Constant, slot: Slot, depth: int):
        return self.visitor.on_constant(node)

    def _symbol(self, node: Symbol, slot: Slot, depth: int):
        return self.visitor.on_symbol(node)

    def _call(self, node: Call, slot: Slot, depth: int):
        intercepted = self.visitor.enter_call(node, slot)
        if intercepted is not DESCEND:
            return intercepted
        head_result = self.visit(node.head, Slot.HEAD, depth + 1)
        arg_results = [self.visit(a.value, Slot.ARG, depth + 1) for a in node.args]
        return self.visitor.on_call(node, head_result, arg_results)

    def _parameter_list(self, node: ParameterList, slot: Slot, depth: int):
        default_results = [
            None if p.default is None else self.visit(p.default, Slot.DEFAULT, depth + 1)
            for p in node.entries
        ]
        return self.visitor.on_parameter_list(node, default_results)


_HANDLERS = {
    Kind.CONSTANT: _Walk._constant,
    Kind.SYMBOL: _Walk._symbol,
    Kind.CALL: _Walk._call,
    Kind.PARAMETER_LIST: _Walk._parameter_list,
}

# Every node kind needs a handler; a new Kind without one fails at import.
if set(_HANDLERS) != set(Kind):
    raise RuntimeError(f"walker has no handler for {set(Kind) - set(_HANDLERS)}")


def fold(expr: Expression, visitor: Visitor[R], max_depth: Optional[int] = None) -> R:
    """Fold ``visitor`` over ``expr`` bottom-up.

    Raises UnsupportedNodeKind for any node outside the four kinds and
    DepthLimitExceeded when the tree is nested deeper than the limit
    (``max_depth``, else EXPRTREE_MAX_DEPTH). A limit set above what the
    Python stack can hold still ends in DepthLimitExceeded.
    """
    limit = get_max_depth(max_depth)
    try:
        return _Walk(visitor, limit).visit(expr, Slot.ROOT, 1)
    except RecursionError:
        raise DepthLimitExceeded(limit) from None


class Mapper(Visitor[Expression]):
    """Visitor whose results are Expressions.

    The defaults rebuild each node as a fresh object with the mapped
    children, keeping argument names and order, so ``map_expr(e, Mapper())``
    is a deep copy of ``e``.
    """

    def on_constant(self, node: Constant) -> Expression:
        return Constant(node.value)

    def on_symbol(self, node: Symbol) -> Expression:
        return Symbol(node.name)

    def on_call(self, node: Call, head_result: Expression, arg_results: list) -> Expression:
        return Call(head_result, [Arg(a.name, v) for a, v in zip(node.args, arg_results)])

    def on_parameter_list(self, node: ParameterList, default_results: list) -> Expression:
        return ParameterList([Param(p.name, d) for p, d in zip(node.entries, default_results)])


def map_expr(expr: Expression, mapper: Optional[Mapper] = None, max_depth: Optional[int] = None) -> Expression:
    return fold(expr, mapper if mapper is not None else Mapper(), max_depth)
