"""Static analysis passes, each a fold over the expression tree.

- free_variables:        names referenced but not bound in the tree
- assignment_targets:    bare-symbol targets of assignment forms
- call_sites:            calls to a given function name
- all_names:             every symbol name, in visit order
- logical_abbreviations: uses of the T / F shorthands
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from exprtree.types.expression import (
    Call,
    Expression,
    ParameterList,
    Symbol,
)
from exprtree.walker import fold, visitor

# Assignment forms: target first, except for the rightward arrows
ASSIGNMENT_OPERATORS = ("<-", "=", "<<-", "->", "->>")
RIGHTWARD_OPERATORS = ("->", "->>")
FUNCTION_HEADS = ("function",)
LOGICAL_ABBREVIATIONS = ("T", "F")


def _head_name(node: Call) -> Optional[str]:
    return node.head.name if isinstance(node.head, Symbol) else None


def _assignment_parts(node: Call, operators: Iterable[str]) -> Optional[tuple[int, int]]:
    """(target index, value index) when ``node`` is an assignment form."""
    name = _head_name(node)
    if name not in operators or len(node.args) != 2:
        return None
    return (1, 0) if name in RIGHTWARD_OPERATORS else (0, 1)


def _concat(results) -> list:
    out = []
    for r in results:
        if r is not None:
            out.extend(r)
    return out


# --- Free variables ---

# Each node folds to a function: scope in -> (free names, scope out).
# Threading scope through siblings left to right is what makes a binding
# visible to later siblings only.
Scoped = Callable[[frozenset], tuple]

_NOTHING: frozenset = frozenset()


def free_variables(
    expr: Expression,
    include_functions: bool = True,
    assignment_operators: Iterable[str] = ASSIGNMENT_OPERATORS,
    function_heads: Iterable[str] = FUNCTION_HEADS,
    max_depth: Optional[int] = None,
) -> frozenset:
    """Names referenced in ``expr`` that no enclosing binding form binds.

    ``function(params) body`` binds its formals inside its defaults and body
    only. An assignment binds its bare-symbol target after its value has been
    visited, for every later sibling and their descendants. Heads of binding
    forms are syntax, not references. With ``include_functions=False``,
    symbols in call-head position are not reported.
    """
    operators = tuple(assignment_operators)
    function_heads = tuple(function_heads)

    def on_constant(node) -> Scoped:
        return lambda scope: (_NOTHING, scope)

    def on_symbol(node: Symbol) -> Scoped:
        def run(scope):
            if node.is_empty or node.name in scope:
                return _NOTHING, scope
            return frozenset((node.name,)), scope
        return run

    def on_parameter_list(node: ParameterList, defaults) -> Scoped:
        names = frozenset(node.names)

        def run(scope):
            inner = scope | names
            free = set()
            for d in defaults:
                if d is not None:
                    f, _ = d(inner)
                    free |= f
            return frozenset(free), inner
        return run

    def on_call(node: Call, head_result: Scoped, arg_results: list) -> Scoped:
        head_name = _head_name(node)

        if head_name in function_heads and node.args and isinstance(node.args[0].value, ParameterList):
            def run_function(scope):
                free = set()
                inner = scope
                for r in arg_results:
                    f, inner = r(inner)
                    free |= f
                # Formals and local assignments do not escape the function
                return frozenset(free), scope
            return run_function

        parts = _assignment_parts(node, operators)
        if parts is not None:
            target_ix, value_ix = parts
            target = node.args[target_ix].value

            def run_assignment(scope):
                free, scope = arg_results[value_ix](scope)
                if isinstance(target, Symbol):
                    if target.is_empty:
                        return free, scope
                    return free, scope | {target.name}
                # Sub-assignment like names(x) <- v reads what it modifies
                f, scope = arg_results[target_ix](scope)
                return free | f, scope
            return run_assignment

        def run_call(scope):
            free = set()
            if include_functions or not isinstance(node.head, Symbol):
                f, scope = head_result(scope)
                free |= f
            for r in arg_results:
                f, scope = r(scope)
                free |= f
            return frozenset(free), scope
        return run_call

    run = fold(
        expr,
        visitor(
            on_constant=on_constant,
            on_symbol=on_symbol,
            on_call=on_call,
            on_parameter_list=on_parameter_list,
        ),
        max_depth,
    )
    free, _ = run(_NOTHING)
    return free


# --- Assignment targets ---

def assignment_targets(
    expr: Expression,
    operators: Iterable[str] = ASSIGNMENT_OPERATORS,
    max_depth: Optional[int] = None,
) -> list[str]:
    """Bare-symbol assignment targets, de-duplicated in first-occurrence order.

    Sub-assignments (``names(x) <- v``, ``l$a <- v``) are not targets, but
    their arguments are still searched for nested assignments.
    """
    operators = tuple(operators)

    def on_call(node: Call, head_result, arg_results):
        own = []
        parts = _assignment_parts(node, operators)
        if parts is not None:
            target = node.args[parts[0]].value
            if isinstance(target, Symbol) and not target.is_empty:
                own.append(target.name)
        return own + head_result + _concat(arg_results)

    found = fold(
        expr,
        visitor(
            on_constant=lambda node: [],
            on_symbol=lambda node: [],
            on_call=on_call,
            on_parameter_list=lambda node, defaults: _concat(defaults),
        ),
        max_depth,
    )
    return list(dict.fromkeys(found))


# --- Call sites ---

def call_sites(expr: Expression, name: str, max_depth: Optional[int] = None) -> list[Call]:
    """Every call whose head is the symbol ``name``, in pre-order, nested ones included."""
    if isinstance(name, Symbol):
        name = name.name

    def on_call(node: Call, head_result, arg_results):
        own = [node] if _head_name(node) == name else []
        return own + head_result + _concat(arg_results)

    return fold(
        expr,
        visitor(
            on_constant=lambda node: [],
            on_symbol=lambda node: [],
            on_call=on_call,
            on_parameter_list=lambda node, defaults: _concat(defaults),
        ),
        max_depth,
    )


# --- Names ---

def all_names(expr: Expression, max_depth: Optional[int] = None) -> list[str]:
    """Every symbol name in visit order, duplicates kept; the empty symbol is skipped."""
    return fold(
        expr,
        visitor(
            on_constant=lambda node: [],
            on_symbol=lambda node: [] if node.is_empty else [node.name],
            on_call=lambda node, head, args: head + _concat(args),
            on_parameter_list=lambda node, defaults: _concat(defaults),
        ),
        max_depth,
    )


def logical_abbreviations(expr: Expression, max_depth: Optional[int] = None) -> list[Symbol]:
    """Uses of ``T`` / ``F`` as values (not as called functions)."""

    def on_call(node: Call, head_result, arg_results):
        head = head_result if isinstance(node.head, Call) else []
        return head + _concat(arg_results)

    return fold(
        expr,
        visitor(
            on_constant=lambda node: [],
            on_symbol=lambda node: [node] if node.name in LOGICAL_ABBREVIATIONS else [],
            on_call=on_call,
            on_parameter_list=lambda node, defaults: _concat(defaults),
        ),
        max_depth,
    )
