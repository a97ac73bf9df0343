"""Deparse expressions back to the prefix-call syntax read by exprtree.reader.parser.

    Constant("a")                    -> "a"
    Call(f, [x, b=2])                -> f(x, b = 2)
    Call(`+`, [1, 2])                -> `+`(1, 2)
    Call(function, [params, body])   -> function(x, y = 2) body

Names that are not syntactic identifiers, or that collide with a keyword,
are written in backticks.
"""

from __future__ import annotations

import json
import math
import re
from typing import Optional

from exprtree.types.expression import (
    FUNCTION,
    Call,
    Constant,
    Expression,
    ParameterList,
    Symbol,
)
from exprtree.types.nil import NilType
from exprtree.walker import Visitor, fold

SYNTACTIC_NAME = re.compile(r"(?:[A-Za-z][A-Za-z0-9._]*|\.(?:[A-Za-z._][A-Za-z0-9._]*)?)\Z")

KEYWORDS = {"TRUE", "FALSE", "NULL", "Inf", "NaN", "function"}


def format_name(name: str) -> str:
    """A symbol or argument name, backticked when the reader would not accept it bare."""
    if SYNTACTIC_NAME.match(name) and name not in KEYWORDS:
        return name
    escaped = name.replace("\\", "\\\\").replace("`", "\\`")
    return f"`{escaped}`"


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Inf" if value > 0 else "-Inf"
    return repr(value)


def format_constant(value) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, NilType):
        return "NULL"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, complex):
        # not readable back; the reader has no complex literals
        sign = "-" if value.imag < 0 else "+"
        return f"{_format_float(value.real)}{sign}{_format_float(abs(value.imag))}i"
    return json.dumps(value, ensure_ascii=False)


def _is_function_form(node: Call) -> bool:
    return (
        node.head == FUNCTION
        and len(node.args) == 2
        and isinstance(node.args[0].value, ParameterList)
        and all(a.name is None for a in node.args)
    )


class Deparser(Visitor[str]):
    def on_constant(self, node: Constant) -> str:
        return format_constant(node.value)

    def on_symbol(self, node: Symbol) -> str:
        if node.is_empty:
            return ""
        return format_name(node.name)

    def on_call(self, node: Call, head_result: str, arg_results: list) -> str:
        if _is_function_form(node):
            params, body = arg_results
            return f"{params} {body}"
        parts = []
        for arg, text in zip(node.args, arg_results):
            if arg.name is None:
                parts.append(text)
            else:
                parts.append(f"{format_name(arg.name)} = {text}".rstrip())
        return f"{head_result}({', '.join(parts)})"

    def on_parameter_list(self, node: ParameterList, default_results: list) -> str:
        parts = []
        for p, text in zip(node.entries, default_results):
            if text is None:
                parts.append(format_name(p.name))
            else:
                parts.append(f"{format_name(p.name)} = {text}")
        return f"function({', '.join(parts)})"


def deparse(expr: Expression, max_depth: Optional[int] = None) -> str:
    return fold(expr, Deparser(), max_depth)
