"""
  Reader: lexer and parser for a minimal prefix-call syntax

- Streaming lexer, recursive-descent parser
- Produces exprtree expressions:

    - 1, 2L, 1.5, 1e3, -2     -> Constant(int / float)
    - "a", 'b'                -> Constant(str)
    - TRUE, FALSE, NULL       -> Constant(True / False / Nil)
    - Inf, -Inf, NaN          -> Constant(float)
    - x, .x, my.name, `+`     -> Symbol
    - f(a, b = 2)             -> Call with positional and named args
    - f(x, , z)               -> empty slots hold the empty symbol
    - f(1)(2)                 -> call whose head is a call
    - function(x, y = 2) body -> Call(function, [ParameterList, body])
    - function(x, y = 2)      -> bare ParameterList
    - # comment

There are no infix operators: write `+`(a, b).
Top-level expressions are separated by ';' or newlines.
"""

from __future__ import annotations

import ast
import re
from typing import Iterator, NamedTuple, Optional

from exprtree.types.errors import ExprSyntaxError
from exprtree.types.expression import (
    EMPTY,
    FUNCTION,
    Arg,
    Call,
    Constant,
    Expression,
    Param,
    ParameterList,
    Symbol,
)
from exprtree.types.nil import Nil

TOKEN_RE = re.compile(
    r"[ \t\r\f]*(?:"
    r"(?P<comment>\#[^\n]*)"  # line comment
    r"|(?P<newline>\n)"
    r"|(?P<semi>;)"
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r"|(?P<comma>,)"
    r"|(?P<equals>=)"
    r'|(?P<string>"(?:\\.|[^\\"])*"|\'(?:\\.|[^\\\'])*\')'  # double or single quoted
    r"|(?P<backtick>`(?:\\.|[^\\`])*`)"  # quoted name
    r"|(?P<number>-?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?L?|-Inf(?![A-Za-z0-9._]))"
    r"|(?P<name>[A-Za-z.][A-Za-z0-9._]*)"
    r")",
    re.DOTALL,
)

KEYWORD_CONSTANTS = {
    "TRUE": True,
    "FALSE": False,
    "NULL": Nil,
    "Inf": float("inf"),
    "NaN": float("nan"),
}

# Tokens that can start an expression
EXPR_START = {"string", "backtick", "number", "name"}


class Token(NamedTuple):
    type: Optional[str]
    value: Optional[str]
    pos: int


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields Token(type, value, offset); comments are dropped."""
    pos = 0
    n = len(source)
    while pos < n:
        m = TOKEN_RE.match(source, pos)
        if not m or m.end() == pos:
            rest = source[pos:].lstrip(" \t\r\f")
            if not rest:
                break
            bad = n - len(rest)
            raise ExprSyntaxError(f"Unexpected character {source[bad]!r}", bad)
        kind = m.lastgroup
        pos = m.end()
        if kind == "comment":
            continue
        yield Token(kind, m.group(kind), m.start(kind))


def _decode_string(text: str, pos: int) -> str:
    try:
        value = ast.literal_eval(text)
    except (SyntaxError, ValueError) as exc:
        raise ExprSyntaxError(f"Invalid string literal {text}: {exc}", pos) from exc
    if not isinstance(value, str):
        raise ExprSyntaxError(f"Invalid string literal {text}", pos)
    return value


def _decode_backtick(text: str) -> str:
    return re.sub(r"\\(.)", r"\1", text[1:-1], flags=re.DOTALL)


def _decode_number(text: str):
    if text == "-Inf":
        return float("-inf")
    if text.endswith("L"):
        text = text[:-1]
        return int(float(text)) if any(c in text for c in ".eE") else int(text)
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)


class TokenStream:
    def __init__(self, token_iter: Iterator[Token]):
        self.tokens = iter(token_iter)
        self.buffer: list[Token] = []
        # Newlines are insignificant inside parentheses
        self.depth = 0
        self.last_pos = 0

    def _fill(self, k: int) -> None:
        while len(self.buffer) < k:
            tok = next(self.tokens, None)
            if tok is None:
                self.buffer.append(Token(None, None, self.last_pos))
                return
            self.last_pos = tok.pos
            self.buffer.append(tok)

    def peek(self, k: int = 0) -> Token:
        """Look ahead ``k`` significant tokens without consuming them."""
        i = 0
        seen = 0
        while True:
            self._fill(i + 1)
            if i >= len(self.buffer):
                return Token(None, None, self.last_pos)
            tok = self.buffer[i]
            if tok.type is None:
                return tok
            if tok.type == "newline" and self.depth > 0:
                i += 1
                continue
            if seen == k:
                return tok
            seen += 1
            i += 1

    def advance(self) -> Token:
        while True:
            self._fill(1)
            tok = self.buffer[0]
            if tok.type is None:
                return tok
            self.buffer.pop(0)
            if tok.type == "newline" and self.depth > 0:
                continue
            if tok.type == "lparen":
                self.depth += 1
            elif tok.type == "rparen":
                self.depth = max(0, self.depth - 1)
            return tok

    def expect(self, tok_type: str) -> Token:
        tok = self.advance()
        if tok.type != tok_type:
            found = "end of input" if tok.type is None else repr(tok.value)
            raise ExprSyntaxError(f"Expected {tok_type}, found {found}", tok.pos)
        return tok

    # --- Grammar ---

    def parse_expr(self) -> Expression:
        expr = self.parse_primary()
        while self.peek().type == "lparen":
            if isinstance(expr, Constant):
                if not isinstance(expr.value, str):
                    raise ExprSyntaxError(f"Cannot call constant {expr.value!r}", self.peek().pos)
                # "f"(x) calls f
                expr = Symbol(expr.value)
            elif isinstance(expr, ParameterList):
                raise ExprSyntaxError("Cannot call a parameter list", self.peek().pos)
            self.advance()
            expr = Call(expr, self.parse_args())
        return expr

    def parse_primary(self) -> Expression:
        tok = self.advance()
        if tok.type is None:
            raise ExprSyntaxError("Unexpected end of input", tok.pos)
        if tok.type == "number":
            return Constant(_decode_number(tok.value))
        if tok.type == "string":
            return Constant(_decode_string(tok.value, tok.pos))
        if tok.type == "backtick":
            return Symbol(_decode_backtick(tok.value))
        if tok.type == "name":
            if tok.value in KEYWORD_CONSTANTS:
                return Constant(KEYWORD_CONSTANTS[tok.value])
            if tok.value == FUNCTION.name:
                return self.parse_function()
            return Symbol(tok.value)
        raise ExprSyntaxError(f"Unexpected {tok.value!r}", tok.pos)

    def parse_function(self) -> Expression:
        self.expect("lparen")
        parameters = self.parse_params()
        if self.peek().type in EXPR_START:
            return Call(FUNCTION, [Arg(None, parameters), Arg(None, self.parse_expr())])
        return parameters

    def _arg_name(self) -> Optional[str]:
        """Consume ``name =`` if the next two tokens are a name and '='."""
        tok = self.peek()
        if tok.type in ("name", "backtick", "string") and self.peek(1).type == "equals":
            self.advance()
            self.advance()
            if tok.type == "name":
                return tok.value
            if tok.type == "backtick":
                return _decode_backtick(tok.value)
            return _decode_string(tok.value, tok.pos)
        return None

    def parse_args(self) -> list[Arg]:
        # called just after '('
        if self.peek().type == "rparen":
            self.advance()
            return []
        args = []
        while True:
            name = self._arg_name()
            if name == "":
                raise ExprSyntaxError("Argument names cannot be empty", self.peek().pos)
            if self.peek().type in ("comma", "rparen"):
                value = EMPTY
            else:
                value = self.parse_expr()
            args.append(Arg(name, value))
            tok = self.advance()
            if tok.type == "rparen":
                return args
            if tok.type != "comma":
                found = "end of input" if tok.type is None else repr(tok.value)
                raise ExprSyntaxError(f"Expected ',' or ')', found {found}", tok.pos)

    def parse_params(self) -> ParameterList:
        # called just after '('
        entries = []
        if self.peek().type == "rparen":
            self.advance()
            return ParameterList(entries)
        while True:
            tok = self.advance()
            if tok.type == "name" and tok.value not in KEYWORD_CONSTANTS and tok.value != FUNCTION.name:
                name = tok.value
            elif tok.type == "backtick":
                name = _decode_backtick(tok.value)
            else:
                found = "end of input" if tok.type is None else repr(tok.value)
                raise ExprSyntaxError(f"Expected a parameter name, found {found}", tok.pos)
            default = None
            if self.peek().type == "equals":
                self.advance()
                default = self.parse_expr()
            entries.append(Param(name, default))
            tok = self.advance()
            if tok.type == "rparen":
                return ParameterList(entries)
            if tok.type != "comma":
                found = "end of input" if tok.type is None else repr(tok.value)
                raise ExprSyntaxError(f"Expected ',' or ')', found {found}", tok.pos)

    def skip_separators(self) -> None:
        while self.peek().type in ("newline", "semi"):
            self.advance()

    def parse_all(self) -> Iterator[Expression]:
        self.skip_separators()
        while self.peek().type is not None:
            yield self.parse_expr()
            tok = self.peek()
            if tok.type not in (None, "newline", "semi"):
                raise ExprSyntaxError(f"Unexpected {tok.value!r} after expression", tok.pos)
            self.skip_separators()


def parse_all(source: str) -> list[Expression]:
    return list(TokenStream(lex(source)).parse_all())


def parse(source: str) -> Expression:
    """Parse exactly one expression."""
    exprs = parse_all(source)
    if len(exprs) != 1:
        raise ExprSyntaxError(f"Expected exactly one expression, found {len(exprs)}")
    return exprs[0]
