from __future__ import annotations

from typing import Any, Sequence


class ExprError(Exception):
    """ Base class for all exprtree errors"""
    pass


class MalformedExpression(ExprError):
    """ Raised when a node would be structurally malformed"""
    pass


class UnsupportedNodeKind(ExprError):
    """ Raised when a walker meets an object outside the four node kinds"""

    def __init__(self, node: Any):
        super().__init__(f"Unsupported node kind: {type(node).__name__} ({node!r})")
        self.node = node


class DepthLimitExceeded(ExprError):
    """ Raised when a tree is nested deeper than the configured limit"""

    def __init__(self, limit: int):
        super().__init__(f"Expression nested deeper than {limit} levels")
        self.limit = limit


class ExprTypeError(ExprError):
    """ Raised when a value has the wrong type for the operation"""


class ExprArityError(ExprError):
    """ Raised when a form receives the wrong number of arguments"""


class ExprSyntaxError(ExprError):
    """ Raised by the reader on malformed source text"""

    def __init__(self, message: str, pos: int | None = None):
        if pos is not None:
            message = f"{message} (at offset {pos})"
        super().__init__(message)
        self.pos = pos


class EmptySymbolLookup(ExprError):
    """ Raised when the empty (missing argument) symbol is resolved to a value"""

    def __init__(self):
        super().__init__("The empty symbol marks a missing argument and has no value")
        self.name = ""


class UnboundName(ExprError):
    """ Raised when a name has no binding"""

    def __init__(self, name: str):
        super().__init__(f"Unbound name: {name}")
        self.name = name


# --- Call standardization ---

class StandardizationError(ExprError):
    """ Base class for signature mismatches found while standardizing a call"""


class AmbiguousArgumentName(StandardizationError):
    def __init__(self, name: str, candidates: Sequence[str]):
        super().__init__(
            f"Argument '{name}' matches multiple formal arguments: {', '.join(candidates)}"
        )
        self.name = name
        self.candidates = tuple(candidates)


class TooManyArguments(StandardizationError):
    def __init__(self, args: Sequence[Any], message: str | None = None):
        super().__init__(message or f"Too many arguments: {list(args)}")
        self.arguments = tuple(args)


class MissingRequiredArgument(StandardizationError):
    def __init__(self, name: str):
        super().__init__(f"Argument '{name}' is missing, with no default")
        self.name = name


class DuplicateArgumentName(StandardizationError):
    def __init__(self, name: str):
        super().__init__(f"Formal argument '{name}' matched by multiple actual arguments")
        self.name = name


class SignatureUnavailable(ExprError):
    """ Raised when no ParameterList can be produced for a callable"""

    def __init__(self, target: Any, reason: str | None = None):
        msg = f"No signature available for {target!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.target = target


# --- Quasiquotation ---

class QuasiquoteError(ExprError):
    """ Base class for structural misuse of quasiquotation markers"""


class InvalidSpliceContext(QuasiquoteError):
    """ Raised when a splice appears anywhere but an unnamed argument slot"""


class InvalidUnquotedName(QuasiquoteError):
    """ Raised when a computed argument name is not a non-empty string"""
