from __future__ import annotations
import sys

from exprtree.types.errors import ExprTypeError
from exprtree.types.node import Expression, Kind


class Symbol(Expression):
    """A reference to a binding by name.

    ``Symbol("")`` is the empty symbol: the marker for a deliberately omitted
    argument, as in ``f(x, , z)``. It is not a name and cannot be resolved.
    """

    __slots__ = ("name",)

    kind = Kind.SYMBOL

    def __init__(self, name: str):
        if not isinstance(name, str):
            raise ExprTypeError(f"Symbol name must be a string, got {type(name).__name__}")
        # Intern to ensure fast equality/hash and reduce memory
        self._init_field("name", sys.intern(name))

    @property
    def is_empty(self) -> bool:
        return self.name == ""

    def __eq__(self, other) -> bool:
        return isinstance(other, Symbol) and self.name == other.name

    def __hash__(self) -> int:
        return hash((Symbol, self.name))

    def __repr__(self):
        return f"Symbol({self.name!r})"

    def __reduce__(self):
        return (Symbol, (self.name,))


EMPTY = Symbol("")
