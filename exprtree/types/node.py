"""Base class and kind tags shared by the four expression node classes."""

from __future__ import annotations

from enum import Enum


class Kind(Enum):
    CONSTANT = "constant"
    SYMBOL = "symbol"
    CALL = "call"
    PARAMETER_LIST = "parameter_list"


class Expression:
    """Abstract base for Constant, Symbol, Call and ParameterList.

    Nodes are immutable: every field is set once in ``__init__`` through
    ``_init_field`` and plain attribute assignment afterwards raises.
    """

    __slots__ = ()

    kind: Kind

    def _init_field(self, name: str, value) -> None:
        object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __str__(self) -> str:
        from exprtree.printer import deparse
        return deparse(self)
