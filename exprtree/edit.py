"""Pure editing operations on calls.

Each function returns a new Call; the input is never modified. Arguments are
addressed by position (int, negative counts from the end) or by name (str,
the first argument carrying that name).
"""

from __future__ import annotations

from typing import Optional, Union

from exprtree import HostValue
from exprtree.types.errors import ExprTypeError
from exprtree.types.expression import Arg, Call, Expression, Symbol, lift

Key = Union[int, str]


class _Zap:
    __slots__ = ()

    def __repr__(self):
        return "ZAP"


# Passed to modify_call to remove an argument
ZAP = _Zap()


def _check_call(call) -> Call:
    if not isinstance(call, Call):
        raise ExprTypeError(f"Expected a Call, got {call!r}")
    return call


def _index(call: Call, key: Key) -> int:
    if isinstance(key, bool) or not isinstance(key, (int, str)):
        raise ExprTypeError(f"Argument key must be an int or str, got {key!r}")
    if isinstance(key, int):
        n = len(call.args)
        ix = key + n if key < 0 else key
        if not 0 <= ix < n:
            raise IndexError(f"Argument index {key} out of range for {n} argument(s)")
        return ix
    for ix, arg in enumerate(call.args):
        if arg.name == key:
            return ix
    raise KeyError(key)


def call_name(call: Call) -> Optional[str]:
    """Name of the called function, or None when the head is itself a call."""
    head = _check_call(call).head
    return head.name if isinstance(head, Symbol) else None


def with_head(call: Call, head) -> Call:
    head = Symbol(head) if isinstance(head, str) else head
    return Call(head, _check_call(call).args)


def replace_arg(call: Call, key: Key, value: HostValue) -> Call:
    """Replace the value in one argument slot, keeping its name and position."""
    args = list(_check_call(call).args)
    ix = _index(call, key)
    args[ix] = Arg(args[ix].name, lift(value))
    return Call(call.head, args)


def remove_arg(call: Call, key: Key) -> Call:
    args = list(_check_call(call).args)
    del args[_index(call, key)]
    return Call(call.head, args)


def append_arg(call: Call, value: HostValue, name: Optional[str] = None) -> Call:
    return Call(_check_call(call).head, call.args + (Arg(name, lift(value)),))


def modify_call(call: Call, *positional: HostValue, **changes: HostValue) -> Call:
    """Append positional values; set, add or (with ZAP) remove named arguments.

    A named change replaces the first argument with that name in place,
    otherwise it is appended. ZAP removes every argument with that name.
    """
    args = list(_check_call(call).args)
    args.extend(Arg(None, lift(v)) for v in positional)
    for name, value in changes.items():
        if value is ZAP:
            args = [a for a in args if a.name != name]
            continue
        for ix, arg in enumerate(args):
            if arg.name == name:
                args[ix] = Arg(name, lift(value))
                break
        else:
            args.append(Arg(name, lift(value)))
    return Call(call.head, args)


def arg_value(call: Call, key: Key) -> Expression:
    return _check_call(call).args[_index(call, key)].value
