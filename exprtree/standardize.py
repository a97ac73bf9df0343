"""Call standardization: rewrite a call's arguments into canonical named form.

Matching follows the usual three passes over the supplied arguments:

1. exact name matches
2. unique partial (prefix) matches, only against formals declared before ``...``
3. positional arguments, left to right, into the formals still unfilled

Whatever is left over goes to the variadic capture ``...`` if the signature
has one. Formals with defaults that received nothing are left out: the
result records what the caller supplied, not what will run.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from exprtree.types.errors import (
    AmbiguousArgumentName,
    DuplicateArgumentName,
    ExprTypeError,
    MissingRequiredArgument,
    TooManyArguments,
)
from exprtree.types.expression import VARIADIC, Arg, Call, ParameterList, Symbol

if TYPE_CHECKING:
    from exprtree.signatures import SignatureRegistry

logger = logging.getLogger(__name__)

LIST = Symbol("list")


def _is_grouped_dots(arg: Arg) -> bool:
    return arg.name == VARIADIC and isinstance(arg.value, Call) and arg.value.head == LIST


def standardize(
    call: Call,
    signature: ParameterList,
    validate: bool = False,
    expand_dots: bool = True,
) -> Call:
    """Return ``call`` with every argument named by the formal it binds to.

    Matched formals come out in the order ``signature`` declares them. The
    variadic capture sits where ``...`` is declared: inlined (keeping each
    argument's own name, None for positional ones) when ``expand_dots`` is
    true, otherwise grouped as a single ``... = list(...)`` argument.

    With ``validate``, a formal without a default that received nothing
    raises MissingRequiredArgument (only for signatures without ``...``).
    """
    if not isinstance(call, Call):
        raise ExprTypeError(f"Can only standardize a Call, got {call!r}")
    if not isinstance(signature, ParameterList):
        raise ExprTypeError(f"Signature must be a ParameterList, got {signature!r}")

    formals = signature.names
    variadic = signature.has_variadic
    # Formals after `...` can only be matched exactly by name
    dots_at = formals.index(VARIADIC) if variadic else len(formals)
    leading = formals[:dots_at]

    matched: dict[str, tuple[int, Arg]] = {}
    dots: list[tuple[int, Arg]] = []

    named = [(i, a) for i, a in enumerate(call.args) if a.name is not None]
    positional = [(i, a) for i, a in enumerate(call.args) if a.name is None]

    # Exact matches
    pending: list[tuple[int, Arg]] = []
    for i, arg in named:
        if variadic and not expand_dots and _is_grouped_dots(arg):
            # Already grouped: unpack rather than group it a second time
            dots.extend((i, a) for a in arg.value.args)
            continue
        if arg.name in formals and arg.name != VARIADIC:
            if arg.name in matched:
                raise DuplicateArgumentName(arg.name)
            matched[arg.name] = (i, arg)
        else:
            pending.append((i, arg))

    # Partial matches, against formals no exact match claimed
    exact = set(matched)
    for i, arg in pending:
        candidates = [
            f for f in leading
            if f not in exact and f != arg.name and f.startswith(arg.name)
        ]
        if len(candidates) > 1:
            raise AmbiguousArgumentName(arg.name, candidates)
        if len(candidates) == 1:
            formal = candidates[0]
            if formal in matched:
                raise DuplicateArgumentName(formal)
            logger.debug("partial argument name %r matched formal %r", arg.name, formal)
            matched[formal] = (i, Arg(formal, arg.value))
            continue
        if not variadic:
            raise TooManyArguments([arg], f"Unused argument: {arg.name}")
        logger.debug("named argument %r captured by '...'", arg.name)
        dots.append((i, arg))

    # Positional fill
    unfilled = [f for f in leading if f not in matched]
    for n, (i, arg) in enumerate(positional):
        if unfilled:
            formal = unfilled.pop(0)
            matched[formal] = (i, Arg(formal, arg.value))
        elif variadic:
            dots.append((i, arg))
        else:
            extra = [a.value for _, a in positional[n:]]
            raise TooManyArguments(extra)

    if validate and not variadic:
        for p in signature.entries:
            if p.default is None and p.name not in matched:
                raise MissingRequiredArgument(p.name)

    dots.sort(key=lambda item: item[0])
    out: list[Arg] = []
    for p in signature.entries:
        if p.is_variadic:
            if not dots:
                continue
            if expand_dots:
                out.extend(a for _, a in dots)
            else:
                out.append(Arg(VARIADIC, Call(LIST, [a for _, a in dots])))
        elif p.name in matched:
            out.append(matched[p.name][1])
    return Call(call.head, out)


def standardize_with(
    call: Call,
    registry: "SignatureRegistry",
    validate: bool = False,
    expand_dots: bool = True,
) -> Call:
    """Standardize ``call`` against the signature ``registry`` has for its head.

    Raises SignatureUnavailable when the registry cannot produce one.
    """
    if not isinstance(call, Call):
        raise ExprTypeError(f"Can only standardize a Call, got {call!r}")
    signature = registry.lookup(call.head)
    return standardize(call, signature, validate=validate, expand_dots=expand_dots)
