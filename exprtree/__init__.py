# Core type aliases for exprtree's data model.
# Expressions are the four node classes in exprtree.types.expression. Host values
# (plain Python ints, strings, lists, ...) appear wherever callers hand data to the
# library, e.g. quasiquote substitution environments; they are lifted into
# Expressions with exprtree.types.expression.lift.
#
# Naming guidance:
# - HostValue: a plain Python value that has not (yet) been lifted to an Expression.
# - Bindings:  a name -> value mapping used for substitution (Mapping or Scope).

from typing import Any, Mapping

__version__ = "0.1.0"

# Plain Python value supplied by a caller
HostValue = Any

# Substitution environments: names (str or Symbol) to Expressions / host values
Bindings = Mapping[Any, HostValue]
