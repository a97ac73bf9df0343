import pytest

from exprtree.reader.parser import parse
from exprtree.signatures import SignatureRegistry, signature_of
from exprtree.types.errors import ExprTypeError, SignatureUnavailable
from exprtree.types.expression import Call, Constant, Param, ParameterList, Symbol


class Sentinel:
    pass


def test_plain_function():
    def f(x, y=2, name="n", flag=None):
        pass

    assert signature_of(f) == parse('function(x, y = 2, name = "n", flag = NULL)')


def test_varargs_collapse_into_one_variadic():
    def f(x, *args, z, **kwargs):
        pass

    sig = signature_of(f)
    assert sig.names == ("x", "...", "z")
    assert sig.has_variadic

    def g(**options):
        pass

    assert signature_of(g) == ParameterList([Param("...")])


def test_defaults_are_lifted():
    def f(xs=[1, 2], opts={"a": True}, marker=Sentinel()):
        pass

    sig = signature_of(f)
    defaults = {p.name: p.default for p in sig.entries}
    assert defaults["xs"] == parse("list(1, 2)")
    assert defaults["opts"] == parse("dict(a = TRUE)")
    # opaque default: recorded as a call to its type
    assert defaults["marker"] == Call(Symbol("Sentinel"), [])


def test_bound_methods_drop_self():
    class Shape:
        def scale(self, factor, origin=0):
            pass

    assert signature_of(Shape().scale) == parse("function(factor, origin = 0)")


def test_no_signature_for_non_callables():
    with pytest.raises(SignatureUnavailable) as exc:
        signature_of(42)
    assert exc.value.target == 42


def test_registry_lookup():
    sig = parse("function(x, ...)")
    registry = SignatureRegistry()
    registry.register("f", sig)
    registry.define(Symbol("g"), lambda a, b=Constant(1): None)

    assert registry.lookup("f") is sig
    assert registry.lookup(Symbol("f")) is sig
    assert registry.lookup(Symbol("g")) == parse("function(a, b = 1)")
    assert "f" in registry
    assert Symbol("g") in registry
    assert "h" not in registry
    assert 3 not in registry


def test_registry_lookup_of_callables():
    def h(p, q=3):
        pass

    assert SignatureRegistry().lookup(h) == parse("function(p, q = 3)")


def test_registry_failures():
    registry = SignatureRegistry()
    with pytest.raises(SignatureUnavailable) as exc:
        registry.lookup("missing")
    assert exc.value.target == "missing"
    with pytest.raises(SignatureUnavailable):
        registry.lookup(parse("f(1)"))
    with pytest.raises(SignatureUnavailable):
        registry.lookup(3)
    with pytest.raises(ExprTypeError):
        registry.register("f", parse("f(x)"))
    with pytest.raises(ExprTypeError):
        registry.define("f", 3)
    with pytest.raises(ExprTypeError):
        registry.lookup(Symbol(""))
