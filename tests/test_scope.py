import pytest

from exprtree.reader.parser import parse
from exprtree.types.errors import EmptySymbolLookup, ExprTypeError, UnboundName
from exprtree.types.expression import Symbol
from exprtree.types.scope import Captured, Scope


@pytest.fixture
def scopes():
    outer = Scope({"a": 1})
    inner = outer.child({"b": 2})
    return outer, inner


def test_lookup_walks_outward(scopes):
    outer, inner = scopes
    assert inner.lookup("a") == 1
    assert inner.lookup(Symbol("b")) == 2
    assert inner["a"] == 1
    assert inner.find("a") is outer
    assert inner.find("zz") is None


def test_define_shadows(scopes):
    outer, inner = scopes
    inner.define("a", 10)
    assert inner.lookup("a") == 10
    assert outer.lookup("a") == 1
    assert len(inner) == 2
    assert list(inner) == ["b", "a"]


def test_set_updates_existing_binding(scopes):
    outer, inner = scopes
    inner.set("a", 5)
    assert outer.lookup("a") == 5
    assert "a" not in inner.vars
    with pytest.raises(UnboundName):
        inner.set("nope", 1)


def test_lookup_failures(scopes):
    _, inner = scopes
    with pytest.raises(EmptySymbolLookup):
        inner.lookup("")
    with pytest.raises(UnboundName) as exc:
        inner.lookup("zz")
    assert exc.value.name == "zz"
    with pytest.raises(KeyError):
        inner["zz"]
    with pytest.raises(KeyError):
        inner[""]


def test_membership(scopes):
    _, inner = scopes
    assert "a" in inner
    assert Symbol("b") in inner
    assert "" not in inner
    assert 3 not in inner


def test_invalid_bindings():
    with pytest.raises(ExprTypeError):
        Scope({"": 1})
    with pytest.raises(ExprTypeError):
        Scope().define(3, 1)


def test_mapping_protocol(scopes):
    _, inner = scopes
    assert dict(inner) == {"a": 1, "b": 2}
    assert inner.get("zz", 0) == 0


def test_captured():
    scope = Scope({"x": 1})
    captured = Captured(parse("f(.(x))"), scope)
    assert captured.lookup("x") == 1
    assert captured == Captured(parse("f(.(x))"), scope)
    assert hash(captured) == hash(Captured(parse("f(.(x))"), scope))
    assert captured != Captured(parse("f(.(x))"), Scope({"x": 1}))
    other = captured.with_expr(parse("g(.(x))"))
    assert other.scope is scope
    assert other.expand() == parse("g(1)")


def test_captured_validates_its_parts():
    with pytest.raises(ExprTypeError):
        Captured("f(x)", Scope())
    with pytest.raises(ExprTypeError):
        Captured(parse("f(x)"), {"x": 1})
