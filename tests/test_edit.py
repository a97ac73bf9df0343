import pytest

from exprtree.edit import (
    ZAP,
    append_arg,
    arg_value,
    call_name,
    modify_call,
    remove_arg,
    replace_arg,
    with_head,
)
from exprtree.reader.parser import parse
from exprtree.types.errors import ExprTypeError
from exprtree.types.expression import Constant, Symbol


@pytest.fixture
def call():
    return parse("f(a, b = 2, c)")


def test_call_name(call):
    assert call_name(call) == "f"
    assert call_name(parse("f(1)(2)")) is None
    with pytest.raises(ExprTypeError):
        call_name(Symbol("f"))


def test_with_head(call):
    assert with_head(call, "g") == parse("g(a, b = 2, c)")
    assert with_head(call, parse("make(1)")) == parse("make(1)(a, b = 2, c)")


def test_replace_arg(call):
    assert replace_arg(call, "b", 3) == parse("f(a, b = 3, c)")
    assert replace_arg(call, -1, Symbol("z")) == parse("f(a, b = 2, z)")
    assert replace_arg(call, 0, [1, 2]) == parse("f(list(1, 2), b = 2, c)")
    assert call == parse("f(a, b = 2, c)")


def test_remove_and_append(call):
    assert remove_arg(call, 0) == parse("f(b = 2, c)")
    assert remove_arg(call, "b") == parse("f(a, c)")
    assert append_arg(call, 4, name="d") == parse("f(a, b = 2, c, d = 4)")
    assert append_arg(call, None) == parse("f(a, b = 2, c, NULL)")


def test_modify_call(call):
    assert modify_call(call, b=9) == parse("f(a, b = 9, c)")
    assert modify_call(call, 5, b=ZAP, e=[1]) == parse("f(a, c, 5, e = list(1))")
    assert modify_call(parse("f(x = 1, x = 2)"), x=ZAP) == parse("f()")
    assert modify_call(call, missing=ZAP) == call


def test_arg_value(call):
    assert arg_value(call, "b") == Constant(2)
    assert arg_value(call, -1) == Symbol("c")


@pytest.mark.parametrize(
    "key, error",
    [
        (3, IndexError),
        (-4, IndexError),
        ("zz", KeyError),
        (True, ExprTypeError),
        (1.0, ExprTypeError),
    ],
)
def test_bad_keys(call, key, error):
    with pytest.raises(error):
        arg_value(call, key)
    with pytest.raises(error):
        replace_arg(call, key, 1)
