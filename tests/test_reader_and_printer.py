import math

import pytest

from exprtree.printer import deparse, format_constant, format_name
from exprtree.reader.parser import lex, parse, parse_all
from exprtree.types.errors import ExprSyntaxError
from exprtree.types.expression import (
    EMPTY,
    FUNCTION,
    Arg,
    Call,
    Constant,
    Param,
    ParameterList,
    Symbol,
)
from exprtree.types.nil import Nil


def test_parse_call_with_named_arguments():
    assert parse("f(x, y = 2)") == Call(Symbol("f"), [Symbol("x"), Arg("y", Constant(2))])


@pytest.mark.parametrize(
    "source, value",
    [
        ("1", 1),
        ("2L", 2),
        ("-3", -3),
        ("1.5", 1.5),
        ("1e3", 1000.0),
        (".5", 0.5),
        ('"a"', "a"),
        ("'b'", "b"),
        ('"tab\\there"', "tab\there"),
        ("TRUE", True),
        ("FALSE", False),
        ("NULL", Nil),
        ("Inf", math.inf),
        ("-Inf", -math.inf),
    ],
)
def test_parse_constants(source, value):
    expr = parse(source)
    assert isinstance(expr, Constant)
    assert expr == Constant(value)


def test_parse_integers_and_doubles_differ():
    assert parse("1") != parse("1.0")
    assert type(parse("2L").value) is int
    assert math.isnan(parse("NaN").value)


@pytest.mark.parametrize("source", ["x", ".x", "my.name", "...", "..1"])
def test_parse_symbols(source):
    assert parse(source) == Symbol(source)


def test_backticked_names():
    assert parse("`+`") == Symbol("+")
    assert parse("`a b`(1)") == Call(Symbol("a b"), [Constant(1)])
    assert parse("`a\\`b`") == Symbol("a`b")
    assert parse("f(`my arg` = 1)").args[0].name == "my arg"
    assert parse('f("quoted" = 1)').args[0].name == "quoted"


def test_string_head_calls_the_named_function():
    assert parse('"f"(x)') == parse("f(x)")


def test_empty_argument_slots():
    assert parse("f(x, , z)").values == (Symbol("x"), EMPTY, Symbol("z"))
    assert parse("f(x, )").values == (Symbol("x"), EMPTY)
    assert parse("f(,)").values == (EMPTY, EMPTY)
    assert parse("f(x = )").args == (Arg("x", EMPTY),)
    assert parse("f()").args == ()


def test_call_chaining():
    expr = parse("f(1)(2)")
    assert expr.head == parse("f(1)")
    assert expr.values == (Constant(2),)


def test_function_forms():
    expr = parse("function(x, y = 2) `+`(x, y)")
    assert expr.head == FUNCTION
    assert expr.values[0] == ParameterList(["x", Param("y", Constant(2))])
    assert expr.values[1] == parse("`+`(x, y)")
    bare = parse("function(x, ...)")
    assert bare == ParameterList(["x", "..."])
    assert parse("function() NULL") == Call(FUNCTION, [ParameterList([]), Constant(None)])


def test_newlines_are_insignificant_inside_parentheses():
    assert parse("f(\n  x,\n  y = 2\n)") == parse("f(x, y = 2)")


def test_parse_all_splits_on_separators():
    source = "a; b\n\n# a comment\nc(1) # trailing\n"
    assert parse_all(source) == [Symbol("a"), Symbol("b"), parse("c(1)")]
    assert parse_all("") == []


def test_lex_reports_offsets():
    tokens = list(lex("f(x)"))
    assert [t.type for t in tokens] == ["name", "lparen", "name", "rparen"]
    assert [t.pos for t in tokens] == [0, 1, 2, 3]


@pytest.mark.parametrize(
    "source",
    [
        "",
        "f(",
        "f(x y)",
        "f(x))",
        "a b",
        "1(2)",
        "function(x)(1)",
        "function(1) x",
        "f(`` = 1)",
        "a @ b",
        "'unterminated",
        "-Infinity",
    ],
)
def test_syntax_errors(source):
    with pytest.raises(ExprSyntaxError):
        parse(source)


def test_syntax_error_position():
    with pytest.raises(ExprSyntaxError) as exc:
        parse("a @")
    assert exc.value.pos == 2


@pytest.mark.parametrize(
    "source",
    [
        "x",
        "f()",
        "f(x, y = 2)",
        "f(x, , z)",
        "f(x =)",
        "`+`(a, 1)",
        "f(1)(2)",
        "function(x, y = 2) `+`(x, y)",
        "function(x, ...)",
        "function() NULL",
        "f(TRUE, FALSE, NULL)",
        "f(1.5, -2, 3)",
        "f(`my arg` = 1)",
        'paste("a", "b c", sep = "")',
        ".(a)",
        "..(xs)",
        "`:=`(.(nm), 1)",
        "`function`(x)",
        "`TRUE`",
        "Inf",
        "f(-Inf, Inf)",
        "f(NaN)",
    ],
)
def test_deparse_round_trips(source):
    expr = parse(source)
    assert deparse(expr) == source
    assert parse(deparse(expr)) == expr


def test_str_deparses():
    assert str(parse("f(x, y = 2)")) == "f(x, y = 2)"
    assert str(EMPTY) == ""


def test_format_name():
    assert format_name("x") == "x"
    assert format_name("...") == "..."
    assert format_name("+") == "`+`"
    assert format_name("a`b") == "`a\\`b`"
    assert format_name("NULL") == "`NULL`"
    assert format_name("1x") == "`1x`"


def test_format_constant():
    assert format_constant(True) == "TRUE"
    assert format_constant(Nil) == "NULL"
    assert format_constant(2) == "2"
    assert format_constant(2.0) == "2.0"
    assert format_constant(float("-inf")) == "-Inf"
    assert format_constant(float("nan")) == "NaN"
    assert format_constant(1 - 2j) == "1.0-2.0i"
    assert format_constant('say "hi"') == '"say \\"hi\\""'
    assert format_constant("café") == '"café"'
