import pytest

from jassmin import (
    ConstantEvaluationFailure,
    Declaration,
    Function,
    LiteralTable,
    MinifyContext,
    eliminate_dead_code,
    evaluate_constant_expression,
    fold_constants,
    format_constant,
    format_real,
    substitute_folded,
    word_pattern,
    wrap_integer,
)


def evaluate(expression, literals=None):
    return evaluate_constant_expression(expression, literals or LiteralTable())


def test_eliminate_dead_code_fills_report():
    context = MinifyContext(
        functions={
            "main": Function("main", "nothing", "nothing", ""),
            "Used": Function("Used", "nothing", "nothing", "", usage=1),
            "Dead": Function("Dead", "nothing", "nothing", ""),
        },
        constants={"C": Declaration("integer", "C", "1", is_constant=True)},
        globals={
            "g": Declaration("integer", "g", usage=2),
            "h": Declaration("integer", "h"),
        },
    )
    eliminate_dead_code(context)
    assert list(context.functions) == ["main", "Used"]
    assert context.constants == {}
    assert list(context.globals) == ["g"]
    assert context.report.lines() == [
        "Removed 1 functions",
        "Removed 1 constants",
        "Removed 1 globals",
    ]


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("7/2", 3),
        ("-7/2", -3),
        ("7./2", 3.5),
        ("$10+0x10", 32),
        ("010", 8),
        ("(1+2)*3-4", 5),
        ("2147483647+1", -2147483648),
        ("1<2 and not false", True),
        ("true==false", False),
    ],
)
def test_evaluate_constant_expression(expression, expected):
    value = evaluate(expression)
    assert value == expected
    assert type(value) is type(expected)


def test_rawcode_operands_are_integers():
    literals = LiteralTable()
    rawcode = literals.register("'A'")
    assert evaluate(rawcode + "+1", literals) == 66


@pytest.mark.parametrize("expression", ["udg_x+1", "1/0", "true+1", "GetTime()", "1<2<3"])
def test_non_constant_expressions_fail(expression):
    with pytest.raises(ConstantEvaluationFailure):
        evaluate(expression)


def test_string_literals_are_not_numbers():
    literals = LiteralTable()
    text = literals.register('"five"')
    with pytest.raises(ConstantEvaluationFailure):
        evaluate(text, literals)


def test_wrap_integer():
    assert wrap_integer(2**31) == -(2**31)
    assert wrap_integer(-(2**31) - 1) == 2**31 - 1
    assert wrap_integer(42) == 42


@pytest.mark.parametrize(
    "value, text",
    [(0.5, ".5"), (100.0, "100."), (-0.25, "-.25"), (3.0, "3."), (0.0, "0."), (1.75, "1.75")],
)
def test_format_real(value, text):
    assert format_real(value) == text


def test_format_constant_checks_types():
    assert format_constant(True, "boolean") == "true"
    assert format_constant(3, "real") == "3."
    with pytest.raises(ConstantEvaluationFailure):
        format_constant(1.5, "integer")
    with pytest.raises(ConstantEvaluationFailure):
        format_constant(1, "boolean")


def test_fold_constants_substitutes_and_drops():
    literals = LiteralTable()
    name = literals.register('"name"')
    context = MinifyContext(
        literals=literals,
        constants={
            "A": Declaration("integer", "A", "5", is_constant=True),
            "B": Declaration("integer", "B", "A*2", is_constant=True),
            "C": Declaration("integer", "C", "someGlobal+1", is_constant=True),
            "R": Declaration("real", "R", "1./4", is_constant=True),
            "DEBUG": Declaration("boolean", "DEBUG", "not true", is_constant=True),
            "S": Declaration("string", "S", name, is_constant=True),
        },
        globals={"g": Declaration("integer", "g", "B")},
        functions={
            "main": Function(
                "main", "nothing", "nothing", "set x=A+B+C\nset y=R\nif DEBUG then"
            )
        },
    )
    fold_constants(context)
    assert list(context.constants) == ["C", "S"]
    assert context.globals["g"].value == "10"
    assert context.functions["main"].body == "set x=5+10+C\nset y=.25\nif false then"


def test_negative_folds_are_parenthesised_after_operators():
    pattern = word_pattern(["N"])
    values = {"N": "-5"}
    assert substitute_folded(pattern, "set x=g-N", values) == "set x=g-(-5)"
    assert substitute_folded(pattern, "set x=2*N+N", values) == "set x=2*(-5)+(-5)"
    assert substitute_folded(pattern, "set x=N\ncall F(N)", values) == "set x=-5\ncall F(-5)"


def test_fold_constants_keeps_negative_operands_separate():
    context = MinifyContext(
        constants={
            "N": Declaration("integer", "N", "-5", is_constant=True),
            "M": Declaration("integer", "M", "10-N", is_constant=True),
        },
        functions={"main": Function("main", "nothing", "nothing", "set x=g-N\nset y=M")},
    )
    fold_constants(context)
    assert context.constants == {}
    assert context.functions["main"].body == "set x=g-(-5)\nset y=15"
