import math

import pytest

from malhaetda.parser import (
    BinaryOperator,
    Expression,
    ExpressionStatement,
    Factor,
    NumberLiteral,
    OpTerm,
    Term,
    parse,
)
from malhaetda.runtime import CalcInternalError, TypeFault, apply_operator, evaluate_expression, ieee_div
from malhaetda.tokenizer import tokenize
from malhaetda.value import Number, Text


def evaluate(code: str) -> tuple[object, list[TypeFault]]:
    statement = parse(tokenize(code))
    assert isinstance(statement, ExpressionStatement)
    faults: list[TypeFault] = []
    return evaluate_expression(statement.expression, faults), faults


@pytest.mark.parametrize(
    "code, expected_faults",
    [
        pytest.param('"a" + 1', [TypeFault("Addition", "Text", "Number")]),
        pytest.param('1 - "a"', [TypeFault("Subtraction", "Number", "Text")]),
        pytest.param('"a" * "b"', [TypeFault("Multiplication", "Text", "Text")]),
        pytest.param('4 / ("b")', [TypeFault("Division", "Number", "Text")]),
        # the absent result keeps flowing into the operators that follow
        pytest.param(
            '"a" + 1 + 2',
            [TypeFault("Addition", "Text", "Number"), TypeFault("Addition", "Nothing", "Number")],
        ),
        pytest.param(
            '1 * "b" - 3',
            [TypeFault("Multiplication", "Number", "Text"), TypeFault("Subtraction", "Nothing", "Number")],
        ),
        pytest.param(
            '(1 + "x") * 2 / 4',
            [
                TypeFault("Addition", "Number", "Text"),
                TypeFault("Multiplication", "Nothing", "Number"),
                TypeFault("Division", "Nothing", "Number"),
            ],
        ),
    ],
)
def test_type_faults_cascade(code: str, expected_faults: list[TypeFault]) -> None:
    result, faults = evaluate(code)
    assert result is None
    assert faults == expected_faults


def test_fault_in_right_operand_is_reported_before_outer_operator() -> None:
    result, faults = evaluate('2 + "a" * 3')
    assert result is None
    assert faults == [TypeFault("Multiplication", "Text", "Number"), TypeFault("Addition", "Number", "Nothing")]


def test_type_fault_message() -> None:
    assert str(TypeFault("Addition", "Text", "Number")) == (
        "Type fault: Addition is not defined for Text and Number, operands cannot be text"
    )
    assert str(TypeFault("Addition", "Nothing", "Number")) == "Type fault: Addition is not defined for Nothing and Number"
    assert str(TypeFault("Division", "Number", "Nothing")) == "Type fault: Division is not defined for Number and Nothing"


def test_unknown_operator_is_internal_error() -> None:
    with pytest.raises(CalcInternalError, match="Unexpected binary operator"):
        apply_operator("POW", Number(2.0), Number(3.0), [])  # type: ignore[arg-type]


def test_unknown_operator_in_tree_is_internal_error() -> None:
    expression = Expression(
        left=Term(Factor(NumberLiteral("1"))),
        right=(OpTerm(operator="POW", term=Term(Factor(NumberLiteral("2")))),),  # type: ignore[arg-type]
    )
    with pytest.raises(CalcInternalError):
        evaluate_expression(expression, [])


def test_unknown_node_is_internal_error() -> None:
    with pytest.raises(CalcInternalError, match="Unexpected expression type"):
        evaluate_expression(object(), [])  # type: ignore[arg-type]


def test_every_operator_is_implemented() -> None:
    expected = {
        BinaryOperator.ADD: 8.0,
        BinaryOperator.SUB: 4.0,
        BinaryOperator.MUL: 12.0,
        BinaryOperator.DIV: 3.0,
    }
    assert set(expected) == set(BinaryOperator)
    for operator, value in expected.items():
        assert apply_operator(operator, Number(6.0), Number(2.0), []) == Number(value)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        pytest.param(1.0, 0.0, math.inf),
        pytest.param(-1.0, 0.0, -math.inf),
        pytest.param(1.0, -0.0, -math.inf),
        pytest.param(-2.0, -0.0, math.inf),
        pytest.param(6.0, 4.0, 1.5),
    ],
)
def test_ieee_div(a: float, b: float, expected: float) -> None:
    assert ieee_div(a, b) == expected


@pytest.mark.parametrize("a", [0.0, -0.0, math.nan])
def test_ieee_div_nan(a: float) -> None:
    assert math.isnan(ieee_div(a, 0.0))


@pytest.mark.parametrize(
    "value, expected",
    [
        pytest.param(Number(14.0), "14"),
        pytest.param(Number(-3.0), "-3"),
        pytest.param(Number(0.0), "0"),
        pytest.param(Number(-0.0), "-0.0"),
        pytest.param(Number(0.5), "0.5"),
        pytest.param(Number(1e20), "1e+20"),
        pytest.param(Number(math.inf), "inf"),
        pytest.param(Number(math.nan), "nan"),
        pytest.param(Text("안녕"), "안녕"),
    ],
)
def test_value_str(value: object, expected: str) -> None:
    assert str(value) == expected
