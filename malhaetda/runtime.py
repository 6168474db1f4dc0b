import math
from dataclasses import dataclass
from typing import Optional, Type

from malhaetda.parser import (
    BinaryOperator,
    Expression,
    Factor,
    Node,
    NumberLiteral,
    Subexpression,
    Term,
    TextLiteral,
)
from malhaetda.value import BinaryOperationImpl, Number, Text, Value, type_name_of


@dataclass
class CalcInternalError(Exception):
    errmsg: str

    def __str__(self) -> str:
        return self.errmsg


@dataclass(frozen=True)
class TypeFault:
    """An operator met an operand other than a number. Evaluation goes on with no value in its place."""

    op_name: str
    left_type: str
    right_type: str

    def __str__(self) -> str:
        message = f"Type fault: {self.op_name} is not defined for {self.left_type} and {self.right_type}"
        if Text.type_name() in (self.left_type, self.right_type):
            message += ", operands cannot be text"
        return message


def evaluate_expression(expression: Node, faults: list[TypeFault]) -> Optional[Value]:
    """Evaluates a tree bottom-up. TypeFaults are appended to faults in the order they occur."""
    if isinstance(expression, Expression):
        result = evaluate_expression(expression.left, faults)
        for op_term in expression.right:
            result = apply_operator(op_term.operator, result, evaluate_expression(op_term.term, faults), faults)
        return result
    elif isinstance(expression, Term):
        result = evaluate_expression(expression.left, faults)
        for op_factor in expression.right:
            result = apply_operator(op_factor.operator, result, evaluate_expression(op_factor.factor, faults), faults)
        return result
    elif isinstance(expression, Factor):
        return evaluate_expression(expression.base, faults)
    elif isinstance(expression, NumberLiteral):
        return Number(float(expression.lexeme))
    elif isinstance(expression, TextLiteral):
        return Text(expression.lexeme[1:-1])
    elif isinstance(expression, Subexpression):
        return evaluate_expression(expression.expression, faults)
    else:
        raise CalcInternalError(f"Unexpected expression type: {expression!r}")


def apply_operator(
    operator: BinaryOperator, a: Optional[Value], b: Optional[Value], faults: list[TypeFault]
) -> Optional[Value]:
    if operator is BinaryOperator.ADD:
        return eval_binary_operation(table=add_impls, a=a, b=b, op_name="Addition", faults=faults)
    elif operator is BinaryOperator.SUB:
        return eval_binary_operation(table=sub_impls, a=a, b=b, op_name="Subtraction", faults=faults)
    elif operator is BinaryOperator.MUL:
        return eval_binary_operation(table=mul_impls, a=a, b=b, op_name="Multiplication", faults=faults)
    elif operator is BinaryOperator.DIV:
        return eval_binary_operation(table=div_impls, a=a, b=b, op_name="Division", faults=faults)
    else:
        raise CalcInternalError(f"Unexpected binary operator: {operator}")


BinaryOperationImplTable = list[tuple[tuple[Type[Value], Type[Value]], BinaryOperationImpl]]


def eval_binary_operation(
    table: BinaryOperationImplTable,
    a: Optional[Value],
    b: Optional[Value],
    op_name: str,
    faults: list[TypeFault],
) -> Optional[Value]:
    for (type_a, type_b), impl in table:
        if isinstance(a, type_a) and isinstance(b, type_b):
            return impl(a, b)
    else:
        faults.append(TypeFault(op_name=op_name, left_type=type_name_of(a), right_type=type_name_of(b)))
        return None


def ieee_div(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


add_impls: BinaryOperationImplTable = [((Number, Number), lambda a, b: Number(a.v + b.v))]  # type: ignore
sub_impls: BinaryOperationImplTable = [((Number, Number), lambda a, b: Number(a.v - b.v))]  # type: ignore
mul_impls: BinaryOperationImplTable = [((Number, Number), lambda a, b: Number(a.v * b.v))]  # type: ignore
div_impls: BinaryOperationImplTable = [((Number, Number), lambda a, b: Number(ieee_div(a.v, b.v)))]  # type: ignore
