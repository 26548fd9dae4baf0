"""
Numeric evaluation of expressions.
Square roots are applied first, then × ÷ before + - with left-to-right ties.
"""

import logging
import math
from dataclasses import dataclass

from .cards import OperatorType
from .expression import Expression

logger = logging.getLogger(__name__)

ZERO_TOLERANCE = 1e-6

EMPTY_EXPRESSION = "Empty expression."
INCOMPLETE_EXPRESSION = "Incomplete expression."
NEGATIVE_ROOT = "Negative argument to unary root."
DIVISION_BY_ZERO = "Division by zero."
INTERNAL_FAULT = "Internal evaluation error."


class ExpressionError(ValueError):
    """Arithmetic the rules do not allow (negative root, division by zero)."""


class EvaluationFault(RuntimeError):
    """Evaluator bookkeeping went wrong; a defect rather than a bad submission."""


@dataclass
class EvaluationResult:
    success: bool = True
    value: float = 0.0
    error_message: str = ""
    internal_fault: bool = False

    @classmethod
    def failure(cls, message: str, internal_fault: bool = False) -> "EvaluationResult":
        return cls(success=False, value=math.nan, error_message=message,
                   internal_fault=internal_fault)


def apply_operator(left: float, op: OperatorType, right: float) -> float:
    if op == OperatorType.ADD:
        return left + right
    if op == OperatorType.SUBTRACT:
        return left - right
    if op == OperatorType.MULTIPLY:
        return left * right
    if op == OperatorType.DIVIDE:
        if math.isclose(right, 0.0, abs_tol=ZERO_TOLERANCE):
            raise ExpressionError(DIVISION_BY_ZERO)
        return left / right
    raise EvaluationFault(f"Unknown operator: {op!r}")


class ExpressionEvaluator:
    """
    Computes the value of an expression.

    Works on unvalidated expressions too (the search feeds it raw
    candidates), so empty and incomplete input is rejected up front.
    """

    def evaluate(self, expression: Expression) -> EvaluationResult:
        """Evaluate with operator precedence."""
        return self._run(expression, self._with_precedence)

    def evaluate_simple(self, expression: Expression) -> EvaluationResult:
        """Evaluate strictly left to right, ignoring precedence."""
        return self._run(expression, self._left_to_right)

    def _run(self, expression: Expression, combine) -> EvaluationResult:
        if expression.is_empty():
            return EvaluationResult.failure(EMPTY_EXPRESSION)
        if not expression.is_complete():
            return EvaluationResult.failure(INCOMPLETE_EXPRESSION)

        try:
            numbers = self._apply_square_roots(expression)
            value = combine(numbers, expression.operators)
        except ExpressionError as e:
            return EvaluationResult.failure(str(e))
        except EvaluationFault as e:
            logger.error("Evaluation fault on '%s': %s", expression, e)
            return EvaluationResult.failure(INTERNAL_FAULT, internal_fault=True)

        return EvaluationResult(success=True, value=value)

    def _apply_square_roots(self, expression: Expression) -> list[float]:
        processed = []
        for term in expression.terms:
            number = term.value
            if term.has_square_root:
                if number < 0:
                    raise ExpressionError(NEGATIVE_ROOT)
                number = math.sqrt(number)
            processed.append(number)
        return processed

    def _with_precedence(self, numbers: list[float], operators: list[OperatorType]) -> float:
        operands = [numbers[0]]
        pending: list[OperatorType] = []

        for op, number in zip(operators, numbers[1:]):
            # >= keeps equal-precedence operators left-associative
            while pending and pending[-1].precedence >= op.precedence:
                self._reduce(operands, pending)
            pending.append(op)
            operands.append(number)

        while pending:
            self._reduce(operands, pending)

        if len(operands) != 1:
            raise EvaluationFault(f"{len(operands)} operands left after evaluation")
        return operands[0]

    def _reduce(self, operands: list[float], pending: list[OperatorType]) -> None:
        if len(operands) < 2:
            raise EvaluationFault("Operand stack underflow")
        right = operands.pop()
        left = operands.pop()
        operands.append(apply_operator(left, pending.pop(), right))

    def _left_to_right(self, numbers: list[float], operators: list[OperatorType]) -> float:
        value = numbers[0]
        for op, number in zip(operators, numbers[1:]):
            value = apply_operator(value, op, number)
        return value


def evaluate_expression(expression: Expression) -> EvaluationResult:
    """Convenience function to evaluate with precedence."""
    return ExpressionEvaluator().evaluate(expression)
