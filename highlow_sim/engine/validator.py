"""
Rule checks for a submitted expression.
Stops at the first broken rule and reports why.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field

from .cards import Hand, OperatorType
from .expression import Expression

logger = logging.getLogger(__name__)

GENERAL_FAILURE_MESSAGE = "The expression does not satisfy this hand's rules."


@dataclass
class ValidationResult:
    """Outcome of validating an expression against a hand."""
    is_valid: bool = True
    error_message: str = ""
    warnings: list[str] = field(default_factory=list)  # Detailed reasons

    @property
    def detail(self) -> str:
        return self.warnings[0] if self.warnings else ""

    def mark_invalid(self, detail: str):
        self.is_valid = False
        self.error_message = GENERAL_FAILURE_MESSAGE
        if detail:
            self.warnings.append(detail)


class ExpressionValidator:
    """
    Checks that an expression uses a hand exactly as the rules require.

    Stages, in order:
      1. not empty
      2. complete (one operator between each pair of numbers)
      3. number cards used exactly (as a multiset)
      4. exactly as many √ as root cards held
      5. exactly as many × as forced-multiply cards held
      6. no disabled operator (× is never treated as disabled)
    """

    def validate(self, expression: Expression, hand: Hand) -> ValidationResult:
        result = ValidationResult()

        for check in (self._check_not_empty, self._check_complete, self._check_numbers,
                      self._check_square_roots, self._check_multiplies,
                      self._check_disabled_operators):
            detail = check(expression, hand)
            if detail:
                result.mark_invalid(detail)
                logger.debug("Rejected '%s': %s", expression, detail)
                break

        return result

    def _check_not_empty(self, expression: Expression, hand: Hand) -> str:
        if expression.is_empty():
            return "The expression is empty."
        return ""

    def _check_complete(self, expression: Expression, hand: Hand) -> str:
        if not expression.is_complete():
            return "The expression is not complete."
        return ""

    def _check_numbers(self, expression: Expression, hand: Hand) -> str:
        for n in expression.numbers:
            if not math.isfinite(n):
                return f"Number {n} is not a card value."

        available = Counter(hand.number_values)
        used = Counter(round(n) for n in expression.numbers)

        # Hand values first, in held order, then anything extra the expression used
        for number in [*available, *(n for n in used if n not in available)]:
            have = available.get(number, 0)
            count = used.get(number, 0)
            if count < have:
                return f"Number {number} must be used {have - count} more time(s)."
            if count > have:
                return f"Number {number} was used {count - have} time(s) too many."
        return ""

    def _check_square_roots(self, expression: Expression, hand: Hand) -> str:
        required = hand.square_root_count()
        used = expression.count_square_roots()
        if used < required:
            return f"√ must be used {required - used} more time(s)."
        if used > required:
            return f"√ was used {used - required} time(s) too many."
        return ""

    def _check_multiplies(self, expression: Expression, hand: Hand) -> str:
        required = hand.multiply_count()
        used = expression.count_operator(OperatorType.MULTIPLY)
        if used < required:
            return f"× must be used {required - used} more time(s)."
        if used > required:
            return f"× was used {used - required} time(s) too many."
        return ""

    def _check_disabled_operators(self, expression: Expression, hand: Hand) -> str:
        for op in expression.operators:
            if op != OperatorType.MULTIPLY and not hand.is_operator_enabled(op):
                return f"Disabled operator used: {op.symbol}"
        return ""


def validate_expression(expression: Expression, hand: Hand) -> ValidationResult:
    """Convenience function to validate an expression."""
    return ExpressionValidator().validate(expression, hand)
