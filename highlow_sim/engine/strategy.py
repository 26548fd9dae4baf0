"""
Expression search and play strategies for Math High-Low.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from .cards import Hand, OperatorType
from .expression import Expression
from .validator import ExpressionValidator
from .evaluator import ExpressionEvaluator

logger = logging.getLogger(__name__)


@dataclass
class Candidate:
    """A fully built expression with its value and distance to target."""
    expression: Expression
    value: float
    distance: float


@dataclass
class SearchStats:
    permutations: int = 0
    candidates: int = 0
    invalid: int = 0
    failed: int = 0
    faults: int = 0


@dataclass
class SearchResult:
    best: Optional[Candidate] = None
    prioritized: Optional[Candidate] = None
    prioritize_special_usage: bool = False
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def chosen(self) -> Optional[Candidate]:
        if self.prioritize_special_usage and self.prioritized is not None:
            return self.prioritized
        return self.best

    @property
    def expression(self) -> Expression:
        """Independent copy of the chosen expression (empty if none)."""
        chosen = self.chosen
        return chosen.expression.clone() if chosen else Expression()


@dataclass
class _SearchContext:
    """State owned by a single search call."""
    hand: Hand
    target: int
    required_roots: int
    required_multiplies: int
    operator_pool: list[OperatorType]
    result: SearchResult

    @property
    def slots(self) -> int:
        return max(0, len(self.hand.number_cards) - 1)


class ExpressionSearch:
    """
    Exhaustive search for the expression closest to a target.

    Explores every distinct ordering of the hand's numbers, every way to
    place the required √, and every assignment of the forced × and the
    held operator cards to the gaps. Each operator card is used at most
    once; forced × never draws on the operator cards.
    """

    def __init__(self, validator: ExpressionValidator = None,
                 evaluator: ExpressionEvaluator = None):
        self.validator = validator or ExpressionValidator()
        self.evaluator = evaluator or ExpressionEvaluator()

    def find_best_expression(self, hand: Hand, target: int) -> Expression:
        return self.search(hand, target).expression

    def search(self, hand: Hand, target: int) -> SearchResult:
        required_roots = hand.square_root_count()
        required_multiplies = hand.multiply_count()
        result = SearchResult(prioritize_special_usage=required_roots > 0 or required_multiplies > 0)
        ctx = _SearchContext(
            hand=hand,
            target=target,
            required_roots=required_roots,
            required_multiplies=required_multiplies,
            operator_pool=hand.enabled_operator_cards(),
            result=result,
        )

        logger.debug("Searching target=%s numbers=%s operators=%s √=%d ×=%d",
                     target, hand.number_values, [op.symbol for op in ctx.operator_pool],
                     required_roots, required_multiplies)

        if not hand.number_cards:
            return result

        if required_multiplies > ctx.slots:
            logger.debug("Infeasible: %d forced × for %d gaps", required_multiplies, ctx.slots)
            return result
        if ctx.slots - required_multiplies > len(ctx.operator_pool):
            logger.debug("Infeasible: %d gaps need operator cards, %d held",
                         ctx.slots - required_multiplies, len(ctx.operator_pool))
            return result

        self._permute(ctx, Counter(hand.number_values), [])

        stats = result.stats
        logger.debug("Search done: %d orderings, %d candidates (%d invalid, %d failed, %d faults)",
                     stats.permutations, stats.candidates, stats.invalid, stats.failed, stats.faults)
        return result

    # --- Stage 1: distinct orderings of the numbers ---

    def _permute(self, ctx: _SearchContext, remaining: Counter, current: list[int]) -> None:
        if len(current) == len(ctx.hand.number_cards):
            ctx.result.stats.permutations += 1
            self._place_roots(ctx, current, 0, [])
            return

        for number in list(remaining):
            if remaining[number] <= 0:
                continue
            remaining[number] -= 1
            current.append(number)
            self._permute(ctx, remaining, current)
            current.pop()
            remaining[number] += 1

    # --- Stage 2: which numbers get a √ ---

    def _place_roots(self, ctx: _SearchContext, numbers: list[int], index: int,
                     roots: list[bool]) -> None:
        placed = sum(roots)
        if index == len(numbers):
            if placed == ctx.required_roots:
                self._assign_operators(ctx, numbers, roots, [], list(ctx.operator_pool), 0)
            return

        remaining = ctx.required_roots - placed
        positions_left = len(numbers) - index
        most = min(1, remaining)
        least = max(0, remaining - (positions_left - 1))
        if least > most:
            return

        for count in range(most, least - 1, -1):
            roots.append(count > 0)
            self._place_roots(ctx, numbers, index + 1, roots)
            roots.pop()

    # --- Stage 3: operators in the gaps ---

    def _assign_operators(self, ctx: _SearchContext, numbers: list[int], roots: list[bool],
                          operators: list[OperatorType], pool: list[OperatorType],
                          multiply_used: int) -> None:
        index = len(operators)
        slots_left = ctx.slots - index
        if ctx.required_multiplies - multiply_used > slots_left:
            return

        if index == ctx.slots:
            if multiply_used == ctx.required_multiplies:
                self._consider(ctx, numbers, roots, operators)
            return

        if multiply_used < ctx.required_multiplies:
            operators.append(OperatorType.MULTIPLY)
            self._assign_operators(ctx, numbers, roots, operators, pool, multiply_used + 1)
            operators.pop()

        for i in range(len(pool)):
            op = pool.pop(i)
            operators.append(op)
            self._assign_operators(ctx, numbers, roots, operators, pool, multiply_used)
            operators.pop()
            pool.insert(i, op)

    def _consider(self, ctx: _SearchContext, numbers: list[int], roots: list[bool],
                  operators: list[OperatorType]) -> None:
        stats = ctx.result.stats
        stats.candidates += 1
        expression = build_expression(numbers, roots, operators)

        validation = self.validator.validate(expression, ctx.hand)
        if not validation.is_valid:
            stats.invalid += 1
            return

        evaluation = self.evaluator.evaluate(expression)
        if not evaluation.success:
            if evaluation.internal_fault:
                stats.faults += 1
            else:
                stats.failed += 1
            return

        distance = abs(evaluation.value - ctx.target)
        result = ctx.result

        # Strict < so the first candidate found wins ties
        if result.prioritize_special_usage and uses_all_required_specials(expression, ctx.hand):
            if result.prioritized is None or distance < result.prioritized.distance:
                result.prioritized = Candidate(expression.clone(), evaluation.value, distance)

        if result.best is None or distance < result.best.distance:
            result.best = Candidate(expression.clone(), evaluation.value, distance)


def build_expression(numbers: list[int], roots: list[bool],
                     operators: list[OperatorType]) -> Expression:
    expression = Expression()
    for i, number in enumerate(numbers):
        expression.add_number(number, roots[i])
        if i < len(operators):
            expression.add_operator(operators[i])
    return expression


def uses_all_required_specials(expression: Expression, hand: Hand) -> bool:
    if expression is None:
        return False
    return (expression.count_square_roots() == hand.square_root_count()
            and expression.count_operator(OperatorType.MULTIPLY) == hand.multiply_count())


def build_fallback_expression(hand: Hand) -> Expression:
    """
    Deterministic expression straight from the hand.

    Numbers in held order, √ on the first ones, then × in the first gaps,
    then operator cards in held order, then + once those run out. May
    still break the rules for degenerate hands.
    """
    fallback = Expression()
    numbers = hand.number_values
    if not numbers:
        return fallback

    roots_left = hand.square_root_count()
    multiplies_left = min(hand.multiply_count(), max(0, len(numbers) - 1))
    operator_queue = [c.operator for c in hand.operator_cards]

    for i, number in enumerate(numbers):
        apply_root = roots_left > 0
        if apply_root:
            roots_left -= 1
        fallback.add_number(number, apply_root)

        if i < len(numbers) - 1:
            if multiplies_left > 0:
                op = OperatorType.MULTIPLY
                multiplies_left -= 1
            elif operator_queue:
                op = operator_queue.pop(0)
            else:
                op = OperatorType.ADD
            fallback.add_operator(op)

    return fallback


def find_best_expression(hand: Hand, target: int) -> Expression:
    """Convenience function to run a fresh search."""
    return ExpressionSearch().find_best_expression(hand, target)


def distance_to_target(value: float, target: int) -> float:
    if value is None or math.isnan(value):
        return math.inf
    return abs(value - target)


class BasicStrategy:
    """
    Naive strategy: plays the numbers in the order they were dealt.
    Used as a baseline opponent in simulations.
    """

    name = "Basic"

    def play_turn(self, hand: Hand, target: int) -> Expression:
        return build_fallback_expression(hand)


class SmartStrategy:
    """
    Searches every legal arrangement and plays the closest one.
    Falls back to the naive construction if the search comes up empty.
    """

    name = "Smart"

    def __init__(self, search: ExpressionSearch = None):
        self.search = search or ExpressionSearch()
        self.validator = self.search.validator

    def play_turn(self, hand: Hand, target: int) -> Expression:
        expression = self.search.find_best_expression(hand, target)

        validation = self.validator.validate(expression, hand)
        if not validation.is_valid:
            logger.warning("Search result is invalid (%s); using fallback", validation.detail)
            expression = build_fallback_expression(hand)

            fallback_validation = self.validator.validate(expression, hand)
            if not fallback_validation.is_valid:
                logger.warning("Fallback expression also breaks the rules: %s",
                               fallback_validation.detail)

        logger.info("AI chose: %s", expression)
        return expression
