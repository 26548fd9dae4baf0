import logging
import math

import pytest

from highlow_sim.engine.cards import Hand, SpecialType
from highlow_sim.engine.strategy import (
    BasicStrategy, SmartStrategy, build_fallback_expression, distance_to_target, find_best_expression,
)

from conftest import ADD, SUB, MUL, DIV, BASIC_OPERATORS


class TestSearch:
    def test_exact_hit_with_basic_operators(self, search, validator, evaluator, plain_hand):
        result = search.search(plain_hand, 11)
        expression = result.expression

        assert result.chosen.distance == 0
        assert validator.validate(expression, plain_hand).is_valid
        assert evaluator.evaluate(expression).value == pytest.approx(11)

    def test_forced_multiply_is_placed(self, search, validator):
        hand = Hand.of([3, 6, 2], BASIC_OPERATORS, [SpecialType.MULTIPLY])
        result = search.search(hand, 20)

        assert result.prioritize_special_usage
        assert result.chosen is result.prioritized
        assert result.chosen.value == pytest.approx(20)
        assert result.expression.count_operator(MUL) == 1
        assert validator.validate(result.expression, hand).is_valid

    def test_root_is_placed(self, search, root_hand):
        expression = search.find_best_expression(root_hand, 5)
        assert expression.to_display_string() == "√9 + 2"
        assert expression.count_square_roots() == 1

    @pytest.mark.parametrize("specials, roots, multiplies", [
        ([SpecialType.SQUARE_ROOT, SpecialType.SQUARE_ROOT], 2, 0),
        ([SpecialType.MULTIPLY, SpecialType.MULTIPLY], 0, 2),
        ([SpecialType.SQUARE_ROOT, SpecialType.SQUARE_ROOT,
          SpecialType.MULTIPLY, SpecialType.MULTIPLY], 2, 2),
    ])
    def test_exact_special_counts(self, search, validator, specials, roots, multiplies):
        hand = Hand.of([4, 9, 2], BASIC_OPERATORS, specials)
        result = search.search(hand, 20)
        expression = result.expression

        assert result.chosen is not None
        assert expression.count_square_roots() == roots
        assert expression.count_operator(MUL) == multiplies
        assert validator.validate(expression, hand).is_valid

    def test_more_roots_than_numbers(self, search):
        hand = Hand.of([4, 9], [ADD], [SpecialType.SQUARE_ROOT] * 3)
        result = search.search(hand, 5)
        assert result.chosen is None
        assert result.stats.candidates == 0
        assert result.expression.is_empty()

    def test_every_operator_card_used_once(self, search):
        # A single + card cannot cover both gaps
        hand = Hand.of([4, 5, 10], [ADD, SUB, DIV])
        expression = search.find_best_expression(hand, 19)
        assert expression.count_operator(ADD) <= 1

    def test_duplicate_operator_cards_both_usable(self, search):
        hand = Hand.of([4, 5, 10], [ADD, ADD])
        result = search.search(hand, 19)
        assert result.chosen.distance == 0
        assert result.expression.count_operator(ADD) == 2

    def test_disabled_operator_is_skipped(self, search, plain_hand):
        plain_hand.disable_operator(SUB)
        for target in (1, 11, 20):
            assert search.find_best_expression(plain_hand, target).count_operator(SUB) == 0

    def test_ties_go_to_first_found(self, search):
        # 1 + 1 and 1 - 1 are both one away from 1
        hand = Hand.of([1, 1], [ADD, SUB])
        assert search.find_best_expression(hand, 1).to_display_string() == "1 + 1"

    @pytest.mark.parametrize("numbers, orderings", [
        ([1, 2, 3], 6),
        ([2, 2, 3], 3),
        ([5, 5, 5], 1),
    ])
    def test_duplicate_numbers_are_not_revisited(self, search, numbers, orderings):
        result = search.search(Hand.of(numbers, BASIC_OPERATORS), 10)
        assert result.stats.permutations == orderings

    def test_single_number(self, search):
        expression = search.find_best_expression(Hand.of([7]), 7)
        assert expression.to_display_string() == "7"

    def test_deterministic(self, multiply_hand):
        first = find_best_expression(multiply_hand, 20)
        second = find_best_expression(multiply_hand, 20)
        assert first.to_display_string() == second.to_display_string()

    def test_returned_expression_is_a_copy(self, search, plain_hand):
        result = search.search(plain_hand, 11)
        before = result.expression.to_display_string()
        mutated = result.expression
        mutated.add_operator(ADD)
        mutated.add_number(1)
        assert result.expression.to_display_string() == before
        assert result.chosen.expression.to_display_string() == before


class TestInfeasible:
    @pytest.mark.parametrize("hand", [
        Hand.of([], BASIC_OPERATORS),
        Hand.of([1, 2, 3], [ADD]),
        Hand.of([1, 2], [ADD], [SpecialType.MULTIPLY, SpecialType.MULTIPLY]),
    ])
    def test_returns_empty(self, search, hand):
        result = search.search(hand, 10)
        assert result.chosen is None
        assert result.expression.is_empty()
        assert result.stats.permutations == 0


class TestFallback:
    def test_layout(self):
        hand = Hand.of([3, 4, 5], [SUB, DIV], [SpecialType.SQUARE_ROOT, SpecialType.MULTIPLY])
        assert build_fallback_expression(hand).to_display_string() == "√3 × 4 - 5"

    def test_defaults_to_add(self):
        assert build_fallback_expression(Hand.of([1, 2, 3])).to_display_string() == "1 + 2 + 3"

    def test_multiply_capped_at_gaps(self):
        hand = Hand.of([3, 4], [], [SpecialType.MULTIPLY, SpecialType.MULTIPLY])
        assert build_fallback_expression(hand).to_display_string() == "3 × 4"

    def test_empty_hand(self):
        assert build_fallback_expression(Hand()).is_empty()


class TestStrategies:
    def test_basic_plays_fallback(self, plain_hand):
        assert BasicStrategy().play_turn(plain_hand, 20).to_display_string() == "4 + 5 - 10"

    def test_smart_finds_exact(self, plain_hand, caplog):
        with caplog.at_level(logging.INFO, logger="highlow_sim.engine.strategy"):
            expression = SmartStrategy().play_turn(plain_hand, 11)
        assert find_best_expression(plain_hand, 11).to_display_string() == expression.to_display_string()
        assert "AI chose" in caplog.text
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_smart_falls_back_when_search_fails(self, caplog):
        hand = Hand.of([1, 2, 3], [ADD])
        with caplog.at_level(logging.WARNING, logger="highlow_sim.engine.strategy"):
            expression = SmartStrategy().play_turn(hand, 6)

        assert expression.to_display_string() == "1 + 2 + 3"
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "fallback" in warnings[0].getMessage()

    def test_smart_reports_broken_fallback(self, caplog):
        hand = Hand.of([1, 2, 3], [ADD])
        hand.disable_operator(ADD)
        with caplog.at_level(logging.WARNING, logger="highlow_sim.engine.strategy"):
            SmartStrategy().play_turn(hand, 6)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 2
        assert "also breaks the rules" in warnings[1].getMessage()


def test_distance_to_target():
    assert distance_to_target(18.5, 20) == 1.5
    assert distance_to_target(math.nan, 20) == math.inf
    assert distance_to_target(None, 20) == math.inf
