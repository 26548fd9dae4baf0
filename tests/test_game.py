import logging
import math
import random

import pytest

from highlow_sim.engine.cards import Hand
from highlow_sim.engine.expression import Expression
from highlow_sim.engine.game import (
    GameConfig, GameState, Winner, decide_winner, judge_submission, simulate_match, simulate_round,
)
from highlow_sim.engine.strategy import SmartStrategy
from highlow_sim.engine.validator import GENERAL_FAILURE_MESSAGE

from conftest import ADD, SUB, MUL, DIV, BASIC_OPERATORS


@pytest.fixture
def game():
    return GameState(seed=3)


def _rig(game, target=11, bet=2):
    """Deal a round, then swap in known hands."""
    game.deal_round(target=target, bet=bet)
    game.player_hand = Hand.of([4, 5, 10], BASIC_OPERATORS)
    game.ai_hand = Hand.of([1, 2, 3], BASIC_OPERATORS)


class TestDealing:
    def test_hands_dealt(self, game):
        game.deal_round(target=20, bet=2)

        assert game.target == 20
        assert game.bet == 2
        assert game.round_dealt
        for hand in (game.player_hand, game.ai_hand):
            assert len(hand.number_cards) == 3
            assert [c.operator for c in hand.operator_cards] == BASIC_OPERATORS
            assert len(hand.special_cards) <= 3

    def test_target_from_config(self):
        game = GameState(GameConfig(target_values=[7]), seed=1)
        game.deal_round()
        assert game.target == 7

    def test_deck_shuffle_independent_of_target_choice(self):
        game = GameState(seed=5)
        assert game.deck.rng.getstate() != random.Random(5).getstate()
        assert game.deck.rng.getstate() != game.rng.getstate()

        again = GameState(seed=5)
        assert again.deck.rng.getstate() == game.deck.rng.getstate()

    def test_round_start_logged_in_history(self, game):
        game.deal_round(target=1)
        event = game.history.get_events_by_type("round_start")[0]
        assert event.round_number == 1
        assert event.data["target"] == 1

    def test_cannot_deal_after_match_over(self, game):
        game.player_credits = 0
        with pytest.raises(ValueError):
            game.deal_round()

    def test_cannot_score_before_deal(self, game):
        with pytest.raises(ValueError):
            game.score_round(Expression(), Expression())


class TestBets:
    def test_clamped_to_limits(self, game, caplog):
        with caplog.at_level(logging.WARNING, logger="highlow_sim.engine.game"):
            assert game.clamp_bet(50) == 5
        assert "adjusted" in caplog.text
        assert game.clamp_bet(0) == 1
        assert game.clamp_bet(3) == 3

    def test_clamped_to_credits(self, game):
        game.player_credits = 2
        assert game.clamp_bet(5) == 2


class TestScoring:
    @pytest.mark.parametrize("player, ai, winner", [
        (0, 1, Winner.PLAYER),
        (2, 1, Winner.AI),
        (1.5, 1.5, Winner.DRAW),
        (math.inf, 3, Winner.AI),
        (3, math.inf, Winner.PLAYER),
        (math.inf, math.inf, Winner.INVALID),
    ])
    def test_decide_winner(self, player, ai, winner):
        assert decide_winner(player, ai) == winner

    def test_judge_invalid_submission(self, make_expression):
        hand = Hand.of([4, 5, 10], BASIC_OPERATORS)
        evaluation, distance = judge_submission(make_expression(4, ADD, 5), hand, 9)
        assert distance == math.inf
        assert not evaluation.success
        assert evaluation.error_message.startswith(GENERAL_FAILURE_MESSAGE)
        assert "Number 10" in evaluation.error_message

    def test_judge_failed_evaluation(self, make_expression):
        hand = Hand.of([4, 0], [DIV])
        evaluation, distance = judge_submission(make_expression(4, DIV, 0), hand, 4)
        assert distance == math.inf
        assert evaluation.error_message == "Division by zero."

    def test_player_wins_round(self, game, make_expression):
        _rig(game)
        result = game.score_round(make_expression(10, ADD, 5, SUB, 4),
                                  make_expression(1, ADD, 2, SUB, 3))

        assert result.winner == Winner.PLAYER
        assert result.player_distance == 0
        assert result.ai_distance == 11
        assert result.player_score_change == 2
        assert result.ai_score_change == -2
        assert result.summary() == "Player wins! (+$2)"

        game.apply_result(result)
        assert game.player_credits == 22
        assert game.ai_credits == 18
        assert game.round_number == 1
        assert not game.round_dealt

    def test_invalid_player_submission_loses(self, game, make_expression):
        _rig(game)
        result = game.score_round(make_expression(10, MUL, 5, SUB, 4),
                                  make_expression(1, ADD, 2, SUB, 3))
        assert result.winner == Winner.AI
        assert result.player_error
        assert result.player_expression == "-"
        assert "Player:" in result.detail()

    def test_both_invalid_is_void(self, game, make_expression):
        _rig(game)
        result = game.score_round(make_expression(1), make_expression(2))
        assert result.winner == Winner.INVALID
        game.apply_result(result)
        assert game.player_credits == game.ai_credits == 20


class TestMatch:
    def test_round_is_settled(self, game):
        result = simulate_round(game, target=20, bet=1)
        assert game.round_number == 1
        assert game.player_credits == 20 + result.player_score_change
        assert game.history.get_events_by_type("round_result")[0].data["target"] == 20

    def test_ai_hits_its_best(self, game):
        result = simulate_round(game, ai_strategy=SmartStrategy(), target=20)
        assert math.isfinite(result.ai_distance)

    def test_match_ends(self):
        game, match = simulate_match(GameConfig(max_rounds=5), seed=11)
        assert game.is_over
        assert match.rounds_played <= 5
        assert len(match.rounds) == match.rounds_played
        assert match.winner is not None
        assert match.player_credits + match.ai_credits == 40
        assert game.history.get_events_by_type("match_end")

    def test_match_is_reproducible(self):
        _, first = simulate_match(GameConfig(max_rounds=5), seed=5)
        _, second = simulate_match(GameConfig(max_rounds=5), seed=5)
        assert first.player_credits == second.player_credits
        assert [r.target for r in first.rounds] == [r.target for r in second.rounds]

    def test_winner_by_credits_at_round_limit(self):
        game = GameState(GameConfig(max_rounds=1))
        game.round_number = 1
        game.player_credits = 25
        game.ai_credits = 15
        assert game.is_over
        assert game.winner == Winner.PLAYER
