"""
Game state and round loop for Math High-Low.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from .cards import Card, CardKind, Hand, OperatorCard, OperatorType
from .deck import SlotDeck
from .expression import Expression
from .validator import ExpressionValidator
from .evaluator import ExpressionEvaluator, EvaluationResult
from .strategy import BasicStrategy, SmartStrategy, distance_to_target
from .history import MatchHistory

logger = logging.getLogger(__name__)

DISTANCE_TOLERANCE = 1e-6


class Winner(Enum):
    PLAYER = auto()
    AI = auto()
    DRAW = auto()
    INVALID = auto()  # Neither side produced a legal expression


@dataclass
class GameConfig:
    """Configuration for a match."""
    # Dealing
    initial_card_count: int = 3         # Slot draws before topping up numbers
    number_cards_per_hand: int = 3
    number_copies_per_value: int = 4
    multiply_cards_per_round: int = 2
    square_root_cards_per_round: int = 2
    basic_operators: list = field(default_factory=lambda: [
        OperatorType.ADD, OperatorType.SUBTRACT, OperatorType.DIVIDE
    ])
    # Rules
    starting_credits: int = 20
    min_bet: int = 1
    max_bet: int = 5
    target_values: list = field(default_factory=lambda: [1, 20])
    max_rounds: int = 100

    @classmethod
    def default(cls) -> "GameConfig":
        return cls()

    @classmethod
    def easy(cls) -> "GameConfig":
        return cls(starting_credits=30, target_values=[5, 10])

    @classmethod
    def hard(cls) -> "GameConfig":
        return cls(starting_credits=15, min_bet=2, max_bet=10, target_values=[1, 50, 100])


@dataclass
class RoundResult:
    """Outcome of one scored round."""
    target: int
    bet: int
    player_expression: str = "-"
    player_value: float = math.nan
    player_distance: float = math.inf
    player_error: str = ""
    ai_expression: str = "-"
    ai_value: float = math.nan
    ai_distance: float = math.inf
    ai_error: str = ""
    winner: Winner = Winner.INVALID
    player_score_change: int = 0
    ai_score_change: int = 0

    def summary(self) -> str:
        if self.winner == Winner.PLAYER:
            return f"Player wins! (+${self.player_score_change})"
        if self.winner == Winner.AI:
            return f"AI wins! (-${-self.player_score_change})"
        if self.winner == Winner.DRAW:
            return "Draw"
        return "Round void"

    def detail(self) -> str:
        lines = [f"Target: {self.target} | Bet: ${self.bet}"]
        for label, expr, value, distance, error in (
            ("Player", self.player_expression, self.player_value, self.player_distance, self.player_error),
            ("AI", self.ai_expression, self.ai_value, self.ai_distance, self.ai_error),
        ):
            if error:
                lines.append(f"{label}: {error}")
            else:
                lines.append(f"{label}: {expr} = {value:.2f} (off by {distance:.2f})")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "target": self.target,
            "bet": self.bet,
            "player_expression": self.player_expression,
            "player_value": self.player_value,
            "player_distance": self.player_distance,
            "player_error": self.player_error,
            "ai_expression": self.ai_expression,
            "ai_value": self.ai_value,
            "ai_distance": self.ai_distance,
            "ai_error": self.ai_error,
            "winner": self.winner.name,
            "player_score_change": self.player_score_change,
        }


@dataclass
class MatchResult:
    """Result of a complete match."""
    winner: Optional[Winner]
    rounds_played: int
    player_credits: int
    ai_credits: int
    rounds: list[RoundResult] = field(default_factory=list)


def judge_submission(expression: Expression, hand: Hand, target: int,
                     validator: ExpressionValidator = None,
                     evaluator: ExpressionEvaluator = None) -> tuple[EvaluationResult, float]:
    """
    Validate then evaluate one side's submission.
    A rejected submission scores an infinite distance.
    """
    validator = validator or ExpressionValidator()
    evaluator = evaluator or ExpressionEvaluator()

    validation = validator.validate(expression, hand)
    if not validation.is_valid:
        message = validation.error_message
        if validation.detail:
            message = f"{message} ({validation.detail})"
        return EvaluationResult.failure(message), math.inf

    evaluation = evaluator.evaluate(expression)
    if not evaluation.success:
        return evaluation, math.inf
    return evaluation, distance_to_target(evaluation.value, target)


def decide_winner(player_distance: float, ai_distance: float) -> Winner:
    if math.isinf(player_distance) and math.isinf(ai_distance):
        return Winner.INVALID
    if math.isclose(player_distance, ai_distance, abs_tol=DISTANCE_TOLERANCE):
        return Winner.DRAW
    if player_distance < ai_distance:
        return Winner.PLAYER
    return Winner.AI


class GameState:
    """
    Tracks the full state of a Math High-Low match.
    """

    def __init__(self, config: GameConfig = None, seed: Optional[int] = None,
                 preset_name: str = "standard"):
        self.config = config or GameConfig()
        self.rng = random.Random(seed)
        self.deck = SlotDeck.from_config(self.config, seed=self.rng.randrange(2**32))
        self.history = MatchHistory(preset_name=preset_name)

        self.player_credits = self.config.starting_credits
        self.ai_credits = self.config.starting_credits

        self.player_hand = Hand()
        self.ai_hand = Hand()
        self.round_number = 0
        self.target: Optional[int] = None
        self.bet = self.config.min_bet
        self.round_dealt = False

        self.validator = ExpressionValidator()
        self.evaluator = ExpressionEvaluator()
        self.results: list[RoundResult] = []

    @property
    def is_over(self) -> bool:
        return (self.player_credits <= 0 or self.ai_credits <= 0
                or self.round_number >= self.config.max_rounds)

    @property
    def winner(self) -> Optional[Winner]:
        """Match winner once the match is over."""
        if not self.is_over:
            return None
        if self.player_credits <= 0:
            return Winner.AI
        if self.ai_credits <= 0:
            return Winner.PLAYER
        if self.player_credits == self.ai_credits:
            return Winner.DRAW
        return Winner.PLAYER if self.player_credits > self.ai_credits else Winner.AI

    def clamp_bet(self, bet: int) -> int:
        """Keep a bet within table limits and what the player can afford."""
        allowed = max(self.config.min_bet, min(bet, self.config.max_bet))
        allowed = min(allowed, self.player_credits)
        if allowed != bet:
            logger.warning("Bet of %s adjusted to %s (limit %s, credits %s)",
                           bet, allowed, self.config.max_bet, self.player_credits)
        return allowed

    def deal_round(self, target: Optional[int] = None, bet: Optional[int] = None) -> None:
        """Start a new round: fresh deck, fresh hands, target and bet set."""
        if self.is_over:
            raise ValueError("The match is over")

        self.player_hand.clear()
        self.ai_hand.clear()
        self.deck.build()

        self.target = target if target is not None else self.rng.choice(self.config.target_values)
        self.bet = self.clamp_bet(bet if bet is not None else self.config.min_bet)

        self._deal_hand(self.player_hand)
        self._deal_hand(self.ai_hand)
        self.round_dealt = True

        self.history.add_round_start(
            round_number=self.round_number + 1,
            target=self.target,
            bet=self.bet,
            player_hand=str(self.player_hand),
            ai_hand=str(self.ai_hand),
        )
        logger.debug("Round %d dealt: target=%s player=[%s] ai=[%s]", self.round_number + 1,
                     self.target, self.player_hand, self.ai_hand)

    def _deal_hand(self, hand: Hand) -> None:
        for op in self.config.basic_operators:
            hand.add_card(OperatorCard(op))

        for _ in range(self.config.initial_card_count):
            self._draw_into(hand)

        # Keep drawing until the hand has its full set of numbers
        while len(hand.number_cards) < self.config.number_cards_per_hand:
            self._draw_into(hand)

    def _draw_into(self, hand: Hand) -> Card:
        card = self.deck.draw()
        hand.add_card(card)
        if card.kind == CardKind.SPECIAL:
            logger.debug("Special card dealt: %s", card)
        return card

    def score_round(self, player_expression: Expression, ai_expression: Expression) -> RoundResult:
        """Judge both submissions for the current round."""
        if not self.round_dealt:
            raise ValueError("No round has been dealt")

        player_eval, player_distance = judge_submission(
            player_expression, self.player_hand, self.target, self.validator, self.evaluator)
        ai_eval, ai_distance = judge_submission(
            ai_expression, self.ai_hand, self.target, self.validator, self.evaluator)

        result = RoundResult(target=self.target, bet=self.bet)
        if player_eval.success:
            result.player_expression = player_expression.to_display_string()
            result.player_value = player_eval.value
        else:
            result.player_error = player_eval.error_message
        if ai_eval.success:
            result.ai_expression = ai_expression.to_display_string()
            result.ai_value = ai_eval.value
        else:
            result.ai_error = ai_eval.error_message
        result.player_distance = player_distance
        result.ai_distance = ai_distance

        result.winner = decide_winner(player_distance, ai_distance)
        if result.winner == Winner.PLAYER:
            result.player_score_change = self.bet
        elif result.winner == Winner.AI:
            result.player_score_change = -self.bet
        result.ai_score_change = -result.player_score_change

        return result

    def apply_result(self, result: RoundResult) -> None:
        """Settle credits and close the round."""
        self.player_credits += result.player_score_change
        self.ai_credits += result.ai_score_change
        self.round_number += 1
        self.round_dealt = False
        self.results.append(result)

        self.history.add_round_result(self.round_number, result.to_dict())
        logger.info("Round %d: %s", self.round_number, result.summary())

        if self.is_over:
            winner = self.winner
            self.history.add_match_end(
                round_number=self.round_number,
                winner=winner.name if winner else None,
                player_credits=self.player_credits,
                ai_credits=self.ai_credits,
            )


def simulate_round(game: GameState, player_strategy=None, ai_strategy=None,
                   target: Optional[int] = None, bet: Optional[int] = None) -> RoundResult:
    """Deal, let both sides play, score and settle one round."""
    if player_strategy is None:
        player_strategy = BasicStrategy()
    if ai_strategy is None:
        ai_strategy = SmartStrategy()

    game.deal_round(target=target, bet=bet)
    player_expression = player_strategy.play_turn(game.player_hand, game.target)
    ai_expression = ai_strategy.play_turn(game.ai_hand, game.target)

    result = game.score_round(player_expression, ai_expression)
    game.apply_result(result)
    return result


def simulate_match(config: GameConfig = None, player_strategy=None, ai_strategy=None,
                   seed: Optional[int] = None, preset_name: str = "standard",
                   bet: Optional[int] = None) -> tuple[GameState, MatchResult]:
    """Play rounds until one side is out of credits or the round limit is hit."""
    game = GameState(config=config, seed=seed, preset_name=preset_name)

    while not game.is_over:
        simulate_round(game, player_strategy, ai_strategy, bet=bet)

    match = MatchResult(
        winner=game.winner,
        rounds_played=game.round_number,
        player_credits=game.player_credits,
        ai_credits=game.ai_credits,
        rounds=list(game.results),
    )
    return game, match
