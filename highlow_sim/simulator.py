"""
Main API for Math High-Low simulation.
Provides clean interface for running matches and solving hands.
"""

import math
from dataclasses import dataclass
from typing import Optional, Union

from .engine.cards import Hand, OperatorType, SpecialType
from .engine.evaluator import ExpressionEvaluator
from .engine.validator import ExpressionValidator
from .engine.game import simulate_match, Winner
from .engine.strategy import BasicStrategy, SmartStrategy, ExpressionSearch
from .presets import Preset, StrategyType, get_preset, list_presets, PRESETS


@dataclass
class RoundDetail:
    """Details of a single round."""
    round_number: int
    target: int
    bet: int
    player_expression: str
    player_value: float
    player_distance: float
    ai_expression: str
    ai_value: float
    ai_distance: float
    winner: str

    @property
    def exact_hit(self) -> bool:
        return self.player_distance == 0 or self.ai_distance == 0


@dataclass
class MatchSummary:
    """Summary of a simulated match."""
    winner: Optional[str]
    rounds_played: int
    player_credits: int
    ai_credits: int
    player_round_wins: int
    ai_round_wins: int
    draws: int
    preset_used: str
    round_history: list[RoundDetail] = None

    def __str__(self):
        lines = [
            f"{'='*50}",
            f"  {self.winner or 'UNFINISHED'} - after {self.rounds_played} rounds",
            f"{'='*50}",
            f"  Credits: player ${self.player_credits} / AI ${self.ai_credits}",
            f"  Rounds won: player {self.player_round_wins}, AI {self.ai_round_wins}, draws {self.draws}",
            f"{'='*50}",
        ]
        return "\n".join(lines)

    def to_dict(self):
        return {
            "winner": self.winner,
            "rounds_played": self.rounds_played,
            "player_credits": self.player_credits,
            "ai_credits": self.ai_credits,
            "player_round_wins": self.player_round_wins,
            "ai_round_wins": self.ai_round_wins,
            "draws": self.draws,
            "preset_used": self.preset_used,
        }


@dataclass
class BatchResult:
    """Results from multiple simulated matches."""
    matches: int
    player_wins: int
    ai_wins: int
    draws: int
    player_win_rate: float
    avg_rounds: float
    avg_player_distance: float
    avg_ai_distance: float
    ai_exact_rate: float
    rounds_distribution: dict[int, int]
    preset_used: str

    def __str__(self):
        lines = [
            f"{'='*50}",
            f"  BATCH RESULTS ({self.matches} matches)",
            f"  Preset: {self.preset_used}",
            f"{'='*50}",
            f"  Player wins: {self.player_wins}/{self.matches} ({self.player_win_rate:.1f}%)",
            f"  AI wins: {self.ai_wins}  Draws: {self.draws}",
            f"  Avg rounds per match: {self.avg_rounds:.1f}",
            f"  Avg distance: player {self.avg_player_distance:.2f}, AI {self.avg_ai_distance:.2f}",
            f"  AI exact hits: {self.ai_exact_rate:.1f}% of rounds",
            f"{'='*50}",
        ]
        return "\n".join(lines)

    def to_dict(self):
        return {
            "matches": self.matches,
            "player_wins": self.player_wins,
            "ai_wins": self.ai_wins,
            "draws": self.draws,
            "player_win_rate": self.player_win_rate,
            "avg_rounds": self.avg_rounds,
            "avg_player_distance": self.avg_player_distance,
            "avg_ai_distance": self.avg_ai_distance,
            "ai_exact_rate": self.ai_exact_rate,
            "rounds_distribution": self.rounds_distribution,
            "preset_used": self.preset_used,
        }


@dataclass
class Solution:
    """Best expression for a hand and target."""
    expression: str
    value: float
    distance: float
    valid: bool
    error: str = ""


class Simulator:
    """
    Main simulator class.

    Usage:
        sim = Simulator()
        result = sim.run("standard")
        print(result)

        # Or run many:
        batch = sim.run_batch("hard", runs=100)
        print(batch)
    """

    def get_strategy(self, strategy_type: StrategyType):
        """Get strategy instance from type."""
        strategies = {
            StrategyType.BASIC: BasicStrategy,
            StrategyType.SMART: SmartStrategy,
        }
        return strategies.get(strategy_type, SmartStrategy)()

    def _resolve_preset(self, preset: Union[str, Preset]) -> tuple[Preset, str]:
        if isinstance(preset, str):
            p = get_preset(preset)
            if p is None:
                raise ValueError(f"Unknown preset: {preset}. Available: {list_presets()}")
            return p, preset
        return preset, preset.name

    def get_available_presets(self) -> list[dict]:
        """Get list of available presets with info."""
        return [
            {
                "id": key,
                "name": p.name,
                "description": p.description,
                "player_strategy": p.player_strategy.value,
                "ai_strategy": p.ai_strategy.value,
            }
            for key, p in PRESETS.items()
        ]

    def run(self, preset: Union[str, Preset] = "standard", verbose: bool = False,
            seed: Optional[int] = None, strategy_override: StrategyType = None) -> MatchSummary:
        """
        Run a single match.

        Args:
            preset: Preset name (string) or Preset object
            verbose: Print each round as it is scored
            seed: Seed for dealing and target choice
            strategy_override: StrategyType to use for the player instead of the preset's
        """
        p, preset_name = self._resolve_preset(preset)
        config = p.build_config()

        player_strategy = self.get_strategy(strategy_override or p.player_strategy)
        ai_strategy = self.get_strategy(p.ai_strategy)

        game, match = simulate_match(
            config=config,
            player_strategy=player_strategy,
            ai_strategy=ai_strategy,
            seed=seed,
            preset_name=preset_name,
        )

        round_history = []
        for event in game.history.get_events_by_type("round_result"):
            data = event.data
            round_history.append(RoundDetail(
                round_number=event.round_number,
                target=data["target"],
                bet=data["bet"],
                player_expression=data["player_expression"],
                player_value=data["player_value"],
                player_distance=data["player_distance"],
                ai_expression=data["ai_expression"],
                ai_value=data["ai_value"],
                ai_distance=data["ai_distance"],
                winner=data["winner"],
            ))
            if verbose:
                print(f"Round {event.round_number}: target {data['target']} | "
                      f"player {data['player_expression']} | AI {data['ai_expression']} "
                      f"-> {data['winner']}")

        return MatchSummary(
            winner=match.winner.name if match.winner else None,
            rounds_played=match.rounds_played,
            player_credits=match.player_credits,
            ai_credits=match.ai_credits,
            player_round_wins=sum(1 for r in match.rounds if r.winner == Winner.PLAYER),
            ai_round_wins=sum(1 for r in match.rounds if r.winner == Winner.AI),
            draws=sum(1 for r in match.rounds if r.winner == Winner.DRAW),
            preset_used=preset_name,
            round_history=round_history,
        )

    def run_batch(self, preset: Union[str, Preset] = "standard", runs: int = 100,
                  verbose: bool = False, seed: Optional[int] = None) -> BatchResult:
        """
        Run multiple matches and aggregate results.

        Args:
            preset: Preset name or Preset object
            runs: Number of matches
            verbose: Print progress
            seed: Base seed; match i uses seed + i
        """
        _, preset_name = self._resolve_preset(preset)

        player_wins = 0
        ai_wins = 0
        draws = 0
        total_rounds = 0
        player_distances = []
        ai_distances = []
        ai_exact = 0
        rounds_distribution = {}

        for i in range(runs):
            if verbose and (i + 1) % 10 == 0:
                print(f"  Match {i + 1}/{runs}...")

            summary = self.run(preset, seed=None if seed is None else seed + i)

            if summary.winner == Winner.PLAYER.name:
                player_wins += 1
            elif summary.winner == Winner.AI.name:
                ai_wins += 1
            else:
                draws += 1
            total_rounds += summary.rounds_played
            rounds_distribution[summary.rounds_played] = rounds_distribution.get(summary.rounds_played, 0) + 1

            for detail in summary.round_history:
                if math.isfinite(detail.player_distance):
                    player_distances.append(detail.player_distance)
                if math.isfinite(detail.ai_distance):
                    ai_distances.append(detail.ai_distance)
                if detail.ai_distance == 0:
                    ai_exact += 1

        total_round_count = max(1, total_rounds)
        return BatchResult(
            matches=runs,
            player_wins=player_wins,
            ai_wins=ai_wins,
            draws=draws,
            player_win_rate=player_wins / runs * 100 if runs else 0.0,
            avg_rounds=total_rounds / runs if runs else 0.0,
            avg_player_distance=sum(player_distances) / len(player_distances) if player_distances else math.inf,
            avg_ai_distance=sum(ai_distances) / len(ai_distances) if ai_distances else math.inf,
            ai_exact_rate=ai_exact / total_round_count * 100,
            rounds_distribution=rounds_distribution,
            preset_used=preset_name,
        )

    def solve(self, numbers: list[int], target: int, operators: list[OperatorType] = None,
              specials: list[SpecialType] = None) -> Solution:
        """Best expression for a hand given as plain values."""
        if operators is None:
            operators = [OperatorType.ADD, OperatorType.SUBTRACT, OperatorType.DIVIDE]
        hand = Hand.of(numbers, operators, specials)
        expression = SmartStrategy(ExpressionSearch()).play_turn(hand, target)

        validation = ExpressionValidator().validate(expression, hand)
        evaluation = ExpressionEvaluator().evaluate(expression)
        if not evaluation.success:
            return Solution(expression.to_display_string(), math.nan, math.inf,
                            valid=False, error=evaluation.error_message)
        return Solution(
            expression=expression.to_display_string(),
            value=evaluation.value,
            distance=abs(evaluation.value - target),
            valid=validation.is_valid,
            error=validation.detail,
        )


# Convenience functions
def run(preset: str = "standard", verbose: bool = False) -> MatchSummary:
    """Quick match with default simulator."""
    return Simulator().run(preset, verbose)


def run_batch(preset: str = "standard", runs: int = 100, verbose: bool = False) -> BatchResult:
    """Quick batch run with default simulator."""
    return Simulator().run_batch(preset, runs, verbose)
