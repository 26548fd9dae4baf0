#!/usr/bin/env python3
"""
Compare play strategies for Math High-Low simulation.
"""

import logging
import math
import time

from highlow_sim.engine.game import GameConfig, GameState, Winner, simulate_match, simulate_round
from highlow_sim.engine.strategy import BasicStrategy, SmartStrategy


def compare_strategies(num_runs: int = 100, seed: int = None):
    """Play each strategy against the searching AI and compare results."""

    strategies = {
        "Basic (dealt order)": BasicStrategy(),
        "Smart (exhaustive search)": SmartStrategy(),
    }

    print("=" * 70)
    print(f"STRATEGY COMPARISON ({num_runs} matches each, opponent: Smart)")
    print("=" * 70)

    results = {}

    for name, strategy in strategies.items():
        print(f"\nTesting: {name}...", end=" ", flush=True)

        start_time = time.time()
        wins = 0
        losses = 0
        total_rounds = 0
        round_wins = 0
        exact_hits = 0
        distances = []

        for i in range(num_runs):
            _, match = simulate_match(
                config=GameConfig.default(),
                player_strategy=strategy,
                ai_strategy=SmartStrategy(),
                seed=None if seed is None else seed + i,
            )
            if match.winner == Winner.PLAYER:
                wins += 1
            elif match.winner == Winner.AI:
                losses += 1
            total_rounds += match.rounds_played

            for r in match.rounds:
                if r.winner == Winner.PLAYER:
                    round_wins += 1
                if r.player_distance == 0:
                    exact_hits += 1
                if math.isfinite(r.player_distance):
                    distances.append(r.player_distance)

        elapsed = time.time() - start_time
        total_rounds = max(1, total_rounds)

        results[name] = {
            "wins": wins,
            "losses": losses,
            "win_rate": wins / num_runs * 100,
            "round_win_rate": round_wins / total_rounds * 100,
            "exact_rate": exact_hits / total_rounds * 100,
            "avg_distance": sum(distances) / len(distances) if distances else math.inf,
            "time": elapsed,
        }

        print(f"Done ({elapsed:.1f}s)")

    # Print results table
    print("\n" + "=" * 70)
    print("RESULTS")
    print("=" * 70)
    print(f"{'Strategy':<30} {'Win %':>8} {'Round %':>9} {'Exact %':>9} {'Avg Dist':>10}")
    print("-" * 70)

    for name, stats in results.items():
        print(f"{name:<30} {stats['win_rate']:>7.1f}% {stats['round_win_rate']:>8.1f}% "
              f"{stats['exact_rate']:>8.1f}% {stats['avg_distance']:>10.2f}")

    return results


def detailed_single_match(strategy_name: str = "Basic", seed: int = None):
    """Play a single match round by round with detailed output."""

    strategies = {
        "Basic": BasicStrategy(),
        "Smart": SmartStrategy(),
    }

    strategy = strategies.get(strategy_name, BasicStrategy())

    print("=" * 70)
    print(f"DETAILED MATCH - {strategy_name} vs Smart")
    print("=" * 70)

    game = GameState(seed=seed)
    ai = SmartStrategy()

    while not game.is_over:
        result = simulate_round(game, strategy, ai)
        print(f"Round {game.round_number}")
        for line in result.detail().splitlines():
            print(f"  {line}")
        print(f"  {result.summary()}")
        print(f"  Credits: player ${game.player_credits} / AI ${game.ai_credits}")
        print()

    print("=" * 70)
    winner = game.winner
    print(f"MATCH OVER after {game.round_number} rounds - {winner.name if winner else 'UNDECIDED'}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Compare Math High-Low strategies")
    parser.add_argument("--runs", type=int, default=100, help="Number of matches per strategy")
    parser.add_argument("--seed", type=int, default=None, help="Base seed for reproducible matches")
    parser.add_argument("--detailed", type=str, help="Play one detailed match with this strategy")
    parser.add_argument("--verbose", action="store_true", help="Show round-level log output")

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.detailed:
        detailed_single_match(args.detailed, seed=args.seed)
    else:
        compare_strategies(num_runs=args.runs, seed=args.seed)
