#!/usr/bin/env python3
"""
Demo script for Math High-Low simulation.
Shows evaluation, validation, the expression search and a full match.
"""

import logging

from highlow_sim.engine.cards import Hand, OperatorType, SpecialType
from highlow_sim.engine.expression import Expression
from highlow_sim.engine.evaluator import ExpressionEvaluator
from highlow_sim.engine.validator import validate_expression
from highlow_sim.engine.strategy import ExpressionSearch
from highlow_sim.engine.game import GameState, simulate_round
from highlow_sim.simulator import Simulator

ADD, SUB, MUL, DIV = OperatorType.ADD, OperatorType.SUBTRACT, OperatorType.MULTIPLY, OperatorType.DIVIDE


def _expression(*parts) -> Expression:
    """Build from alternating numbers and operators; "√4" style strings get a root."""
    expression = Expression()
    for part in parts:
        if isinstance(part, OperatorType):
            expression.add_operator(part)
        elif isinstance(part, str) and part.startswith("√"):
            expression.add_number(float(part[1:]), has_square_root=True)
        else:
            expression.add_number(part)
    return expression


def demo_evaluation():
    """Demonstrate precedence and arithmetic failures."""
    print("=" * 60)
    print("EVALUATION DEMO")
    print("=" * 60)

    evaluator = ExpressionEvaluator()
    samples = [
        _expression(4, MUL, 3, ADD, 2),
        _expression(2, ADD, 3, MUL, 4),
        _expression(8, DIV, 2, DIV, 2),
        _expression("√9", SUB, 1),
        _expression(5, DIV, 0),
    ]

    for expression in samples:
        precedence = evaluator.evaluate(expression)
        simple = evaluator.evaluate_simple(expression)
        if precedence.success:
            print(f"\n{expression}")
            print(f"  With precedence: {precedence.value:g}")
            print(f"  Left to right:   {simple.value:g}")
        else:
            print(f"\n{expression}")
            print(f"  Failed: {precedence.error_message}")


def demo_validation():
    """Demonstrate the rule checks against a hand."""
    print("\n" + "=" * 60)
    print("VALIDATION DEMO")
    print("=" * 60)

    hand = Hand.of([4, 5, 1], [ADD, SUB, DIV], [SpecialType.MULTIPLY])
    print(f"\nHand: {hand}")

    for expression in [
        _expression(4, MUL, 5, ADD, 1),
        _expression(4, ADD, 5, ADD, 1),
        _expression(4, MUL, 5),
        _expression(4, MUL, 5, SUB),
    ]:
        result = validate_expression(expression, hand)
        status = "OK" if result.is_valid else f"REJECTED - {result.detail}"
        print(f"  {str(expression):<16} {status}")


def demo_search():
    """Demonstrate the exhaustive expression search."""
    print("\n" + "=" * 60)
    print("SEARCH DEMO")
    print("=" * 60)

    search = ExpressionSearch()
    hands = [
        (Hand.of([4, 5, 10], [ADD, SUB, DIV]), 20),
        (Hand.of([9, 2, 7], [ADD, SUB, DIV], [SpecialType.SQUARE_ROOT]), 1),
        (Hand.of([3, 6, 8, 2], [ADD, SUB, DIV], [SpecialType.MULTIPLY]), 20),
    ]

    for hand, target in hands:
        result = search.search(hand, target)
        chosen = result.chosen
        print(f"\nHand: {hand} | Target: {target}")
        if chosen is None:
            print("  No legal expression")
            continue
        print(f"  Best: {chosen.expression} = {chosen.value:.2f} (off by {chosen.distance:.2f})")
        print(f"  Searched {result.stats.permutations} orderings, {result.stats.candidates} candidates")


def demo_single_round():
    """Demonstrate one dealt round between the naive player and the AI."""
    print("\n" + "=" * 60)
    print("SINGLE ROUND DEMO")
    print("=" * 60)

    game = GameState(seed=7)
    result = simulate_round(game, bet=3)

    print(f"\n{result.detail()}")
    print(f"  {result.summary()}")
    print(f"  Credits: player ${game.player_credits} / AI ${game.ai_credits}")


def demo_match():
    """Demonstrate a full match through the simulator."""
    print("\n" + "=" * 60)
    print("FULL MATCH DEMO")
    print("=" * 60)

    summary = Simulator().run("standard", seed=42)
    print(summary)

    for detail in summary.round_history[:5]:
        print(f"  Round {detail.round_number}: target {detail.target} -> {detail.winner}")


def demo_batch():
    """Demonstrate a small batch of matches."""
    print("\n" + "=" * 60)
    print("BATCH DEMO (20 matches)")
    print("=" * 60)

    print(Simulator().run_batch("easy", runs=20, seed=0))


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    demo_evaluation()
    demo_validation()
    demo_search()
    demo_single_round()
    demo_match()
    demo_batch()
