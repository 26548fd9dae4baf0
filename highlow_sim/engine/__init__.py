"""
Math High-Low engine components.
"""

from .cards import CardKind, OperatorType, SpecialType, NumberCard, OperatorCard, SpecialCard, Card, Hand
from .expression import Expression, Term
from .validator import ExpressionValidator, ValidationResult, validate_expression
from .evaluator import ExpressionEvaluator, EvaluationResult, evaluate_expression
from .strategy import (ExpressionSearch, SearchResult, BasicStrategy, SmartStrategy,
                       find_best_expression, build_fallback_expression)
from .builder import ExpressionBuilder, BuildStep
from .deck import SlotDeck
from .game import GameConfig, GameState, RoundResult, MatchResult, Winner, simulate_round, simulate_match
