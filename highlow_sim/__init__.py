"""
Math High-Low Simulator
"""

from .engine.cards import Hand, NumberCard, OperatorCard, SpecialCard, OperatorType, SpecialType
from .engine.expression import Expression
from .engine.validator import ExpressionValidator, ValidationResult, validate_expression
from .engine.evaluator import ExpressionEvaluator, EvaluationResult, evaluate_expression
from .engine.strategy import ExpressionSearch, find_best_expression, build_fallback_expression

__version__ = "0.1.0"
