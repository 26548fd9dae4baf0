"""
Card model for Math High-Low.
Number, operator and special cards, plus the hand each side holds for a round.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)


class CardKind(Enum):
    NUMBER = "Number"
    OPERATOR = "Operator"
    SPECIAL = "Special"


class OperatorType(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def precedence(self) -> int:
        """Binding strength: × and ÷ bind tighter than + and -."""
        if self in (OperatorType.MULTIPLY, OperatorType.DIVIDE):
            return 2
        return 1


class SpecialType(Enum):
    MULTIPLY = "×"       # Forces a × into the expression
    SQUARE_ROOT = "√"    # Unary root on one number

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def is_unary(self) -> bool:
        return self == SpecialType.SQUARE_ROOT


MIN_NUMBER = 0
MAX_NUMBER = 10


@dataclass(eq=False)
class NumberCard:
    value: int

    def __post_init__(self):
        self.value = max(MIN_NUMBER, min(MAX_NUMBER, int(self.value)))

    @property
    def kind(self) -> CardKind:
        return CardKind.NUMBER

    @property
    def display_text(self) -> str:
        return str(self.value)

    def clone(self) -> "NumberCard":
        return NumberCard(self.value)

    def has_same_value(self, other: Optional["NumberCard"]) -> bool:
        return other is not None and self.value == other.value

    def is_same_type(self, other) -> bool:
        return other is not None and self.kind == other.kind

    def __str__(self) -> str:
        return self.display_text

    def __repr__(self) -> str:
        return f"NumberCard({self.value})"


@dataclass(eq=False)
class OperatorCard:
    operator: OperatorType

    @property
    def kind(self) -> CardKind:
        return CardKind.OPERATOR

    @property
    def display_text(self) -> str:
        return self.operator.symbol

    def clone(self) -> "OperatorCard":
        return OperatorCard(self.operator)

    def is_same_type(self, other) -> bool:
        return other is not None and self.kind == other.kind

    def __str__(self) -> str:
        return self.display_text

    def __repr__(self) -> str:
        return f"OperatorCard({self.display_text})"


@dataclass(eq=False)
class SpecialCard:
    special: SpecialType
    consumed: bool = False

    @property
    def kind(self) -> CardKind:
        return CardKind.SPECIAL

    @property
    def display_text(self) -> str:
        return self.special.symbol

    @property
    def is_unary(self) -> bool:
        return self.special.is_unary

    def clone(self) -> "SpecialCard":
        """Copy of this card with its usage reset."""
        return SpecialCard(self.special)

    def consume(self) -> None:
        self.consumed = True

    def reset_usage(self) -> None:
        self.consumed = False

    def apply_square_root(self, value: float) -> float:
        """Root of value, or NaN for negatives."""
        if self.special != SpecialType.SQUARE_ROOT:
            logger.warning("%r is not a square root card", self)
            return value
        if value < 0:
            logger.warning("Cannot take the square root of %s", value)
            return math.nan
        return math.sqrt(value)

    def is_same_type(self, other) -> bool:
        return other is not None and self.kind == other.kind

    def __str__(self) -> str:
        return self.display_text

    def __repr__(self) -> str:
        state = ", consumed" if self.consumed else ""
        return f"SpecialCard({self.display_text}{state})"


Card = Union[NumberCard, OperatorCard, SpecialCard]


@dataclass
class Hand:
    """Cards one side holds for the current round."""
    number_cards: list[NumberCard] = field(default_factory=list)
    operator_cards: list[OperatorCard] = field(default_factory=list)
    special_cards: list[SpecialCard] = field(default_factory=list)
    disabled_operators: set[OperatorType] = field(default_factory=set)

    @classmethod
    def of(cls, numbers: list[int] = None, operators: list[OperatorType] = None,
           specials: list[SpecialType] = None) -> "Hand":
        """Build a hand straight from values and kinds."""
        hand = cls()
        for value in numbers or []:
            hand.add_card(NumberCard(value))
        for op in operators or []:
            hand.add_card(OperatorCard(op))
        for special in specials or []:
            hand.add_card(SpecialCard(special))
        return hand

    def clear(self) -> None:
        self.number_cards.clear()
        self.operator_cards.clear()
        self.special_cards.clear()
        self.disabled_operators.clear()

    def add_card(self, card: Card) -> None:
        if card.kind == CardKind.NUMBER:
            self.number_cards.append(card)
        elif card.kind == CardKind.OPERATOR:
            self.operator_cards.append(card)
        elif card.kind == CardKind.SPECIAL:
            self.special_cards.append(card)

    def remove_card(self, card: Card) -> bool:
        """Remove a specific card. Returns True if it was held."""
        pile = self._pile_for(card)
        for i, held in enumerate(pile):
            if held is card:
                del pile[i]
                return True
        return False

    def holds(self, card: Card) -> bool:
        return any(held is card for held in self._pile_for(card))

    def _pile_for(self, card: Card) -> list:
        if card.kind == CardKind.NUMBER:
            return self.number_cards
        if card.kind == CardKind.OPERATOR:
            return self.operator_cards
        return self.special_cards

    @property
    def cards(self) -> list[Card]:
        return [*self.number_cards, *self.operator_cards, *self.special_cards]

    @property
    def number_values(self) -> list[int]:
        return [c.value for c in self.number_cards]

    def multiply_count(self) -> int:
        """Number of × the expression is forced to use."""
        return sum(1 for c in self.special_cards if c.special == SpecialType.MULTIPLY)

    def square_root_count(self) -> int:
        """Number of √ the expression is forced to use."""
        return sum(1 for c in self.special_cards if c.special == SpecialType.SQUARE_ROOT)

    def is_operator_enabled(self, op: OperatorType) -> bool:
        return op not in self.disabled_operators

    def disable_operator(self, op: OperatorType) -> None:
        self.disabled_operators.add(op)

    def enabled_operator_cards(self) -> list[OperatorType]:
        """Every enabled operator card held, duplicates kept, in held order."""
        return [c.operator for c in self.operator_cards if self.is_operator_enabled(c.operator)]

    def available_operators(self) -> list[OperatorType]:
        """Distinct enabled operator kinds held."""
        seen = []
        for op in self.enabled_operator_cards():
            if op not in seen:
                seen.append(op)
        return seen

    def total_card_count(self) -> int:
        return len(self.number_cards) + len(self.operator_cards) + len(self.special_cards)

    def is_empty(self) -> bool:
        return self.total_card_count() == 0

    def __str__(self) -> str:
        return ", ".join(str(c) for c in self.cards)

    def __repr__(self) -> str:
        return (f"Hand({len(self.number_cards)} numbers, {len(self.operator_cards)} operators, "
                f"{len(self.special_cards)} specials)")
