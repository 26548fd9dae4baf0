"""
Card-by-card expression building for a human player.
Enforces turn order (number, operator, number, ...) and card usage as cards are picked.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .cards import Card, CardKind, Hand, NumberCard, OperatorCard, OperatorType, SpecialCard, SpecialType
from .expression import Expression

logger = logging.getLogger(__name__)


@dataclass
class BuildStep:
    """Outcome of picking one card."""
    accepted: bool
    message: str = ""


class ExpressionBuilder:
    """Builds one side's expression from card picks."""

    def __init__(self, hand: Hand = None):
        self.hand: Optional[Hand] = None
        self._expression = Expression()
        self._used: set[int] = set()
        self._pending_root: Optional[SpecialCard] = None
        if hand is not None:
            self.set_hand(hand)

    @property
    def expression(self) -> Expression:
        return self._expression.clone()

    @property
    def root_pending(self) -> bool:
        return self._pending_root is not None

    def set_hand(self, hand: Hand) -> None:
        self.hand = hand
        self.reset()

    def reset(self) -> None:
        """Start the expression over and return every card to the hand."""
        self._expression.clear()
        self._used.clear()
        self._pending_root = None
        if self.hand is not None:
            for card in self.hand.special_cards:
                card.reset_usage()

    def is_used(self, card: Card) -> bool:
        return id(card) in self._used

    def play_card(self, card: Card) -> BuildStep:
        if card is None:
            return BuildStep(False, "No card selected.")
        if self.hand is None:
            return BuildStep(False, "No hand has been dealt.")
        if not self.hand.holds(card):
            logger.warning("Card %r is not in this hand", card)
            return BuildStep(False, "That card is not in your hand.")
        if self.is_used(card):
            return BuildStep(False, "That card has already been used.")

        if card.kind == CardKind.NUMBER:
            return self._play_number(card)
        if card.kind == CardKind.OPERATOR:
            return self._play_operator(card)
        if card.special == SpecialType.MULTIPLY:
            return self._play_multiply(card)
        return self._play_square_root(card)

    def _play_number(self, card: NumberCard) -> BuildStep:
        if not self._expression.expecting_number():
            return BuildStep(False, "Pick an operator card now.")

        apply_root = self._pending_root is not None
        self._expression.add_number(card.value, apply_root)
        self._used.add(id(card))

        if apply_root:
            self._pending_root.consume()
            self._used.add(id(self._pending_root))
            self._pending_root = None

        if not self.has_unused_numbers():
            return BuildStep(True, self.completion_status())
        return BuildStep(True, "Pick an operator card.")

    def _play_operator(self, card: OperatorCard) -> BuildStep:
        if self._expression.is_empty() or self._expression.expecting_number():
            return BuildStep(False, "Pick a number card now.")
        if not self.has_unused_numbers():
            return BuildStep(False, "No numbers left to follow an operator. Submit when ready.")

        self._expression.add_operator(card.operator)
        self._used.add(id(card))
        return BuildStep(True, "Pick a number card.")

    def _play_multiply(self, card: SpecialCard) -> BuildStep:
        if self._expression.is_empty() or self._expression.expecting_number():
            return BuildStep(False, "Place a number before using ×.")
        if not self.has_unused_numbers():
            return BuildStep(False, "No numbers left, so × cannot be used.")

        self._expression.add_operator(OperatorType.MULTIPLY)
        card.consume()
        self._used.add(id(card))
        return BuildStep(True, "Pick a number card.")

    def _play_square_root(self, card: SpecialCard) -> BuildStep:
        if self._pending_root is not None:
            return BuildStep(False, "A √ is already waiting for a number.")
        if not self._expression.expecting_number():
            return BuildStep(False, "Use √ when it is time to pick a number.")
        if not self.has_unused_numbers():
            return BuildStep(False, "No numbers left, so √ cannot be used.")

        self._pending_root = card
        return BuildStep(True, "The next number you pick gets the √.")

    def has_unused_numbers(self) -> bool:
        if self.hand is None:
            return False
        return any(not self.is_used(c) for c in self.hand.number_cards)

    def is_finished(self) -> bool:
        """All numbers placed and the expression does not end on an operator."""
        return (not self._expression.is_empty() and not self.has_unused_numbers()
                and not self._expression.expecting_number())

    def has_used_required_special_cards(self) -> bool:
        if self.hand is None or self._expression.is_empty():
            return False
        return all(card.consumed for card in self.hand.special_cards)

    def needs_special_reminder(self) -> bool:
        """Expression is finished but special cards are still unplayed."""
        return self.is_finished() and not self.has_used_required_special_cards()

    def completion_status(self) -> str:
        if not self.is_finished():
            return ""
        if not self.has_used_required_special_cards():
            return "Every √ and × card you were dealt must be used before submitting."
        return "Expression complete. Submit it when you are ready."
