"""
Slot deck for Math High-Low.
Number cards 0-10 plus the round's special cards, shuffled and drawn from the top.
"""

import random
from typing import Optional

from .cards import Card, NumberCard, SpecialCard, SpecialType, MIN_NUMBER, MAX_NUMBER


class SlotDeck:
    """The shared deck both hands are dealt from."""

    def __init__(self, copies_per_value: int = 4, multiply_cards: int = 2,
                 square_root_cards: int = 2, seed: Optional[int] = None):
        self.copies_per_value = copies_per_value
        self.multiply_cards = multiply_cards
        self.square_root_cards = square_root_cards
        self.rng = random.Random(seed)
        self.cards: list[Card] = []

    @classmethod
    def from_config(cls, config, seed: Optional[int] = None) -> "SlotDeck":
        return cls(
            copies_per_value=config.number_copies_per_value,
            multiply_cards=config.multiply_cards_per_round,
            square_root_cards=config.square_root_cards_per_round,
            seed=seed,
        )

    def build(self) -> None:
        """Refill with a fresh set of cards and shuffle."""
        self.cards = []
        for value in range(MIN_NUMBER, MAX_NUMBER + 1):
            for _ in range(self.copies_per_value):
                self.cards.append(NumberCard(value))
        for _ in range(self.multiply_cards):
            self.cards.append(SpecialCard(SpecialType.MULTIPLY))
        for _ in range(self.square_root_cards):
            self.cards.append(SpecialCard(SpecialType.SQUARE_ROOT))
        self.shuffle()

    def shuffle(self) -> None:
        self.rng.shuffle(self.cards)

    def draw(self) -> Card:
        """Draw the top card, rebuilding the deck if it ran out."""
        if not self.cards:
            self.build()
        return self.cards.pop().clone()

    def draw_random_number_card(self) -> NumberCard:
        return NumberCard(self.rng.randint(MIN_NUMBER, MAX_NUMBER))

    def remaining(self) -> int:
        return len(self.cards)

    def count_specials(self, special: SpecialType) -> int:
        return sum(1 for c in self.cards if isinstance(c, SpecialCard) and c.special == special)
