import math

from highlow_sim.engine.cards import (
    CardKind, Hand, NumberCard, OperatorCard, OperatorType, SpecialCard, SpecialType,
)

from conftest import ADD, SUB, DIV, BASIC_OPERATORS


class TestCards:
    def test_number_value_is_clamped(self):
        assert NumberCard(15).value == 10
        assert NumberCard(-3).value == 0
        assert NumberCard(7).value == 7

    def test_kinds_and_display(self):
        assert NumberCard(3).kind == CardKind.NUMBER
        assert OperatorCard(DIV).kind == CardKind.OPERATOR
        assert SpecialCard(SpecialType.SQUARE_ROOT).kind == CardKind.SPECIAL
        assert OperatorCard(DIV).display_text == "÷"
        assert str(SpecialCard(SpecialType.MULTIPLY)) == "×"

    def test_precedence(self):
        assert OperatorType.MULTIPLY.precedence > ADD.precedence
        assert DIV.precedence == OperatorType.MULTIPLY.precedence
        assert SUB.precedence == ADD.precedence

    def test_only_root_is_unary(self):
        assert SpecialType.SQUARE_ROOT.is_unary
        assert not SpecialType.MULTIPLY.is_unary

    def test_clone_is_independent_and_unconsumed(self):
        card = SpecialCard(SpecialType.SQUARE_ROOT)
        card.consume()
        copy = card.clone()
        assert copy is not card
        assert card.consumed
        assert not copy.consumed

    def test_cards_compare_by_identity(self):
        a, b = NumberCard(5), NumberCard(5)
        assert a != b
        assert a.has_same_value(b)
        assert a.is_same_type(b)
        assert not a.is_same_type(OperatorCard(ADD))

    def test_square_root_of_negative_is_nan(self):
        card = SpecialCard(SpecialType.SQUARE_ROOT)
        assert card.apply_square_root(16) == 4
        assert math.isnan(card.apply_square_root(-1))


class TestHand:
    def test_of_sorts_cards_by_kind(self):
        hand = Hand.of([1, 2, 3], BASIC_OPERATORS, [SpecialType.MULTIPLY, SpecialType.SQUARE_ROOT])
        assert hand.number_values == [1, 2, 3]
        assert len(hand.operator_cards) == 3
        assert hand.multiply_count() == 1
        assert hand.square_root_count() == 1
        assert hand.total_card_count() == 8

    def test_remove_card_by_identity(self):
        hand = Hand()
        first, second = NumberCard(5), NumberCard(5)
        hand.add_card(first)
        hand.add_card(second)

        assert hand.remove_card(second)
        assert hand.holds(first)
        assert not hand.holds(second)
        assert not hand.remove_card(second)

    def test_enabled_operator_cards_keep_duplicates(self):
        hand = Hand.of([1], [ADD, ADD, SUB, DIV])
        hand.disable_operator(SUB)
        assert hand.enabled_operator_cards() == [ADD, ADD, DIV]
        assert hand.available_operators() == [ADD, DIV]
        assert not hand.is_operator_enabled(SUB)

    def test_clear(self):
        hand = Hand.of([1, 2], [ADD], [SpecialType.MULTIPLY])
        hand.disable_operator(ADD)
        hand.clear()
        assert hand.is_empty()
        assert hand.is_operator_enabled(ADD)

    def test_str_lists_cards(self):
        hand = Hand.of([4, 5], [ADD], [SpecialType.SQUARE_ROOT])
        assert str(hand) == "4, 5, +, √"
