import pytest

from highlow_sim.engine.cards import Hand, OperatorType, SpecialType
from highlow_sim.engine.expression import Expression
from highlow_sim.engine.evaluator import ExpressionEvaluator
from highlow_sim.engine.validator import ExpressionValidator
from highlow_sim.engine.strategy import ExpressionSearch

ADD = OperatorType.ADD
SUB = OperatorType.SUBTRACT
MUL = OperatorType.MULTIPLY
DIV = OperatorType.DIVIDE
BASIC_OPERATORS = [ADD, SUB, DIV]


def build(*parts) -> Expression:
    """Alternating numbers and operators; a ("√", n) tuple is a rooted number."""
    expression = Expression()
    for part in parts:
        if isinstance(part, OperatorType):
            expression.add_operator(part)
        elif isinstance(part, tuple):
            expression.add_number(part[1], has_square_root=True)
        else:
            expression.add_number(part)
    return expression


@pytest.fixture
def make_expression():
    return build


@pytest.fixture
def evaluator():
    return ExpressionEvaluator()


@pytest.fixture
def validator():
    return ExpressionValidator()


@pytest.fixture
def search():
    return ExpressionSearch()


@pytest.fixture
def plain_hand():
    return Hand.of([4, 5, 10], BASIC_OPERATORS)


@pytest.fixture
def multiply_hand():
    return Hand.of([4, 5, 1], BASIC_OPERATORS, [SpecialType.MULTIPLY])


@pytest.fixture
def root_hand():
    return Hand.of([9, 2], [ADD], [SpecialType.SQUARE_ROOT])
