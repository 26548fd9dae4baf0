"""
Arithmetic expressions built from a hand.
An expression alternates numbers and binary operators: n0 op0 n1 op1 n2 ...
"""

from dataclasses import dataclass, field

from .cards import OperatorType


@dataclass(frozen=True)
class Term:
    """One number slot, optionally under a square root."""
    value: float
    has_square_root: bool = False

    def __str__(self) -> str:
        root = "√" if self.has_square_root else ""
        return f"{root}{format_number(self.value)}"


def format_number(value: float) -> str:
    """Up to two decimals, trailing zeros dropped."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


@dataclass
class Expression:
    terms: list[Term] = field(default_factory=list)
    operators: list[OperatorType] = field(default_factory=list)

    @property
    def numbers(self) -> list[float]:
        return [t.value for t in self.terms]

    @property
    def square_root_flags(self) -> list[bool]:
        return [t.has_square_root for t in self.terms]

    def add_number(self, value: float, has_square_root: bool = False) -> None:
        self.terms.append(Term(float(value), has_square_root))

    def add_operator(self, op: OperatorType) -> None:
        self.operators.append(op)

    def remove_last(self) -> None:
        """Drop the last operator of a complete expression, otherwise the last number."""
        if self.operators and len(self.operators) == len(self.terms) - 1:
            self.operators.pop()
        elif self.terms:
            self.terms.pop()

    def clear(self) -> None:
        self.terms.clear()
        self.operators.clear()

    def is_empty(self) -> bool:
        return not self.terms

    def is_complete(self) -> bool:
        return bool(self.terms) and len(self.operators) == len(self.terms) - 1

    def expecting_number(self) -> bool:
        return len(self.terms) == len(self.operators)

    def count_square_roots(self) -> int:
        return sum(1 for t in self.terms if t.has_square_root)

    def count_operator(self, op: OperatorType) -> int:
        return sum(1 for o in self.operators if o == op)

    def clone(self) -> "Expression":
        return Expression(terms=list(self.terms), operators=list(self.operators))

    def to_display_string(self) -> str:
        parts = []
        for i, term in enumerate(self.terms):
            parts.append(str(term))
            if i < len(self.operators):
                parts.append(self.operators[i].symbol)
        return " ".join(parts)

    def __str__(self) -> str:
        return self.to_display_string()
