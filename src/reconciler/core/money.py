#!/usr/bin/env python3
"""
Money Primitive Type

Immutable signed amount in minor currency units (cents).
Negative amounts are expenses, positive amounts are inflows such as refunds.
"""

from dataclasses import dataclass

from .currency import cents_to_dollars_str, milliunits_to_cents, parse_dollars_to_cents


@dataclass(frozen=True, order=True)
class Money:
    """
    Immutable money value in cents.

    Examples:
        >>> expense = Money.from_milliunits(-45990)  # YNAB expense
        >>> str(expense)
        '$-45.99'
        >>> expense.abs()
        Money(cents=4599)
        >>> Money.from_dollars("$45.99").negate() == expense
        True
    """

    cents: int

    @classmethod
    def from_cents(cls, cents: int) -> "Money":
        """Create Money from cents."""
        return cls(cents=int(cents))

    @classmethod
    def from_milliunits(cls, milliunits: int) -> "Money":
        """Create Money from YNAB milliunits, preserving sign."""
        return cls(cents=milliunits_to_cents(milliunits))

    @classmethod
    def from_dollars(cls, dollars: str | int | float) -> "Money":
        """Parse from a dollar string like '$123.45' or a number of dollars."""
        return cls(cents=parse_dollars_to_cents(dollars))

    @classmethod
    def zero(cls) -> "Money":
        return cls(cents=0)

    def to_cents(self) -> int:
        """Get value in cents."""
        return self.cents

    def abs(self) -> "Money":
        """Return absolute value."""
        return Money(cents=abs(self.cents))

    def negate(self) -> "Money":
        """Return the amount with its sign flipped."""
        return Money(cents=-self.cents)

    def distance(self, other: "Money") -> int:
        """Absolute difference to another amount, in cents."""
        return abs(self.cents - other.cents)

    @property
    def is_expense(self) -> bool:
        return self.cents < 0

    def __add__(self, other: "Money") -> "Money":
        return Money(cents=self.cents + other.cents)

    def __sub__(self, other: "Money") -> "Money":
        return Money(cents=self.cents - other.cents)

    def __str__(self) -> str:
        """Format as dollar string."""
        return f"${cents_to_dollars_str(self.cents)}"

    def __repr__(self) -> str:
        return f"Money(cents={self.cents})"


def sum_money(amounts: "list[Money] | tuple[Money, ...]") -> Money:
    """Sum a sequence of Money values (empty sequence sums to zero)."""
    total = Money.zero()
    for amount in amounts:
        total = total + amount
    return total
