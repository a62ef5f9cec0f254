"""Value objects shared across party entities."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

MONEY_SCALE = Decimal("0.01")

Amount = Union["Money", Decimal, int, str]


@dataclass(frozen=True, order=True)
class Money:
    """Monetary amount with two-decimal scale.

    Negative amounts are representable; callers decide whether a
    negative delta is meaningful (see ``Investor.increase_investment_amount``).
    """

    amount: Decimal

    def __post_init__(self) -> None:
        value = self.amount if isinstance(self.amount, Decimal) else Decimal(str(self.amount))
        object.__setattr__(self, "amount", value.quantize(MONEY_SCALE, rounding=ROUND_HALF_UP))

    @classmethod
    def of(cls, value: Amount) -> Money:
        """Build a Money from a Money, Decimal, int or numeric string."""
        if isinstance(value, Money):
            return value
        return cls(Decimal(str(value)))

    @classmethod
    def zero(cls) -> Money:
        return cls(Decimal("0"))

    def add(self, other: Money) -> Money:
        return Money(self.amount + other.amount)

    def subtract(self, other: Money) -> Money:
        return Money(self.amount - other.amount)

    def is_positive_or_zero(self) -> bool:
        return self.amount >= 0

    def is_greater_than(self, other: Money) -> bool:
        return self.amount > other.amount

    def __str__(self) -> str:
        return f"{self.amount:,}"
