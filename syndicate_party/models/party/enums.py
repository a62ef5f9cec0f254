"""Enumeration types for party entities."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from syndicate_party.models.base import Amount, Money


class Industry(str, Enum):
    FINANCE = "FINANCE"
    MANUFACTURING = "MANUFACTURING"
    TECH = "TECH"
    RETAIL = "RETAIL"
    ENERGY = "ENERGY"
    HEALTHCARE = "HEALTHCARE"
    REAL_ESTATE = "REAL_ESTATE"
    TRANSPORTATION = "TRANSPORTATION"
    OTHER = "OTHER"


class InvestorType(str, Enum):
    BANK = "BANK"
    INSURANCE = "INSURANCE"
    FUND = "FUND"
    PENSION = "PENSION"
    CORPORATE = "CORPORATE"
    GOVERNMENT = "GOVERNMENT"
    INDIVIDUAL = "INDIVIDUAL"
    OTHER = "OTHER"


# Maximum credit limit allowed per rating
_RATING_LIMITS: dict[str, Decimal] = {
    "AAA": Decimal("10000000"),
    "AA": Decimal("1000000"),
    "A": Decimal("500000"),
    "BBB": Decimal("200000"),
    "BB": Decimal("100000"),
    "B": Decimal("50000"),
    "CCC": Decimal("20000"),
    "CC": Decimal("10000"),
    "C": Decimal("5000"),
    "D": Decimal("0"),
}


class CreditRating(str, Enum):
    """Borrower credit rating with an associated maximum credit limit."""

    AAA = "AAA"
    AA = "AA"
    A = "A"
    BBB = "BBB"
    BB = "BB"
    B = "B"
    CCC = "CCC"
    CC = "CC"
    C = "C"
    D = "D"

    @property
    def max_limit(self) -> Money:
        return Money(_RATING_LIMITS[self.value])

    def is_limit_satisfied(self, limit: Amount) -> bool:
        """Return True if ``limit`` does not exceed this rating's maximum."""
        return not Money.of(limit).is_greater_than(self.max_limit)
