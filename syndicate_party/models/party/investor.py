"""Investor model for party management."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from syndicate_party.clock import SYSTEM_CLOCK, Clock
from syndicate_party.models.base import Money
from syndicate_party.models.party.enums import InvestorType


@dataclass
class Investor:
    """Syndicate participant providing loan funding."""

    name: str
    email: str | None = None
    phone_number: str | None = None
    company_id: str | None = None  # Company.id, string-encoded
    investment_capacity: Decimal = Decimal("0")
    current_investment_amount: Money = field(default_factory=Money.zero)
    investor_type: InvestorType | None = None
    is_active: bool = True
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int | None = None

    @classmethod
    def create(
        cls,
        name: str,
        email: str | None,
        phone_number: str | None,
        company_id: str | None,
        investment_capacity: Decimal | None,
        investor_type: InvestorType | None,
        clock: Clock = SYSTEM_CLOCK,
    ) -> Investor:
        now = clock.now()
        return cls(
            name=name,
            email=email,
            phone_number=phone_number,
            company_id=company_id,
            investment_capacity=investment_capacity if investment_capacity is not None else Decimal("0"),
            current_investment_amount=Money.zero(),
            investor_type=investor_type,
            is_active=True,
            created_at=now,
            updated_at=now,
        )

    def increase_investment_amount(
        self, amount: Money | None, clock: Clock = SYSTEM_CLOCK
    ) -> None:
        """Add ``amount`` to the current investment; None or negative is ignored."""
        if amount is not None and amount.is_positive_or_zero():
            self.current_investment_amount = self.current_investment_amount.add(amount)
            self.updated_at = clock.now()

    def decrease_investment_amount(
        self, amount: Money | None, clock: Clock = SYSTEM_CLOCK
    ) -> None:
        """Subtract ``amount`` from the current investment; None or negative is ignored.

        No floor is applied against zero or ``investment_capacity``.
        """
        if amount is not None and amount.is_positive_or_zero():
            self.current_investment_amount = self.current_investment_amount.subtract(amount)
            self.updated_at = clock.now()
