"""Borrower model for party management."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from syndicate_party.clock import SYSTEM_CLOCK, Clock
from syndicate_party.models.base import Money
from syndicate_party.models.party.enums import CreditRating


@dataclass
class Borrower:
    """Loan borrower, optionally attached to a company."""

    name: str
    email: str | None = None
    phone_number: str | None = None
    company_id: str | None = None  # Company.id, string-encoded
    credit_limit: Money | None = None
    credit_rating: CreditRating | None = None
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
        credit_limit: Money | None,
        credit_rating: CreditRating | None,
        clock: Clock = SYSTEM_CLOCK,
    ) -> Borrower:
        now = clock.now()
        return cls(
            name=name,
            email=email,
            phone_number=phone_number,
            company_id=company_id,
            credit_limit=credit_limit,
            credit_rating=credit_rating,
            created_at=now,
            updated_at=now,
        )
