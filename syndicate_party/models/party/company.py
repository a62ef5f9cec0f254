"""Company model for party management."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from syndicate_party.clock import SYSTEM_CLOCK, Clock
from syndicate_party.models.party.enums import Industry


@dataclass
class Company:
    """Corporate party referenced by borrowers and investors."""

    company_name: str
    registration_number: str | None = None
    industry: Industry | None = None
    address: str | None = None
    country: str | None = None
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int | None = None

    @classmethod
    def create(
        cls,
        company_name: str,
        registration_number: str | None,
        industry: Industry | None,
        address: str | None,
        country: str | None,
        clock: Clock = SYSTEM_CLOCK,
    ) -> Company:
        now = clock.now()
        return cls(
            company_name=company_name,
            registration_number=registration_number,
            industry=industry,
            address=address,
            country=country,
            created_at=now,
            updated_at=now,
        )
