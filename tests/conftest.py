"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest

from syndicate_party.clock import FixedClock
from syndicate_party.models.party import CreateCompanyRequest, Industry
from syndicate_party.services import PartyService
from syndicate_party.store import PartyRepositories, memory_repositories


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def clock() -> FixedClock:
    """Deterministic clock starting at 2025-01-01 UTC."""
    return FixedClock(datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def repositories(clock: FixedClock) -> PartyRepositories:
    """Fresh in-memory repositories for each test."""
    return memory_repositories(clock)


@pytest.fixture
def service(repositories: PartyRepositories, clock: FixedClock) -> PartyService:
    """Party service over in-memory storage."""
    return PartyService(repositories, clock=clock)


@pytest.fixture
def company_request() -> CreateCompanyRequest:
    """Sample company creation request."""
    return CreateCompanyRequest(
        company_name="Acme Holdings",
        registration_number="REG-00000001",
        industry=Industry.TECH,
        address="1 Market Street, San Francisco",
        country="US",
    )
