"""Tests for sample party request generators."""

from decimal import Decimal

import pytest

from syndicate_party.generators import (
    BorrowerRequestGenerator,
    CompanyRequestGenerator,
    InvestorRequestGenerator,
)
from syndicate_party.generators.base import BaseGenerator
from syndicate_party.models.party import (
    CreateBorrowerRequest,
    CreateCompanyRequest,
    CreateInvestorRequest,
    Industry,
    InvestorType,
)
from syndicate_party.services import PartyService


class TestBaseGenerator:
    """Tests for the shared generator helpers."""

    def test_pick_weighted_honors_zero_weight(self, seed: int) -> None:
        gen = CompanyRequestGenerator(seed=seed)

        picks = {gen.pick_weighted(["a", "b"], [1.0, 0.0]) for _ in range(50)}

        assert picks == {"a"}

    def test_maybe_company_id_bounds(self, seed: int) -> None:
        gen = CompanyRequestGenerator(seed=seed)

        assert gen.maybe_company_id([], 1.0) is None
        assert gen.maybe_company_id([9], 0.0) is None
        assert gen.maybe_company_id([9], 1.0) == "9"

    def test_is_base_generator(self) -> None:
        assert isinstance(InvestorRequestGenerator(), BaseGenerator)


class TestCompanyRequestGenerator:
    """Tests for CompanyRequestGenerator."""

    def test_generate_single(self, seed: int) -> None:
        """Test generating a single company request."""
        request = CompanyRequestGenerator(seed=seed).generate()

        assert isinstance(request, CreateCompanyRequest)
        assert request.company_name
        assert request.registration_number.startswith("REG-")
        assert isinstance(request.industry, Industry)
        assert "\n" not in request.address
        assert request.country in CompanyRequestGenerator.COUNTRIES

    def test_generate_batch(self, seed: int) -> None:
        requests = list(CompanyRequestGenerator(seed=seed).generate_batch(10))

        assert len(requests) == 10

    def test_reproducibility(self, seed: int) -> None:
        """Test that the same seed produces the same requests."""
        first = list(CompanyRequestGenerator(seed=seed).generate_batch(5))
        second = list(CompanyRequestGenerator(seed=seed).generate_batch(5))

        assert first == second


class TestBorrowerRequestGenerator:
    """Tests for BorrowerRequestGenerator."""

    def test_limits_satisfy_rating(self, seed: int) -> None:
        """Test every generated limit is within its rating maximum."""
        for request in BorrowerRequestGenerator(seed=seed).generate_batch(200):
            assert isinstance(request, CreateBorrowerRequest)
            assert request.credit_rating.is_limit_satisfied(request.credit_limit)
            assert request.credit_limit.is_positive_or_zero()
            assert not request.credit_limit_override

    def test_no_company_ids_means_no_link(self, seed: int) -> None:
        requests = list(BorrowerRequestGenerator(seed=seed).generate_batch(50))

        assert all(r.company_id is None for r in requests)

    def test_links_only_known_companies(self, seed: int) -> None:
        """Test company links are drawn from the supplied ids."""
        requests = list(BorrowerRequestGenerator(seed=seed).generate_batch(100, [3, 7]))
        linked = {r.company_id for r in requests if r.company_id is not None}

        assert linked <= {"3", "7"}
        assert linked

    def test_reproducibility(self, seed: int) -> None:
        first = list(BorrowerRequestGenerator(seed=seed).generate_batch(5, [1, 2]))
        second = list(BorrowerRequestGenerator(seed=seed).generate_batch(5, [1, 2]))

        assert first == second


class TestInvestorRequestGenerator:
    """Tests for InvestorRequestGenerator."""

    def test_generate(self, seed: int) -> None:
        for request in InvestorRequestGenerator(seed=seed).generate_batch(100):
            assert isinstance(request, CreateInvestorRequest)
            assert isinstance(request.investor_type, InvestorType)
            low, high = InvestorRequestGenerator.CAPACITY_RANGE
            assert Decimal(low) <= request.investment_capacity < Decimal(high)
            assert request.investment_capacity % 100_000 == 0

    def test_different_seeds_differ(self) -> None:
        first = list(InvestorRequestGenerator(seed=1).generate_batch(5))
        second = list(InvestorRequestGenerator(seed=2).generate_batch(5))

        assert first != second


class TestGeneratedRequestsThroughService:
    """Tests that generated requests pass service validation."""

    @pytest.mark.parametrize("count", [25])
    def test_seed_service(self, service: PartyService, seed: int, count: int) -> None:
        companies = [
            service.create_company(r)
            for r in CompanyRequestGenerator(seed=seed).generate_batch(5)
        ]
        ids = [c.id for c in companies]

        borrowers = [
            service.create_borrower(r)
            for r in BorrowerRequestGenerator(seed=seed).generate_batch(count, ids)
        ]
        investors = [
            service.create_investor(r)
            for r in InvestorRequestGenerator(seed=seed).generate_batch(count, ids)
        ]

        assert len(borrowers) == len(investors) == count
        assert service.get_all_investors().total_elements == count
        assert service.get_active_investors().total_elements == count
