"""Request generators for companies, borrowers and investors."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterator, Sequence

from syndicate_party.generators.base import BaseGenerator
from syndicate_party.models.base import Money
from syndicate_party.models.party import (
    CreateBorrowerRequest,
    CreateCompanyRequest,
    CreateInvestorRequest,
    CreditRating,
    Industry,
    InvestorType,
)


class CompanyRequestGenerator(BaseGenerator):
    """Generate company creation requests."""

    INDUSTRIES = list(Industry)

    COUNTRIES = ["US", "GB", "JP", "DE", "FR", "SG", "AU", "CA"]

    def generate(self) -> CreateCompanyRequest:
        """Generate a single company request.

        Returns
        -------
        CreateCompanyRequest
            Generated request.
        """
        return CreateCompanyRequest(
            company_name=self.fake.company(),
            registration_number=self.fake.bothify("REG-########"),
            industry=self.random.choice(self.INDUSTRIES),
            address=self.fake.address().replace("\n", ", "),
            country=self.random.choice(self.COUNTRIES),
        )

    def generate_batch(self, count: int) -> Iterator[CreateCompanyRequest]:
        """Generate multiple company requests.

        Parameters
        ----------
        count : int
            Number of requests to generate.

        Yields
        ------
        CreateCompanyRequest
            Generated requests.
        """
        for _ in range(count):
            yield self.generate()


class BorrowerRequestGenerator(BaseGenerator):
    """Generate borrower creation requests that satisfy the rating limit.

    Ratings skew toward investment grade, the way a syndicate book does.
    Credit limits are drawn between 10% and 100% of the rating maximum.
    """

    RATINGS = list(CreditRating)
    RATING_WEIGHTS = [0.05, 0.12, 0.20, 0.25, 0.15, 0.10, 0.06, 0.04, 0.02, 0.01]

    # Share of borrowers attached to a company when company ids are supplied
    COMPANY_LINK_RATE = 0.6

    def generate(self, company_ids: Sequence[int] = ()) -> CreateBorrowerRequest:
        """Generate a single borrower request.

        Parameters
        ----------
        company_ids : Sequence[int]
            Existing company ids to link against.

        Returns
        -------
        CreateBorrowerRequest
            Generated request.
        """
        rating = self.pick_weighted(self.RATINGS, self.RATING_WEIGHTS)
        share = Decimal(self.random.randint(10, 100)) / Decimal(100)
        return CreateBorrowerRequest(
            name=self.fake.company(),
            email=self.fake.company_email(),
            phone_number=self.fake.phone_number(),
            company_id=self.maybe_company_id(company_ids, self.COMPANY_LINK_RATE),
            credit_limit=Money(rating.max_limit.amount * share),
            credit_rating=rating,
        )

    def generate_batch(
        self, count: int, company_ids: Sequence[int] = ()
    ) -> Iterator[CreateBorrowerRequest]:
        for _ in range(count):
            yield self.generate(company_ids)


class InvestorRequestGenerator(BaseGenerator):
    """Generate investor creation requests."""

    INVESTOR_TYPES = list(InvestorType)
    TYPE_WEIGHTS = [0.35, 0.10, 0.20, 0.08, 0.12, 0.05, 0.07, 0.03]

    # Capacity range in whole currency units
    CAPACITY_RANGE = (1_000_000, 500_000_000)

    COMPANY_LINK_RATE = 0.8

    def generate(self, company_ids: Sequence[int] = ()) -> CreateInvestorRequest:
        """Generate a single investor request."""
        investor_type = self.pick_weighted(self.INVESTOR_TYPES, self.TYPE_WEIGHTS)
        low, high = self.CAPACITY_RANGE
        capacity = Decimal(self.random.randrange(low, high, 100_000))
        if investor_type == InvestorType.INDIVIDUAL:
            name = self.fake.name()
        else:
            name = f"{self.fake.company()} {investor_type.value.title()}"
        return CreateInvestorRequest(
            name=name,
            email=self.fake.email(),
            phone_number=self.fake.phone_number(),
            company_id=self.maybe_company_id(company_ids, self.COMPANY_LINK_RATE),
            investment_capacity=capacity,
            investor_type=investor_type,
        )

    def generate_batch(
        self, count: int, company_ids: Sequence[int] = ()
    ) -> Iterator[CreateInvestorRequest]:
        for _ in range(count):
            yield self.generate(company_ids)
