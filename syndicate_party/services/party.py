"""Party management service for companies, borrowers and investors."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TypeVar

from syndicate_party.clock import SYSTEM_CLOCK, Clock
from syndicate_party.config import CompanyDeletePolicy, PagingConfig, PartyConfig
from syndicate_party.exceptions import (
    BusinessRuleViolationError,
    ConcurrencyConflictError,
    InvalidReferenceError,
    ResourceNotFoundError,
)
from syndicate_party.logging import party_context
from syndicate_party.models.base import Money
from syndicate_party.models.party import (
    Borrower,
    Company,
    CreateBorrowerRequest,
    CreateCompanyRequest,
    CreateInvestorRequest,
    CreditRating,
    Industry,
    Investor,
    InvestorType,
    UpdateBorrowerRequest,
    UpdateCompanyRequest,
    UpdateInvestorRequest,
)
from syndicate_party.store import (
    Contains,
    Criterion,
    Equals,
    Page,
    PageRequest,
    PartyRepositories,
    ReferencesId,
    Repository,
    create_repositories,
)
from syndicate_party.store.base import ENTITY_ID_PATTERN

logger = logging.getLogger(__name__)

E = TypeVar("E")


class PartyService:
    """CRUD and search for party entities.

    Updates follow an optimistic-locking protocol: the replacement record
    carries the version the caller last read, and the repository performs
    the compare-and-swap. A stale version surfaces as
    ``ConcurrencyConflictError``; the service never retries.

    Parameters
    ----------
    repositories : PartyRepositories
        Storage for all three entity types.
    clock : Clock
        Source of timestamps for new entities and investment adjustments.
    paging : PagingConfig | None
        Default and maximum page sizes.
    company_delete_policy : CompanyDeletePolicy
        Whether deleting a referenced company is refused or allowed.
    """

    def __init__(
        self,
        repositories: PartyRepositories,
        clock: Clock = SYSTEM_CLOCK,
        paging: PagingConfig | None = None,
        company_delete_policy: CompanyDeletePolicy = CompanyDeletePolicy.RESTRICT,
    ) -> None:
        self._repos = repositories
        self._clock = clock
        self._paging = paging or PagingConfig()
        self._company_delete_policy = company_delete_policy

    @classmethod
    def from_config(cls, config: PartyConfig, clock: Clock = SYSTEM_CLOCK) -> PartyService:
        """Build a service over the repositories selected by ``config``."""
        return cls(
            create_repositories(config, clock),
            clock=clock,
            paging=config.paging,
            company_delete_policy=config.company_delete_policy,
        )

    @property
    def repositories(self) -> PartyRepositories:
        """Repository bundle backing this service."""
        return self._repos

    # --- Company ---

    def create_company(self, request: CreateCompanyRequest) -> Company:
        """Create a company at version 0."""
        company = Company.create(
            request.company_name,
            request.registration_number,
            request.industry,
            request.address,
            request.country,
            clock=self._clock,
        )
        with self._repos.transaction():
            saved = self._repos.companies.save(company)
        logger.info(
            "Created company %s",
            saved.company_name,
            extra=party_context("Company", saved.id, saved.version),
        )
        return saved

    def get_company_by_id(self, company_id: int) -> Company:
        """Return a company or raise ResourceNotFoundError."""
        with self._repos.transaction():
            return self._get(self._repos.companies, company_id)

    def get_all_companies(self, page_request: PageRequest | None = None) -> Page[Company]:
        """Return a page of all companies."""
        with self._repos.transaction():
            return self._repos.companies.find_all(self._page(page_request))

    def update_company(self, company_id: int, request: UpdateCompanyRequest) -> Company:
        """Replace a company's fields if ``request.version`` is current."""
        with self._repos.transaction():
            existing = self._get(self._repos.companies, company_id)
            replacement = Company(
                id=company_id,
                version=request.version,
                company_name=request.company_name,
                registration_number=request.registration_number,
                industry=request.industry,
                address=request.address,
                country=request.country,
                created_at=existing.created_at,
            )
            saved = self._save_versioned(self._repos.companies, replacement)
        logger.info("Updated company", extra=party_context("Company", saved.id, saved.version))
        return saved

    def delete_company(self, company_id: int) -> None:
        """Delete a company, subject to the configured delete policy."""
        with self._repos.transaction():
            self._require_exists(self._repos.companies, company_id)
            if self._company_delete_policy is CompanyDeletePolicy.RESTRICT:
                self._check_company_unreferenced(company_id)
            self._repos.companies.delete_by_id(company_id)
        logger.info("Deleted company", extra=party_context("Company", company_id))

    def search_companies(
        self,
        name: str | None = None,
        industry: Industry | None = None,
        page_request: PageRequest | None = None,
    ) -> Page[Company]:
        """Page of companies matching a name fragment and/or industry."""
        criteria = _search_criteria("company_name", name, "industry", industry)
        logger.debug("Searching companies with %s", criteria)
        with self._repos.transaction():
            return self._repos.companies.find(criteria, self._page(page_request))

    # --- Borrower ---

    def create_borrower(self, request: CreateBorrowerRequest) -> Borrower:
        """Create a borrower after the company and credit-limit checks."""
        with self._repos.transaction():
            self._check_company_id(request.company_id)
            if not request.credit_limit_override:
                _check_credit_limit_at_creation(request.credit_rating, request.credit_limit)
            borrower = Borrower.create(
                request.name,
                request.email,
                request.phone_number,
                request.company_id,
                request.credit_limit,
                request.credit_rating,
                clock=self._clock,
            )
            saved = self._repos.borrowers.save(borrower)
        logger.info(
            "Created borrower %s",
            saved.name,
            extra=party_context("Borrower", saved.id, saved.version),
        )
        return saved

    def get_borrower_by_id(self, borrower_id: int) -> Borrower:
        """Return a borrower or raise ResourceNotFoundError."""
        with self._repos.transaction():
            return self._get(self._repos.borrowers, borrower_id)

    def get_all_borrowers(self, page_request: PageRequest | None = None) -> Page[Borrower]:
        """Return a page of all borrowers."""
        with self._repos.transaction():
            return self._repos.borrowers.find_all(self._page(page_request))

    def update_borrower(self, borrower_id: int, request: UpdateBorrowerRequest) -> Borrower:
        """Replace a borrower's fields if ``request.version`` is current."""
        with self._repos.transaction():
            existing = self._get(self._repos.borrowers, borrower_id)
            # Unlike creation, no override flag applies here
            if request.credit_limit is not None and request.credit_rating is not None:
                if request.credit_limit.is_greater_than(request.credit_rating.max_limit):
                    raise BusinessRuleViolationError(
                        f"Credit limit cannot exceed rating limit (creditLimit: {request.credit_limit}, "
                        f"ratingLimit: {request.credit_rating.max_limit}, "
                        f"creditRating: {request.credit_rating.value})"
                    )
            self._check_company_id(request.company_id)
            replacement = Borrower(
                id=borrower_id,
                version=request.version,
                name=request.name,
                email=request.email,
                phone_number=request.phone_number,
                company_id=request.company_id,
                credit_limit=request.credit_limit,
                credit_rating=request.credit_rating,
                created_at=existing.created_at,
            )
            saved = self._save_versioned(self._repos.borrowers, replacement)
        logger.info("Updated borrower", extra=party_context("Borrower", saved.id, saved.version))
        return saved

    def delete_borrower(self, borrower_id: int) -> None:
        """Delete a borrower."""
        with self._repos.transaction():
            self._require_exists(self._repos.borrowers, borrower_id)
            self._repos.borrowers.delete_by_id(borrower_id)
        logger.info("Deleted borrower", extra=party_context("Borrower", borrower_id))

    def search_borrowers(
        self,
        name: str | None = None,
        credit_rating: CreditRating | None = None,
        page_request: PageRequest | None = None,
    ) -> Page[Borrower]:
        """Page of borrowers matching a name fragment and/or credit rating."""
        criteria = _search_criteria("name", name, "credit_rating", credit_rating)
        logger.debug("Searching borrowers with %s", criteria)
        with self._repos.transaction():
            return self._repos.borrowers.find(criteria, self._page(page_request))

    # --- Investor ---

    def create_investor(self, request: CreateInvestorRequest) -> Investor:
        """Create an active investor with no current investment."""
        with self._repos.transaction():
            self._check_company_id(request.company_id)
            _check_investment_capacity(request.investment_capacity)
            investor = Investor.create(
                request.name,
                request.email,
                request.phone_number,
                request.company_id,
                request.investment_capacity,
                request.investor_type,
                clock=self._clock,
            )
            saved = self._repos.investors.save(investor)
        logger.info(
            "Created investor %s",
            saved.name,
            extra=party_context("Investor", saved.id, saved.version),
        )
        return saved

    def get_investor_by_id(self, investor_id: int) -> Investor:
        """Return an investor or raise ResourceNotFoundError."""
        with self._repos.transaction():
            return self._get(self._repos.investors, investor_id)

    def get_all_investors(self, page_request: PageRequest | None = None) -> Page[Investor]:
        """Return a page of all investors."""
        with self._repos.transaction():
            return self._repos.investors.find_all(self._page(page_request))

    def get_active_investors(self, page_request: PageRequest | None = None) -> Page[Investor]:
        """Return a page of investors flagged active."""
        with self._repos.transaction():
            return self._repos.investors.find([Equals("is_active", True)], self._page(page_request))

    def update_investor(self, investor_id: int, request: UpdateInvestorRequest) -> Investor:
        """Replace an investor's editable fields if ``request.version`` is current."""
        with self._repos.transaction():
            existing = self._get(self._repos.investors, investor_id)
            _check_investment_capacity(request.investment_capacity)
            self._check_company_id(request.company_id)
            replacement = Investor(
                id=investor_id,
                version=request.version,
                name=request.name,
                email=request.email,
                phone_number=request.phone_number,
                company_id=request.company_id,
                investment_capacity=(
                    request.investment_capacity
                    if request.investment_capacity is not None
                    else Decimal("0")
                ),
                investor_type=request.investor_type,
                # Not part of the update request; carried from the stored record
                current_investment_amount=existing.current_investment_amount,
                is_active=request.is_active if request.is_active is not None else existing.is_active,
                created_at=existing.created_at,
            )
            saved = self._save_versioned(self._repos.investors, replacement)
        logger.info("Updated investor", extra=party_context("Investor", saved.id, saved.version))
        return saved

    def adjust_investment_amount(
        self, investor_id: int, amount: Money | None, version: int
    ) -> Investor:
        """Apply a signed delta to an investor's current investment amount.

        A non-negative ``amount`` is added and a negative one subtracted.
        The write is version-checked like any other update; capacity is
        not enforced here. A missing ``amount`` changes nothing and returns
        the stored investor.
        """
        with self._repos.transaction():
            investor = self._get(self._repos.investors, investor_id)
            if amount is None:
                return investor
            investor.version = version
            if amount.is_positive_or_zero():
                investor.increase_investment_amount(amount, clock=self._clock)
            else:
                investor.decrease_investment_amount(Money(-amount.amount), clock=self._clock)
            saved = self._save_versioned(self._repos.investors, investor)
        logger.info(
            "Adjusted investment by %s to %s",
            amount,
            saved.current_investment_amount,
            extra=party_context("Investor", saved.id, saved.version),
        )
        return saved

    def delete_investor(self, investor_id: int) -> None:
        """Delete an investor."""
        with self._repos.transaction():
            self._require_exists(self._repos.investors, investor_id)
            self._repos.investors.delete_by_id(investor_id)
        logger.info("Deleted investor", extra=party_context("Investor", investor_id))

    def search_investors(
        self,
        name: str | None = None,
        investor_type: InvestorType | None = None,
        page_request: PageRequest | None = None,
    ) -> Page[Investor]:
        """Page of investors matching a name fragment and/or investor type."""
        criteria = _search_criteria("name", name, "investor_type", investor_type)
        logger.debug("Searching investors with %s", criteria)
        with self._repos.transaction():
            return self._repos.investors.find(criteria, self._page(page_request))

    # --- Helpers ---

    def _page(self, page_request: PageRequest | None) -> PageRequest:
        return page_request or PageRequest.of(paging=self._paging)

    def _get(self, repository: Repository[E], entity_id: int) -> E:
        entity = repository.find_by_id(entity_id)
        if entity is None:
            raise ResourceNotFoundError(f"{repository.entity_name} not found with ID: {entity_id}")
        return entity

    def _require_exists(self, repository: Repository, entity_id: int) -> None:
        if not repository.exists_by_id(entity_id):
            raise ResourceNotFoundError(f"{repository.entity_name} not found with ID: {entity_id}")

    def _save_versioned(self, repository: Repository[E], entity: E) -> E:
        try:
            return repository.save(entity)
        except ConcurrencyConflictError:
            logger.warning(
                "Version conflict updating %s %s with version %s",
                repository.entity_name,
                entity.id,
                entity.version,
                extra=party_context(repository.entity_name, entity.id, entity.version),
            )
            raise

    def _check_company_id(self, raw: str | None) -> None:
        """Validate an optional company reference without rewriting it.

        Blank or missing references are accepted as no company.
        """
        if raw is None or not raw.strip():
            return
        if not ENTITY_ID_PATTERN.fullmatch(raw):
            raise InvalidReferenceError(f"Invalid company ID: {raw}")
        if not self._repos.companies.exists_by_id(int(raw)):
            raise InvalidReferenceError(f"Company not found with ID: {raw}")

    def _check_company_unreferenced(self, company_id: int) -> None:
        reference = [ReferencesId("company_id", company_id)]
        borrowers = self._repos.borrowers.count(reference)
        investors = self._repos.investors.count(reference)
        if borrowers or investors:
            raise BusinessRuleViolationError(
                f"Company {company_id} is still referenced by "
                f"{borrowers} borrower(s) and {investors} investor(s)"
            )


def _search_criteria(
    name_field: str,
    name: str | None,
    category_field: str,
    category: object | None,
) -> list[Criterion]:
    criteria: list[Criterion] = []
    if name is not None and name.strip():
        criteria.append(Contains(name_field, name))
    if category is not None:
        criteria.append(Equals(category_field, category))
    return criteria


def _check_credit_limit_at_creation(rating: CreditRating | None, limit: Money | None) -> None:
    if rating is None or limit is None:
        raise BusinessRuleViolationError(
            f"creditRating and creditLimit are required unless creditLimitOverride is set "
            f"(creditRating: {rating.value if rating else None}, creditLimit: {limit})"
        )
    if not rating.is_limit_satisfied(limit):
        raise BusinessRuleViolationError(
            f"creditLimit {limit} exceeds allowed maximum for creditRating {rating.value} "
            f"(max: {rating.max_limit})"
        )


def _check_investment_capacity(capacity: Decimal | None) -> None:
    if capacity is not None and capacity < 0:
        raise BusinessRuleViolationError(f"investmentCapacity must not be negative, got {capacity}")
