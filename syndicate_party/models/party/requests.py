"""Inbound request objects for party operations.

Fields arrive already typed; optional fields may be missing, and
``company_id`` may be blank or not a valid integer.
"""

from dataclasses import dataclass
from decimal import Decimal

from syndicate_party.models.base import Money
from syndicate_party.models.party.enums import CreditRating, Industry, InvestorType


@dataclass
class CreateCompanyRequest:
    company_name: str
    registration_number: str | None = None
    industry: Industry | None = None
    address: str | None = None
    country: str | None = None


@dataclass
class UpdateCompanyRequest:
    company_name: str
    version: int
    registration_number: str | None = None
    industry: Industry | None = None
    address: str | None = None
    country: str | None = None


@dataclass
class CreateBorrowerRequest:
    name: str
    email: str | None = None
    phone_number: str | None = None
    company_id: str | None = None
    credit_limit: Money | None = None
    credit_rating: CreditRating | None = None
    credit_limit_override: bool = False


@dataclass
class UpdateBorrowerRequest:
    name: str
    version: int
    email: str | None = None
    phone_number: str | None = None
    company_id: str | None = None
    credit_limit: Money | None = None
    credit_rating: CreditRating | None = None


@dataclass
class CreateInvestorRequest:
    name: str
    email: str | None = None
    phone_number: str | None = None
    company_id: str | None = None
    investment_capacity: Decimal | None = None
    investor_type: InvestorType | None = None


@dataclass
class UpdateInvestorRequest:
    name: str
    version: int
    email: str | None = None
    phone_number: str | None = None
    company_id: str | None = None
    investment_capacity: Decimal | None = None
    investor_type: InvestorType | None = None
    is_active: bool | None = None  # None keeps the stored flag
