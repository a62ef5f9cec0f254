"""Party domain models."""

from syndicate_party.models.party.borrower import Borrower
from syndicate_party.models.party.company import Company
from syndicate_party.models.party.enums import CreditRating, Industry, InvestorType
from syndicate_party.models.party.investor import Investor
from syndicate_party.models.party.requests import (
    CreateBorrowerRequest,
    CreateCompanyRequest,
    CreateInvestorRequest,
    UpdateBorrowerRequest,
    UpdateCompanyRequest,
    UpdateInvestorRequest,
)

__all__ = [
    "Borrower",
    "Company",
    "CreateBorrowerRequest",
    "CreateCompanyRequest",
    "CreateInvestorRequest",
    "CreditRating",
    "Industry",
    "Investor",
    "InvestorType",
    "UpdateBorrowerRequest",
    "UpdateCompanyRequest",
    "UpdateInvestorRequest",
]
