"""Sample request generators for party entities."""

from syndicate_party.generators.party import (
    BorrowerRequestGenerator,
    CompanyRequestGenerator,
    InvestorRequestGenerator,
)

__all__ = [
    "BorrowerRequestGenerator",
    "CompanyRequestGenerator",
    "InvestorRequestGenerator",
]
