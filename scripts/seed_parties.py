#!/usr/bin/env python3
"""Seed a party store with generated companies, borrowers and investors.

Usage::

    python scripts/seed_parties.py --companies 20 --borrowers 50 --investors 30
    PARTY_STORAGE_BACKEND=postgres python scripts/seed_parties.py --json-out local/
"""

import argparse
import json
import logging
from pathlib import Path

from syndicate_party.config import PartyConfig
from syndicate_party.exceptions import PartyError
from syndicate_party.generators import (
    BorrowerRequestGenerator,
    CompanyRequestGenerator,
    InvestorRequestGenerator,
)
from syndicate_party.logging import setup_logging
from syndicate_party.serialization import to_dict
from syndicate_party.services import PartyService

logger = logging.getLogger(__name__)


def seed(
    service: PartyService,
    num_companies: int,
    num_borrowers: int,
    num_investors: int,
    seed_value: int | None = None,
) -> dict[str, list]:
    """Create generated parties through the service and return them."""
    company_gen = CompanyRequestGenerator(seed=seed_value)
    borrower_gen = BorrowerRequestGenerator(seed=seed_value)
    investor_gen = InvestorRequestGenerator(seed=seed_value)

    companies = [service.create_company(req) for req in company_gen.generate_batch(num_companies)]
    company_ids = [company.id for company in companies]
    logger.info("Created %d companies", len(companies))

    borrowers = [
        service.create_borrower(req)
        for req in borrower_gen.generate_batch(num_borrowers, company_ids)
    ]
    logger.info("Created %d borrowers", len(borrowers))

    investors = [
        service.create_investor(req)
        for req in investor_gen.generate_batch(num_investors, company_ids)
    ]
    logger.info("Created %d investors", len(investors))

    return {"companies": companies, "borrowers": borrowers, "investors": investors}


def save_json(records: list, filename: str, output_dir: Path) -> None:
    """Save records to a JSON file."""
    output_dir.mkdir(parents=True, exist_ok=True)
    filepath = output_dir / filename
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump([to_dict(r) for r in records], f, indent=2, ensure_ascii=False)
    logger.info("Saved %d records to %s", len(records), filepath)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed the party store with sample data")
    parser.add_argument("--companies", type=int, default=10, help="Number of companies (default: 10)")
    parser.add_argument("--borrowers", type=int, default=25, help="Number of borrowers (default: 25)")
    parser.add_argument("--investors", type=int, default=15, help="Number of investors (default: 15)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--json-out",
        type=Path,
        default=None,
        help="Directory to write companies/borrowers/investors JSON files",
    )
    args = parser.parse_args()

    config = PartyConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    service = PartyService.from_config(config)
    try:
        created = seed(service, args.companies, args.borrowers, args.investors, args.seed)
    except PartyError:
        logger.exception("Seeding aborted")
        raise SystemExit(1)
    finally:
        service.repositories.close()

    if args.json_out is not None:
        for name, records in created.items():
            save_json(records, f"{name}.json", args.json_out)

    print("\nSeed summary:")
    for name, records in created.items():
        print(f"  {name}: {len(records)}")


if __name__ == "__main__":
    main()
