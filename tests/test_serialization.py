"""Tests for serialization of party entities."""

import json
from datetime import date, datetime, timezone
from decimal import Decimal

from syndicate_party.models.base import Money
from syndicate_party.models.party import Borrower, CreditRating, Investor, InvestorType
from syndicate_party.serialization import serialize_value, to_dict
from syndicate_party.store import Page


class TestToDict:
    """Tests for to_dict function."""

    def test_borrower(self) -> None:
        borrower = Borrower(
            name="Northwind",
            credit_limit=Money.of(750_000),
            credit_rating=CreditRating.AA,
            id=1,
            created_at=datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc),
            version=0,
        )

        result = to_dict(borrower)

        assert result["credit_limit"] == "750000.00"
        assert result["credit_rating"] == "AA"
        assert result["created_at"] == "2025-01-01T09:00:00+00:00"
        assert result["updated_at"] is None
        assert result["version"] == 0

    def test_investor_is_json_safe(self) -> None:
        investor = Investor(
            name="Harbor Capital",
            investment_capacity=Decimal("25000000"),
            investor_type=InvestorType.FUND,
        )

        data = json.loads(json.dumps(to_dict(investor)))

        assert data["investment_capacity"] == "25000000"
        assert data["current_investment_amount"] == "0.00"
        assert data["is_active"] is True

    def test_money_is_not_expanded(self) -> None:
        assert to_dict(Money.of(5)) == {"value": "5.00"}

    def test_dict_passthrough(self) -> None:
        assert to_dict({"key": "value"}) == {"key": "value"}

    def test_page_keeps_paging_metadata(self) -> None:
        """Test that a page serializes its content and paging fields."""
        page = Page(content=[Borrower(name="Northwind", id=1)], page=1, size=1, total_elements=3)

        result = to_dict(page)

        assert result["content"][0]["name"] == "Northwind"
        assert result["page"] == 1
        assert result["total_elements"] == 3
        assert result["total_pages"] == 3
        assert "sort" not in result


class TestSerializeValue:
    """Tests for serialize_value function."""

    def test_decimal(self) -> None:
        assert serialize_value(Decimal("99.99")) == "99.99"

    def test_date(self) -> None:
        assert serialize_value(date(2024, 6, 15)) == "2024-06-15"

    def test_datetime_keeps_offset(self) -> None:
        assert serialize_value(datetime(2025, 1, 1, tzinfo=timezone.utc)) == "2025-01-01T00:00:00+00:00"

    def test_nested(self) -> None:
        data = {"limits": (Money.of(1), Money.of(2)), "rating": CreditRating.BBB}

        assert serialize_value(data) == {"limits": ["1.00", "2.00"], "rating": "BBB"}
