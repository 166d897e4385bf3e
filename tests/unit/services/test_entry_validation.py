"""Unit tests for stock entry validation."""

from datetime import UTC, date, datetime, timedelta

import pytest

from stock_ledger.core.entities import MovementType, StockEntry
from stock_ledger.core.services import validate_stock_entry
from stock_ledger.core.services.entry_validation import (
    EXPIRY_NOT_IN_FUTURE,
    IN_PRICE_REQUIRED,
    IN_QUANTITY_NOT_POSITIVE,
    OUT_QUANTITY_NOT_NEGATIVE,
    PRICE_NEGATIVE,
    QUANTITY_ZERO,
)

NOW = datetime(2025, 3, 14, 15, 30, tzinfo=UTC)


def entry(quantity, movement_type=MovementType.IN, **kwargs) -> StockEntry:
    return StockEntry(item_id="item-1", quantity=quantity, movement_type=movement_type, **kwargs)


class TestValidEntries:
    def test_priced_receipt(self):
        result = validate_stock_entry(entry(10, unit_price=2.5), now=NOW)

        assert result.is_valid is True
        assert result.errors == []

    def test_unpriced_issue(self):
        assert validate_stock_entry(entry(-3, MovementType.OUT), now=NOW).is_valid

    def test_priced_issue(self):
        assert validate_stock_entry(entry(-3, MovementType.OUT, unit_price=4), now=NOW).is_valid

    def test_future_expiry(self):
        result = validate_stock_entry(
            entry(1, unit_price=1, expiry_date=date(2025, 3, 15)), now=NOW
        )

        assert result.is_valid


class TestRuleViolations:
    def test_zero_quantity(self):
        """Should report only the non-zero rule."""
        result = validate_stock_entry(entry(0, unit_price=1), now=NOW)

        assert result.errors == [QUANTITY_ZERO]

    def test_negative_inbound(self):
        result = validate_stock_entry(entry(-5, unit_price=1), now=NOW)

        assert result.errors == [IN_QUANTITY_NOT_POSITIVE]

    def test_positive_outbound(self):
        result = validate_stock_entry(entry(5, MovementType.OUT), now=NOW)

        assert result.errors == [OUT_QUANTITY_NOT_NEGATIVE]

    @pytest.mark.parametrize("price", [None, 0])
    def test_inbound_needs_positive_price(self, price):
        result = validate_stock_entry(entry(5, unit_price=price), now=NOW)

        assert result.errors == [IN_PRICE_REQUIRED]

    def test_negative_price_on_outbound(self):
        result = validate_stock_entry(entry(-5, MovementType.OUT, unit_price=-1), now=NOW)

        assert result.errors == [PRICE_NEGATIVE]

    def test_negative_price_on_inbound_reports_both(self):
        result = validate_stock_entry(entry(5, unit_price=-1), now=NOW)

        assert result.errors == [IN_PRICE_REQUIRED, PRICE_NEGATIVE]

    def test_expiry_today_is_invalid(self):
        """A date-only expiry means midnight, which is already past today."""
        result = validate_stock_entry(
            entry(1, unit_price=1, expiry_date=NOW.date()), now=NOW
        )

        assert result.errors == [EXPIRY_NOT_IN_FUTURE]

    def test_expiry_datetime_in_past(self):
        result = validate_stock_entry(
            entry(1, unit_price=1, expiry_date=NOW - timedelta(minutes=1)), now=NOW
        )

        assert result.errors == [EXPIRY_NOT_IN_FUTURE]

    def test_expiry_equal_to_now_is_invalid(self):
        result = validate_stock_entry(entry(1, unit_price=1, expiry_date=NOW), now=NOW)

        assert not result.is_valid

    def test_all_errors_collected(self):
        result = validate_stock_entry(
            entry(-2, unit_price=-3, expiry_date=date(2020, 1, 1)), now=NOW
        )

        assert result.errors == [
            IN_QUANTITY_NOT_POSITIVE,
            IN_PRICE_REQUIRED,
            PRICE_NEGATIVE,
            EXPIRY_NOT_IN_FUTURE,
        ]

    def test_default_clock(self):
        result = validate_stock_entry(entry(1, unit_price=1, expiry_date=date(2000, 1, 1)))

        assert result.errors == [EXPIRY_NOT_IN_FUTURE]
