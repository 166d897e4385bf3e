"""Unit tests for deficit and low-stock detection."""

import pytest

from stock_ledger.core.entities import DeficitSeverity
from stock_ledger.core.services import (
    CostValuator,
    DeficitDetector,
    StockAggregator,
    classify_deficit,
)


@pytest.fixture
def build_detector(movement_store_with, item_store_with):
    def build(movements, items):
        movement_store = movement_store_with(list(movements))
        item_store = item_store_with(list(items))
        aggregator = StockAggregator(movement_store, item_store)
        valuator = CostValuator(movement_store, item_store, aggregator)
        return DeficitDetector(aggregator, valuator, item_store)

    return build


class TestClassifyDeficit:
    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0.5, DeficitSeverity.MODERATE),
            (10, DeficitSeverity.MODERATE),
            (10.01, DeficitSeverity.CRITICAL),
            (11, DeficitSeverity.CRITICAL),
        ],
    )
    def test_threshold(self, amount, expected):
        assert classify_deficit(amount) == expected


class TestStockDeficits:
    async def test_only_negative_items(self, build_detector, movement_factory, item_factory):
        items = [
            item_factory("a", name="A"),
            item_factory("b", name="B"),
            item_factory("c", name="C"),
        ]
        movements = [
            movement_factory(5, 1, item_id="a"),
            movement_factory(-8, item_id="a"),
            movement_factory(3, 1, item_id="b"),
            movement_factory(-3, item_id="b"),
        ]

        deficits = await build_detector(movements, items).stock_deficits("tenant-1")

        assert len(deficits) == 1
        assert deficits[0].item_id == "a"
        assert deficits[0].current_stock == -3
        assert deficits[0].deficit_amount == 3
        assert deficits[0].tenant_id == "tenant-1"

    async def test_no_deficits(self, build_detector, item_factory):
        assert await build_detector([], [item_factory()]).stock_deficits("tenant-1") == []


class TestDeficitSummary:
    async def test_severity_counts_and_value(
        self, build_detector, movement_factory, item_factory
    ):
        """-10 is moderate, -11 is critical; value uses each item's WAC."""
        items = [item_factory("a"), item_factory("b")]
        movements = [
            movement_factory(10, 2, item_id="a"),
            movement_factory(-20, item_id="a"),
            movement_factory(4, 5, item_id="b"),
            movement_factory(-15, item_id="b"),
        ]

        summary = await build_detector(movements, items).deficit_summary("tenant-1")

        assert summary.total_deficit_items == 2
        assert summary.moderate_deficits == 1
        assert summary.critical_deficits == 1
        assert summary.total_deficit_value == pytest.approx(10 * 2 + 11 * 5)

    async def test_deficit_without_price_has_no_value(
        self, build_detector, movement_factory, item_factory
    ):
        summary = await build_detector(
            [movement_factory(-4)], [item_factory()]
        ).deficit_summary("tenant-1")

        assert summary.total_deficit_items == 1
        assert summary.total_deficit_value == 0

    async def test_empty_summary(self, build_detector):
        summary = await build_detector([], []).deficit_summary("tenant-1")

        assert summary.total_deficit_items == 0
        assert summary.critical_deficits == 0
        assert summary.moderate_deficits == 0


class TestIsLowStock:
    async def test_below_minimum(self, build_detector, movement_factory, item_factory):
        detector = build_detector([movement_factory(4, 1)], [item_factory(min_stock=5)])

        assert await detector.is_low_stock("item-1", "tenant-1") is True

    async def test_at_minimum_is_not_low(self, build_detector, movement_factory, item_factory):
        detector = build_detector([movement_factory(5, 1)], [item_factory(min_stock=5)])

        assert await detector.is_low_stock("item-1", "tenant-1") is False

    @pytest.mark.parametrize("min_stock", [None, 0])
    async def test_untracked_minimum(self, build_detector, item_factory, min_stock):
        """Should opt out of tracking when the minimum is missing or zero."""
        detector = build_detector([], [item_factory(min_stock=min_stock)])

        assert await detector.is_low_stock("item-1", "tenant-1") is False

    async def test_unknown_item(self, build_detector):
        assert await build_detector([], []).is_low_stock("ghost", "tenant-1") is False


class TestLowStockItems:
    async def test_fallback_threshold(self, build_detector, movement_factory, item_factory):
        """Items without a minimum fall back to a threshold of 10."""
        items = [
            item_factory("a", min_stock=None),
            item_factory("b", min_stock=None),
            item_factory("c", min_stock=50),
        ]
        movements = [
            movement_factory(9, 1, item_id="a"),
            movement_factory(10, 1, item_id="b"),
            movement_factory(40, 1, item_id="c"),
        ]
        detector = build_detector(movements, items)

        low = {entry.item_id: entry for entry in await detector.low_stock_items("tenant-1")}

        assert set(low) == {"a", "c"}
        assert low["a"].threshold == 10
        assert low["a"].min_stock is None
        assert low["c"].threshold == 50
        assert low["c"].current == 40

    async def test_count_matches_listing(self, build_detector, movement_factory, item_factory):
        items = [item_factory("a"), item_factory("b", min_stock=2)]
        detector = build_detector([movement_factory(3, 1, item_id="b")], items)

        assert await detector.low_stock_count("tenant-1") == 1
