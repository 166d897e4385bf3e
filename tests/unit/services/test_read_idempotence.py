"""
Unit tests for repeated reads over an unchanged ledger.

Every derived view is a pure function of the stored rows: asking twice
without a write in between gives the same answer and writes nothing.
"""

from unittest.mock import AsyncMock

import pytest

from stock_ledger.core.entities import RecipeIngredientLink
from stock_ledger.core.services import (
    CostValuator,
    DeficitDetector,
    PriceConsistencyChecker,
    StockAggregator,
)


@pytest.fixture
def services(movement_store_with, item_store_with, movement_factory, item_factory):
    movements = [
        movement_factory(100, 10, item_id="flour"),
        movement_factory(50, 12.5, item_id="flour"),
        movement_factory(-30, item_id="flour"),
        movement_factory(0.1, 4, item_id="salt"),
        movement_factory(0.2, 4, item_id="salt"),
        movement_factory(-20, item_id="sugar"),
        movement_factory(8, 3, item_id="flour", deleted=True),
    ]
    items = [
        item_factory("flour", min_stock=200),
        item_factory("salt", min_stock=1),
        item_factory("sugar"),
    ]
    movement_store = movement_store_with(movements)
    item_store = item_store_with(items)
    recipe_gateway = AsyncMock()
    recipe_gateway.list_ingredient_links.return_value = [
        RecipeIngredientLink(
            recipe_id="bread",
            recipe_name="Bread",
            tenant_id="tenant-1",
            item_id="flour",
            unit_cost=9.0,
        )
    ]

    aggregator = StockAggregator(movement_store, item_store)
    valuator = CostValuator(movement_store, item_store, aggregator)
    detector = DeficitDetector(aggregator, valuator, item_store)
    checker = PriceConsistencyChecker(valuator, item_store, recipe_gateway)
    return aggregator, valuator, detector, checker, movement_store, recipe_gateway


class TestRepeatedReads:
    async def test_views_stable_without_writes(self, services):
        """Should return equal results on a second call and never write."""
        aggregator, valuator, detector, checker, movement_store, recipe_gateway = services

        async def read_all():
            return [
                await aggregator.current_stock("flour", "tenant-1"),
                await aggregator.current_stock("salt", "tenant-1"),
                await aggregator.stock_levels("tenant-1"),
                await valuator.weighted_average_cost("flour", "tenant-1"),
                await valuator.inventory_valuation("tenant-1"),
                await detector.stock_deficits("tenant-1"),
                await detector.deficit_summary("tenant-1"),
                await detector.is_low_stock("flour", "tenant-1"),
                await checker.validate_price_consistency("tenant-1"),
            ]

        first = await read_all()
        second = await read_all()

        assert first == second
        assert first[0] == 120
        assert first[1] == 0.3
        assert first[7] is True
        assert len(first[8]) == 1
        movement_store.add_movement.assert_not_awaited()
        movement_store.soft_delete_movement.assert_not_awaited()
        movement_store.amend_movement.assert_not_awaited()
        recipe_gateway.recalculate_recipe_cost.assert_not_awaited()
