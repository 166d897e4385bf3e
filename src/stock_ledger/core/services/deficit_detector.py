"""
Deficit and low-stock detection.

Two distinct policies over the same aggregator output: a deficit is stock
below zero, low stock is stock below the item's minimum.
"""

from __future__ import annotations

from stock_ledger.config import get_logger
from stock_ledger.core.entities.reports import (
    DeficitSeverity,
    DeficitSummary,
    LowStockItem,
    StockDeficit,
)
from stock_ledger.core.interfaces.item_store import IItemStore
from stock_ledger.core.services.cost_valuator import CostValuator
from stock_ledger.core.services.stock_aggregator import StockAggregator

logger = get_logger(__name__)

CRITICAL_DEFICIT_THRESHOLD = 10
DEFAULT_MIN_STOCK = 10


def classify_deficit(deficit_amount: float) -> DeficitSeverity:
    """Deficits strictly above the threshold are critical."""
    if deficit_amount > CRITICAL_DEFICIT_THRESHOLD:
        return DeficitSeverity.CRITICAL
    return DeficitSeverity.MODERATE


class DeficitDetector:
    """Classifies items against zero and against their minimum stock."""

    def __init__(
        self,
        aggregator: StockAggregator,
        valuator: CostValuator,
        item_store: IItemStore,
    ) -> None:
        self._aggregator = aggregator
        self._valuator = valuator
        self._items = item_store

    async def stock_deficits(self, tenant_id: str) -> list[StockDeficit]:
        """Active items whose current stock is negative."""
        items = await self._items.list_items(tenant_id, active_only=True)

        deficits: list[StockDeficit] = []
        for item in items:
            current_stock = await self._aggregator.current_stock(item.id, item.tenant_id)
            if current_stock < 0:
                deficits.append(
                    StockDeficit(
                        item_id=item.id,
                        item_name=item.name,
                        category=item.category,
                        unit=item.unit,
                        current_stock=current_stock,
                        deficit_amount=abs(current_stock),
                        tenant_id=item.tenant_id,
                    )
                )
        return deficits

    async def deficit_summary(self, tenant_id: str) -> DeficitSummary:
        """Counts by severity and the notional cost of covering every shortfall."""
        deficits = await self.stock_deficits(tenant_id)

        summary = DeficitSummary(total_deficit_items=len(deficits))
        for deficit in deficits:
            average_cost = await self._valuator.weighted_average_cost(
                deficit.item_id, deficit.tenant_id
            )
            summary.total_deficit_value += deficit.deficit_amount * average_cost

            if classify_deficit(deficit.deficit_amount) == DeficitSeverity.CRITICAL:
                summary.critical_deficits += 1
            else:
                summary.moderate_deficits += 1

        if deficits:
            logger.warning(
                "stock_deficits_detected",
                tenant_id=tenant_id,
                items=summary.total_deficit_items,
                critical=summary.critical_deficits,
            )
        return summary

    async def is_low_stock(self, item_id: str, tenant_id: str) -> bool:
        """
        Strictly below the item's minimum stock.

        A missing or zero minimum opts the item out of low-stock tracking.
        """
        item = await self._items.get_item(item_id, tenant_id)
        if item is None or not item.min_stock:
            return False

        current_stock = await self._aggregator.current_stock(item_id, tenant_id)
        return current_stock < item.min_stock

    async def low_stock_items(self, tenant_id: str) -> list[LowStockItem]:
        """
        Dashboard listing of items under their threshold.

        Unlike is_low_stock, items without a minimum fall back to
        DEFAULT_MIN_STOCK.
        """
        levels = await self._aggregator.stock_levels(tenant_id)
        items = {
            item.id: item
            for item in await self._items.list_items(tenant_id, active_only=True)
        }

        result: list[LowStockItem] = []
        for level in levels:
            item = items.get(level.item_id)
            min_stock = item.min_stock if item else None
            threshold = min_stock or DEFAULT_MIN_STOCK
            if level.current < threshold:
                result.append(
                    LowStockItem(
                        item_id=level.item_id,
                        item_name=level.item_name,
                        category=level.category,
                        unit=level.unit,
                        current=level.current,
                        min_stock=min_stock,
                        threshold=threshold,
                    )
                )
        return result

    async def low_stock_count(self, tenant_id: str) -> int:
        return len(await self.low_stock_items(tenant_id))
