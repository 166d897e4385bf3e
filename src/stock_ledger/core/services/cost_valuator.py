"""
Cost Valuator.

Weighted-average cost (WAC) per item, on-hand valuation, and the price view
consumed by recipe price synchronisation.
"""

from __future__ import annotations

from stock_ledger.config import get_logger
from stock_ledger.core.entities.inventory import MovementFilter, MovementType, utcnow
from stock_ledger.core.entities.reports import (
    InventoryPrice,
    InventoryValuation,
    PriceChange,
    PricePoint,
    PriceRange,
    PriceSource,
    PriceStatistics,
    ValuationLine,
)
from stock_ledger.core.interfaces.item_store import IItemStore
from stock_ledger.core.interfaces.movement_store import IMovementStore
from stock_ledger.core.services import ledger_math
from stock_ledger.core.services.stock_aggregator import StockAggregator

logger = get_logger(__name__)

PRICE_HISTORY_LIMIT = 10
RECENT_CHANGES_LIMIT = 10


class CostValuator:
    """Reduces priced IN movements into unit costs and stock values."""

    def __init__(
        self,
        movement_store: IMovementStore,
        item_store: IItemStore,
        aggregator: StockAggregator | None = None,
        price_history_limit: int = PRICE_HISTORY_LIMIT,
    ) -> None:
        self._movements = movement_store
        self._items = item_store
        self._aggregator = aggregator or StockAggregator(movement_store, item_store)
        self._history_limit = price_history_limit

    async def weighted_average_cost(self, item_id: str, tenant_id: str | None) -> float:
        """
        Σ(quantity × unit price) / Σ(quantity) over live, priced IN movements.

        Returns 0.0 when no qualifying movement exists; that is a sentinel,
        not an error.
        """
        receipts = await self._movements.list_movements(
            MovementFilter(
                tenant_id=tenant_id,
                item_id=item_id,
                movement_type=MovementType.IN,
                priced_only=True,
            )
        )
        return ledger_math.weighted_average(receipts)

    async def inventory_valuation(self, tenant_id: str) -> InventoryValuation:
        """Value every active item with positive stock at its WAC."""
        items = await self._items.list_items(tenant_id, active_only=True)

        lines: list[ValuationLine] = []
        total_value = 0.0
        for item in items:
            current_stock = await self._aggregator.current_stock(item.id, item.tenant_id)
            if current_stock <= 0:
                continue

            average_cost = await self.weighted_average_cost(item.id, item.tenant_id)
            item_value = current_stock * average_cost
            lines.append(
                ValuationLine(
                    item_id=item.id,
                    item_name=item.name,
                    current_stock=current_stock,
                    average_cost=average_cost,
                    total_value=item_value,
                )
            )
            total_value += item_value

        logger.info(
            "inventory_valuation_complete",
            tenant_id=tenant_id,
            items=len(lines),
            total_value=round(total_value, 2),
        )
        return InventoryValuation(total_value=total_value, items=lines)

    async def inventory_price(
        self, item_id: str, tenant_id: str | None = None
    ) -> InventoryPrice:
        """
        Current WAC with the most recent priced receipts.

        Never raises. Any failure degrades to a NONE-sourced price with an
        empty history so that one bad item cannot block price sync.

        Args:
            item_id: Item to price.
            tenant_id: Optional tenant scope; item IDs are globally unique.
        """
        try:
            price = await self.weighted_average_cost(item_id, tenant_id)
            recent = await self._movements.list_movements(
                MovementFilter(
                    tenant_id=tenant_id,
                    item_id=item_id,
                    movement_type=MovementType.IN,
                    priced_only=True,
                ),
                limit=self._history_limit,
            )
            history = [
                PricePoint(
                    date=m.created_at,
                    price=float(m.unit_price or 0.0),
                    quantity=float(m.quantity),
                )
                for m in recent
            ]
            return InventoryPrice(
                price=price,
                price_source=PriceSource.WAC if price > 0 else PriceSource.NONE,
                last_updated=history[0].date if history else utcnow(),
                price_history=history,
            )
        except Exception:
            logger.warning("inventory_price_unavailable", item_id=item_id, exc_info=True)
            return InventoryPrice(
                price=0.0,
                price_source=PriceSource.NONE,
                last_updated=utcnow(),
                price_history=[],
            )

    async def price_statistics(self, tenant_id: str) -> PriceStatistics:
        """
        Price coverage and recent changes across a tenant's active items.

        An item whose price lookup fails is logged and skipped; the rest of
        the report is still produced.
        """
        items = await self._items.list_items(tenant_id, active_only=True)

        prices: list[float] = []
        changes: list[PriceChange] = []
        for item in items:
            try:
                info = await self.inventory_price(item.id, item.tenant_id)
            except Exception:
                logger.warning("price_statistics_item_failed", item_id=item.id, exc_info=True)
                continue

            if info.price <= 0:
                continue
            prices.append(info.price)

            if len(info.price_history) > 1:
                recent, previous = info.price_history[0], info.price_history[1]
                if recent.price != previous.price:
                    changes.append(
                        PriceChange(
                            item_id=item.id,
                            item_name=item.name,
                            old_price=previous.price,
                            new_price=recent.price,
                            change_date=recent.date,
                        )
                    )

        return PriceStatistics(
            total_items=len(items),
            items_with_prices=len(prices),
            average_price=sum(prices) / len(prices) if prices else 0.0,
            price_range=(
                PriceRange(min=min(prices), max=max(prices)) if prices else PriceRange()
            ),
            recent_price_changes=changes[:RECENT_CHANGES_LIMIT],
        )
