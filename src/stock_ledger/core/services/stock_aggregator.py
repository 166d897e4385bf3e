"""
Stock Aggregator.

Reduces the movement log into current stock per item, per date window and
per tenant. All operations are read-only.
"""

from __future__ import annotations

import math
from datetime import datetime

from stock_ledger.config import get_logger
from stock_ledger.core.entities.inventory import Item, MovementFilter, MovementType
from stock_ledger.core.entities.reports import (
    ItemMovementSummary,
    MovementPage,
    MovementReport,
    Pagination,
    StockLevel,
    TotalQuantity,
)
from stock_ledger.core.exceptions import ConfigurationError
from stock_ledger.core.interfaces.item_store import IItemStore
from stock_ledger.core.interfaces.movement_store import IMovementStore
from stock_ledger.core.services import ledger_math

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 50


class StockAggregator:
    """Current stock as the signed sum of the movement log."""

    def __init__(
        self,
        movement_store: IMovementStore,
        item_store: IItemStore | None = None,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._movements = movement_store
        self._items = item_store
        self._page_size = default_page_size

    async def current_stock(
        self,
        item_id: str,
        tenant_id: str,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> float:
        """
        Sum signed quantities of an item's live movements.

        Args:
            item_id: Item to aggregate.
            tenant_id: Tenant scope.
            start_date: Inclusive lower bound on creation time.
            end_date: Inclusive upper bound on creation time.

        Returns:
            Current stock; 0 when the item has no movements.
        """
        movements = await self._movements.list_movements(
            MovementFilter(
                tenant_id=tenant_id,
                item_id=item_id,
                start_date=start_date,
                end_date=end_date,
            )
        )
        return ledger_math.sum_quantities(movements)

    async def check_stock_availability(
        self, item_id: str, requested_quantity: float, tenant_id: str
    ) -> bool:
        """True when on-hand stock covers the requested quantity (sign ignored)."""
        current = await self.current_stock(item_id, tenant_id)
        return current >= abs(requested_quantity)

    async def stock_levels(self, tenant_id: str) -> list[StockLevel]:
        """Inbound, outbound and current totals for every active item of the tenant."""
        items = await self._require_items().list_items(tenant_id, active_only=True)
        grouped = ledger_math.group_by_item(
            await self._movements.list_movements(MovementFilter(tenant_id=tenant_id))
        )

        levels: list[StockLevel] = []
        for item in items:
            total_in, total_out = ledger_math.split_totals(grouped.get(item.id, []))
            levels.append(
                StockLevel(
                    item_id=item.id,
                    item_name=item.name,
                    category=item.category,
                    unit=item.unit,
                    total_in=total_in,
                    total_out=total_out,
                    current=ledger_math.round_quantity(total_in + total_out),
                )
            )
        return levels

    async def total_quantity(self, tenant_id: str) -> TotalQuantity:
        """Sum of positive stock positions; deficits do not offset other items."""
        grouped = ledger_math.group_by_item(
            await self._movements.list_movements(MovementFilter(tenant_id=tenant_id))
        )
        positions = [ledger_math.sum_quantities(rows) for rows in grouped.values()]
        return TotalQuantity(
            total_quantity=sum((q for q in positions if q > 0), 0.0),
            item_count=len(grouped),
        )

    async def list_movements(
        self,
        item_id: str,
        tenant_id: str,
        page: int = 1,
        limit: int | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        movement_type: MovementType | None = None,
    ) -> MovementPage:
        """Paginated movement history of one item, newest first."""
        page = max(page, 1)
        limit = limit or self._page_size
        movement_filter = MovementFilter(
            tenant_id=tenant_id,
            item_id=item_id,
            movement_type=movement_type,
            start_date=start_date,
            end_date=end_date,
        )

        entries = await self._movements.list_movements(
            movement_filter, limit=limit, offset=(page - 1) * limit
        )
        total = await self._movements.count_movements(movement_filter)

        return MovementPage(
            entries=entries,
            pagination=Pagination(
                current_page=page,
                total=total,
                pages=math.ceil(total / limit),
                limit=limit,
            ),
        )

    async def movement_report(
        self,
        tenant_id: str,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        item_id: str | None = None,
        movement_type: MovementType | None = None,
    ) -> MovementReport:
        """Filtered movements with direction totals and a per-item breakdown."""
        entries = await self._movements.list_movements(
            MovementFilter(
                tenant_id=tenant_id,
                item_id=item_id,
                movement_type=movement_type,
                start_date=start_date,
                end_date=end_date,
            )
        )
        names = await self._item_names(tenant_id)

        total_in, total_out = ledger_math.split_totals(entries)
        summary: dict[str, ItemMovementSummary] = {}
        for entry in entries:
            line = summary.setdefault(
                entry.item_id,
                ItemMovementSummary(name=names.get(entry.item_id, entry.item_id)),
            )
            if entry.movement_type == MovementType.IN:
                line.total_in += entry.quantity
            else:
                line.total_out += entry.quantity
            line.net = line.total_in + line.total_out

        logger.info(
            "movement_report_built",
            tenant_id=tenant_id,
            entries=len(entries),
            items=len(summary),
        )
        return MovementReport(
            entries=entries,
            total_entries=len(entries),
            total_in=total_in,
            total_out=total_out,
            item_summary=summary,
        )

    async def _item_names(self, tenant_id: str) -> dict[str, str]:
        if self._items is None:
            return {}
        items: list[Item] = await self._items.list_items(tenant_id, active_only=False)
        return {item.id: item.name for item in items}

    def _require_items(self) -> IItemStore:
        if self._items is None:
            raise ConfigurationError("StockAggregator needs an item store for per-item views")
        return self._items
