"""Pytest configuration and fixtures.

Store fixtures are AsyncMocks that filter a fixed list of movements the way
a real store applies a MovementFilter.
"""

from collections.abc import Generator
from datetime import date, datetime, timedelta
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from stock_ledger.application.services import reset_services
from stock_ledger.config.settings import reset_settings
from stock_ledger.core.entities import (
    Item,
    Movement,
    MovementFilter,
    MovementType,
    ensure_utc,
    utcnow,
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch) -> Generator[None, None, None]:
    """Point storage at a temp dir and drop cached settings/services."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


def make_item(
    item_id: str = "item-1",
    tenant_id: str = "tenant-1",
    name: str | None = None,
    min_stock: float | None = None,
    **kwargs,
) -> Item:
    """Build an Item with test defaults."""
    return Item(
        id=item_id,
        tenant_id=tenant_id,
        name=name or item_id.replace("-", " ").title(),
        category=kwargs.pop("category", "Dry goods"),
        unit=kwargs.pop("unit", "kg"),
        min_stock=min_stock,
        **kwargs,
    )


_next_id = iter(range(1, 1_000_000))


def make_movement(
    quantity: float,
    unit_price: float | None = None,
    item_id: str = "item-1",
    tenant_id: str = "tenant-1",
    user_id: str = "user-1",
    created_at: datetime | None = None,
    days_ago: float = 0,
    deleted: bool = False,
    expiry_date: date | None = None,
    **kwargs,
) -> Movement:
    """Build a Movement whose direction follows the sign of quantity."""
    created = created_at or (utcnow() - timedelta(days=days_ago))
    return Movement(
        id=kwargs.pop("id", next(_next_id)),
        tenant_id=tenant_id,
        item_id=item_id,
        quantity=quantity,
        movement_type=MovementType.IN if quantity > 0 else MovementType.OUT,
        unit_price=unit_price,
        user_id=user_id,
        created_at=created,
        deleted_at=created if deleted else None,
        expiry_date=expiry_date,
        **kwargs,
    )


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def movement_factory():
    return make_movement


def matches(movement: Movement, movement_filter: MovementFilter) -> bool:
    f = movement_filter
    if f.tenant_id is not None and movement.tenant_id != f.tenant_id:
        return False
    if f.item_id is not None and movement.item_id != f.item_id:
        return False
    if f.movement_type is not None and movement.movement_type != f.movement_type:
        return False
    if f.start_date is not None and movement.created_at < ensure_utc(f.start_date):
        return False
    if f.end_date is not None and movement.created_at > ensure_utc(f.end_date):
        return False
    if f.priced_only and movement.unit_price is None:
        return False
    if not f.include_deleted and movement.is_deleted:
        return False
    return True


@pytest.fixture
def movement_store_with():
    """Build a movement store mock over a fixed list of movements."""

    def build(movements: list[Movement]) -> AsyncMock:
        """Appended movements are visible to later reads."""
        store = AsyncMock()

        async def list_movements(movement_filter, limit=None, offset=0):
            rows = [m for m in movements if matches(m, movement_filter)]
            rows.sort(key=lambda m: (m.created_at, m.id or 0), reverse=True)
            if limit is not None:
                rows = rows[offset : offset + limit]
            return rows

        async def count_movements(movement_filter):
            return len([m for m in movements if matches(m, movement_filter)])

        async def get_movement(movement_id, include_deleted=False):
            for m in movements:
                if m.id == movement_id and (include_deleted or not m.is_deleted):
                    return m
            return None

        async def add_movement(movement):
            stored = movement.model_copy(update={"id": 10_000 + len(movements)})
            movements.append(stored)
            return stored

        store.list_movements.side_effect = list_movements
        store.count_movements.side_effect = count_movements
        store.get_movement.side_effect = get_movement
        store.add_movement.side_effect = add_movement
        store.soft_delete_movement.return_value = True
        return store

    return build


@pytest.fixture
def item_store_with():
    """Build an item store mock over a fixed list of items."""

    def build(items: list[Item]) -> AsyncMock:
        store = AsyncMock()

        async def list_items(tenant_id, active_only=True):
            return [
                i
                for i in items
                if i.tenant_id == tenant_id and (not active_only or i.is_available)
            ]

        async def get_item(item_id, tenant_id=None):
            for i in items:
                if i.id == item_id and (tenant_id is None or i.tenant_id == tenant_id):
                    return i
            return None

        store.list_items.side_effect = list_items
        store.get_item.side_effect = get_item
        return store

    return build
