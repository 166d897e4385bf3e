"""SQLite implementation of item lookups."""

import aiosqlite

from stock_ledger.config import get_logger
from stock_ledger.core.entities.inventory import Item
from stock_ledger.core.interfaces.item_store import IItemStore
from stock_ledger.infrastructure.storage.sqlite.connection import ConnectionPool
from stock_ledger.infrastructure.storage.sqlite.movement_store import (
    from_db_timestamp,
    to_db_timestamp,
)

logger = get_logger(__name__)


class SQLiteItemStore(IItemStore):
    """Read access to the items table, plus an upsert used for seeding."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def get_item(self, item_id: str, tenant_id: str | None = None) -> Item | None:
        """Get item by ID, optionally constrained to a tenant."""
        sql = "SELECT * FROM items WHERE id = ?"
        params: list[str] = [item_id]
        if tenant_id is not None:
            sql += " AND tenant_id = ?"
            params.append(tenant_id)

        async with self._pool.acquire() as conn:
            cursor = await conn.execute(sql, params)
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_item(row)

    async def list_items(self, tenant_id: str, active_only: bool = True) -> list[Item]:
        """List a tenant's items ordered by name."""
        sql = "SELECT * FROM items WHERE tenant_id = ?"
        if active_only:
            sql += " AND is_active = 1 AND deleted_at IS NULL"
        sql += " ORDER BY name"

        async with self._pool.acquire() as conn:
            cursor = await conn.execute(sql, (tenant_id,))
            rows = await cursor.fetchall()
            return [self._row_to_item(row) for row in rows]

    async def save_item(self, item: Item) -> Item:
        """Insert or replace an item. Catalog management owns items; this is for seeding."""
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO items (
                    id, tenant_id, name, category, unit, min_stock, is_active, deleted_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    category = excluded.category,
                    unit = excluded.unit,
                    min_stock = excluded.min_stock,
                    is_active = excluded.is_active,
                    deleted_at = excluded.deleted_at
                """,
                (
                    item.id,
                    item.tenant_id,
                    item.name,
                    item.category,
                    item.unit,
                    item.min_stock,
                    1 if item.is_active else 0,
                    to_db_timestamp(item.deleted_at) if item.deleted_at else None,
                ),
            )
        logger.info("item_saved", item_id=item.id, tenant_id=item.tenant_id)
        return item

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> Item:
        """Convert a database row to an Item entity."""
        return Item(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            category=row["category"] or "",
            unit=row["unit"] or "",
            min_stock=float(row["min_stock"]) if row["min_stock"] is not None else None,
            is_active=bool(row["is_active"]),
            deleted_at=from_db_timestamp(row["deleted_at"]),
        )
