"""SQLite implementation of the movement log."""

from datetime import date, datetime
from typing import Any

import aiosqlite

from stock_ledger.config import get_logger
from stock_ledger.core.entities.inventory import (
    Movement,
    MovementFilter,
    MovementType,
    ensure_utc,
    utcnow,
)
from stock_ledger.core.interfaces.movement_store import IMovementStore
from stock_ledger.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


def to_db_timestamp(value: datetime) -> str:
    """
    Fixed-width UTC ISO string.

    Every stored timestamp shares this format so that text comparison in
    SQL orders the same way as the instants.
    """
    return ensure_utc(value).isoformat(timespec="microseconds")


def from_db_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return ensure_utc(datetime.fromisoformat(value))


def _build_where(movement_filter: MovementFilter) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []

    if movement_filter.tenant_id is not None:
        clauses.append("tenant_id = ?")
        params.append(movement_filter.tenant_id)
    if movement_filter.item_id is not None:
        clauses.append("item_id = ?")
        params.append(movement_filter.item_id)
    if movement_filter.movement_type is not None:
        clauses.append("movement_type = ?")
        params.append(MovementType(movement_filter.movement_type).value)
    if movement_filter.start_date is not None:
        clauses.append("created_at >= ?")
        params.append(to_db_timestamp(movement_filter.start_date))
    if movement_filter.end_date is not None:
        clauses.append("created_at <= ?")
        params.append(to_db_timestamp(movement_filter.end_date))
    if movement_filter.priced_only:
        clauses.append("unit_price IS NOT NULL")
    if not movement_filter.include_deleted:
        clauses.append("deleted_at IS NULL")

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class SQLiteMovementStore(IMovementStore):
    """SQLite implementation of the append-only movement log."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def add_movement(self, movement: Movement) -> Movement:
        """Append a movement and return it with its generated ID."""
        created_at = ensure_utc(movement.created_at)
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory_movements (
                    tenant_id, item_id, quantity, movement_type, unit_price,
                    note, batch_number, expiry_date, user_id, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    movement.tenant_id,
                    movement.item_id,
                    movement.quantity,
                    movement.movement_type.value,
                    movement.unit_price,
                    movement.note,
                    movement.batch_number,
                    movement.expiry_date.isoformat() if movement.expiry_date else None,
                    movement.user_id,
                    to_db_timestamp(created_at),
                ),
            )
            stored = movement.model_copy(
                update={"id": cursor.lastrowid, "created_at": created_at}
            )
            logger.info(
                "stock_movement_recorded",
                movement_id=stored.id,
                item_id=stored.item_id,
                type=stored.movement_type.value,
                qty=stored.quantity,
            )
            return stored

    async def get_movement(
        self, movement_id: int, include_deleted: bool = False
    ) -> Movement | None:
        """Get a movement by ID."""
        sql = "SELECT * FROM inventory_movements WHERE id = ?"
        if not include_deleted:
            sql += " AND deleted_at IS NULL"
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(sql, (movement_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_movement(row)

    async def list_movements(
        self,
        movement_filter: MovementFilter,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Movement]:
        """List movements matching the filter, newest first."""
        where, params = _build_where(movement_filter)
        sql = f"SELECT * FROM inventory_movements {where} ORDER BY created_at DESC, id DESC"
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])

        async with self._pool.acquire() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    async def count_movements(self, movement_filter: MovementFilter) -> int:
        """Count movements matching the filter."""
        where, params = _build_where(movement_filter)
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                f"SELECT COUNT(*) FROM inventory_movements {where}", params
            )
            row = await cursor.fetchone()
            return int(row[0]) if row else 0

    async def amend_movement(
        self,
        movement_id: int,
        note: str | None = None,
        batch_number: str | None = None,
        expiry_date: date | None = None,
    ) -> Movement | None:
        """Update note, batch number and expiry date. Omitted fields are kept."""
        updates: dict[str, Any] = {}
        if note is not None:
            updates["note"] = note
        if batch_number is not None:
            updates["batch_number"] = batch_number
        if expiry_date is not None:
            updates["expiry_date"] = expiry_date.isoformat()

        if updates:
            assignments = ", ".join(f"{column} = ?" for column in updates)
            async with self._pool.transaction() as conn:
                cursor = await conn.execute(
                    f"""
                    UPDATE inventory_movements SET {assignments}
                    WHERE id = ? AND deleted_at IS NULL
                    """,
                    [*updates.values(), movement_id],
                )
                if cursor.rowcount == 0:
                    return None
            logger.info(
                "stock_movement_amended",
                movement_id=movement_id,
                fields=list(updates),
            )

        return await self.get_movement(movement_id)

    async def soft_delete_movement(self, movement_id: int) -> bool:
        """Stamp deleted_at; the row stays for audit."""
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE inventory_movements SET deleted_at = ?
                WHERE id = ? AND deleted_at IS NULL
                """,
                (to_db_timestamp(utcnow()), movement_id),
            )
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("stock_movement_deleted", movement_id=movement_id)
        return deleted

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> Movement:
        """Convert a database row to a Movement entity."""
        expiry_date = None
        if row["expiry_date"]:
            expiry_date = date.fromisoformat(row["expiry_date"][:10])

        return Movement(
            id=row["id"],
            tenant_id=row["tenant_id"],
            item_id=row["item_id"],
            quantity=float(row["quantity"]),
            movement_type=MovementType(row["movement_type"]),
            unit_price=float(row["unit_price"]) if row["unit_price"] is not None else None,
            note=row["note"],
            batch_number=row["batch_number"],
            expiry_date=expiry_date,
            user_id=row["user_id"],
            created_at=from_db_timestamp(row["created_at"]),
            deleted_at=from_db_timestamp(row["deleted_at"]),
        )
