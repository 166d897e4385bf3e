"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from stock_ledger.core.entities import Item
from stock_ledger.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteItemStore,
    SQLiteMovementStore,
    SQLiteRecipeGateway,
)
from stock_ledger.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def pool(temp_db_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Migrated temporary database behind a small pool."""
    await initialize_database(temp_db_path, create_backup_before=False)
    pool = ConnectionPool(temp_db_path, pool_size=2, busy_timeout=5000)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def movement_store(pool: ConnectionPool) -> SQLiteMovementStore:
    return SQLiteMovementStore(pool)


@pytest.fixture
def item_store(pool: ConnectionPool) -> SQLiteItemStore:
    return SQLiteItemStore(pool)


@pytest.fixture
def recipe_gateway(pool: ConnectionPool) -> SQLiteRecipeGateway:
    return SQLiteRecipeGateway(pool)


@pytest.fixture
async def seeded_items(item_store: SQLiteItemStore) -> list[Item]:
    """Two tenant-1 items and one tenant-2 item."""
    items = [
        Item(id="item-1", tenant_id="tenant-1", name="Flour", category="Dry", unit="kg", min_stock=20),
        Item(id="item-2", tenant_id="tenant-1", name="Butter", category="Dairy", unit="kg"),
        Item(id="item-3", tenant_id="tenant-2", name="Flour", unit="kg"),
    ]
    for item in items:
        await item_store.save_item(item)
    return items


@pytest.fixture
async def add_recipe(pool: ConnectionPool):
    """Insert a recipe with ingredient rows straight into the recipe tables."""

    async def add(recipe_id, tenant_id, name, ingredients, recipe_yield=1.0):
        async with pool.transaction() as conn:
            await conn.execute(
                "INSERT INTO recipes (id, tenant_id, name, yield) VALUES (?, ?, ?, ?)",
                (recipe_id, tenant_id, name, recipe_yield),
            )
            for item_id, quantity, unit_cost in ingredients:
                await conn.execute(
                    """
                    INSERT INTO recipe_ingredients
                        (recipe_id, tenant_id, item_id, quantity, unit_cost, total_cost)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (recipe_id, tenant_id, item_id, quantity, unit_cost, quantity * unit_cost),
                )

    return add
