"""SQLite storage implementations."""

from stock_ledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
)
from stock_ledger.infrastructure.storage.sqlite.item_store import SQLiteItemStore
from stock_ledger.infrastructure.storage.sqlite.movement_store import SQLiteMovementStore
from stock_ledger.infrastructure.storage.sqlite.recipe_gateway import SQLiteRecipeGateway

async def get_movement_store(pool: ConnectionPool | None = None) -> SQLiteMovementStore:
    """Movement store over the given pool, or the default pool."""
    return SQLiteMovementStore(pool or await get_pool())


async def get_item_store(pool: ConnectionPool | None = None) -> SQLiteItemStore:
    """Item store over the given pool, or the default pool."""
    return SQLiteItemStore(pool or await get_pool())


async def get_recipe_gateway(pool: ConnectionPool | None = None) -> SQLiteRecipeGateway:
    """Recipe gateway over the given pool, or the default pool."""
    return SQLiteRecipeGateway(pool or await get_pool())


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    # Store classes
    "SQLiteMovementStore",
    "SQLiteItemStore",
    "SQLiteRecipeGateway",
    # Factory functions
    "get_movement_store",
    "get_item_store",
    "get_recipe_gateway",
]
