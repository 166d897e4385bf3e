"""
SQLite-backed recipe gateway.

Reads recipe ingredient rows that point at stock items and recomputes
recipe totals from the stored ingredient costs.
"""

import aiosqlite

from stock_ledger.config import get_logger
from stock_ledger.core.entities.inventory import utcnow
from stock_ledger.core.entities.recipe import RecipeIngredientLink
from stock_ledger.core.exceptions import RecipeGatewayError
from stock_ledger.core.interfaces.recipe_gateway import IRecipeGateway
from stock_ledger.infrastructure.storage.sqlite.connection import ConnectionPool
from stock_ledger.infrastructure.storage.sqlite.movement_store import to_db_timestamp

logger = get_logger(__name__)

_LINK_QUERY = """
    SELECT ri.recipe_id, r.name AS recipe_name, r.tenant_id,
           ri.item_id, ri.unit_cost
    FROM recipe_ingredients ri
    JOIN recipes r ON r.id = ri.recipe_id
"""


class SQLiteRecipeGateway(IRecipeGateway):
    """Recipe subsystem access over the shared database."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def list_ingredient_links(self, tenant_id: str) -> list[RecipeIngredientLink]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                _LINK_QUERY + " WHERE r.tenant_id = ? ORDER BY ri.item_id, ri.recipe_id",
                (tenant_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_link(row) for row in rows]

    async def list_links_for_item(self, item_id: str) -> list[RecipeIngredientLink]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                _LINK_QUERY + " WHERE ri.item_id = ? ORDER BY ri.recipe_id",
                (item_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_link(row) for row in rows]

    async def recalculate_recipe_cost(self, tenant_id: str, recipe_id: str) -> None:
        """
        Recompute total cost and cost per serving from ingredient rows.

        Cost per serving falls back to the total when the recipe yield is
        not positive.

        Raises:
            RecipeGatewayError: Recipe missing or the update failed.
        """
        try:
            async with self._pool.transaction() as conn:
                cursor = await conn.execute(
                    "SELECT yield FROM recipes WHERE id = ? AND tenant_id = ?",
                    (recipe_id, tenant_id),
                )
                recipe = await cursor.fetchone()
                if recipe is None:
                    raise RecipeGatewayError(
                        "recalculate_recipe_cost", "recipe not found", recipe_id=recipe_id
                    )

                cursor = await conn.execute(
                    """
                    SELECT COALESCE(SUM(total_cost), 0) FROM recipe_ingredients
                    WHERE recipe_id = ? AND tenant_id = ?
                    """,
                    (recipe_id, tenant_id),
                )
                total_cost = float((await cursor.fetchone())[0])
                recipe_yield = float(recipe["yield"] or 0)
                cost_per_serving = total_cost / recipe_yield if recipe_yield > 0 else total_cost

                await conn.execute(
                    """
                    UPDATE recipes SET total_cost = ?, cost_per_serving = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (total_cost, cost_per_serving, to_db_timestamp(utcnow()), recipe_id),
                )
        except aiosqlite.Error as e:
            raise RecipeGatewayError(
                "recalculate_recipe_cost", str(e), recipe_id=recipe_id
            ) from e

        logger.info(
            "recipe_cost_recalculated",
            recipe_id=recipe_id,
            tenant_id=tenant_id,
            total_cost=total_cost,
            cost_per_serving=cost_per_serving,
        )

    @staticmethod
    def _row_to_link(row: aiosqlite.Row) -> RecipeIngredientLink:
        return RecipeIngredientLink(
            recipe_id=row["recipe_id"],
            recipe_name=row["recipe_name"],
            tenant_id=row["tenant_id"],
            item_id=row["item_id"],
            unit_cost=float(row["unit_cost"] or 0),
        )
