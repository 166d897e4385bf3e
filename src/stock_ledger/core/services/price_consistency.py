"""
Price consistency between inventory WAC and recipe ingredient costs.

Also propagates inventory price changes to the recipe subsystem.
"""

from __future__ import annotations

from stock_ledger.config import get_logger
from stock_ledger.core.entities.recipe import RecipeIngredientLink
from stock_ledger.core.entities.reports import PriceInconsistency, RecipePriceDiff
from stock_ledger.core.interfaces.item_store import IItemStore
from stock_ledger.core.interfaces.recipe_gateway import IRecipeGateway
from stock_ledger.core.services.cost_valuator import CostValuator

logger = get_logger(__name__)

# Differences at or below this are floating-point noise, not mismatches.
MATERIALITY_THRESHOLD = 0.01


def compare_prices(
    inventory_price: float, links: list[RecipeIngredientLink]
) -> list[RecipePriceDiff]:
    """Material differences between one WAC and each linked recipe cost."""
    diffs: list[RecipePriceDiff] = []
    for link in links:
        recipe_price = float(link.unit_cost)
        difference = abs(recipe_price - inventory_price)
        if difference <= MATERIALITY_THRESHOLD:
            continue
        diffs.append(
            RecipePriceDiff(
                recipe_id=link.recipe_id,
                recipe_name=link.recipe_name,
                recipe_price=recipe_price,
                difference=difference,
                percentage_diff=(
                    difference / inventory_price * 100 if inventory_price > 0 else 0.0
                ),
            )
        )
    return diffs


class PriceConsistencyChecker:
    """Cross-checks WAC against recipe costs and triggers recipe recalculation."""

    def __init__(
        self,
        valuator: CostValuator,
        item_store: IItemStore,
        recipe_gateway: IRecipeGateway,
    ) -> None:
        self._valuator = valuator
        self._items = item_store
        self._recipes = recipe_gateway

    async def validate_price_consistency(self, tenant_id: str) -> list[PriceInconsistency]:
        """
        Items whose recipe ingredient cost disagrees with inventory WAC.

        Items with no recipe link, a zero WAC, or only immaterial differences
        are omitted. A lookup failure is logged and yields an empty report.
        """
        try:
            links = await self._recipes.list_ingredient_links(tenant_id)
            items = await self._items.list_items(tenant_id, active_only=True)
        except Exception:
            logger.error("price_consistency_lookup_failed", tenant_id=tenant_id, exc_info=True)
            return []

        links_by_item: dict[str, list[RecipeIngredientLink]] = {}
        for link in links:
            links_by_item.setdefault(link.item_id, []).append(link)

        inconsistencies: list[PriceInconsistency] = []
        for item in items:
            item_links = links_by_item.get(item.id)
            if not item_links:
                continue

            inventory_price = await self._valuator.weighted_average_cost(
                item.id, item.tenant_id
            )
            if inventory_price <= 0:
                continue

            diffs = compare_prices(inventory_price, item_links)
            if diffs:
                inconsistencies.append(
                    PriceInconsistency(
                        item_id=item.id,
                        item_name=item.name,
                        inventory_price=inventory_price,
                        recipe_prices=diffs,
                    )
                )

        logger.info(
            "price_consistency_checked",
            tenant_id=tenant_id,
            linked_items=len(links_by_item),
            inconsistent=len(inconsistencies),
        )
        return inconsistencies

    async def notify_price_change(
        self, item_id: str, new_price: float, old_price: float
    ) -> int:
        """
        Ask the recipe subsystem to recost every recipe using the item.

        Recipes are recalculated one at a time. A failing recipe is logged
        and the rest still run; nothing is rolled back and nothing is raised.

        Returns:
            Number of recipes successfully recalculated.
        """
        try:
            affected = await self._recipes.list_links_for_item(item_id)
        except Exception:
            logger.error("price_change_lookup_failed", item_id=item_id, exc_info=True)
            return 0

        if not affected:
            return 0

        logger.info(
            "price_change_detected",
            item_id=item_id,
            old_price=old_price,
            new_price=new_price,
            affected_recipes=len(affected),
        )

        recalculated = 0
        for link in affected:
            try:
                await self._recipes.recalculate_recipe_cost(link.tenant_id, link.recipe_id)
                recalculated += 1
            except Exception as e:
                logger.warning(
                    "recipe_recalculation_failed",
                    recipe_id=link.recipe_id,
                    item_id=item_id,
                    error=str(e),
                )
        return recalculated
