"""Abstract interface to the recipe subsystem."""

from abc import ABC, abstractmethod

from stock_ledger.core.entities.recipe import RecipeIngredientLink


class IRecipeGateway(ABC):
    """Recipe ingredient lookups and cost recalculation requests."""

    @abstractmethod
    async def list_ingredient_links(self, tenant_id: str) -> list[RecipeIngredientLink]:
        """All ingredient rows of the tenant's recipes that reference a stock item."""
        pass

    @abstractmethod
    async def list_links_for_item(self, item_id: str) -> list[RecipeIngredientLink]:
        """Ingredient rows referencing one item, across its recipes."""
        pass

    @abstractmethod
    async def recalculate_recipe_cost(self, tenant_id: str, recipe_id: str) -> None:
        """Ask the recipe subsystem to recompute a recipe's cost."""
        pass
