"""Recipe subsystem view of an ingredient that references a stock item."""

from pydantic import BaseModel


class RecipeIngredientLink(BaseModel):
    """One recipe ingredient row pointing at an inventory item."""

    recipe_id: str
    recipe_name: str
    tenant_id: str  # tenant owning the recipe
    item_id: str
    unit_cost: float  # per-unit ingredient cost stored on the recipe
