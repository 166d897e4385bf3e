"""Core interfaces (ports) for dependency injection."""

from stock_ledger.core.interfaces.item_store import IItemStore
from stock_ledger.core.interfaces.movement_store import IMovementStore
from stock_ledger.core.interfaces.recipe_gateway import IRecipeGateway

__all__ = [
    # Storage interfaces
    "IMovementStore",
    "IItemStore",
    # Collaborator interfaces
    "IRecipeGateway",
]
