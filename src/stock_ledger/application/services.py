"""
Service factory functions for dependency injection.

Wires SQLite store implementations into the core ledger services. Use
cases and API dependencies import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from stock_ledger.config import get_settings
from stock_ledger.core.services import (
    CostValuator,
    DeficitDetector,
    PriceConsistencyChecker,
    StockAggregator,
    StockPolicyService,
)

if TYPE_CHECKING:
    from stock_ledger.core.interfaces import IItemStore, IMovementStore, IRecipeGateway


# Singleton service instances
_stock_aggregator: StockAggregator | None = None
_cost_valuator: CostValuator | None = None
_deficit_detector: DeficitDetector | None = None
_price_checker: PriceConsistencyChecker | None = None
_stock_policy: StockPolicyService | None = None


async def _resolve_stores(
    movement_store: "IMovementStore | None",
    item_store: "IItemStore | None",
) -> "tuple[IMovementStore, IItemStore]":
    """Fill in missing stores from the default pool."""
    # Lazy import infrastructure
    from stock_ledger.infrastructure.storage.sqlite import get_item_store, get_movement_store

    if movement_store is None:
        movement_store = await get_movement_store()
    if item_store is None:
        item_store = await get_item_store()
    return movement_store, item_store


async def get_stock_aggregator(
    movement_store: "IMovementStore | None" = None,
    item_store: "IItemStore | None" = None,
) -> StockAggregator:
    """
    Get or create the StockAggregator.

    Args:
        movement_store: Optional movement store override
        item_store: Optional item store override

    Returns:
        Configured StockAggregator; cached when no override is given
    """
    global _stock_aggregator

    overridden = movement_store is not None or item_store is not None
    if _stock_aggregator is not None and not overridden:
        return _stock_aggregator

    movements, items = await _resolve_stores(movement_store, item_store)
    service = StockAggregator(
        movement_store=movements,
        item_store=items,
        default_page_size=get_settings().ledger.default_page_size,
    )

    if not overridden:
        _stock_aggregator = service
    return service


async def get_cost_valuator(
    movement_store: "IMovementStore | None" = None,
    item_store: "IItemStore | None" = None,
) -> CostValuator:
    """Get or create the CostValuator."""
    global _cost_valuator

    overridden = movement_store is not None or item_store is not None
    if _cost_valuator is not None and not overridden:
        return _cost_valuator

    movements, items = await _resolve_stores(movement_store, item_store)
    service = CostValuator(
        movement_store=movements,
        item_store=items,
        aggregator=await get_stock_aggregator(movement_store, item_store),
        price_history_limit=get_settings().ledger.price_history_limit,
    )

    if not overridden:
        _cost_valuator = service
    return service


async def get_deficit_detector(
    movement_store: "IMovementStore | None" = None,
    item_store: "IItemStore | None" = None,
) -> DeficitDetector:
    """Get or create the DeficitDetector."""
    global _deficit_detector

    overridden = movement_store is not None or item_store is not None
    if _deficit_detector is not None and not overridden:
        return _deficit_detector

    _, items = await _resolve_stores(movement_store, item_store)
    service = DeficitDetector(
        aggregator=await get_stock_aggregator(movement_store, item_store),
        valuator=await get_cost_valuator(movement_store, item_store),
        item_store=items,
    )

    if not overridden:
        _deficit_detector = service
    return service


async def get_price_consistency_checker(
    movement_store: "IMovementStore | None" = None,
    item_store: "IItemStore | None" = None,
    recipe_gateway: "IRecipeGateway | None" = None,
) -> PriceConsistencyChecker:
    """Get or create the PriceConsistencyChecker."""
    global _price_checker

    overridden = any(s is not None for s in (movement_store, item_store, recipe_gateway))
    if _price_checker is not None and not overridden:
        return _price_checker

    if recipe_gateway is None:
        from stock_ledger.infrastructure.storage.sqlite import get_recipe_gateway

        recipe_gateway = await get_recipe_gateway()

    _, items = await _resolve_stores(movement_store, item_store)
    service = PriceConsistencyChecker(
        valuator=await get_cost_valuator(movement_store, item_store),
        item_store=items,
        recipe_gateway=recipe_gateway,
    )

    if not overridden:
        _price_checker = service
    return service


async def get_stock_policy_service(
    movement_store: "IMovementStore | None" = None,
) -> StockPolicyService:
    """Get or create the StockPolicyService. Current stock only needs movements."""
    global _stock_policy

    if _stock_policy is not None and movement_store is None:
        return _stock_policy

    if movement_store is None:
        from stock_ledger.infrastructure.storage.sqlite import get_movement_store

        movements = await get_movement_store()
    else:
        movements = movement_store
    service = StockPolicyService(movement_store=movements, aggregator=StockAggregator(movements))

    if movement_store is None:
        _stock_policy = service
    return service


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _stock_aggregator
    global _cost_valuator
    global _deficit_detector
    global _price_checker
    global _stock_policy

    _stock_aggregator = None
    _cost_valuator = None
    _deficit_detector = None
    _price_checker = None
    _stock_policy = None


__all__ = [
    # Factory functions
    "get_stock_aggregator",
    "get_cost_valuator",
    "get_deficit_detector",
    "get_price_consistency_checker",
    "get_stock_policy_service",
    # Reset
    "reset_services",
]
