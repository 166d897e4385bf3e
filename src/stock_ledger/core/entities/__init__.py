"""Core domain entities."""

from stock_ledger.core.entities.inventory import (
    Item,
    Movement,
    MovementFilter,
    MovementType,
    StockEntry,
    UserRole,
    ensure_utc,
    utcnow,
)
from stock_ledger.core.entities.recipe import RecipeIngredientLink
from stock_ledger.core.entities.reports import (
    DeficitSeverity,
    DeficitSummary,
    DeletionPermission,
    InventoryPrice,
    InventoryValuation,
    ItemMovementSummary,
    LowStockItem,
    MovementPage,
    MovementReport,
    Pagination,
    PriceChange,
    PriceInconsistency,
    PricePoint,
    PriceRange,
    PriceSource,
    PriceStatistics,
    RecipePriceDiff,
    StockDeficit,
    StockLevel,
    TotalQuantity,
    ValidationResult,
    ValuationLine,
)

__all__ = [
    # Ledger entities
    "Item",
    "Movement",
    "MovementFilter",
    "MovementType",
    "StockEntry",
    "UserRole",
    "ensure_utc",
    "utcnow",
    # Recipe collaborator
    "RecipeIngredientLink",
    # Aggregation views
    "StockLevel",
    "TotalQuantity",
    "Pagination",
    "MovementPage",
    "MovementReport",
    "ItemMovementSummary",
    # Valuation views
    "ValuationLine",
    "InventoryValuation",
    "PricePoint",
    "PriceSource",
    "InventoryPrice",
    "PriceChange",
    "PriceRange",
    "PriceStatistics",
    # Deficit views
    "DeficitSeverity",
    "StockDeficit",
    "DeficitSummary",
    "LowStockItem",
    # Price consistency
    "RecipePriceDiff",
    "PriceInconsistency",
    # Policy results
    "ValidationResult",
    "DeletionPermission",
]
