"""
Derived ledger views.

Pure Pydantic models, never persisted. Every instance is recomputed from the
movement log on request.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from stock_ledger.core.entities.inventory import Movement


class PriceSource(str, Enum):
    """Where an item's inventory price came from."""

    WAC = "WAC"
    NONE = "NONE"


class DeficitSeverity(str, Enum):
    """Deficit classification."""

    CRITICAL = "critical"
    MODERATE = "moderate"


# --- Aggregation ---


class StockLevel(BaseModel):
    """Per-item inbound/outbound totals."""

    item_id: str
    item_name: str
    category: str = ""
    unit: str = ""
    total_in: float = 0.0
    total_out: float = 0.0  # negative or zero
    current: float = 0.0  # total_in + total_out


class TotalQuantity(BaseModel):
    """Tenant-wide positive on-hand quantity."""

    total_quantity: float = 0.0
    item_count: int = 0


class Pagination(BaseModel):
    current_page: int
    total: int
    pages: int
    limit: int


class MovementPage(BaseModel):
    """One page of a movement listing."""

    entries: list[Movement] = Field(default_factory=list)
    pagination: Pagination


class ItemMovementSummary(BaseModel):
    name: str
    total_in: float = 0.0
    total_out: float = 0.0
    net: float = 0.0


class MovementReport(BaseModel):
    """Filtered movements with totals per direction and per item."""

    entries: list[Movement] = Field(default_factory=list)
    total_entries: int = 0
    total_in: float = 0.0
    total_out: float = 0.0
    item_summary: dict[str, ItemMovementSummary] = Field(default_factory=dict)


# --- Valuation ---


class ValuationLine(BaseModel):
    item_id: str
    item_name: str
    current_stock: float
    average_cost: float
    total_value: float


class InventoryValuation(BaseModel):
    total_value: float = 0.0
    items: list[ValuationLine] = Field(default_factory=list)


class PricePoint(BaseModel):
    """One priced IN movement as seen by price synchronisation."""

    date: datetime
    price: float
    quantity: float


class InventoryPrice(BaseModel):
    price: float = 0.0
    price_source: PriceSource = PriceSource.NONE
    last_updated: datetime
    price_history: list[PricePoint] = Field(default_factory=list)


class PriceChange(BaseModel):
    item_id: str
    item_name: str
    old_price: float
    new_price: float
    change_date: datetime


class PriceRange(BaseModel):
    min: float = 0.0
    max: float = 0.0


class PriceStatistics(BaseModel):
    total_items: int = 0
    items_with_prices: int = 0
    average_price: float = 0.0
    price_range: PriceRange = Field(default_factory=PriceRange)
    recent_price_changes: list[PriceChange] = Field(default_factory=list)


# --- Deficits and low stock ---


class StockDeficit(BaseModel):
    item_id: str
    item_name: str
    category: str = ""
    unit: str = ""
    current_stock: float
    deficit_amount: float
    tenant_id: str


class DeficitSummary(BaseModel):
    total_deficit_items: int = 0
    total_deficit_value: float = 0.0
    critical_deficits: int = 0
    moderate_deficits: int = 0


class LowStockItem(BaseModel):
    item_id: str
    item_name: str
    category: str = ""
    unit: str = ""
    current: float
    min_stock: float | None = None
    threshold: float


# --- Price consistency ---


class RecipePriceDiff(BaseModel):
    recipe_id: str
    recipe_name: str
    recipe_price: float
    difference: float
    percentage_diff: float


class PriceInconsistency(BaseModel):
    item_id: str
    item_name: str
    inventory_price: float
    recipe_prices: list[RecipePriceDiff] = Field(default_factory=list)


# --- Policy results ---


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)


class DeletionPermission(BaseModel):
    allowed: bool
    reason: str | None = None
