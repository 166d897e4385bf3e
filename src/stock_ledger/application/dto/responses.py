"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from stock_ledger.core.entities.inventory import Movement, utcnow


class MovementResponse(BaseModel):
    """A ledger entry."""

    id: int = Field(..., description="Entry ID")
    tenant_id: str
    item_id: str
    quantity: float = Field(..., description="Signed quantity")
    movement_type: str = Field(..., description="IN or OUT")
    unit_price: float | None = None
    note: str | None = None
    batch_number: str | None = None
    expiry_date: date | None = None
    user_id: str
    created_at: datetime

    @classmethod
    def from_entity(cls, movement: Movement) -> "MovementResponse":
        return cls(
            id=movement.id,  # type: ignore[arg-type]
            tenant_id=movement.tenant_id,
            item_id=movement.item_id,
            quantity=movement.quantity,
            movement_type=movement.movement_type.value,
            unit_price=movement.unit_price,
            note=movement.note,
            batch_number=movement.batch_number,
            expiry_date=movement.expiry_date,
            user_id=movement.user_id,
            created_at=movement.created_at,
        )


class RecordMovementResponse(BaseModel):
    """Result of appending a movement."""

    movement: MovementResponse
    current_stock: float = Field(..., description="Item stock after the movement")
    in_deficit: bool = Field(default=False, description="Stock is below zero")
    average_cost: float = Field(default=0.0, description="WAC after the movement")
    recipes_recalculated: int = Field(
        default=0, description="Recipes recosted because the WAC changed"
    )


class AdjustStockResponse(BaseModel):
    """Result of a stock adjustment."""

    movement: MovementResponse
    previous_stock: float
    new_stock: float


class CurrentStockResponse(BaseModel):
    item_id: str
    tenant_id: str
    current_stock: float
    start_date: datetime | None = None
    end_date: datetime | None = None


class StockAvailabilityResponse(BaseModel):
    item_id: str
    requested_quantity: float
    available: bool


class LowStockCheckResponse(BaseModel):
    item_id: str
    is_low_stock: bool


class CountResponse(BaseModel):
    count: int


class PaginationResponse(BaseModel):
    current_page: int
    total: int
    pages: int
    limit: int


class MovementPageResponse(BaseModel):
    """One page of an item's movement history."""

    entries: list[MovementResponse] = Field(default_factory=list)
    pagination: PaginationResponse


class ItemMovementSummaryResponse(BaseModel):
    name: str
    total_in: float
    total_out: float
    net: float


class MovementReportSummaryResponse(BaseModel):
    total_entries: int
    total_in: float
    total_out: float
    item_summary: dict[str, ItemMovementSummaryResponse] = Field(default_factory=dict)


class MovementReportResponse(BaseModel):
    """Filtered movements with per-direction and per-item totals."""

    entries: list[MovementResponse] = Field(default_factory=list)
    summary: MovementReportSummaryResponse


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status (healthy/degraded/unhealthy)")
    version: str = Field(..., description="Application version")
    database: str = Field(..., description="Database reachability")
    timestamp: datetime = Field(default_factory=utcnow)


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. MOVEMENT_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    errors: list[str] | None = Field(default=None, description="All rule violations")
    timestamp: datetime = Field(default_factory=utcnow)
