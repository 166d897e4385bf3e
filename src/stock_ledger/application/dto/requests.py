"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from stock_ledger.core.entities.inventory import MovementType


class RecordMovementRequest(BaseModel):
    """Request to append a movement to the ledger.

    Sign and price rules are checked by the use case so that every
    violation is reported together.
    """

    tenant_id: str = Field(..., min_length=1, description="Tenant scope")
    user_id: str = Field(..., min_length=1, description="Recording user")
    item_id: str = Field(..., min_length=1, description="Item receiving the movement")
    quantity: float = Field(
        ...,
        description="Signed quantity: positive for IN, negative for OUT",
        examples=[100, -15.5],
    )
    movement_type: MovementType = Field(..., description="IN or OUT")
    unit_price: float | None = Field(
        default=None,
        description="Unit purchase price, required for IN",
        examples=[1000],
    )
    note: str | None = Field(default=None, max_length=1000, description="Free text note")
    batch_number: str | None = Field(default=None, max_length=100, description="Batch/lot")
    expiry_date: date | None = Field(default=None, description="Expiry date (future)")


class AdjustStockRequest(BaseModel):
    """Request to bring an item's stock to an exact quantity."""

    tenant_id: str = Field(..., min_length=1, description="Tenant scope")
    user_id: str = Field(..., min_length=1, description="Adjusting user")
    item_id: str = Field(..., min_length=1, description="Item to adjust")
    new_quantity: float = Field(..., description="Target stock after adjustment")
    reason: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Why the adjustment is needed",
        examples=["stock count"],
    )


class AmendMovementRequest(BaseModel):
    """Request to amend descriptive fields of a recorded movement.

    Unknown fields are kept so that attempts to change quantity or
    direction can be rejected explicitly.
    """

    model_config = ConfigDict(extra="allow")

    note: str | None = Field(default=None, max_length=1000, description="New note")
    batch_number: str | None = Field(default=None, max_length=100, description="New batch")
    expiry_date: date | None = Field(default=None, description="New expiry date")
