"""Inventory ledger domain entities."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class MovementType(str, Enum):
    """Direction of a stock movement."""

    IN = "IN"
    OUT = "OUT"


class UserRole(str, Enum):
    """Roles recognised by the deletion policy."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    STAFF = "STAFF"


class Item(BaseModel):
    """A stock-keeping unit within a tenant."""

    id: str
    tenant_id: str
    name: str
    category: str = ""
    unit: str = ""
    min_stock: float | None = None  # None = not tracked
    is_active: bool = True
    deleted_at: datetime | None = None

    @property
    def is_available(self) -> bool:
        """Active and not soft-deleted; only these appear in stock views."""
        return self.is_active and self.deleted_at is None


class Movement(BaseModel):
    """
    Immutable signed-quantity ledger entry.

    Inbound quantities are positive, outbound negative. Only note, batch
    number and expiry date may be amended after creation.
    """

    id: int | None = None
    tenant_id: str
    item_id: str
    quantity: float  # signed
    movement_type: MovementType
    unit_price: float | None = None
    note: str | None = None
    batch_number: str | None = None
    expiry_date: date | None = None
    user_id: str
    created_at: datetime = Field(default_factory=utcnow)
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_priced_receipt(self) -> bool:
        """IN movement carrying a unit price; the only rows that feed WAC."""
        return (
            not self.is_deleted
            and self.movement_type == MovementType.IN
            and self.unit_price is not None
        )


class StockEntry(BaseModel):
    """Unvalidated stock entry as submitted by a caller."""

    item_id: str
    quantity: float
    movement_type: MovementType
    note: str | None = None
    unit_price: float | None = None
    batch_number: str | None = None
    expiry_date: date | datetime | None = None


@dataclass
class MovementFilter:
    """Criteria for movement queries. Soft-deleted rows are excluded by default."""

    tenant_id: str | None = None
    item_id: str | None = None
    movement_type: MovementType | None = None
    start_date: datetime | None = None  # inclusive
    end_date: datetime | None = None  # inclusive
    priced_only: bool = False
    include_deleted: bool = False
