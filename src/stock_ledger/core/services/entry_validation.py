"""Stock entry validation rules."""

from datetime import UTC, date, datetime, time

from stock_ledger.core.entities.inventory import MovementType, StockEntry, ensure_utc, utcnow
from stock_ledger.core.entities.reports import ValidationResult

QUANTITY_ZERO = "Quantity must be non-zero"
IN_QUANTITY_NOT_POSITIVE = "Inbound quantity must be positive"
OUT_QUANTITY_NOT_NEGATIVE = "Outbound quantity must be negative"
IN_PRICE_REQUIRED = "Unit price is required for inbound entries"
PRICE_NEGATIVE = "Unit price must not be negative"
EXPIRY_NOT_IN_FUTURE = "Expiry date must be in the future"


def _expiry_instant(expiry: date | datetime) -> datetime:
    # A bare date means midnight UTC of that day.
    if isinstance(expiry, datetime):
        return ensure_utc(expiry)
    return datetime.combine(expiry, time.min, tzinfo=UTC)


def validate_stock_entry(entry: StockEntry, now: datetime | None = None) -> ValidationResult:
    """
    Check an entry against every rule and collect all violations.

    Rules are independent; one failure does not stop the others from
    being reported.

    Args:
        entry: Entry as submitted.
        now: Reference time for the expiry rule. Defaults to the current UTC time.

    Returns:
        ValidationResult listing every violated rule.
    """
    errors: list[str] = []

    if entry.quantity == 0:
        errors.append(QUANTITY_ZERO)

    if entry.movement_type == MovementType.IN and entry.quantity < 0:
        errors.append(IN_QUANTITY_NOT_POSITIVE)

    if entry.movement_type == MovementType.OUT and entry.quantity > 0:
        errors.append(OUT_QUANTITY_NOT_NEGATIVE)

    if entry.movement_type == MovementType.IN and (
        entry.unit_price is None or entry.unit_price <= 0
    ):
        errors.append(IN_PRICE_REQUIRED)

    if entry.unit_price is not None and entry.unit_price < 0:
        errors.append(PRICE_NEGATIVE)

    if entry.expiry_date is not None:
        reference = ensure_utc(now) if now else utcnow()
        if _expiry_instant(entry.expiry_date) <= reference:
            errors.append(EXPIRY_NOT_IN_FUTURE)

    return ValidationResult(is_valid=not errors, errors=errors)
