"""
Pure reductions over movement sequences.

Every derived view in the engine bottoms out in one of these functions.
They never touch storage, so the result depends only on the rows passed in
and not on their order.
"""

from collections.abc import Iterable

from stock_ledger.core.entities.inventory import Movement, MovementType

# Decimal places kept for quantities; float sums drift below this
QUANTITY_PRECISION = 6


def round_quantity(value: float) -> float:
    """Snap a quantity to QUANTITY_PRECISION so 0.1 + 0.2 compares equal to 0.3."""
    return round(value, QUANTITY_PRECISION) + 0.0


def live(movements: Iterable[Movement]) -> list[Movement]:
    """Drop soft-deleted rows."""
    return [m for m in movements if not m.is_deleted]


def sum_quantities(movements: Iterable[Movement]) -> float:
    """Current stock: the sum of signed quantities."""
    return round_quantity(sum((m.quantity for m in live(movements)), 0.0))


def split_totals(movements: Iterable[Movement]) -> tuple[float, float]:
    """Return (total_in, total_out); total_out keeps its negative sign."""
    total_in = 0.0
    total_out = 0.0
    for m in live(movements):
        if m.movement_type == MovementType.IN:
            total_in += m.quantity
        else:
            total_out += m.quantity
    return round_quantity(total_in), round_quantity(total_out)


def weighted_average(movements: Iterable[Movement]) -> float:
    """
    Weighted-average unit cost over priced IN movements.

    OUT rows and unpriced IN rows are excluded from numerator and
    denominator. Returns 0.0 when nothing qualifies.
    """
    total_qty = 0.0
    total_value = 0.0
    for m in movements:
        if not m.is_priced_receipt:
            continue
        total_qty += m.quantity
        total_value += m.quantity * (m.unit_price or 0.0)
    if total_qty <= 0:
        return 0.0
    return total_value / total_qty


def group_by_item(movements: Iterable[Movement]) -> dict[str, list[Movement]]:
    """Bucket movements by item ID, preserving input order."""
    grouped: dict[str, list[Movement]] = {}
    for m in movements:
        grouped.setdefault(m.item_id, []).append(m)
    return grouped
