"""
Adjustment and deletion policy.

Adjustments append a corrective movement; nothing in the log is ever edited.
Deletion is a soft delete gated by entry age and the caller's role.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from stock_ledger.config import get_logger
from stock_ledger.core.entities.inventory import (
    Movement,
    MovementType,
    UserRole,
    ensure_utc,
    utcnow,
)
from stock_ledger.core.entities.reports import DeletionPermission
from stock_ledger.core.exceptions import DeletionNotAllowedError, NoStockChangeError
from stock_ledger.core.interfaces.movement_store import IMovementStore
from stock_ledger.core.services.ledger_math import round_quantity
from stock_ledger.core.services.stock_aggregator import StockAggregator

logger = get_logger(__name__)

DELETION_WINDOW_DAYS = 7
ADJUSTMENT_NOTE_PREFIX = "Stock adjustment: "

REASON_NOT_FOUND = "record not found"
REASON_TOO_OLD = "cannot delete old records"
REASON_NO_PERMISSION = "insufficient permission"

_PRIVILEGED_ROLES = {UserRole.ADMIN.value, UserRole.MANAGER.value}


def _role_value(user_role: UserRole | str) -> str:
    return user_role.value if isinstance(user_role, UserRole) else str(user_role)


class StockPolicyService:
    """Corrective adjustments and the deletion policy for ledger entries."""

    def __init__(
        self,
        movement_store: IMovementStore,
        aggregator: StockAggregator | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._movements = movement_store
        self._aggregator = aggregator or StockAggregator(movement_store)
        self._clock = clock or utcnow

    async def adjust_stock(
        self,
        item_id: str,
        new_quantity: float,
        reason: str,
        user_id: str,
        tenant_id: str,
    ) -> Movement:
        """
        Bring current stock to new_quantity with a single corrective movement.

        Stock is read and the correction appended in two separate steps;
        two concurrent adjustments of the same item can both apply.

        Raises:
            NoStockChangeError: Stock already equals new_quantity to within
                QUANTITY_PRECISION decimal places.
        """
        current_stock = await self._aggregator.current_stock(item_id, tenant_id)
        delta = round_quantity(new_quantity - current_stock)
        if delta == 0:
            raise NoStockChangeError(item_id, current_stock)

        movement_type = MovementType.IN if delta > 0 else MovementType.OUT
        movement = await self._movements.add_movement(
            Movement(
                tenant_id=tenant_id,
                item_id=item_id,
                quantity=delta,
                movement_type=movement_type,
                # Adjustments have no purchase price
                unit_price=0.0 if movement_type == MovementType.IN else None,
                note=f"{ADJUSTMENT_NOTE_PREFIX}{reason}",
                user_id=user_id,
            )
        )

        logger.info(
            "stock_adjusted",
            item_id=item_id,
            tenant_id=tenant_id,
            previous=current_stock,
            target=new_quantity,
            delta=delta,
            movement_id=movement.id,
        )
        return movement

    async def can_delete_inventory_entry(
        self,
        entry_id: int,
        user_id: str,
        user_role: UserRole | str,
        tenant_id: str | None = None,
    ) -> DeletionPermission:
        """
        Decide whether the user may delete an entry.

        An entry belonging to another tenant is reported as not found.
        Checks apply in order: existence, age (more than seven whole days
        is too old, regardless of role), privileged role, staff ownership.
        """
        entry = await self._movements.get_movement(entry_id)
        if entry is None or (tenant_id is not None and entry.tenant_id != tenant_id):
            return DeletionPermission(allowed=False, reason=REASON_NOT_FOUND)

        age = self._clock() - ensure_utc(entry.created_at)
        if age.days > DELETION_WINDOW_DAYS:
            return DeletionPermission(allowed=False, reason=REASON_TOO_OLD)

        role = _role_value(user_role)
        if role in _PRIVILEGED_ROLES:
            return DeletionPermission(allowed=True)

        if role == UserRole.STAFF.value and entry.user_id == user_id:
            return DeletionPermission(allowed=True)

        return DeletionPermission(allowed=False, reason=REASON_NO_PERMISSION)

    async def delete_inventory_entry(
        self,
        entry_id: int,
        user_id: str,
        user_role: UserRole | str,
        tenant_id: str | None = None,
    ) -> None:
        """
        Soft-delete an entry if the deletion policy allows it.

        Raises:
            DeletionNotAllowedError: Policy refused; carries the reason.
        """
        permission = await self.can_delete_inventory_entry(
            entry_id, user_id, user_role, tenant_id=tenant_id
        )
        if not permission.allowed:
            logger.warning(
                "inventory_entry_deletion_denied",
                entry_id=entry_id,
                user_id=user_id,
                tenant_id=tenant_id,
                reason=permission.reason,
            )
            raise DeletionNotAllowedError(entry_id, permission.reason or REASON_NO_PERMISSION)

        deleted = await self._movements.soft_delete_movement(entry_id)
        if not deleted:
            # Removed between the check and the update
            raise DeletionNotAllowedError(entry_id, REASON_NOT_FOUND)

        logger.info(
            "inventory_entry_deleted", entry_id=entry_id, user_id=user_id, tenant_id=tenant_id
        )
