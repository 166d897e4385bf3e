"""Amend Movement Use Case: descriptive fields only."""

from stock_ledger.application.dto.requests import AmendMovementRequest
from stock_ledger.application.dto.responses import MovementResponse
from stock_ledger.config import get_logger
from stock_ledger.core.entities.inventory import Movement
from stock_ledger.core.exceptions import ImmutableFieldError, MovementNotFoundError
from stock_ledger.core.interfaces import IMovementStore

logger = get_logger(__name__)

IMMUTABLE_FIELDS = ("quantity", "movement_type", "type", "unit_price", "item_id")


class AmendMovementUseCase:
    """Update note, batch number or expiry date of a live entry."""

    def __init__(self, movement_store: IMovementStore | None = None):
        self._movement_store = movement_store

    async def _get_movement_store(self) -> IMovementStore:
        if self._movement_store is None:
            from stock_ledger.infrastructure.storage.sqlite import get_movement_store

            self._movement_store = await get_movement_store()
        return self._movement_store

    async def execute(
        self, movement_id: int, tenant_id: str, request: AmendMovementRequest
    ) -> Movement:
        """Execute amend movement use case.

        Raises:
            ImmutableFieldError: Request tries to change a ledger fact.
            MovementNotFoundError: Entry missing, deleted, or in another tenant.
        """
        extra = request.model_extra or {}
        for field in IMMUTABLE_FIELDS:
            if field in extra:
                raise ImmutableFieldError(field)

        store = await self._get_movement_store()

        existing = await store.get_movement(movement_id)
        if existing is None or existing.tenant_id != tenant_id:
            raise MovementNotFoundError(movement_id)

        amended = await store.amend_movement(
            movement_id,
            note=request.note,
            batch_number=request.batch_number,
            expiry_date=request.expiry_date,
        )
        if amended is None:
            raise MovementNotFoundError(movement_id)

        logger.info("movement_amended", movement_id=movement_id, tenant_id=tenant_id)
        return amended

    def to_response(self, movement: Movement) -> MovementResponse:
        return MovementResponse.from_entity(movement)
