"""Adjust Stock Use Case: corrective movement to an exact quantity."""

from dataclasses import dataclass

from stock_ledger.application.dto.requests import AdjustStockRequest
from stock_ledger.application.dto.responses import AdjustStockResponse, MovementResponse
from stock_ledger.config import get_logger
from stock_ledger.core.entities.inventory import Movement
from stock_ledger.core.exceptions import ItemNotFoundError
from stock_ledger.core.interfaces import IItemStore, IMovementStore
from stock_ledger.core.services import StockAggregator, StockPolicyService

logger = get_logger(__name__)


@dataclass
class AdjustStockResult:
    """Result of adjusting stock."""

    movement: Movement
    previous_stock: float
    new_stock: float


class AdjustStockUseCase:
    """Bring an item's stock to a target quantity."""

    def __init__(
        self,
        movement_store: IMovementStore | None = None,
        item_store: IItemStore | None = None,
    ):
        self._movement_store = movement_store
        self._item_store = item_store

    async def _get_movement_store(self) -> IMovementStore:
        if self._movement_store is None:
            from stock_ledger.infrastructure.storage.sqlite import get_movement_store

            self._movement_store = await get_movement_store()
        return self._movement_store

    async def _get_item_store(self) -> IItemStore:
        if self._item_store is None:
            from stock_ledger.infrastructure.storage.sqlite import get_item_store

            self._item_store = await get_item_store()
        return self._item_store

    async def execute(self, request: AdjustStockRequest) -> AdjustStockResult:
        """Execute adjust stock use case.

        Raises:
            ItemNotFoundError: Item is not in the tenant.
            NoStockChangeError: Stock already equals the target.
        """
        movement_store = await self._get_movement_store()
        item_store = await self._get_item_store()

        item = await item_store.get_item(request.item_id, request.tenant_id)
        if item is None:
            raise ItemNotFoundError(request.item_id, request.tenant_id)

        policy = StockPolicyService(movement_store, StockAggregator(movement_store, item_store))
        movement = await policy.adjust_stock(
            item_id=request.item_id,
            new_quantity=request.new_quantity,
            reason=request.reason,
            user_id=request.user_id,
            tenant_id=request.tenant_id,
        )

        return AdjustStockResult(
            movement=movement,
            previous_stock=request.new_quantity - movement.quantity,
            new_stock=request.new_quantity,
        )

    def to_response(self, result: AdjustStockResult) -> AdjustStockResponse:
        """Convert result to API response."""
        return AdjustStockResponse(
            movement=MovementResponse.from_entity(result.movement),
            previous_stock=result.previous_stock,
            new_stock=result.new_stock,
        )
