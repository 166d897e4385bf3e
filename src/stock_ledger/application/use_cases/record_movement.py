"""Record Movement Use Case: validated append with deficit and price follow-up."""

from dataclasses import dataclass

from stock_ledger.application.dto.requests import RecordMovementRequest
from stock_ledger.application.dto.responses import MovementResponse, RecordMovementResponse
from stock_ledger.config import get_logger
from stock_ledger.core.entities.inventory import Movement, MovementType, StockEntry
from stock_ledger.core.exceptions import ItemNotFoundError, StockEntryValidationError
from stock_ledger.core.interfaces import IItemStore, IMovementStore, IRecipeGateway
from stock_ledger.core.services import (
    CostValuator,
    PriceConsistencyChecker,
    StockAggregator,
    validate_stock_entry,
)

logger = get_logger(__name__)


@dataclass
class RecordMovementResult:
    """Result of recording a movement."""

    movement: Movement
    current_stock: float
    average_cost: float
    recipes_recalculated: int = 0

    @property
    def in_deficit(self) -> bool:
        return self.current_stock < 0


class RecordMovementUseCase:
    """Validate a stock entry and append it to the ledger.

    Negative stock is allowed; an OUT that drives the item below zero is
    logged as a deficit. A priced IN that moves the WAC triggers recipe
    recalculation.
    """

    def __init__(
        self,
        movement_store: IMovementStore | None = None,
        item_store: IItemStore | None = None,
        recipe_gateway: IRecipeGateway | None = None,
    ):
        self._movement_store = movement_store
        self._item_store = item_store
        self._recipe_gateway = recipe_gateway

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

    async def _get_recipe_gateway(self) -> IRecipeGateway:
        if self._recipe_gateway is None:
            from stock_ledger.infrastructure.storage.sqlite import get_recipe_gateway

            self._recipe_gateway = await get_recipe_gateway()
        return self._recipe_gateway

    async def execute(self, request: RecordMovementRequest) -> RecordMovementResult:
        """Execute record movement use case."""
        logger.info(
            "record_movement_started",
            item_id=request.item_id,
            tenant_id=request.tenant_id,
            type=request.movement_type.value,
            quantity=request.quantity,
        )

        # 1. Validate every entry rule
        validation = validate_stock_entry(
            StockEntry(
                item_id=request.item_id,
                quantity=request.quantity,
                movement_type=request.movement_type,
                note=request.note,
                unit_price=request.unit_price,
                batch_number=request.batch_number,
                expiry_date=request.expiry_date,
            )
        )
        if not validation.is_valid:
            logger.warning(
                "stock_entry_rejected", item_id=request.item_id, errors=validation.errors
            )
            raise StockEntryValidationError(validation.errors)

        movement_store = await self._get_movement_store()
        item_store = await self._get_item_store()

        # 2. Item must exist in the tenant
        item = await item_store.get_item(request.item_id, request.tenant_id)
        if item is None:
            raise ItemNotFoundError(request.item_id, request.tenant_id)

        aggregator = StockAggregator(movement_store, item_store)
        valuator = CostValuator(movement_store, item_store, aggregator)

        is_priced_in = (
            request.movement_type == MovementType.IN and request.unit_price is not None
        )
        old_cost = (
            await valuator.weighted_average_cost(item.id, request.tenant_id)
            if is_priced_in
            else 0.0
        )

        # 3. Append
        movement = await movement_store.add_movement(
            Movement(
                tenant_id=request.tenant_id,
                item_id=request.item_id,
                quantity=request.quantity,
                movement_type=request.movement_type,
                unit_price=request.unit_price,
                note=request.note,
                batch_number=request.batch_number,
                expiry_date=request.expiry_date,
                user_id=request.user_id,
            )
        )

        # 4. Deficits are recorded, not refused
        current_stock = await aggregator.current_stock(item.id, request.tenant_id)
        if request.movement_type == MovementType.OUT and current_stock < 0:
            logger.warning(
                "stock_deficit_created",
                item_id=item.id,
                item_name=item.name,
                previous_stock=current_stock - request.quantity,
                current_stock=current_stock,
            )

        # 5. Propagate a WAC change to recipes
        new_cost = await valuator.weighted_average_cost(item.id, request.tenant_id)
        recalculated = 0
        if is_priced_in and new_cost != old_cost:
            checker = PriceConsistencyChecker(
                valuator, item_store, await self._get_recipe_gateway()
            )
            recalculated = await checker.notify_price_change(item.id, new_cost, old_cost)

        logger.info(
            "record_movement_complete",
            movement_id=movement.id,
            current_stock=current_stock,
            average_cost=new_cost,
        )

        return RecordMovementResult(
            movement=movement,
            current_stock=current_stock,
            average_cost=new_cost,
            recipes_recalculated=recalculated,
        )

    def to_response(self, result: RecordMovementResult) -> RecordMovementResponse:
        """Convert result to API response."""
        return RecordMovementResponse(
            movement=MovementResponse.from_entity(result.movement),
            current_stock=result.current_stock,
            in_deficit=result.in_deficit,
            average_cost=result.average_cost,
            recipes_recalculated=result.recipes_recalculated,
        )
