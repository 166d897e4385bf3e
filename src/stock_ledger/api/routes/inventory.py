"""Inventory ledger endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from stock_ledger.api.dependencies import (
    get_adjust_stock_use_case,
    get_aggregator,
    get_amend_movement_use_case,
    get_delete_movement_use_case,
    get_detector,
    get_price_checker,
    get_record_movement_use_case,
    get_valuator,
)
from stock_ledger.application.dto.requests import (
    AdjustStockRequest,
    AmendMovementRequest,
    RecordMovementRequest,
)
from stock_ledger.application.dto.responses import (
    AdjustStockResponse,
    CountResponse,
    CurrentStockResponse,
    ErrorResponse,
    ItemMovementSummaryResponse,
    LowStockCheckResponse,
    MovementPageResponse,
    MovementReportResponse,
    MovementReportSummaryResponse,
    MovementResponse,
    PaginationResponse,
    RecordMovementResponse,
    StockAvailabilityResponse,
)
from stock_ledger.application.use_cases import (
    AdjustStockUseCase,
    AmendMovementUseCase,
    DeleteMovementUseCase,
    RecordMovementUseCase,
)
from stock_ledger.core.entities import (
    DeficitSummary,
    DeletionPermission,
    InventoryPrice,
    InventoryValuation,
    LowStockItem,
    MovementType,
    PriceInconsistency,
    PriceStatistics,
    StockDeficit,
    StockLevel,
    TotalQuantity,
    UserRole,
)
from stock_ledger.core.services import (
    CostValuator,
    DeficitDetector,
    PriceConsistencyChecker,
    StockAggregator,
)

router = APIRouter(prefix="/api/inventory", tags=["inventory"])

TenantId = Annotated[str, Query(min_length=1, description="Tenant scope")]


# --- Per-item views ---


@router.get("/items/{item_id}/stock", response_model=CurrentStockResponse)
async def get_current_stock(
    item_id: str,
    tenant_id: TenantId,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    aggregator: StockAggregator = Depends(get_aggregator),
) -> CurrentStockResponse:
    """Current stock of one item, optionally within a date window."""
    current = await aggregator.current_stock(item_id, tenant_id, start_date, end_date)
    return CurrentStockResponse(
        item_id=item_id,
        tenant_id=tenant_id,
        current_stock=current,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/items/{item_id}/availability", response_model=StockAvailabilityResponse)
async def check_availability(
    item_id: str,
    quantity: float,
    tenant_id: TenantId,
    aggregator: StockAggregator = Depends(get_aggregator),
) -> StockAvailabilityResponse:
    """Whether on-hand stock covers the requested quantity."""
    available = await aggregator.check_stock_availability(item_id, quantity, tenant_id)
    return StockAvailabilityResponse(
        item_id=item_id, requested_quantity=quantity, available=available
    )


@router.get("/items/{item_id}/low-stock", response_model=LowStockCheckResponse)
async def check_low_stock(
    item_id: str,
    tenant_id: TenantId,
    detector: DeficitDetector = Depends(get_detector),
) -> LowStockCheckResponse:
    """Whether the item is below its configured minimum."""
    return LowStockCheckResponse(
        item_id=item_id,
        is_low_stock=await detector.is_low_stock(item_id, tenant_id),
    )


@router.get("/items/{item_id}/price", response_model=InventoryPrice)
async def get_item_price(
    item_id: str,
    tenant_id: str | None = None,
    valuator: CostValuator = Depends(get_valuator),
) -> InventoryPrice:
    """Current WAC and recent priced receipts, for recipe price sync."""
    return await valuator.inventory_price(item_id, tenant_id)


@router.get("/items/{item_id}/movements", response_model=MovementPageResponse)
async def list_item_movements(
    item_id: str,
    tenant_id: TenantId,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=500),
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    movement_type: MovementType | None = Query(None, alias="type"),
    aggregator: StockAggregator = Depends(get_aggregator),
) -> MovementPageResponse:
    """Paginated movement history of one item, newest first."""
    result = await aggregator.list_movements(
        item_id,
        tenant_id,
        page=page,
        limit=limit,
        start_date=start_date,
        end_date=end_date,
        movement_type=movement_type,
    )
    return MovementPageResponse(
        entries=[MovementResponse.from_entity(m) for m in result.entries],
        pagination=PaginationResponse(**result.pagination.model_dump()),
    )


# --- Tenant-wide views ---


@router.get("/levels", response_model=list[StockLevel])
async def get_stock_levels(
    tenant_id: TenantId,
    aggregator: StockAggregator = Depends(get_aggregator),
) -> list[StockLevel]:
    """Inbound, outbound and current totals for every active item."""
    return await aggregator.stock_levels(tenant_id)


@router.get("/total-quantity", response_model=TotalQuantity)
async def get_total_quantity(
    tenant_id: TenantId,
    aggregator: StockAggregator = Depends(get_aggregator),
) -> TotalQuantity:
    return await aggregator.total_quantity(tenant_id)


@router.get("/valuation", response_model=InventoryValuation)
async def get_valuation(
    tenant_id: TenantId,
    valuator: CostValuator = Depends(get_valuator),
) -> InventoryValuation:
    """On-hand stock valued at weighted-average cost."""
    return await valuator.inventory_valuation(tenant_id)


@router.get("/price-statistics", response_model=PriceStatistics)
async def get_price_statistics(
    tenant_id: TenantId,
    valuator: CostValuator = Depends(get_valuator),
) -> PriceStatistics:
    return await valuator.price_statistics(tenant_id)


@router.get("/price-consistency", response_model=list[PriceInconsistency])
async def get_price_consistency(
    tenant_id: TenantId,
    checker: PriceConsistencyChecker = Depends(get_price_checker),
) -> list[PriceInconsistency]:
    """Items whose recipe ingredient cost disagrees with the WAC."""
    return await checker.validate_price_consistency(tenant_id)


@router.get("/deficits", response_model=list[StockDeficit])
async def get_deficits(
    tenant_id: TenantId,
    detector: DeficitDetector = Depends(get_detector),
) -> list[StockDeficit]:
    """Items with negative stock."""
    return await detector.stock_deficits(tenant_id)


@router.get("/deficits/summary", response_model=DeficitSummary)
async def get_deficit_summary(
    tenant_id: TenantId,
    detector: DeficitDetector = Depends(get_detector),
) -> DeficitSummary:
    return await detector.deficit_summary(tenant_id)


@router.get("/low-stock", response_model=list[LowStockItem])
async def get_low_stock(
    tenant_id: TenantId,
    detector: DeficitDetector = Depends(get_detector),
) -> list[LowStockItem]:
    """Items below their minimum stock (10 when none is set)."""
    return await detector.low_stock_items(tenant_id)


@router.get("/low-stock/count", response_model=CountResponse)
async def get_low_stock_count(
    tenant_id: TenantId,
    detector: DeficitDetector = Depends(get_detector),
) -> CountResponse:
    return CountResponse(count=await detector.low_stock_count(tenant_id))


@router.get("/report", response_model=MovementReportResponse)
async def get_movement_report(
    tenant_id: TenantId,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    item_id: str | None = None,
    movement_type: MovementType | None = Query(None, alias="type"),
    aggregator: StockAggregator = Depends(get_aggregator),
) -> MovementReportResponse:
    """Filtered movements with direction totals and a per-item breakdown."""
    report = await aggregator.movement_report(
        tenant_id,
        start_date=start_date,
        end_date=end_date,
        item_id=item_id,
        movement_type=movement_type,
    )
    return MovementReportResponse(
        entries=[MovementResponse.from_entity(m) for m in report.entries],
        summary=MovementReportSummaryResponse(
            total_entries=report.total_entries,
            total_in=report.total_in,
            total_out=report.total_out,
            item_summary={
                item_id: ItemMovementSummaryResponse(**line.model_dump())
                for item_id, line in report.item_summary.items()
            },
        ),
    )


# --- Writes ---


@router.post(
    "/movements",
    response_model=RecordMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_movement(
    request: RecordMovementRequest,
    use_case: RecordMovementUseCase = Depends(get_record_movement_use_case),
) -> RecordMovementResponse:
    """Append an IN or OUT movement. Negative stock is allowed."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.patch(
    "/movements/{movement_id}",
    response_model=MovementResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def amend_movement(
    movement_id: int,
    request: AmendMovementRequest,
    tenant_id: TenantId,
    use_case: AmendMovementUseCase = Depends(get_amend_movement_use_case),
) -> MovementResponse:
    """Amend note, batch number or expiry date of an entry."""
    movement = await use_case.execute(movement_id, tenant_id, request)
    return use_case.to_response(movement)


@router.get("/movements/{movement_id}/can-delete", response_model=DeletionPermission)
async def can_delete_movement(
    movement_id: int,
    tenant_id: TenantId,
    user_id: str = Query(..., min_length=1),
    user_role: UserRole = Query(...),
    use_case: DeleteMovementUseCase = Depends(get_delete_movement_use_case),
) -> DeletionPermission:
    """Deletion policy decision for the given user."""
    return await use_case.check(movement_id, tenant_id, user_id, user_role)


@router.delete(
    "/movements/{movement_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"model": ErrorResponse}},
)
async def delete_movement(
    movement_id: int,
    tenant_id: TenantId,
    user_id: str = Query(..., min_length=1),
    user_role: UserRole = Query(...),
    use_case: DeleteMovementUseCase = Depends(get_delete_movement_use_case),
) -> Response:
    """Soft-delete an entry if the deletion policy allows it."""
    await use_case.execute(movement_id, tenant_id, user_id, user_role)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/adjust",
    response_model=AdjustStockResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def adjust_stock(
    request: AdjustStockRequest,
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> AdjustStockResponse:
    """Bring stock to an exact quantity with one corrective movement."""
    result = await use_case.execute(request)
    return use_case.to_response(result)
