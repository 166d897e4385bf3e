"""
Dependency injection container for FastAPI.

Provides service and use case instances to route handlers.
"""

from functools import lru_cache

from stock_ledger.application.services import (
    get_cost_valuator,
    get_deficit_detector,
    get_price_consistency_checker,
    get_stock_aggregator,
)
from stock_ledger.application.use_cases import (
    AdjustStockUseCase,
    AmendMovementUseCase,
    DeleteMovementUseCase,
    RecordMovementUseCase,
)
from stock_ledger.config import Settings, get_settings
from stock_ledger.core.services import (
    CostValuator,
    DeficitDetector,
    PriceConsistencyChecker,
    StockAggregator,
)
from stock_ledger.infrastructure.storage.sqlite import ConnectionPool, get_pool


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Read-side services
async def get_aggregator() -> StockAggregator:
    """Get stock aggregator."""
    return await get_stock_aggregator()


async def get_valuator() -> CostValuator:
    """Get cost valuator."""
    return await get_cost_valuator()


async def get_detector() -> DeficitDetector:
    """Get deficit/low-stock detector."""
    return await get_deficit_detector()


async def get_price_checker() -> PriceConsistencyChecker:
    """Get price consistency checker."""
    return await get_price_consistency_checker()


# Write-side use cases
def get_record_movement_use_case() -> RecordMovementUseCase:
    """Get record movement use case."""
    return RecordMovementUseCase()


def get_adjust_stock_use_case() -> AdjustStockUseCase:
    """Get adjust stock use case."""
    return AdjustStockUseCase()


def get_amend_movement_use_case() -> AmendMovementUseCase:
    """Get amend movement use case."""
    return AmendMovementUseCase()


def get_delete_movement_use_case() -> DeleteMovementUseCase:
    """Get delete movement use case."""
    return DeleteMovementUseCase()


# Storage
async def get_db_pool() -> ConnectionPool:
    """Get the default connection pool."""
    return await get_pool()
