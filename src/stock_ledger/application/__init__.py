"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates ledger logic by:
1. Defining request/response DTOs for API contracts
2. Implementing write use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only write entry point for API handlers.
"""

from stock_ledger.application.services import (
    get_cost_valuator,
    get_deficit_detector,
    get_price_consistency_checker,
    get_stock_aggregator,
    get_stock_policy_service,
    reset_services,
)
from stock_ledger.application.use_cases import (
    AdjustStockUseCase,
    AmendMovementUseCase,
    DeleteMovementUseCase,
    RecordMovementUseCase,
)

__all__ = [
    # Use Cases
    "RecordMovementUseCase",
    "AdjustStockUseCase",
    "AmendMovementUseCase",
    "DeleteMovementUseCase",
    # Service factories
    "get_stock_aggregator",
    "get_cost_valuator",
    "get_deficit_detector",
    "get_price_consistency_checker",
    "get_stock_policy_service",
    "reset_services",
]
