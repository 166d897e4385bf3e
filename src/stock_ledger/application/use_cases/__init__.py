"""Application use cases."""

from stock_ledger.application.use_cases.adjust_stock import AdjustStockResult, AdjustStockUseCase
from stock_ledger.application.use_cases.amend_movement import AmendMovementUseCase
from stock_ledger.application.use_cases.delete_movement import DeleteMovementUseCase
from stock_ledger.application.use_cases.record_movement import (
    RecordMovementResult,
    RecordMovementUseCase,
)

__all__ = [
    "RecordMovementUseCase",
    "RecordMovementResult",
    "AdjustStockUseCase",
    "AdjustStockResult",
    "AmendMovementUseCase",
    "DeleteMovementUseCase",
]
