"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

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
    HealthResponse,
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

__all__ = [
    # Requests
    "RecordMovementRequest",
    "AdjustStockRequest",
    "AmendMovementRequest",
    # Responses
    "MovementResponse",
    "RecordMovementResponse",
    "AdjustStockResponse",
    "CurrentStockResponse",
    "StockAvailabilityResponse",
    "LowStockCheckResponse",
    "CountResponse",
    "PaginationResponse",
    "MovementPageResponse",
    "ItemMovementSummaryResponse",
    "MovementReportSummaryResponse",
    "MovementReportResponse",
    "HealthResponse",
    "ErrorResponse",
]
