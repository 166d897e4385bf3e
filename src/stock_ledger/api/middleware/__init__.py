"""API middleware."""

from stock_ledger.api.middleware.error_handler import ErrorHandlerMiddleware
from stock_ledger.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
