"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from stock_ledger.application.dto.responses import ErrorResponse
from stock_ledger.config import get_logger
from stock_ledger.core.exceptions import (
    ConfigurationError,
    DeletionNotAllowedError,
    ItemNotFoundError,
    LedgerError,
    LedgerValidationError,
    MovementNotFoundError,
    NoStockChangeError,
    PolicyError,
    RecipeGatewayError,
    StockEntryValidationError,
    StorageError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; first match wins, so subclasses go first
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    MovementNotFoundError: status.HTTP_404_NOT_FOUND,
    ItemNotFoundError: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    LedgerValidationError: status.HTTP_400_BAD_REQUEST,
    DeletionNotAllowedError: status.HTTP_403_FORBIDDEN,
    NoStockChangeError: status.HTTP_409_CONFLICT,
    PolicyError: status.HTTP_409_CONFLICT,
    RecipeGatewayError: status.HTTP_502_BAD_GATEWAY,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "MOVEMENT_NOT_FOUND": "Check the entry ID; deleted entries are not returned.",
    "ITEM_NOT_FOUND": "Check the item ID and tenant. Items are managed by the catalog.",
    "STOCK_ENTRY_INVALID": "IN needs a positive quantity and unit price; OUT needs a negative quantity.",
    "IMMUTABLE_FIELD": "Quantity and type cannot change. Record an adjustment instead.",
    "NO_STOCK_CHANGE": "Current stock already equals the requested quantity.",
    "DELETION_NOT_ALLOWED": "Entries older than 7 days, or created by another staff user, cannot be deleted.",
    "RECIPE_GATEWAY_ERROR": "The recipe subsystem did not respond. Retry the recalculation later.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    403: "The operation is not permitted for this user.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the current ledger state.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    502: "A downstream service failed. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to a standardized JSON response."""
    status_code = _status_for(exc)
    error_code = exc.code if isinstance(exc, LedgerError) else exc.__class__.__name__
    request_id = getattr(request.state, "request_id", None)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=request_id,
        path=request.url.path,
        error_type=error_code,
        error=str(exc),
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    detail = None
    if isinstance(exc, DeletionNotAllowedError):
        detail = exc.reason

    error_response = ErrorResponse(
        error_code=error_code,
        message=str(exc),
        hint=_get_hint(error_code, status_code),
        detail=detail,
        path=request.url.path,
        errors=exc.errors if isinstance(exc, StockEntryValidationError) else None,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escape the route handlers to standardized
    JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(LedgerError)
    async def ledger_exception_handler(request: Request, exc: LedgerError) -> JSONResponse:
        """Handle domain errors raised by use cases and services."""
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int) -> str:
    """Infer a machine-readable error code from an HTTP status."""
    if status_code == 404:
        return "NOT_FOUND"
    if status_code == 400:
        return "BAD_REQUEST"
    if status_code == 405:
        return "METHOD_NOT_ALLOWED"
    if status_code == 422:
        return "UNPROCESSABLE_ENTITY"
    return "HTTP_ERROR"
