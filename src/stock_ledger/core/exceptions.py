"""
Domain exceptions for the stock ledger.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all stock ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class MovementNotFoundError(StorageError):
    """Ledger entry not found (or already soft-deleted)."""

    def __init__(self, movement_id: int):
        super().__init__(
            f"Inventory entry not found: {movement_id}",
            code="MOVEMENT_NOT_FOUND",
            details={"movement_id": movement_id},
        )


class ItemNotFoundError(StorageError):
    """Item not found within the tenant."""

    def __init__(self, item_id: str, tenant_id: str | None = None):
        super().__init__(
            f"Item not found: {item_id}",
            code="ITEM_NOT_FOUND",
            details={"item_id": item_id, "tenant_id": tenant_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Validation Exceptions
class LedgerValidationError(LedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class StockEntryValidationError(LedgerValidationError):
    """A stock entry violated one or more entry rules."""

    def __init__(self, errors: list[str]):
        super().__init__(field="entry", message="; ".join(errors))
        self.code = "STOCK_ENTRY_INVALID"
        self.errors = list(errors)
        self.details["errors"] = self.errors


class ImmutableFieldError(LedgerValidationError):
    """Attempt to change quantity or direction of a recorded movement."""

    def __init__(self, field: str):
        super().__init__(
            field=field,
            message=f"'{field}' cannot be changed once an entry is recorded",
        )
        self.code = "IMMUTABLE_FIELD"


# Policy Exceptions
class PolicyError(LedgerError):
    """Base exception for ledger policy refusals."""

    pass


class NoStockChangeError(PolicyError):
    """Adjustment target equals the current stock."""

    def __init__(self, item_id: str, current_stock: float):
        super().__init__(
            f"Current stock of item {item_id} already equals {current_stock}",
            code="NO_STOCK_CHANGE",
            details={"item_id": item_id, "current_stock": current_stock},
        )


class DeletionNotAllowedError(PolicyError):
    """Deletion policy refused to remove a ledger entry."""

    def __init__(self, movement_id: int, reason: str):
        super().__init__(
            f"Cannot delete inventory entry {movement_id}: {reason}",
            code="DELETION_NOT_ALLOWED",
            details={"movement_id": movement_id, "reason": reason},
        )
        self.reason = reason


# Collaborator Exceptions
class RecipeGatewayError(LedgerError):
    """Recipe subsystem call failed."""

    def __init__(self, operation: str, reason: str, recipe_id: str | None = None):
        super().__init__(
            f"Recipe subsystem error during {operation}: {reason}",
            code="RECIPE_GATEWAY_ERROR",
            details={"operation": operation, "reason": reason, "recipe_id": recipe_id},
        )


class ConfigurationError(LedgerError):
    """Configuration error."""

    pass
