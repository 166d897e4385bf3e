"""Abstract interface for the append-only movement log."""

from abc import ABC, abstractmethod
from datetime import date

from stock_ledger.core.entities.inventory import Movement, MovementFilter


class IMovementStore(ABC):
    """
    Interface for stock movement persistence.

    Quantity and direction of a stored movement never change; the only
    mutations are descriptive amendments and soft deletion.
    """

    @abstractmethod
    async def add_movement(self, movement: Movement) -> Movement:
        """Append a movement; returns it with generated id and timestamp."""
        pass

    @abstractmethod
    async def get_movement(
        self, movement_id: int, include_deleted: bool = False
    ) -> Movement | None:
        """Get a movement by ID."""
        pass

    @abstractmethod
    async def list_movements(
        self,
        movement_filter: MovementFilter,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Movement]:
        """List movements matching the filter, newest first."""
        pass

    @abstractmethod
    async def count_movements(self, movement_filter: MovementFilter) -> int:
        """Count movements matching the filter."""
        pass

    @abstractmethod
    async def amend_movement(
        self,
        movement_id: int,
        note: str | None = None,
        batch_number: str | None = None,
        expiry_date: date | None = None,
    ) -> Movement | None:
        """Update descriptive fields. Returns None when the entry is missing."""
        pass

    @abstractmethod
    async def soft_delete_movement(self, movement_id: int) -> bool:
        """Mark a movement deleted. Returns False if it was missing."""
        pass
