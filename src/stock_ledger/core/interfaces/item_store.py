"""Abstract interface for the item dimension table."""

from abc import ABC, abstractmethod

from stock_ledger.core.entities.inventory import Item


class IItemStore(ABC):
    """Read access to stock-keeping units. Item CRUD lives in the catalog."""

    @abstractmethod
    async def get_item(self, item_id: str, tenant_id: str | None = None) -> Item | None:
        """Get item by ID, optionally constrained to a tenant."""
        pass

    @abstractmethod
    async def list_items(self, tenant_id: str, active_only: bool = True) -> list[Item]:
        """List a tenant's items. Active-only excludes inactive and soft-deleted rows."""
        pass
