"""Delete Movement Use Case: policy-gated, tenant-scoped soft delete."""

from stock_ledger.application.services import get_stock_policy_service
from stock_ledger.core.entities.inventory import UserRole
from stock_ledger.core.entities.reports import DeletionPermission
from stock_ledger.core.interfaces import IMovementStore
from stock_ledger.core.services import StockPolicyService


class DeleteMovementUseCase:
    """Check the deletion policy and soft-delete a ledger entry of one tenant."""

    def __init__(self, movement_store: IMovementStore | None = None):
        self._movement_store = movement_store
        self._policy: StockPolicyService | None = None

    async def _get_policy(self) -> StockPolicyService:
        if self._policy is None:
            self._policy = await get_stock_policy_service(self._movement_store)
        return self._policy

    async def check(
        self, movement_id: int, tenant_id: str, user_id: str, user_role: UserRole | str
    ) -> DeletionPermission:
        """Report whether the user may delete the entry without deleting it."""
        policy = await self._get_policy()
        return await policy.can_delete_inventory_entry(
            movement_id, user_id, user_role, tenant_id=tenant_id
        )

    async def execute(
        self, movement_id: int, tenant_id: str, user_id: str, user_role: UserRole | str
    ) -> None:
        """Execute delete movement use case.

        Raises:
            DeletionNotAllowedError: Policy refused, with the reason. Entries
                of another tenant are refused as not found.
        """
        policy = await self._get_policy()
        await policy.delete_inventory_entry(movement_id, user_id, user_role, tenant_id=tenant_id)
