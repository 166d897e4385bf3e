"""
Unit tests for StockPolicyService.

Tests:
- Corrective adjustments
- Deletion precedence: existence and tenant, age, role, ownership
- Soft delete execution
"""

from datetime import timedelta

import pytest

from stock_ledger.core.entities import MovementType, UserRole, utcnow
from stock_ledger.core.exceptions import DeletionNotAllowedError, NoStockChangeError
from stock_ledger.core.services import StockPolicyService
from stock_ledger.core.services.stock_policy import (
    ADJUSTMENT_NOTE_PREFIX,
    REASON_NO_PERMISSION,
    REASON_NOT_FOUND,
    REASON_TOO_OLD,
)

FROZEN_NOW = utcnow()


def frozen_clock():
    return FROZEN_NOW


@pytest.fixture
def build_policy(movement_store_with):
    def build(movements):
        store = movement_store_with(list(movements))
        return StockPolicyService(store, clock=frozen_clock), store

    return build


class TestAdjustStock:
    async def test_reduces_with_outbound(self, build_policy, movement_factory):
        """100 -> 85 appends a single -15 OUT movement."""
        policy, store = build_policy([movement_factory(100, 10)])

        movement = await policy.adjust_stock("item-1", 85, "spoilage", "user-9", "tenant-1")

        assert movement.quantity == -15
        assert movement.movement_type == MovementType.OUT
        assert movement.unit_price is None
        assert movement.note == f"{ADJUSTMENT_NOTE_PREFIX}spoilage"
        assert movement.user_id == "user-9"
        store.add_movement.assert_awaited_once()

    async def test_increases_with_zero_priced_inbound(self, build_policy, movement_factory):
        policy, _ = build_policy([movement_factory(10, 3)])

        movement = await policy.adjust_stock("item-1", 25, "recount", "user-1", "tenant-1")

        assert movement.quantity == 15
        assert movement.movement_type == MovementType.IN
        assert movement.unit_price == 0.0

    async def test_from_deficit(self, build_policy, movement_factory):
        policy, _ = build_policy([movement_factory(-5)])

        movement = await policy.adjust_stock("item-1", 0, "reset", "user-1", "tenant-1")

        assert movement.quantity == 5

    async def test_no_change_raises(self, build_policy, movement_factory):
        policy, store = build_policy([movement_factory(40, 2)])

        with pytest.raises(NoStockChangeError):
            await policy.adjust_stock("item-1", 40, "recount", "user-1", "tenant-1")

        store.add_movement.assert_not_awaited()

    async def test_float_drift_is_no_change(self, build_policy, movement_factory):
        """0.1 + 0.2 on hand adjusted to 0.3 appends nothing."""
        policy, store = build_policy([movement_factory(0.1, 5), movement_factory(0.2, 5)])

        with pytest.raises(NoStockChangeError):
            await policy.adjust_stock("item-1", 0.3, "recount", "user-1", "tenant-1")

        store.add_movement.assert_not_awaited()

    async def test_fractional_delta_is_exact(self, build_policy, movement_factory):
        policy, _ = build_policy([movement_factory(0.1, 5), movement_factory(0.2, 5)])

        movement = await policy.adjust_stock("item-1", 0.25, "recount", "user-1", "tenant-1")

        assert movement.quantity == -0.05
        assert movement.movement_type == MovementType.OUT


class TestCanDeleteInventoryEntry:
    async def test_other_tenant_checked_before_age(self, build_policy, movement_factory):
        entry = movement_factory(5, 1, created_at=FROZEN_NOW - timedelta(days=30))
        policy, _ = build_policy([entry])

        result = await policy.can_delete_inventory_entry(
            entry.id, "admin-1", UserRole.ADMIN, tenant_id="tenant-2"
        )

        assert result.allowed is False
        assert result.reason == REASON_NOT_FOUND

    async def test_missing_entry(self, build_policy):
        policy, _ = build_policy([])

        result = await policy.can_delete_inventory_entry(1, "user-1", UserRole.ADMIN)

        assert result.allowed is False
        assert result.reason == REASON_NOT_FOUND

    async def test_deleted_entry_is_missing(self, build_policy, movement_factory):
        entry = movement_factory(5, 1, deleted=True)
        policy, _ = build_policy([entry])

        result = await policy.can_delete_inventory_entry(entry.id, "user-1", UserRole.ADMIN)

        assert result.reason == REASON_NOT_FOUND

    async def test_too_old_even_for_admin(self, build_policy, movement_factory):
        """Age is checked before role."""
        entry = movement_factory(5, 1, created_at=FROZEN_NOW - timedelta(days=8))
        policy, _ = build_policy([entry])

        result = await policy.can_delete_inventory_entry(entry.id, "user-1", UserRole.ADMIN)

        assert result.allowed is False
        assert result.reason == REASON_TOO_OLD

    async def test_seven_days_still_allowed(self, build_policy, movement_factory):
        entry = movement_factory(
            5, 1, created_at=FROZEN_NOW - timedelta(days=7, hours=23, minutes=59)
        )
        policy, _ = build_policy([entry])

        result = await policy.can_delete_inventory_entry(entry.id, "user-1", UserRole.MANAGER)

        assert result.allowed is True
        assert result.reason is None

    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.MANAGER, "ADMIN", "MANAGER"])
    async def test_privileged_roles_delete_any(self, build_policy, movement_factory, role):
        entry = movement_factory(5, 1, user_id="someone-else")
        policy, _ = build_policy([entry])

        result = await policy.can_delete_inventory_entry(entry.id, "user-1", role)

        assert result.allowed is True

    async def test_staff_own_entry(self, build_policy, movement_factory):
        entry = movement_factory(5, 1, user_id="staff-1")
        policy, _ = build_policy([entry])

        result = await policy.can_delete_inventory_entry(entry.id, "staff-1", UserRole.STAFF)

        assert result.allowed is True

    async def test_staff_other_entry(self, build_policy, movement_factory):
        entry = movement_factory(5, 1, user_id="staff-2")
        policy, _ = build_policy([entry])

        result = await policy.can_delete_inventory_entry(entry.id, "staff-1", UserRole.STAFF)

        assert result.allowed is False
        assert result.reason == REASON_NO_PERMISSION

    async def test_unknown_role(self, build_policy, movement_factory):
        entry = movement_factory(5, 1, user_id="user-1")
        policy, _ = build_policy([entry])

        result = await policy.can_delete_inventory_entry(entry.id, "user-1", "AUDITOR")

        assert result.allowed is False
        assert result.reason == REASON_NO_PERMISSION


class TestDeleteInventoryEntry:
    async def test_soft_deletes(self, build_policy, movement_factory):
        entry = movement_factory(5, 1)
        policy, store = build_policy([entry])

        await policy.delete_inventory_entry(entry.id, "user-1", UserRole.ADMIN)

        store.soft_delete_movement.assert_awaited_once_with(entry.id)

    async def test_denied_carries_reason(self, build_policy, movement_factory):
        entry = movement_factory(5, 1, created_at=FROZEN_NOW - timedelta(days=30))
        policy, store = build_policy([entry])

        with pytest.raises(DeletionNotAllowedError) as exc_info:
            await policy.delete_inventory_entry(entry.id, "user-1", UserRole.ADMIN)

        assert exc_info.value.reason == REASON_TOO_OLD
        store.soft_delete_movement.assert_not_awaited()

    async def test_vanished_between_check_and_delete(self, build_policy, movement_factory):
        entry = movement_factory(5, 1)
        policy, store = build_policy([entry])
        store.soft_delete_movement.return_value = False

        with pytest.raises(DeletionNotAllowedError) as exc_info:
            await policy.delete_inventory_entry(entry.id, "user-1", UserRole.ADMIN)

        assert exc_info.value.reason == REASON_NOT_FOUND

    async def test_other_tenant_entry_not_found(self, build_policy, movement_factory):
        entry = movement_factory(5, 1, tenant_id="tenant-1")
        policy, store = build_policy([entry])

        with pytest.raises(DeletionNotAllowedError) as exc_info:
            await policy.delete_inventory_entry(
                entry.id, "manager-2", UserRole.MANAGER, tenant_id="tenant-2"
            )

        assert exc_info.value.reason == REASON_NOT_FOUND
        store.soft_delete_movement.assert_not_awaited()
