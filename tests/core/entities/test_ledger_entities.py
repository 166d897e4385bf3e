"""Tests for ledger entities."""

from datetime import UTC, datetime, timedelta, timezone

from stock_ledger.core.entities import Item, Movement, MovementType, ensure_utc, utcnow


class TestEnsureUtc:
    def test_naive_treated_as_utc(self):
        value = ensure_utc(datetime(2025, 3, 14, 12, 0))
        assert value.tzinfo is UTC
        assert value.hour == 12

    def test_aware_converted(self):
        value = ensure_utc(datetime(2025, 3, 14, 12, 0, tzinfo=timezone(timedelta(hours=3))))
        assert value.hour == 9
        assert value.utcoffset() == timedelta(0)

    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo is not None


class TestItem:
    def test_defaults(self):
        item = Item(id="item-1", tenant_id="tenant-1", name="Flour")
        assert item.min_stock is None
        assert item.is_available

    def test_inactive_not_available(self):
        item = Item(id="item-1", tenant_id="tenant-1", name="Flour", is_active=False)
        assert not item.is_available

    def test_deleted_not_available(self):
        item = Item(id="item-1", tenant_id="tenant-1", name="Flour", deleted_at=utcnow())
        assert not item.is_available


class TestMovement:
    def _movement(self, **overrides) -> Movement:
        data = {
            "tenant_id": "tenant-1",
            "item_id": "item-1",
            "quantity": 10.0,
            "movement_type": MovementType.IN,
            "unit_price": 2.5,
            "user_id": "user-1",
        }
        data.update(overrides)
        return Movement(**data)

    def test_defaults(self):
        movement = self._movement()
        assert movement.id is None
        assert movement.deleted_at is None
        assert movement.created_at.tzinfo is not None

    def test_priced_receipt(self):
        assert self._movement().is_priced_receipt

    def test_unpriced_receipt(self):
        assert not self._movement(unit_price=None).is_priced_receipt

    def test_outbound_never_priced_receipt(self):
        movement = self._movement(quantity=-4.0, movement_type=MovementType.OUT)
        assert not movement.is_priced_receipt

    def test_deleted_excluded(self):
        movement = self._movement(deleted_at=utcnow())
        assert movement.is_deleted
        assert not movement.is_priced_receipt

    def test_movement_type_from_string(self):
        assert self._movement(movement_type="OUT").movement_type == MovementType.OUT
