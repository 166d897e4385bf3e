"""Tests for pure movement reductions."""

import random

import pytest

from stock_ledger.core.services import ledger_math


class TestSumQuantities:
    def test_empty_log_is_zero(self):
        assert ledger_math.sum_quantities([]) == 0.0

    def test_signed_sum(self, movement_factory):
        movements = [movement_factory(100, 10), movement_factory(-30), movement_factory(5, 12)]
        assert ledger_math.sum_quantities(movements) == 75

    def test_deleted_rows_excluded(self, movement_factory):
        movements = [movement_factory(100, 10), movement_factory(-30, deleted=True)]
        assert ledger_math.sum_quantities(movements) == 100

    def test_order_independent(self, movement_factory):
        """Stock is the same whatever order the rows arrive in."""
        movements = [movement_factory(q, 1 if q > 0 else None) for q in (10, -3, 7.5, -2, 40)]
        expected = ledger_math.sum_quantities(movements)
        shuffled = movements[:]
        random.Random(7).shuffle(shuffled)
        assert ledger_math.sum_quantities(shuffled) == pytest.approx(expected)

    def test_linear_over_concatenation(self, movement_factory):
        a = [movement_factory(10, 1), movement_factory(-4)]
        b = [movement_factory(6, 2), movement_factory(-20)]
        assert ledger_math.sum_quantities(a + b) == (
            ledger_math.sum_quantities(a) + ledger_math.sum_quantities(b)
        )


class TestSplitTotals:
    def test_out_total_stays_negative(self, movement_factory):
        total_in, total_out = ledger_math.split_totals(
            [movement_factory(100, 10), movement_factory(-30), movement_factory(-5)]
        )
        assert total_in == 100
        assert total_out == -35

    def test_current_is_in_plus_out(self, movement_factory):
        movements = [movement_factory(50, 1), movement_factory(-80)]
        total_in, total_out = ledger_math.split_totals(movements)
        assert total_in + total_out == ledger_math.sum_quantities(movements)


class TestWeightedAverage:
    def test_two_receipts(self, movement_factory):
        """100 @ 1000 and 50 @ 1200 average to 1066.67."""
        wac = ledger_math.weighted_average(
            [movement_factory(100, 1000), movement_factory(50, 1200)]
        )
        assert wac == pytest.approx(1066.6667, rel=1e-6)

    def test_out_movements_ignored(self, movement_factory):
        base = [movement_factory(100, 1000), movement_factory(50, 1200)]
        with_out = base + [movement_factory(-70, 5000)]
        assert ledger_math.weighted_average(with_out) == ledger_math.weighted_average(base)

    def test_unpriced_receipts_ignored(self, movement_factory):
        assert ledger_math.weighted_average(
            [movement_factory(10, 5), movement_factory(90)]
        ) == 5

    def test_no_qualifying_rows_is_zero(self, movement_factory):
        assert ledger_math.weighted_average([]) == 0.0
        assert ledger_math.weighted_average([movement_factory(-5)]) == 0.0

    def test_deleted_receipt_ignored(self, movement_factory):
        assert ledger_math.weighted_average(
            [movement_factory(10, 5), movement_factory(10, 500, deleted=True)]
        ) == 5

    def test_zero_priced_receipt_lowers_average(self, movement_factory):
        """Adjustment receipts carry price 0 and still count."""
        wac = ledger_math.weighted_average(
            [movement_factory(10, 10), movement_factory(10, 0.0)]
        )
        assert wac == 5


class TestGroupByItem:
    def test_groups_preserve_order(self, movement_factory):
        a1 = movement_factory(1, 1, item_id="a")
        b1 = movement_factory(2, 1, item_id="b")
        a2 = movement_factory(-1, item_id="a")
        grouped = ledger_math.group_by_item([a1, b1, a2])
        assert grouped == {"a": [a1, a2], "b": [b1]}
