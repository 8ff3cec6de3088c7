"""Unit tests for the LineItemReconciler domain service."""

from decimal import Decimal

import pytest

from tms.domain.exceptions import NotFoundError
from tms.domain.model.value_objects import Quantity, RawItemLine, RecipeLine
from tms.domain.service.line_item_reconciler import InventoryDelta, LineItemReconciler
from tests.fakes import FakeDatabase

A, B, C = 1, 2, 3


def _reconciler() -> LineItemReconciler:
    db = FakeDatabase()
    db.add_recipe(10, "Pancake mix", [(A, "2"), (B, "1")])
    db.add_recipe(11, "Dough", [(B, "0.5"), (C, "0.25")])
    return LineItemReconciler(db.recipe_repo())


class TestReconcile:

    def test_raw_lines_pass_through(self):
        deltas = _reconciler().reconcile([RawItemLine(A, Quantity.of(3))])
        assert deltas == [InventoryDelta(A, Decimal("3"))]

    def test_recipe_expands_and_merges_with_raw_line(self):
        deltas = _reconciler().reconcile([
            RecipeLine(10, Quantity.of(5)),
            RawItemLine(A, Quantity.of(3)),
        ])
        assert deltas == [
            InventoryDelta(A, Decimal("13")),
            InventoryDelta(B, Decimal("5")),
        ]

    def test_item_shared_by_two_recipes_is_summed(self):
        deltas = _reconciler().reconcile([
            RecipeLine(10, Quantity.of(1)),
            RecipeLine(11, Quantity.of(4)),
        ])
        assert deltas == [
            InventoryDelta(A, Decimal("2")),
            InventoryDelta(B, Decimal("3.0")),
            InventoryDelta(C, Decimal("1.00")),
        ]

    def test_order_follows_first_occurrence(self):
        deltas = _reconciler().reconcile([
            RawItemLine(C, Quantity.of(1)),
            RecipeLine(10, Quantity.of(1)),
        ])
        assert [d.inventory_item_id for d in deltas] == [C, A, B]

    def test_empty_input(self):
        assert _reconciler().reconcile([]) == []

    def test_unknown_recipe_rejected(self):
        with pytest.raises(NotFoundError, match="Recipe #99 not found"):
            _reconciler().reconcile([
                RawItemLine(A, Quantity.of(1)),
                RecipeLine(99, Quantity.of(1)),
            ])

    def test_delta_converts_back_to_line(self):
        assert InventoryDelta(A, Decimal("2")).as_line() == RawItemLine(A, Quantity.of(2))
