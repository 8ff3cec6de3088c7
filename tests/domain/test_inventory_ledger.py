"""Unit tests for the InventoryLedger domain service."""

from decimal import Decimal

import pytest

from tms.domain.exceptions import InsufficientStockError, NotFoundError, ValidationError
from tms.domain.service.inventory_ledger import InventoryLedger
from tms.domain.service.line_item_reconciler import InventoryDelta
from tests.fakes import FakeDatabase


def _setup() -> tuple[FakeDatabase, InventoryLedger]:
    db = FakeDatabase()
    db.add_stock(1, 1, "10", name="Flour", minimum="2")
    db.add_stock(1, 2, "5", name="Sugar")
    db.add_stock(2, 1, "1", name="Flour")
    return db, InventoryLedger(db.inventory_repo())


class TestDecrementAll:

    def test_decrements_every_item(self):
        db, ledger = _setup()
        ledger.decrement_all(1, [InventoryDelta(1, Decimal("4")), InventoryDelta(2, Decimal("5"))])
        assert db.stock(1, 1) == Decimal("6")
        assert db.stock(1, 2) == Decimal("0")

    def test_shortfall_changes_nothing(self):
        db, ledger = _setup()
        with pytest.raises(InsufficientStockError, match="Sugar at store #1"):
            ledger.decrement_all(1, [InventoryDelta(1, Decimal("4")), InventoryDelta(2, Decimal("6"))])
        assert db.stock(1, 1) == Decimal("10")
        assert db.stock(1, 2) == Decimal("5")

    def test_duplicate_deltas_checked_against_their_total(self):
        db, ledger = _setup()
        with pytest.raises(InsufficientStockError, match="need 6, have 5"):
            ledger.decrement_all(1, [InventoryDelta(2, Decimal("3")), InventoryDelta(2, Decimal("3"))])
        assert db.stock(1, 2) == Decimal("5")

    def test_missing_row_rejected(self):
        db, ledger = _setup()
        with pytest.raises(NotFoundError, match="Store #2 has no inventory record for item #2"):
            ledger.decrement_all(2, [InventoryDelta(2, Decimal("1"))])

    def test_non_positive_delta_rejected(self):
        _, ledger = _setup()
        with pytest.raises(ValidationError, match="must be positive"):
            ledger.decrement_all(1, [InventoryDelta(1, Decimal("0"))])

    def test_single_decrement(self):
        db, ledger = _setup()
        ledger.decrement(2, 1, Decimal("1"))
        assert db.stock(2, 1) == Decimal("0")


class TestIncrementAll:

    def test_increments_existing_row(self):
        db, ledger = _setup()
        ledger.increment_all(2, [InventoryDelta(1, Decimal("2.5"))])
        assert db.stock(2, 1) == Decimal("3.5")

    def test_opens_row_copied_from_another_store(self):
        db, ledger = _setup()
        ledger.increment(3, 1, Decimal("4"))

        row = db.snapshot.inventory[(3, 1)]
        assert row.quantity_on_hand == Decimal("4")
        assert row.item_name == "Flour"
        assert row.minimum_quantity == Decimal("2")

    def test_unknown_item_rejected(self):
        db, ledger = _setup()
        with pytest.raises(NotFoundError, match="Inventory item #42 not found"):
            ledger.increment_all(2, [InventoryDelta(1, Decimal("1")), InventoryDelta(42, Decimal("1"))])
        assert db.stock(2, 1) == Decimal("1")
