"""Unit tests for the InventoryItem aggregate."""

from decimal import Decimal

import pytest

from tms.domain.exceptions import InsufficientStockError, ValidationError
from tms.domain.model.inventory import InventoryItem


def _item(on_hand: str = "10", minimum: str | None = None) -> InventoryItem:
    return InventoryItem(
        item_id=1,
        store_id=5,
        item_name="Flour",
        quantity_on_hand=Decimal(on_hand),
        minimum_quantity=Decimal(minimum) if minimum is not None else None,
    )


class TestDecrement:

    def test_decrement_reduces_stock(self):
        item = _item("10")
        item.decrement(Decimal("4"))
        assert item.quantity_on_hand == Decimal("6")

    def test_decrement_to_exactly_zero(self):
        item = _item("10")
        item.decrement(Decimal("10"))
        assert item.quantity_on_hand == Decimal("0")

    def test_decrement_beyond_stock_rejected(self):
        item = _item("5")
        with pytest.raises(InsufficientStockError, match="Flour at store #5") as exc_info:
            item.decrement(Decimal("6"))
        assert exc_info.value.required == Decimal("6")
        assert exc_info.value.available == Decimal("5")
        assert item.quantity_on_hand == Decimal("5")

    def test_non_positive_decrement_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _item().decrement(Decimal("0"))


class TestIncrementAndSet:

    def test_increment_adds_stock(self):
        item = _item("1.5")
        item.increment(Decimal("0.25"))
        assert item.quantity_on_hand == Decimal("1.75")

    def test_non_positive_increment_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _item().increment(Decimal("-1"))

    def test_set_quantity_overwrites(self):
        item = _item("10")
        item.set_quantity(Decimal("3"))
        assert item.quantity_on_hand == Decimal("3")

    def test_set_negative_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            _item().set_quantity(Decimal("-1"))


class TestMinimum:

    def test_below_minimum(self):
        assert _item("2", minimum="5").is_below_minimum

    def test_at_minimum_is_fine(self):
        assert not _item("5", minimum="5").is_below_minimum

    def test_no_minimum_never_low(self):
        assert not _item("0").is_below_minimum
