"""InventoryItem aggregate — quantity-on-hand of one item at one store.

Every store keeps its own row for an item; rows for the same ``item_id``
in different stores describe the same catalogue item.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from tms.domain.exceptions import InsufficientStockError, ValidationError


@dataclass
class InventoryItem:
    """Aggregate root for per-store stock.

    Invariants:
    - ``quantity_on_hand`` is always >= 0
    - quantity only changes through ``decrement()`` / ``increment()``
      (or an explicit stock adjustment via ``set_quantity()``)
    """

    item_id: int
    store_id: int
    item_name: str
    quantity_on_hand: Decimal = Decimal("0")
    minimum_quantity: Decimal | None = None
    version: int = 0

    @property
    def key(self) -> tuple[int, int]:
        return (self.store_id, self.item_id)

    @property
    def is_below_minimum(self) -> bool:
        if self.minimum_quantity is None:
            return False
        return self.quantity_on_hand < self.minimum_quantity

    def can_decrement(self, amount: Decimal) -> bool:
        return amount <= self.quantity_on_hand

    def decrement(self, amount: Decimal) -> None:
        """Remove stock that is leaving the store.

        Raises InsufficientStockError rather than clamping to zero.
        """
        if amount <= 0:
            raise ValidationError("Decrement amount must be positive")
        if not self.can_decrement(amount):
            raise InsufficientStockError(
                store_id=self.store_id,
                item_id=self.item_id,
                required=amount,
                available=self.quantity_on_hand,
                item_name=self.item_name,
            )
        self.quantity_on_hand -= amount

    def increment(self, amount: Decimal) -> None:
        """Add stock that arrived at the store."""
        if amount <= 0:
            raise ValidationError("Increment amount must be positive")
        self.quantity_on_hand += amount

    def set_quantity(self, quantity: Decimal) -> None:
        """Overwrite the counted stock level (manual adjustment)."""
        if quantity < 0:
            raise ValidationError("Stock level cannot be negative")
        self.quantity_on_hand = quantity
