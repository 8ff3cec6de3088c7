"""Domain service: Inventory Ledger.

The single place where ``quantity_on_hand`` changes during a transfer.
It lives in the domain layer because "stock never goes negative" is a
core business rule, not just orchestration.

The batch operations use a two-phase approach (validate-then-mutate) so a
store is never left partially decremented when one item falls short.
Durability and isolation come from the surrounding unit of work.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from tms.domain.exceptions import InsufficientStockError, NotFoundError, ValidationError
from tms.domain.model.inventory import InventoryItem
from tms.domain.repository.inventory_repository import InventoryRepository
from tms.domain.service.line_item_reconciler import InventoryDelta


class InventoryLedger:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def decrement(self, store_id: int, item_id: int, amount: Decimal) -> None:
        self.decrement_all(store_id, [InventoryDelta(item_id, amount)])

    def increment(self, store_id: int, item_id: int, amount: Decimal) -> None:
        self.increment_all(store_id, [InventoryDelta(item_id, amount)])

    def decrement_all(self, store_id: int, deltas: Sequence[InventoryDelta]) -> None:
        """Take every delta out of the store's stock, or none of them.

        Phase 1 — load and validate: every item must be stocked and
                  hold at least the requested amount.
        Phase 2 — mutate and persist.
        """
        totals = _net(deltas)

        rows: list[tuple[InventoryItem, Decimal]] = []
        for item_id, qty in totals.items():
            row = self._inventory_repo.get(store_id, item_id)
            if row is None:
                raise NotFoundError(
                    f"Store #{store_id} has no inventory record for item #{item_id}"
                )
            if not row.can_decrement(qty):
                raise InsufficientStockError(
                    store_id=store_id,
                    item_id=item_id,
                    required=qty,
                    available=row.quantity_on_hand,
                    item_name=row.item_name,
                )
            rows.append((row, qty))

        for row, qty in rows:
            row.decrement(qty)
            self._inventory_repo.save(row)

    def increment_all(self, store_id: int, deltas: Sequence[InventoryDelta]) -> None:
        """Add every delta to the store's stock.

        An item the store has never stocked gets a new row, copied from
        another store's record of the same item.
        """
        totals = _net(deltas)

        rows: list[tuple[InventoryItem, Decimal]] = []
        for item_id, qty in totals.items():
            row = self._inventory_repo.get(store_id, item_id)
            if row is None:
                row = self._open_row(store_id, item_id)
            rows.append((row, qty))

        for row, qty in rows:
            row.increment(qty)
            self._inventory_repo.save(row)

    # --- Internal helpers -----------------------------------------------------

    def _open_row(self, store_id: int, item_id: int) -> InventoryItem:
        template = self._inventory_repo.find_any(item_id)
        if template is None:
            raise NotFoundError(f"Inventory item #{item_id} not found")
        return InventoryItem(
            item_id=item_id,
            store_id=store_id,
            item_name=template.item_name,
            quantity_on_hand=Decimal("0"),
            minimum_quantity=template.minimum_quantity,
        )


def _net(deltas: Sequence[InventoryDelta]) -> dict[int, Decimal]:
    """Validate and sum deltas per item so each row is checked against its total."""
    totals: dict[int, Decimal] = {}
    for delta in deltas:
        if delta.quantity <= 0:
            raise ValidationError(
                f"Stock movement for item #{delta.inventory_item_id} must be positive"
            )
        totals[delta.inventory_item_id] = (
            totals.get(delta.inventory_item_id, Decimal("0")) + delta.quantity
        )
    return totals
