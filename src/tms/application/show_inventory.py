"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from tms.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class InventoryLineDTO:
    item_id: int
    item_name: str
    quantity_on_hand: Decimal
    minimum_quantity: Decimal | None
    below_minimum: bool


class ShowInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, store_id: int) -> list[InventoryLineDTO]:
        with self._uow:
            items = self._uow.inventory.list_for_store(store_id)
        return [
            InventoryLineDTO(
                item_id=item.item_id,
                item_name=item.item_name,
                quantity_on_hand=item.quantity_on_hand,
                minimum_quantity=item.minimum_quantity,
                below_minimum=item.is_below_minimum,
            )
            for item in items
        ]
