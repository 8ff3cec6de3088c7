"""Application service: Set Inventory use case.

A direct stock count, outside the transfer workflow.  It goes through the
same unit of work so it cannot silently overwrite a concurrent transfer's
decrement.
"""

from __future__ import annotations

from decimal import Decimal

from tms.domain.exceptions import NotFoundError, ValidationError
from tms.domain.model.inventory import InventoryItem
from tms.domain.repository.unit_of_work import UnitOfWork


class SetInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        store_id: int,
        item_id: int,
        quantity: Decimal,
        item_name: str | None = None,
        minimum_quantity: Decimal | None = None,
    ) -> None:
        """Set the counted quantity of an item at a store, creating the row if needed."""
        with self._uow:
            if self._uow.stores.get_by_id(store_id) is None:
                raise NotFoundError(f"Store #{store_id} not found")

            existing = self._uow.inventory.get(store_id, item_id)
            if existing is not None:
                existing.set_quantity(quantity)
                if item_name:
                    existing.item_name = item_name.strip()
                if minimum_quantity is not None:
                    existing.minimum_quantity = minimum_quantity
                self._uow.inventory.save(existing)
            else:
                if not item_name:
                    template = self._uow.inventory.find_any(item_id)
                    if template is None:
                        raise ValidationError(f"Item #{item_id} is new; an item name is required")
                    item_name = template.item_name
                item = InventoryItem(
                    item_id=item_id,
                    store_id=store_id,
                    item_name=item_name.strip(),
                    minimum_quantity=minimum_quantity,
                )
                item.set_quantity(quantity)
                self._uow.inventory.save(item)

            self._uow.commit()
