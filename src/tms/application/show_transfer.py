"""Application service: Show Transfer use case (query)."""

from __future__ import annotations

from tms.application.dto import TransferDetailDTO, TransferItemDTO
from tms.domain.exceptions import NotFoundError
from tms.domain.model.transfer import Transfer, TransferItem
from tms.domain.repository.unit_of_work import UnitOfWork


class ShowTransferHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, transfer_id: int) -> TransferDetailDTO:
        with self._uow:
            transfer = self._uow.transfers.get_by_id(transfer_id)
            if transfer is None:
                raise NotFoundError(f"Transfer #{transfer_id} not found")
            return self._to_dto(transfer)

    # --- Mapping --------------------------------------------------------------

    def _to_dto(self, transfer: Transfer) -> TransferDetailDTO:
        from_store = self._uow.stores.get_by_id(transfer.from_store_id)
        to_store = self._uow.stores.get_by_id(transfer.to_store_id)
        return TransferDetailDTO(
            transfer_id=transfer.id,  # type: ignore[arg-type]
            from_store_id=transfer.from_store_id,
            from_store_name=from_store.name if from_store else None,
            to_store_id=transfer.to_store_id,
            to_store_name=to_store.name if to_store else None,
            status=transfer.status.value,
            requested_at=transfer.requested_at,
            received_at=transfer.received_at,
            notes=transfer.notes,
            requested_by_user_id=transfer.requested_by_user_id,
            approved_by_user_id=transfer.approved_by_user_id,
            driver_id=transfer.driver_id,
            driver_name=transfer.driver_name,
            driver_email=transfer.driver_email,
            items=[self._item_to_dto(transfer, item) for item in transfer.items],
        )

    def _item_to_dto(self, transfer: Transfer, item: TransferItem) -> TransferItemDTO:
        item_name = None
        if item.inventory_item_id is not None:
            row = self._uow.inventory.get(transfer.from_store_id, item.inventory_item_id)
            if row is None:
                row = self._uow.inventory.find_any(item.inventory_item_id)
            item_name = row.item_name if row else None

        recipe_name = None
        if item.recipe_id is not None:
            recipe = self._uow.recipes.get_by_id(item.recipe_id)
            recipe_name = recipe.name if recipe else None

        return TransferItemDTO(
            transfer_item_id=item.id,
            inventory_item_id=item.inventory_item_id,
            inventory_item_name=item_name,
            recipe_id=item.recipe_id,
            recipe_name=recipe_name,
            quantity=item.quantity,
            is_requested=item.is_requested,
        )
