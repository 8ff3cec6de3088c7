"""Application service: Distribute Transfer Items use case (query).

Splits a transfer's requested (or shipped) lines into raw-item and recipe
quantities without resolving recipes.  Pure read.
"""

from __future__ import annotations

from tms.domain.exceptions import NotFoundError
from tms.domain.model.transfer import DistributedItems
from tms.domain.repository.unit_of_work import UnitOfWork


class DistributeTransferItemsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, transfer_id: int, is_requested: bool) -> DistributedItems:
        with self._uow:
            transfer = self._uow.transfers.get_by_id(transfer_id)
            if transfer is None:
                raise NotFoundError(f"Transfer #{transfer_id} not found")
            return transfer.distribute(is_requested)
