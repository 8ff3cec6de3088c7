"""Application service: Deliver Transfer use case.

Adds every shipped line to the requesting store's stock and closes the
transfer.  Shipped lines are normally raw items already; any line still
denominated in a recipe is resolved against the recipe as it is now.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from tms.application.events import publish_events, utcnow
from tms.domain.events import TransferEventSink, TransferTransitionEvent
from tms.domain.exceptions import NotFoundError
from tms.domain.model.transfer import TransferStatus
from tms.domain.repository.unit_of_work import UnitOfWork
from tms.domain.service.inventory_ledger import InventoryLedger
from tms.domain.service.line_item_reconciler import LineItemReconciler

logger = logging.getLogger(__name__)


class DeliverTransferHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        event_sink: TransferEventSink,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow = uow
        self._event_sink = event_sink
        self._clock = clock

    def handle(self, transfer_id: int, actor_user_id: int) -> None:
        received_at = self._clock()

        with self._uow:
            transfer = self._uow.transfers.get_by_id(transfer_id)
            if transfer is None:
                raise NotFoundError(f"Transfer #{transfer_id} not found")
            transfer.ensure_status(TransferStatus.APPROVED, "deliver")

            deltas = LineItemReconciler(self._uow.recipes).reconcile(transfer.shipped_lines)
            if deltas:
                InventoryLedger(self._uow.inventory).increment_all(transfer.to_store_id, deltas)

            transfer.mark_delivered(received_at)
            self._uow.transfers.save(transfer)
            self._uow.commit()

        logger.info(
            "Transfer #%s delivered to store #%s; %d item(s) received",
            transfer_id, transfer.to_store_id, len(deltas),
        )
        publish_events(self._event_sink, [
            TransferTransitionEvent(
                transfer_id=transfer_id,
                from_state=TransferStatus.APPROVED,
                to_state=TransferStatus.DELIVERED,
                actor_user_id=actor_user_id,
                timestamp=received_at,
            )
        ])
