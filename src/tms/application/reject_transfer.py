"""Application service: Reject Transfer use case.

Nothing is reserved while a transfer is Pending, so rejecting it never
touches inventory.
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

logger = logging.getLogger(__name__)


class RejectTransferHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        event_sink: TransferEventSink,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow = uow
        self._event_sink = event_sink
        self._clock = clock

    def handle(self, transfer_id: int, actor_user_id: int, notes: str | None = None) -> None:
        with self._uow:
            transfer = self._uow.transfers.get_by_id(transfer_id)
            if transfer is None:
                raise NotFoundError(f"Transfer #{transfer_id} not found")

            transfer.reject(notes)
            self._uow.transfers.save(transfer)
            self._uow.commit()

        logger.info("Transfer #%s rejected by user #%s", transfer_id, actor_user_id)
        publish_events(self._event_sink, [
            TransferTransitionEvent(
                transfer_id=transfer_id,
                from_state=TransferStatus.PENDING,
                to_state=TransferStatus.REJECTED,
                actor_user_id=actor_user_id,
                timestamp=self._clock(),
            )
        ])
