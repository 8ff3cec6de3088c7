"""Application service: Create Transfer use case.

Records what a store is asking for.  Nothing is reserved and no stock
moves until the transfer is approved.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from tms.application.dto import TransferLineSpec
from tms.application.events import publish_events, utcnow
from tms.domain.events import TransferEventSink, TransferTransitionEvent
from tms.domain.exceptions import NotFoundError, ValidationError
from tms.domain.model.transfer import Transfer, TransferStatus
from tms.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class CreateTransferHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        event_sink: TransferEventSink,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow = uow
        self._event_sink = event_sink
        self._clock = clock

    def handle(
        self,
        from_store_id: int | None,
        requester_store_id: int,
        requested_by_user_id: int,
        items: list[TransferLineSpec],
        status: str | TransferStatus = TransferStatus.PENDING,
        requested_at: datetime | None = None,
        notes: str | None = None,
    ) -> int:
        """Create a transfer and return its ID.

        Steps:
        1. Validate the source store was chosen and both stores exist.
        2. Turn every line spec into a tagged line (rejects bad lines).
        3. Let the Transfer aggregate enforce the creation rules.
        4. Persist atomically, then publish the creation event.
        """
        if from_store_id is None:
            raise ValidationError("The store to request from must be selected")
        if not items:
            raise ValidationError("Select at least one item")
        if isinstance(status, str):
            status = TransferStatus.parse(status)

        lines = [spec.to_line() for spec in items]

        with self._uow:
            for store_id in (from_store_id, requester_store_id):
                if self._uow.stores.get_by_id(store_id) is None:
                    raise NotFoundError(f"Store #{store_id} not found")

            transfer = Transfer.create(
                from_store_id=from_store_id,
                to_store_id=requester_store_id,
                requested_by_user_id=requested_by_user_id,
                lines=lines,
                status=status,
                requested_at=requested_at or self._clock(),
                notes=notes,
            )
            self._uow.transfers.save(transfer)
            self._uow.commit()

        logger.info(
            "Transfer #%s created (%s) from store #%s to store #%s with %d line(s)",
            transfer.id, transfer.status.value, from_store_id, requester_store_id, len(lines),
        )
        publish_events(self._event_sink, [
            TransferTransitionEvent(
                transfer_id=transfer.id,  # type: ignore[arg-type]
                from_state=None,
                to_state=transfer.status,
                actor_user_id=requested_by_user_id,
                timestamp=self._clock(),
            )
        ])
        return transfer.id  # type: ignore[return-value]
