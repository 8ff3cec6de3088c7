"""Application service: Update Transfer use case.

Edits a Draft or Pending transfer: metadata, submission (Draft -> Pending)
and the item set.  Items are always replaced as a whole, never patched.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from tms.application.dto import TransferLineSpec
from tms.application.events import publish_events, utcnow
from tms.domain.events import TransferEventSink, TransferTransitionEvent
from tms.domain.exceptions import NotFoundError
from tms.domain.model.transfer import TransferStatus
from tms.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UpdateTransferHandler:

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
        transfer_id: int,
        actor_user_id: int,
        from_store_id: int | None = None,
        to_store_id: int | None = None,
        requested_at: datetime | None = None,
        notes: str | None = None,
        status: str | TransferStatus | None = None,
        items: list[TransferLineSpec] | None = None,
    ) -> None:
        if isinstance(status, str):
            status = TransferStatus.parse(status)
        lines = [spec.to_line() for spec in items] if items is not None else None

        with self._uow:
            transfer = self._uow.transfers.get_by_id(transfer_id)
            if transfer is None:
                raise NotFoundError(f"Transfer #{transfer_id} not found")

            for store_id in (from_store_id, to_store_id):
                if store_id is not None and self._uow.stores.get_by_id(store_id) is None:
                    raise NotFoundError(f"Store #{store_id} not found")

            previous = transfer.status
            transfer.update_details(
                from_store_id=from_store_id,
                to_store_id=to_store_id,
                requested_at=requested_at,
                notes=notes,
            )
            if lines is not None:
                transfer.replace_items(lines)
            if status is not None:
                transfer.change_status(status)

            self._uow.transfers.save(transfer)
            self._uow.commit()

        logger.info("Transfer #%s updated by user #%s", transfer_id, actor_user_id)
        if transfer.status != previous:
            publish_events(self._event_sink, [
                TransferTransitionEvent(
                    transfer_id=transfer_id,
                    from_state=previous,
                    to_state=transfer.status,
                    actor_user_id=actor_user_id,
                    timestamp=self._clock(),
                )
            ])
