"""Publishing of transition events after a successful commit."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from tms.domain.events import TransferEventSink, TransferTransitionEvent

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def publish_events(sink: TransferEventSink, events: Iterable[TransferTransitionEvent]) -> None:
    """Hand committed events to the sink.

    The transition is already durable at this point; a failing sink is
    logged and does not undo it.
    """
    for event in events:
        try:
            sink.publish(event)
        except Exception:
            logger.exception(
                "Failed to publish transfer event",
                extra={"transfer_id": event.transfer_id, "to_state": event.to_state.value},
            )
