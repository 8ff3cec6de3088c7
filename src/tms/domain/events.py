"""Transition events handed to the audit/notification collaborator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from tms.domain.model.transfer import TransferStatus


@dataclass(frozen=True)
class TransferTransitionEvent:
    transfer_id: int
    from_state: TransferStatus | None  # None for a newly created transfer
    to_state: TransferStatus
    actor_user_id: int
    timestamp: datetime

    def as_dict(self) -> dict:
        return {
            "event": "transfer.transition",
            "transfer_id": self.transfer_id,
            "from_state": self.from_state.value if self.from_state else None,
            "to_state": self.to_state.value,
            "actor_user_id": self.actor_user_id,
            "timestamp": self.timestamp.isoformat(),
        }


class TransferEventSink(ABC):
    """Receives one event per committed transition.  Storage is not our concern."""

    @abstractmethod
    def publish(self, event: TransferTransitionEvent) -> None:
        """Record or forward the event."""
