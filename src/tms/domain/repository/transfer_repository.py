"""Abstract repository for Transfer aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from tms.domain.model.transfer import Transfer


class TransferRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique transfer ID."""

    @abstractmethod
    def get_by_id(self, transfer_id: int) -> Transfer | None:
        """Return a transfer by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Transfer]:
        """Return every transfer, in no particular order."""

    @abstractmethod
    def save(self, transfer: Transfer) -> None:
        """Persist a new or updated transfer.  Assigns an ID to new ones."""
