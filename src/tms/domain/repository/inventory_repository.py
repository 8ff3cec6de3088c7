"""Abstract repository for InventoryItem aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from tms.domain.model.inventory import InventoryItem


class InventoryRepository(ABC):

    @abstractmethod
    def get(self, store_id: int, item_id: int) -> InventoryItem | None:
        """Return the store's row for an item, or None."""

    @abstractmethod
    def find_any(self, item_id: int) -> InventoryItem | None:
        """Return any store's row for an item, or None if it exists nowhere."""

    @abstractmethod
    def list_for_store(self, store_id: int) -> list[InventoryItem]:
        """Return every inventory row of a store."""

    @abstractmethod
    def save(self, item: InventoryItem) -> None:
        """Persist a new or updated inventory row."""
