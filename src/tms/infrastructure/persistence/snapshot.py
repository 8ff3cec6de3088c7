"""In-memory snapshot of the whole data set, and repositories over it.

A unit of work reads one Snapshot, works on a deep copy of it through the
repositories below, and merges the copy back on commit.  The JSON store and
the test fakes share this code; they differ only in where the snapshot lives.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tms.domain.model.catalog import Driver, Recipe, Store
from tms.domain.model.inventory import InventoryItem
from tms.domain.model.transfer import Transfer
from tms.domain.repository.catalog_repository import (
    DriverRepository,
    RecipeRepository,
    StoreRepository,
)
from tms.domain.repository.inventory_repository import InventoryRepository
from tms.domain.repository.transfer_repository import TransferRepository

TABLES = ("stores", "inventory", "recipes", "drivers", "transfers")


@dataclass
class Snapshot:
    stores: dict[int, Store] = field(default_factory=dict)
    inventory: dict[tuple[int, int], InventoryItem] = field(default_factory=dict)
    recipes: dict[int, Recipe] = field(default_factory=dict)
    drivers: dict[int, Driver] = field(default_factory=dict)
    transfers: dict[int, Transfer] = field(default_factory=dict)


class SnapshotTransferRepository(TransferRepository):

    def __init__(self, snapshot: Snapshot) -> None:
        self._rows = snapshot.transfers

    def next_id(self) -> int:
        return max(self._rows, default=0) + 1

    def get_by_id(self, transfer_id: int) -> Transfer | None:
        return self._rows.get(transfer_id)

    def list_all(self) -> list[Transfer]:
        return list(self._rows.values())

    def save(self, transfer: Transfer) -> None:
        if transfer.id is None:
            transfer.id = self.next_id()
        self._rows[transfer.id] = transfer


class SnapshotInventoryRepository(InventoryRepository):

    def __init__(self, snapshot: Snapshot) -> None:
        self._rows = snapshot.inventory

    def get(self, store_id: int, item_id: int) -> InventoryItem | None:
        return self._rows.get((store_id, item_id))

    def find_any(self, item_id: int) -> InventoryItem | None:
        matches = [row for row in self._rows.values() if row.item_id == item_id]
        if not matches:
            return None
        return min(matches, key=lambda row: row.store_id)

    def list_for_store(self, store_id: int) -> list[InventoryItem]:
        rows = [row for row in self._rows.values() if row.store_id == store_id]
        return sorted(rows, key=lambda row: row.item_id)

    def save(self, item: InventoryItem) -> None:
        self._rows[item.key] = item


class SnapshotStoreRepository(StoreRepository):

    def __init__(self, snapshot: Snapshot) -> None:
        self._rows = snapshot.stores

    def get_by_id(self, store_id: int) -> Store | None:
        return self._rows.get(store_id)

    def list_all(self) -> list[Store]:
        return sorted(self._rows.values(), key=lambda s: s.id)

    def save(self, store: Store) -> None:
        self._rows[store.id] = store


class SnapshotRecipeRepository(RecipeRepository):

    def __init__(self, snapshot: Snapshot) -> None:
        self._rows = snapshot.recipes

    def get_by_id(self, recipe_id: int) -> Recipe | None:
        return self._rows.get(recipe_id)

    def save(self, recipe: Recipe) -> None:
        self._rows[recipe.id] = recipe


class SnapshotDriverRepository(DriverRepository):

    def __init__(self, snapshot: Snapshot) -> None:
        self._rows = snapshot.drivers

    def next_id(self) -> int:
        return max(self._rows, default=0) + 1

    def get_by_id(self, driver_id: int) -> Driver | None:
        return self._rows.get(driver_id)

    def find_by_email(self, store_id: int, email: str) -> Driver | None:
        wanted = email.strip().lower()
        for driver in self._rows.values():
            if driver.store_id == store_id and driver.email.lower() == wanted:
                return driver
        return None

    def list_for_store(self, store_id: int) -> list[Driver]:
        rows = [d for d in self._rows.values() if d.store_id == store_id]
        return sorted(rows, key=lambda d: d.id)

    def save(self, driver: Driver) -> None:
        self._rows[driver.id] = driver
