"""JSON-file-backed unit of work.

The whole data set lives in one JSON document with a list per table.
Commits replace the file atomically (temporary file + ``os.replace``), so a
crash mid-write leaves the previous committed state intact.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from tms.domain.model.catalog import Driver, Ingredient, Recipe, Store
from tms.domain.model.inventory import InventoryItem
from tms.domain.model.transfer import Transfer, TransferItem, TransferStatus, as_utc
from tms.domain.model.value_objects import make_line
from tms.infrastructure.persistence.snapshot import TABLES, Snapshot
from tms.infrastructure.persistence.snapshot_unit_of_work import SnapshotUnitOfWork

_LOCKS: dict[Path, threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _LOCKS_GUARD:
        return _LOCKS.setdefault(path, threading.Lock())


class JsonUnitOfWork(SnapshotUnitOfWork):

    def __init__(self, file_path: Path) -> None:
        super().__init__()
        self._file_path = file_path.resolve()
        self._lock = _lock_for(self._file_path)
        self._ensure_file()

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    # --- Snapshot I/O ---------------------------------------------------------

    def _read(self) -> Snapshot:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        snapshot = Snapshot()
        for store in (self._store_to_domain(r) for r in raw.get("stores", [])):
            snapshot.stores[store.id] = store
        for item in (self._inventory_to_domain(r) for r in raw.get("inventory", [])):
            snapshot.inventory[item.key] = item
        for recipe in (self._recipe_to_domain(r) for r in raw.get("recipes", [])):
            snapshot.recipes[recipe.id] = recipe
        for driver in (self._driver_to_domain(r) for r in raw.get("drivers", [])):
            snapshot.drivers[driver.id] = driver
        for transfer in (self._transfer_to_domain(r) for r in raw.get("transfers", [])):
            snapshot.transfers[transfer.id] = transfer
        return snapshot

    def _write(self, snapshot: Snapshot) -> None:
        raw = {
            "stores": [self._store_to_raw(s) for s in snapshot.stores.values()],
            "inventory": [self._inventory_to_raw(i) for i in snapshot.inventory.values()],
            "recipes": [self._recipe_to_raw(r) for r in snapshot.recipes.values()],
            "drivers": [self._driver_to_raw(d) for d in snapshot.drivers.values()],
            "transfers": [self._transfer_to_raw(t) for t in snapshot.transfers.values()],
        }
        self._persist_raw(raw)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _store_to_raw(store: Store) -> dict:
        return {"id": store.id, "name": store.name, "org_id": store.org_id}

    @staticmethod
    def _store_to_domain(raw: dict) -> Store:
        return Store(id=raw["id"], name=raw["name"], org_id=raw["org_id"])

    @staticmethod
    def _inventory_to_raw(item: InventoryItem) -> dict:
        return {
            "item_id": item.item_id,
            "store_id": item.store_id,
            "item_name": item.item_name,
            "quantity_on_hand": str(item.quantity_on_hand),
            "minimum_quantity": (
                str(item.minimum_quantity) if item.minimum_quantity is not None else None
            ),
            "version": item.version,
        }

    @staticmethod
    def _inventory_to_domain(raw: dict) -> InventoryItem:
        minimum = raw.get("minimum_quantity")
        return InventoryItem(
            item_id=raw["item_id"],
            store_id=raw["store_id"],
            item_name=raw["item_name"],
            quantity_on_hand=Decimal(raw["quantity_on_hand"]),
            minimum_quantity=Decimal(minimum) if minimum is not None else None,
            version=raw.get("version", 0),
        )

    @staticmethod
    def _recipe_to_raw(recipe: Recipe) -> dict:
        return {
            "id": recipe.id,
            "name": recipe.name,
            "ingredients": [
                {
                    "inventory_item_id": ing.inventory_item_id,
                    "quantity_per_unit": str(ing.quantity_per_unit),
                }
                for ing in recipe.ingredients
            ],
        }

    @staticmethod
    def _recipe_to_domain(raw: dict) -> Recipe:
        return Recipe(
            id=raw["id"],
            name=raw["name"],
            ingredients=tuple(
                Ingredient(
                    inventory_item_id=i["inventory_item_id"],
                    quantity_per_unit=Decimal(i["quantity_per_unit"]),
                )
                for i in raw["ingredients"]
            ),
        )

    @staticmethod
    def _driver_to_raw(driver: Driver) -> dict:
        return {
            "id": driver.id,
            "name": driver.name,
            "email": driver.email,
            "store_id": driver.store_id,
        }

    @staticmethod
    def _driver_to_domain(raw: dict) -> Driver:
        return Driver(
            id=raw["id"], name=raw["name"], email=raw["email"], store_id=raw["store_id"]
        )

    @staticmethod
    def _transfer_to_raw(transfer: Transfer) -> dict:
        return {
            "id": transfer.id,
            "from_store_id": transfer.from_store_id,
            "to_store_id": transfer.to_store_id,
            "requested_by_user_id": transfer.requested_by_user_id,
            "status": transfer.status.value,
            "requested_at": transfer.requested_at.isoformat(),
            "received_at": transfer.received_at.isoformat() if transfer.received_at else None,
            "notes": transfer.notes,
            "driver_id": transfer.driver_id,
            "driver_name": transfer.driver_name,
            "driver_email": transfer.driver_email,
            "approved_by_user_id": transfer.approved_by_user_id,
            "version": transfer.version,
            "items": [
                {
                    "id": item.id,
                    "inventory_item_id": item.inventory_item_id,
                    "recipe_id": item.recipe_id,
                    "quantity": str(item.quantity),
                    "is_requested": item.is_requested,
                }
                for item in transfer.items
            ],
        }

    @staticmethod
    def _transfer_to_domain(raw: dict) -> Transfer:
        items = [
            TransferItem(
                id=i["id"],
                line=make_line(i.get("inventory_item_id"), i.get("recipe_id"), i["quantity"]),
                is_requested=i["is_requested"],
            )
            for i in raw["items"]
        ]
        received_at = raw.get("received_at")
        return Transfer(
            id=raw["id"],
            from_store_id=raw["from_store_id"],
            to_store_id=raw["to_store_id"],
            requested_by_user_id=raw["requested_by_user_id"],
            items=items,
            status=TransferStatus(raw["status"]),
            requested_at=as_utc(datetime.fromisoformat(raw["requested_at"])),
            notes=raw.get("notes"),
            driver_id=raw.get("driver_id"),
            driver_name=raw.get("driver_name"),
            driver_email=raw.get("driver_email"),
            approved_by_user_id=raw.get("approved_by_user_id"),
            received_at=as_utc(datetime.fromisoformat(received_at)) if received_at else None,
            version=raw.get("version", 0),
        )

    # --- File helpers ---------------------------------------------------------

    def _persist_raw(self, raw: dict) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(raw, indent=2) + "\n")
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            empty = {table: [] for table in TABLES}
            self._file_path.write_text(json.dumps(empty, indent=2) + "\n", encoding="utf-8")
