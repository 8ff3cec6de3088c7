"""Optimistic unit of work over a Snapshot.

``begin()`` reads the committed snapshot and hands out repositories over a
private deep copy.  ``commit()`` takes the backend's lock, re-reads the
committed state and merges the copy into it row by row:

- a row that was not changed is ignored;
- a changed Transfer / InventoryItem must still carry the version that was
  read (its version is then bumped);
- a changed unversioned row must still equal what was read;
- a new row must not collide with one created in the meantime.

Any violation raises ConcurrencyConflictError before anything is written,
so two approvals of one transfer, or two decrements of one store's item,
can never both land.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
import threading
from abc import abstractmethod

from tms.domain.exceptions import ConcurrencyConflictError
from tms.domain.repository.unit_of_work import UnitOfWork
from tms.infrastructure.persistence.snapshot import (
    TABLES,
    Snapshot,
    SnapshotDriverRepository,
    SnapshotInventoryRepository,
    SnapshotRecipeRepository,
    SnapshotStoreRepository,
    SnapshotTransferRepository,
)

logger = logging.getLogger(__name__)


class SnapshotUnitOfWork(UnitOfWork):

    def __init__(self) -> None:
        self._base: Snapshot | None = None
        self._working: Snapshot | None = None

    # --- Backend hooks --------------------------------------------------------

    @property
    @abstractmethod
    def lock(self) -> threading.Lock:
        """Serialises read-check-write of the committed state."""

    @abstractmethod
    def _read(self) -> Snapshot:
        """Return a fresh, unshared copy of the committed state."""

    @abstractmethod
    def _write(self, snapshot: Snapshot) -> None:
        """Replace the committed state."""

    # --- UnitOfWork interface -------------------------------------------------

    def begin(self) -> None:
        with self.lock:
            self._base = self._read()
        self._bind(copy.deepcopy(self._base))

    def commit(self) -> None:
        if self._base is None or self._working is None:
            raise RuntimeError("commit() called outside of an open unit of work")
        with self.lock:
            current = self._read()
            merge_snapshot(self._base, self._working, current)
            self._write(current)
        self._base = current
        self._bind(copy.deepcopy(current))

    def rollback(self) -> None:
        if self._base is not None:
            self._bind(copy.deepcopy(self._base))

    # --- Internal helpers -----------------------------------------------------

    def _bind(self, working: Snapshot) -> None:
        self._working = working
        self.transfers = SnapshotTransferRepository(working)
        self.inventory = SnapshotInventoryRepository(working)
        self.recipes = SnapshotRecipeRepository(working)
        self.drivers = SnapshotDriverRepository(working)
        self.stores = SnapshotStoreRepository(working)


def merge_snapshot(base: Snapshot, working: Snapshot, current: Snapshot) -> None:
    """Apply ``working``'s changes relative to ``base`` onto ``current`` in place.

    Every table is checked before any is modified.
    """
    plans = [
        (getattr(current, table), _plan_table(table, getattr(base, table),
                                              getattr(working, table),
                                              getattr(current, table)))
        for table in TABLES
    ]
    for rows, changes in plans:
        rows.update(changes)


def _plan_table(table: str, base: dict, working: dict, current: dict) -> dict:
    changes = {}
    for key, row in working.items():
        original = base.get(key)
        if original is not None and row == original:
            continue
        latest = current.get(key)
        if original is None:
            if latest is not None:
                raise _conflict(table, key, "was created concurrently")
            changes[key] = _stamp(row, 1)
            continue
        if latest is None or not _same_revision(original, latest):
            raise _conflict(table, key, "was modified concurrently")
        changes[key] = _stamp(row, _version(original) + 1)
    return changes


def _same_revision(original, latest) -> bool:
    if hasattr(original, "version"):
        return original.version == latest.version
    return original == latest


def _version(row) -> int:
    return getattr(row, "version", 0)


def _stamp(row, version: int):
    if hasattr(row, "version"):
        return dataclasses.replace(row, version=version)
    return row


def _conflict(table: str, key, detail: str) -> ConcurrencyConflictError:
    logger.warning("Commit conflict on %s %s: %s", table, key, detail)
    return ConcurrencyConflictError(
        f"{table} record {key} {detail}; reload and try again"
    )
