"""Abstract unit of work — the atomic boundary of every transfer transition.

Handlers use it as a context manager::

    with uow:
        ...mutate through uow.transfers / uow.inventory...
        uow.commit()

Leaving the block without ``commit()`` (normally or through an exception)
rolls back, so a failed transition leaves no trace.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from tms.domain.repository.catalog_repository import (
    DriverRepository,
    RecipeRepository,
    StoreRepository,
)
from tms.domain.repository.inventory_repository import InventoryRepository
from tms.domain.repository.transfer_repository import TransferRepository


class UnitOfWork(ABC):

    transfers: TransferRepository
    inventory: InventoryRepository
    recipes: RecipeRepository
    drivers: DriverRepository
    stores: StoreRepository

    def __enter__(self) -> UnitOfWork:
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def begin(self) -> None:
        """Open a fresh view of the committed state."""

    @abstractmethod
    def commit(self) -> None:
        """Publish every change made since ``begin()``, or raise and publish none.

        Raises ConcurrencyConflictError when another unit of work changed
        the same rows first.
        """

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes.  Harmless after a successful commit."""
