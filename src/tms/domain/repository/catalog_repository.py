"""Abstract repositories for the entities owned by neighbouring subsystems.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from tms.domain.model.catalog import Driver, Recipe, Store


class StoreRepository(ABC):

    @abstractmethod
    def get_by_id(self, store_id: int) -> Store | None:
        """Return a store by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Store]:
        """Return every known store."""

    @abstractmethod
    def save(self, store: Store) -> None:
        """Register or replace a store."""


class RecipeRepository(ABC):

    @abstractmethod
    def get_by_id(self, recipe_id: int) -> Recipe | None:
        """Return a recipe with its ingredients, or None if not found."""

    @abstractmethod
    def save(self, recipe: Recipe) -> None:
        """Register or replace a recipe."""


class DriverRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique driver ID."""

    @abstractmethod
    def get_by_id(self, driver_id: int) -> Driver | None:
        """Return a driver by ID, or None if not found."""

    @abstractmethod
    def find_by_email(self, store_id: int, email: str) -> Driver | None:
        """Return the store's driver with this email (case-insensitive), or None."""

    @abstractmethod
    def list_for_store(self, store_id: int) -> list[Driver]:
        """Return the drivers scoped to a store."""

    @abstractmethod
    def save(self, driver: Driver) -> None:
        """Persist a new driver."""
