"""Read-mostly entities owned by neighbouring subsystems.

Stores, recipes and drivers are managed elsewhere; the transfer workflow
only needs the shape below to resolve ids and scope records.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from tms.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Store:
    id: int
    name: str
    org_id: int


@dataclass(frozen=True)
class Ingredient:
    inventory_item_id: int
    quantity_per_unit: Decimal


@dataclass(frozen=True)
class Recipe:
    """A recipe and the raw items one unit of it consumes.

    Ingredient order is preserved; the reconciler relies on it for a
    deterministic output order.
    """

    id: int
    name: str
    ingredients: tuple[Ingredient, ...]

    @staticmethod
    def create(recipe_id: int, name: str, ingredients: list[Ingredient]) -> Recipe:
        if not name or not name.strip():
            raise ValidationError("Recipe name is required")
        if not ingredients:
            raise ValidationError("Recipe must have at least one ingredient")
        for ing in ingredients:
            if ing.quantity_per_unit <= 0:
                raise ValidationError(
                    f"Ingredient quantity for item #{ing.inventory_item_id} must be positive"
                )
        return Recipe(id=recipe_id, name=name.strip(), ingredients=tuple(ingredients))


@dataclass(frozen=True)
class Driver:
    """A delivery driver, scoped to the store that dispatches transfers."""

    id: int
    name: str
    email: str
    store_id: int
