"""Domain service: Line-Item Reconciler.

Turns a mix of raw-item and recipe lines into one net delta per raw
inventory item, which is the only shape the ledger accepts.

A recipe line of quantity N contributes ``N x quantity_per_unit`` of each
ingredient.  The same item reached several ways (directly, through one
recipe, through another) is summed into a single delta so the ledger never
sees two competing partial decrements.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from tms.domain.exceptions import NotFoundError
from tms.domain.model.catalog import Recipe
from tms.domain.model.value_objects import Quantity, RawItemLine, RecipeLine, TransferLine
from tms.domain.repository.catalog_repository import RecipeRepository


@dataclass(frozen=True)
class InventoryDelta:
    inventory_item_id: int
    quantity: Decimal

    def as_line(self) -> RawItemLine:
        return RawItemLine(self.inventory_item_id, Quantity(self.quantity))


class LineItemReconciler:

    def __init__(self, recipe_repo: RecipeRepository) -> None:
        self._recipe_repo = recipe_repo

    def reconcile(self, lines: Iterable[TransferLine]) -> list[InventoryDelta]:
        """Resolve ``lines`` into net per-item deltas.

        Output order is the order in which each item is first met while
        walking the input (recipes expand in ingredient order).

        Raises NotFoundError if any recipe is unknown; no partial result
        is returned in that case.
        """
        lines = list(lines)

        # Resolve every recipe before producing any output.
        recipes: dict[int, Recipe] = {}
        for line in lines:
            if isinstance(line, RecipeLine) and line.recipe_id not in recipes:
                recipe = self._recipe_repo.get_by_id(line.recipe_id)
                if recipe is None:
                    raise NotFoundError(f"Recipe #{line.recipe_id} not found")
                recipes[line.recipe_id] = recipe

        totals: dict[int, Decimal] = {}
        for line in lines:
            if isinstance(line, RecipeLine):
                units = line.quantity.value
                for ing in recipes[line.recipe_id].ingredients:
                    _add(totals, ing.inventory_item_id, units * ing.quantity_per_unit)
            else:
                _add(totals, line.inventory_item_id, line.quantity.value)

        return [InventoryDelta(item_id, qty) for item_id, qty in totals.items()]


def _add(totals: dict[int, Decimal], item_id: int, qty: Decimal) -> None:
    totals[item_id] = totals.get(item_id, Decimal("0")) + qty
