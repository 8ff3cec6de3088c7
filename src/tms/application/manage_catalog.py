"""Application services: register stores and recipes, list drivers.

The catalogue belongs to other subsystems; these handlers exist so the
transfer workflow can be seeded and inspected from the command line.
"""

from __future__ import annotations

from tms.domain.exceptions import ValidationError
from tms.domain.model.catalog import Driver, Ingredient, Recipe, Store
from tms.domain.repository.unit_of_work import UnitOfWork


class AddStoreHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, store_id: int, name: str, org_id: int) -> Store:
        if not name or not name.strip():
            raise ValidationError("Store name is required")
        store = Store(id=store_id, name=name.strip(), org_id=org_id)
        with self._uow:
            if self._uow.stores.get_by_id(store_id) is not None:
                raise ValidationError(f"Store #{store_id} already exists")
            self._uow.stores.save(store)
            self._uow.commit()
        return store


class AddRecipeHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, recipe_id: int, name: str, ingredients: list[Ingredient]) -> Recipe:
        recipe = Recipe.create(recipe_id, name, ingredients)
        with self._uow:
            if self._uow.recipes.get_by_id(recipe_id) is not None:
                raise ValidationError(f"Recipe #{recipe_id} already exists")
            self._uow.recipes.save(recipe)
            self._uow.commit()
        return recipe


class ListDriversHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, store_id: int) -> list[Driver]:
        with self._uow:
            return self._uow.drivers.list_for_store(store_id)
