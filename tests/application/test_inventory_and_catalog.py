"""Integration tests for stock counts and catalogue administration."""

from decimal import Decimal

import pytest

from tms.application.manage_catalog import AddRecipeHandler, AddStoreHandler, ListDriversHandler
from tms.application.set_inventory import SetInventoryHandler
from tms.application.show_inventory import ShowInventoryHandler
from tms.domain.exceptions import NotFoundError, ValidationError
from tms.domain.model.catalog import Ingredient
from tests.fakes import FakeUnitOfWork, seeded_database


class TestSetInventory:

    def test_overwrites_existing_count(self):
        db = seeded_database()
        SetInventoryHandler(FakeUnitOfWork(db)).handle(1, 1, Decimal("7"), minimum_quantity=Decimal("3"))

        row = db.snapshot.inventory[(1, 1)]
        assert row.quantity_on_hand == Decimal("7")
        assert row.minimum_quantity == Decimal("3")
        assert row.version == 1

    def test_new_item_needs_a_name(self):
        db = seeded_database()
        with pytest.raises(ValidationError, match="item name is required"):
            SetInventoryHandler(FakeUnitOfWork(db)).handle(2, 50, Decimal("1"))

    def test_known_item_borrows_name_from_other_store(self):
        db = seeded_database()
        SetInventoryHandler(FakeUnitOfWork(db)).handle(3, 2, Decimal("4"))
        assert db.snapshot.inventory[(3, 2)].item_name == "Sugar"

    def test_unknown_store_rejected(self):
        db = seeded_database()
        with pytest.raises(NotFoundError, match="Store #9 not found"):
            SetInventoryHandler(FakeUnitOfWork(db)).handle(9, 1, Decimal("1"), item_name="Flour")

    def test_negative_count_rejected(self):
        db = seeded_database()
        with pytest.raises(ValidationError, match="cannot be negative"):
            SetInventoryHandler(FakeUnitOfWork(db)).handle(1, 1, Decimal("-2"))
        assert db.stock(1, 1) == Decimal("20")


class TestShowInventory:

    def test_lists_store_rows_with_low_flag(self):
        db = seeded_database()
        db.add_stock(1, 3, "1", name="Yeast", minimum="2")

        lines = ShowInventoryHandler(FakeUnitOfWork(db)).handle(1)

        assert [(line.item_id, line.item_name) for line in lines] == [(1, "Flour"), (2, "Sugar"), (3, "Yeast")]
        assert [line.below_minimum for line in lines] == [False, False, True]

    def test_empty_store(self):
        db = seeded_database()
        assert ShowInventoryHandler(FakeUnitOfWork(db)).handle(3) == []


class TestCatalog:

    def test_add_store(self):
        db = seeded_database()
        store = AddStoreHandler(FakeUnitOfWork(db)).handle(4, " Harbour ", org_id=2)
        assert store.name == "Harbour"
        assert db.snapshot.stores[4].org_id == 2

    def test_duplicate_store_rejected(self):
        db = seeded_database()
        with pytest.raises(ValidationError, match="already exists"):
            AddStoreHandler(FakeUnitOfWork(db)).handle(1, "Again", org_id=1)

    def test_add_recipe(self):
        db = seeded_database()
        AddRecipeHandler(FakeUnitOfWork(db)).handle(
            11, "Dough", [Ingredient(1, Decimal("0.5")), Ingredient(2, Decimal("0.1"))]
        )
        assert db.snapshot.recipes[11].ingredients[1] == Ingredient(2, Decimal("0.1"))

    def test_recipe_needs_ingredients(self):
        db = seeded_database()
        with pytest.raises(ValidationError, match="at least one ingredient"):
            AddRecipeHandler(FakeUnitOfWork(db)).handle(11, "Air", [])

    def test_list_drivers_for_store(self):
        db = seeded_database()
        db.add_driver(2, "Sam", "sam@example.com", store_id=2)
        drivers = ListDriversHandler(FakeUnitOfWork(db)).handle(1)
        assert [d.name for d in drivers] == ["Dana"]
