"""CLI commands for stores, recipes and drivers."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

import click

from tms.application.manage_catalog import AddRecipeHandler, AddStoreHandler, ListDriversHandler
from tms.domain.exceptions import DomainException
from tms.domain.model.catalog import Ingredient
from tms.infrastructure.bootstrap import unit_of_work


def _parse_ingredients(raw: str) -> list[Ingredient]:
    """Parse '3:2,4:0.5' (item ID : quantity per unit) into Ingredient list."""
    ingredients: list[Ingredient] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid ingredient format '{pair}'. Expected 'ItemID:QtyPerUnit'."
            )
        item_str, qty_str = pair.split(":", 1)
        try:
            ingredients.append(Ingredient(int(item_str), Decimal(qty_str)))
        except (ValueError, InvalidOperation):
            raise click.BadParameter(f"Invalid ingredient '{pair}'.")
    return ingredients


@click.command("add-store")
@click.option("--id", "store_id", required=True, type=int)
@click.option("--name", required=True)
@click.option("--org", "org_id", required=True, type=int, help="Owning organisation ID.")
def catalog_add_store(store_id: int, name: str, org_id: int) -> None:
    """Register a store."""
    handler = AddStoreHandler(uow=unit_of_work())

    try:
        store = handler.handle(store_id=store_id, name=name, org_id=org_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Store #{store.id} '{store.name}' added")


@click.command("add-recipe")
@click.option("--id", "recipe_id", required=True, type=int)
@click.option("--name", required=True)
@click.option("--ingredients", required=True, help="Ingredients as 'ItemID:QtyPerUnit,...'.")
def catalog_add_recipe(recipe_id: int, name: str, ingredients: str) -> None:
    """Register a recipe and its ingredients."""
    parsed = _parse_ingredients(ingredients)
    handler = AddRecipeHandler(uow=unit_of_work())

    try:
        recipe = handler.handle(recipe_id=recipe_id, name=name, ingredients=parsed)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Recipe #{recipe.id} '{recipe.name}' added with {len(recipe.ingredients)} ingredient(s)")


@click.command("drivers")
@click.option("--store", "store_id", required=True, type=int)
def catalog_drivers(store_id: int) -> None:
    """List the drivers of a store."""
    drivers = ListDriversHandler(uow=unit_of_work()).handle(store_id)

    if not drivers:
        click.echo("No drivers found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Email':<30}")
    click.echo("-" * 62)
    for d in drivers:
        click.echo(f"{d.id:<6} {d.name:<24} {d.email:<30}")
