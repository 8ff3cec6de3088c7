"""CLI commands for per-store inventory."""

from __future__ import annotations

from decimal import Decimal

import click

from tms.application.set_inventory import SetInventoryHandler
from tms.application.show_inventory import ShowInventoryHandler
from tms.domain.exceptions import DomainException
from tms.infrastructure.bootstrap import unit_of_work
from tms.infrastructure.cli.params import DECIMAL


@click.command("set")
@click.option("--store", "store_id", required=True, type=int, help="Store ID.")
@click.option("--item", "item_id", required=True, type=int, help="Inventory item ID.")
@click.option("--quantity", required=True, type=DECIMAL, help="Counted quantity on hand.")
@click.option("--name", default=None, help="Item name (required for a new item).")
@click.option("--minimum", type=DECIMAL, default=None, help="Minimum quantity.")
def inventory_set(
    store_id: int,
    item_id: int,
    quantity: Decimal,
    name: str | None,
    minimum: Decimal | None,
) -> None:
    """Set the stock level of an item at a store."""
    handler = SetInventoryHandler(uow=unit_of_work())

    try:
        handler.handle(
            store_id=store_id,
            item_id=item_id,
            quantity=quantity,
            item_name=name,
            minimum_quantity=minimum,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item #{item_id} at store #{store_id} set to {quantity}")


@click.command("show")
@click.option("--store", "store_id", required=True, type=int, help="Store ID.")
def inventory_show(store_id: int) -> None:
    """Show current inventory levels of a store."""
    handler = ShowInventoryHandler(uow=unit_of_work())
    lines = handler.handle(store_id)

    if not lines:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'ID':<6} {'Item':<24} {'On hand':>10} {'Minimum':>10}")
    click.echo("-" * 52)
    for line in lines:
        minimum = str(line.minimum_quantity) if line.minimum_quantity is not None else "-"
        flag = "  LOW" if line.below_minimum else ""
        click.echo(
            f"{line.item_id:<6} {line.item_name:<24} {str(line.quantity_on_hand):>10} {minimum:>10}{flag}"
        )
