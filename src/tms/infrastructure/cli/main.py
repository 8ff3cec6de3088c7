import click

from tms.infrastructure.bootstrap import settings
from tms.infrastructure.cli.catalog_commands import (
    catalog_add_recipe,
    catalog_add_store,
    catalog_drivers,
)
from tms.infrastructure.cli.inventory_commands import inventory_set, inventory_show
from tms.infrastructure.cli.transfer_commands import (
    transfer_approve,
    transfer_create,
    transfer_deliver,
    transfer_distribute,
    transfer_list,
    transfer_reject,
    transfer_show,
    transfer_statuses,
    transfer_update,
)
from tms.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """TMS — Inventory Transfer Management"""
    configure_logging(settings().LOG_LEVEL)


@cli.group()
def transfer() -> None:
    """Request, approve and receive transfers."""


@cli.group()
def inventory() -> None:
    """Manage per-store inventory."""


@cli.group()
def catalog() -> None:
    """Register stores and recipes, list drivers."""


# Register subcommands
transfer.add_command(transfer_approve)
transfer.add_command(transfer_create)
transfer.add_command(transfer_deliver)
transfer.add_command(transfer_distribute)
transfer.add_command(transfer_list)
transfer.add_command(transfer_reject)
transfer.add_command(transfer_show)
transfer.add_command(transfer_statuses)
transfer.add_command(transfer_update)
inventory.add_command(inventory_set)
inventory.add_command(inventory_show)
catalog.add_command(catalog_add_recipe)
catalog.add_command(catalog_add_store)
catalog.add_command(catalog_drivers)
