"""CLI commands for the Transfer aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from tms.application.approve_transfer import ApproveTransferHandler
from tms.application.create_transfer import CreateTransferHandler
from tms.application.deliver_transfer import DeliverTransferHandler
from tms.application.distribute_transfer_items import DistributeTransferItemsHandler
from tms.application.dto import TransferDetailDTO
from tms.application.list_transfers import ListTransfersHandler, TransferFilter
from tms.application.reject_transfer import RejectTransferHandler
from tms.application.retry import run_with_retry
from tms.application.show_transfer import ShowTransferHandler
from tms.application.update_transfer import UpdateTransferHandler
from tms.domain.exceptions import DomainException
from tms.domain.model.transfer import TransferStatus
from tms.infrastructure.bootstrap import event_sink, settings, unit_of_work
from tms.infrastructure.cli.params import DATE, parse_items


def _fmt_date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M UTC") if value else "-"


@click.command("create")
@click.option("--from-store", "from_store", required=True, type=int, help="Store asked to send the stock.")
@click.option("--to-store", "to_store", required=True, type=int, help="Requesting store.")
@click.option("--user", "user_id", required=True, type=int, help="Requesting user ID.")
@click.option("--items", required=True, help="Items as 'item:ID:QTY,recipe:ID:QTY'.")
@click.option("--status", default="Pending", show_default=True, help="Draft or Pending.")
@click.option("--date", "requested_at", type=DATE, default=None, help="Requested date.")
@click.option("--notes", default=None, help="Free-text notes.")
def transfer_create(
    from_store: int,
    to_store: int,
    user_id: int,
    items: str,
    status: str,
    requested_at: datetime | None,
    notes: str | None,
) -> None:
    """Request stock from another store."""
    specs = parse_items(items)
    handler = CreateTransferHandler(uow=unit_of_work(), event_sink=event_sink())

    try:
        transfer_id = handler.handle(
            from_store_id=from_store,
            requester_store_id=to_store,
            requested_by_user_id=user_id,
            items=specs,
            status=status,
            requested_at=requested_at,
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Transfer #{transfer_id} created.")


@click.command("update")
@click.option("--id", "transfer_id", required=True, type=int, help="Transfer ID to edit.")
@click.option("--user", "user_id", required=True, type=int, help="Acting user ID.")
@click.option("--from-store", "from_store", type=int, default=None)
@click.option("--to-store", "to_store", type=int, default=None)
@click.option("--date", "requested_at", type=DATE, default=None)
@click.option("--notes", default=None)
@click.option("--status", default=None, help="Pending submits a draft.")
@click.option("--items", default=None, help="Replaces ALL items: 'item:ID:QTY,recipe:ID:QTY'.")
def transfer_update(
    transfer_id: int,
    user_id: int,
    from_store: int | None,
    to_store: int | None,
    requested_at: datetime | None,
    notes: str | None,
    status: str | None,
    items: str | None,
) -> None:
    """Edit a draft or pending transfer."""
    specs = parse_items(items) if items else None
    handler = UpdateTransferHandler(uow=unit_of_work(), event_sink=event_sink())

    try:
        run_with_retry(
            lambda: handler.handle(
                transfer_id,
                actor_user_id=user_id,
                from_store_id=from_store,
                to_store_id=to_store,
                requested_at=requested_at,
                notes=notes,
                status=status,
                items=specs,
            ),
            attempts=settings().RETRY_ATTEMPTS,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Transfer #{transfer_id} updated.")


@click.command("approve")
@click.option("--id", "transfer_id", required=True, type=int, help="Transfer ID to approve.")
@click.option("--user", "user_id", required=True, type=int, help="Approving user ID.")
@click.option("--items", required=True, help="Items to ship: 'item:ID:QTY,recipe:ID:QTY'.")
@click.option("--driver-id", type=int, default=None, help="Existing driver.")
@click.option("--driver-name", default=None, help="New driver's name.")
@click.option("--driver-email", default=None, help="New driver's email.")
@click.option("--notes", default=None)
def transfer_approve(
    transfer_id: int,
    user_id: int,
    items: str,
    driver_id: int | None,
    driver_name: str | None,
    driver_email: str | None,
    notes: str | None,
) -> None:
    """Approve a pending transfer (takes stock from the sending store)."""
    specs = parse_items(items)
    handler = ApproveTransferHandler(
        uow=unit_of_work(),
        event_sink=event_sink(),
        reuse_driver_by_email=settings().REUSE_DRIVER_BY_EMAIL,
    )

    try:
        run_with_retry(
            lambda: handler.handle(
                transfer_id,
                approver_user_id=user_id,
                items=specs,
                driver_id=driver_id,
                new_driver_name=driver_name,
                new_driver_email=driver_email,
                notes=notes,
            ),
            attempts=settings().RETRY_ATTEMPTS,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Transfer #{transfer_id} approved — stock taken from the sending store.")


@click.command("reject")
@click.option("--id", "transfer_id", required=True, type=int, help="Transfer ID to reject.")
@click.option("--user", "user_id", required=True, type=int, help="Acting user ID.")
@click.option("--notes", default=None)
def transfer_reject(transfer_id: int, user_id: int, notes: str | None) -> None:
    """Reject a pending transfer."""
    handler = RejectTransferHandler(uow=unit_of_work(), event_sink=event_sink())

    try:
        run_with_retry(
            lambda: handler.handle(transfer_id, actor_user_id=user_id, notes=notes),
            attempts=settings().RETRY_ATTEMPTS,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Transfer #{transfer_id} rejected.")


@click.command("deliver")
@click.option("--id", "transfer_id", required=True, type=int, help="Transfer ID received.")
@click.option("--user", "user_id", required=True, type=int, help="Receiving user ID.")
def transfer_deliver(transfer_id: int, user_id: int) -> None:
    """Mark an approved transfer delivered (adds stock to the requesting store)."""
    handler = DeliverTransferHandler(uow=unit_of_work(), event_sink=event_sink())

    try:
        run_with_retry(
            lambda: handler.handle(transfer_id, actor_user_id=user_id),
            attempts=settings().RETRY_ATTEMPTS,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Transfer #{transfer_id} delivered.")


def _display_transfer(dto: TransferDetailDTO) -> None:
    click.echo(f"Transfer #{dto.transfer_id}  (status={dto.status})")
    click.echo(f"From:      {dto.from_store_name or '#' + str(dto.from_store_id)}")
    click.echo(f"To:        {dto.to_store_name or '#' + str(dto.to_store_id)}")
    click.echo(f"Requested: {_fmt_date(dto.requested_at)} by user #{dto.requested_by_user_id}")
    if dto.approved_by_user_id is not None:
        click.echo(f"Approved:  by user #{dto.approved_by_user_id}")
    if dto.driver_name:
        click.echo(f"Driver:    {dto.driver_name} <{dto.driver_email}>")
    click.echo(f"Received:  {_fmt_date(dto.received_at)}")
    if dto.notes:
        click.echo(f"Notes:     {dto.notes}")

    for title, items in (("Requested", dto.requested_items), ("Shipped", dto.shipped_items)):
        if not items:
            continue
        click.echo()
        click.echo(f"  {title}")
        click.echo(f"  {'Kind':<8} {'ID':>5} {'Name':<24} {'Qty':>10}")
        click.echo(f"  {'-'*50}")
        for item in items:
            if item.recipe_id is not None:
                kind, ref, name = "recipe", item.recipe_id, item.recipe_name
            else:
                kind, ref, name = "item", item.inventory_item_id, item.inventory_item_name
            click.echo(f"  {kind:<8} {ref:>5} {name or '?':<24} {str(item.quantity):>10}")


@click.command("show")
@click.option("--id", "transfer_id", required=True, type=int, help="Transfer ID to display.")
def transfer_show(transfer_id: int) -> None:
    """Show details of a transfer."""
    handler = ShowTransferHandler(uow=unit_of_work())

    try:
        dto = handler.handle(transfer_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_transfer(dto)


@click.command("list")
@click.option("--store", "store_id", type=int, default=None, help="View as this store.")
@click.option("--org", "org_id", type=int, default=None, help="View a whole organisation.")
@click.option("--flow", type=click.Choice(["in", "out"]), default=None)
@click.option("--status", default=None)
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--page-size", "page_size", type=int, default=None)
def transfer_list(
    store_id: int | None,
    org_id: int | None,
    flow: str | None,
    status: str | None,
    page: int,
    page_size: int | None,
) -> None:
    """List transfers for a store or an organisation."""
    cfg = settings()
    handler = ListTransfersHandler(uow=unit_of_work(), max_page_size=cfg.MAX_PAGE_SIZE)

    try:
        result = handler.handle(
            TransferFilter(store_id=store_id, org_id=org_id, flow=flow, status=status),
            page=page,
            page_size=page_size or cfg.DEFAULT_PAGE_SIZE,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.items:
        click.echo("No transfers found.")
        return

    click.echo(f"{'ID':<6} {'Dir':<4} {'Store':<28} {'Status':<10} {'Requested':<17} {'Driver':<16}")
    click.echo("-" * 86)
    for row in result.items:
        click.echo(
            f"{row.transfer_id:<6} {row.in_out:<4} {row.store_involved:<28} "
            f"{row.status:<10} {row.requested_at.strftime('%Y-%m-%d %H:%M'):<17} {row.driver_name:<16}"
        )
    click.echo(f"Page {result.page} — {len(result.items)} of {result.total_count} transfer(s)")


@click.command("distribute")
@click.option("--id", "transfer_id", required=True, type=int)
@click.option("--shipped", is_flag=True, default=False, help="Shipped lines instead of requested.")
def transfer_distribute(transfer_id: int, shipped: bool) -> None:
    """Split a transfer's lines into item and recipe quantities."""
    handler = DistributeTransferItemsHandler(uow=unit_of_work())

    try:
        result = handler.handle(transfer_id, is_requested=not shipped)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Inventory items:")
    for item_id, qty in result.inventory_items:
        click.echo(f"  #{item_id:<5} {qty}")
    click.echo("Recipes:")
    for recipe_id, qty in result.recipes:
        click.echo(f"  #{recipe_id:<5} {qty}")


@click.command("statuses")
def transfer_statuses() -> None:
    """List the transfer statuses."""
    for status in TransferStatus:
        click.echo(status.value)
