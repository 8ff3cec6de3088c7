"""Application service: Approve Transfer use case.

Orchestrates driver assignment, the reconciler (recipe lines -> raw item
deltas), the ledger (source-store decrement) and the Transfer aggregate
(PENDING -> APPROVED) inside one unit of work.  Either all of it is
committed or none of it is.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from tms.application.dto import TransferLineSpec
from tms.application.events import publish_events, utcnow
from tms.domain.events import TransferEventSink, TransferTransitionEvent
from tms.domain.exceptions import NotFoundError, ValidationError
from tms.domain.model.catalog import Driver
from tms.domain.model.transfer import Transfer, TransferStatus
from tms.domain.repository.unit_of_work import UnitOfWork
from tms.domain.service.inventory_ledger import InventoryLedger
from tms.domain.service.line_item_reconciler import LineItemReconciler

logger = logging.getLogger(__name__)


class ApproveTransferHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        event_sink: TransferEventSink,
        reuse_driver_by_email: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow = uow
        self._event_sink = event_sink
        self._reuse_driver_by_email = reuse_driver_by_email
        self._clock = clock

    def handle(
        self,
        transfer_id: int,
        approver_user_id: int,
        items: list[TransferLineSpec],
        driver_id: int | None = None,
        new_driver_name: str | None = None,
        new_driver_email: str | None = None,
        notes: str | None = None,
    ) -> None:
        lines = [spec.to_line() for spec in items]

        with self._uow:
            transfer = self._uow.transfers.get_by_id(transfer_id)
            if transfer is None:
                raise NotFoundError(f"Transfer #{transfer_id} not found")
            transfer.ensure_status(TransferStatus.PENDING, "approve")
            if not lines:
                raise ValidationError("Approval must ship at least one item")

            driver = self._resolve_driver(transfer, driver_id, new_driver_name, new_driver_email)

            deltas = LineItemReconciler(self._uow.recipes).reconcile(lines)
            InventoryLedger(self._uow.inventory).decrement_all(transfer.from_store_id, deltas)

            transfer.approve(
                driver=driver,
                shipped_lines=[delta.as_line() for delta in deltas],
                approver_user_id=approver_user_id,
                notes=notes,
            )
            self._uow.transfers.save(transfer)
            self._uow.commit()

        logger.info(
            "Transfer #%s approved by user #%s; driver #%s; %d item(s) taken from store #%s",
            transfer_id, approver_user_id, driver.id, len(deltas), transfer.from_store_id,
        )
        publish_events(self._event_sink, [
            TransferTransitionEvent(
                transfer_id=transfer_id,
                from_state=TransferStatus.PENDING,
                to_state=TransferStatus.APPROVED,
                actor_user_id=approver_user_id,
                timestamp=self._clock(),
            )
        ])

    def _resolve_driver(
        self,
        transfer: Transfer,
        driver_id: int | None,
        new_driver_name: str | None,
        new_driver_email: str | None,
    ) -> Driver:
        if driver_id is not None:
            driver = self._uow.drivers.get_by_id(driver_id)
            if driver is None:
                raise NotFoundError(f"Driver #{driver_id} not found")
            return driver

        name = (new_driver_name or "").strip()
        email = (new_driver_email or "").strip()
        if not name and not email:
            raise ValidationError("Select a driver or enter a new driver's name and email")
        if not name or not email:
            raise ValidationError("A new driver needs both a name and an email")

        if self._reuse_driver_by_email:
            existing = self._uow.drivers.find_by_email(transfer.from_store_id, email)
            if existing is not None:
                return existing

        driver = Driver(
            id=self._uow.drivers.next_id(),
            name=name,
            email=email,
            store_id=transfer.from_store_id,
        )
        self._uow.drivers.save(driver)
        logger.info("Driver #%s created for store #%s", driver.id, driver.store_id)
        return driver
