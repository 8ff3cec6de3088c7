"""Application service: List Transfers use case (query).

Scoping follows who is looking:

- with a store: transfers the store sends or receives, optionally only
  incoming (``flow="in"``) or outgoing (``flow="out"``);
- with only an organisation: transfers where either store belongs to it;
- with neither: nothing.
"""

from __future__ import annotations

from dataclasses import dataclass

from tms.application.dto import TransferListItemDTO, TransferPageDTO
from tms.domain.exceptions import ValidationError
from tms.domain.model.catalog import Store
from tms.domain.model.transfer import Transfer
from tms.domain.repository.unit_of_work import UnitOfWork

FLOWS = ("in", "out")


@dataclass(frozen=True)
class TransferFilter:
    store_id: int | None = None
    org_id: int | None = None
    flow: str | None = None
    status: str | None = None


class ListTransfersHandler:

    def __init__(self, uow: UnitOfWork, max_page_size: int = 200) -> None:
        self._uow = uow
        self._max_page_size = max_page_size

    def handle(self, criteria: TransferFilter, page: int = 1, page_size: int = 20) -> TransferPageDTO:
        flow = (criteria.flow or "").strip().lower() or None
        if flow is not None and flow not in FLOWS:
            raise ValidationError(f"Flow must be 'in' or 'out', got {criteria.flow!r}")

        page = max(1, page)
        page_size = min(max(1, page_size), self._max_page_size)

        with self._uow:
            stores = {s.id: s for s in self._uow.stores.list_all()}
            matches = [
                t for t in self._uow.transfers.list_all()
                if self._in_scope(t, criteria, flow, stores)
            ]

        matches.sort(key=lambda t: t.requested_at, reverse=True)
        start = (page - 1) * page_size
        rows = [
            self._to_dto(t, criteria.store_id, stores)
            for t in matches[start:start + page_size]
        ]
        return TransferPageDTO(items=rows, total_count=len(matches), page=page, page_size=page_size)

    @staticmethod
    def _in_scope(
        transfer: Transfer,
        criteria: TransferFilter,
        flow: str | None,
        stores: dict[int, Store],
    ) -> bool:
        if criteria.store_id is not None:
            if not transfer.involves_store(criteria.store_id):
                return False
            if flow == "in" and transfer.to_store_id != criteria.store_id:
                return False
            if flow == "out" and transfer.from_store_id != criteria.store_id:
                return False
        elif criteria.org_id is not None:
            orgs = {
                stores[sid].org_id
                for sid in (transfer.from_store_id, transfer.to_store_id)
                if sid in stores
            }
            if criteria.org_id not in orgs:
                return False
        else:
            return False

        if criteria.status and criteria.status.strip():
            return transfer.status.value.lower() == criteria.status.strip().lower()
        return True

    @staticmethod
    def _to_dto(
        transfer: Transfer,
        viewer_store_id: int | None,
        stores: dict[int, Store],
    ) -> TransferListItemDTO:
        def name(store_id: int) -> str:
            store = stores.get(store_id)
            return store.name if store else f"Store #{store_id}"

        if viewer_store_id == transfer.from_store_id:
            in_out, other = "Out", name(transfer.to_store_id)
        elif viewer_store_id == transfer.to_store_id:
            in_out, other = "In", name(transfer.from_store_id)
        else:
            in_out = "N/A"
            other = f"{name(transfer.from_store_id)} → {name(transfer.to_store_id)}"

        return TransferListItemDTO(
            transfer_id=transfer.id,  # type: ignore[arg-type]
            in_out=in_out,
            store_involved=other,
            status=transfer.status.value,
            requested_at=transfer.requested_at,
            driver_name=transfer.driver_name or "Not assigned",
            requester_user_id=transfer.requested_by_user_id,
        )
