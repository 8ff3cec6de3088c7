"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI (or any other caller) and the application
layer without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from tms.domain.model.value_objects import TransferLine, make_line


@dataclass(frozen=True)
class TransferLineSpec:
    """Input: one line as the caller states it — an item id or a recipe id."""

    quantity: Decimal | str | int
    inventory_item_id: int | None = None
    recipe_id: int | None = None

    def to_line(self) -> TransferLine:
        return make_line(self.inventory_item_id, self.recipe_id, self.quantity)


@dataclass(frozen=True)
class TransferItemDTO:
    transfer_item_id: int
    inventory_item_id: int | None
    inventory_item_name: str | None
    recipe_id: int | None
    recipe_name: str | None
    quantity: Decimal
    is_requested: bool


@dataclass(frozen=True)
class TransferDetailDTO:
    """Output: a complete transfer as displayed to the user."""

    transfer_id: int
    from_store_id: int
    from_store_name: str | None
    to_store_id: int
    to_store_name: str | None
    status: str
    requested_at: datetime
    received_at: datetime | None
    notes: str | None
    requested_by_user_id: int
    approved_by_user_id: int | None
    driver_id: int | None
    driver_name: str | None
    driver_email: str | None
    items: list[TransferItemDTO]

    @property
    def requested_items(self) -> list[TransferItemDTO]:
        return [i for i in self.items if i.is_requested]

    @property
    def shipped_items(self) -> list[TransferItemDTO]:
        return [i for i in self.items if not i.is_requested]


@dataclass(frozen=True)
class TransferListItemDTO:
    """Output: one row of a transfer listing, seen from the filtering store."""

    transfer_id: int
    in_out: str  # "In", "Out" or "N/A"
    store_involved: str
    status: str
    requested_at: datetime
    driver_name: str
    requester_user_id: int


@dataclass(frozen=True)
class TransferPageDTO:
    items: list[TransferListItemDTO]
    total_count: int
    page: int
    page_size: int
