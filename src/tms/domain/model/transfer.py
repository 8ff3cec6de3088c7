"""Transfer aggregate — the core of the domain.

A Transfer owns its line items and enforces the status state machine:

    Draft -> Pending -> Approved -> Delivered
                    \\-> Rejected

Ledger side effects (stock decrement on approval, increment on delivery)
are coordinated by the application handlers; the aggregate only decides
whether a transition is legal and records its outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from tms.domain.exceptions import InvalidStateError, ValidationError
from tms.domain.model.catalog import Driver
from tms.domain.model.value_objects import RawItemLine, RecipeLine, TransferLine


class TransferStatus(Enum):
    DRAFT = "Draft"
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    DELIVERED = "Delivered"

    @staticmethod
    def parse(name: str) -> TransferStatus:
        """Resolve a status name case-insensitively, tolerating whitespace."""
        wanted = (name or "").strip().lower()
        for status in TransferStatus:
            if status.value.lower() == wanted:
                return status
        raise ValidationError(f"Unknown transfer status: {name!r}")


INITIAL_STATUSES = (TransferStatus.DRAFT, TransferStatus.PENDING)
EDITABLE_STATUSES = (TransferStatus.DRAFT, TransferStatus.PENDING)


@dataclass
class TransferItem:
    """One requested or shipped line of a transfer."""

    id: int
    line: TransferLine
    is_requested: bool = True

    @property
    def inventory_item_id(self) -> int | None:
        return self.line.inventory_item_id if isinstance(self.line, RawItemLine) else None

    @property
    def recipe_id(self) -> int | None:
        return self.line.recipe_id if isinstance(self.line, RecipeLine) else None

    @property
    def quantity(self) -> Decimal:
        return self.line.quantity.value


@dataclass(frozen=True)
class DistributedItems:
    """A transfer's lines split by kind, as (id, quantity) pairs."""

    inventory_items: list[tuple[int, Decimal]]
    recipes: list[tuple[int, Decimal]]


@dataclass
class Transfer:
    """Aggregate root for inter-store inventory transfers.

    Use ``Transfer.create()`` for new transfers — it enforces the creation
    rules.  ``__init__`` stays plain so repositories can reconstitute
    persisted transfers without re-validating.
    """

    id: int | None
    from_store_id: int
    to_store_id: int
    requested_by_user_id: int
    items: list[TransferItem]
    status: TransferStatus = TransferStatus.PENDING
    requested_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    notes: str | None = None
    driver_id: int | None = None
    driver_name: str | None = None
    driver_email: str | None = None
    approved_by_user_id: int | None = None
    received_at: datetime | None = None
    version: int = 0

    # --- Factory (used for NEW transfers only) --------------------------------

    @staticmethod
    def create(
        from_store_id: int,
        to_store_id: int,
        requested_by_user_id: int,
        lines: list[TransferLine],
        status: TransferStatus = TransferStatus.PENDING,
        requested_at: datetime | None = None,
        notes: str | None = None,
    ) -> Transfer:
        if status not in INITIAL_STATUSES:
            raise ValidationError(
                f"A transfer starts as Draft or Pending, not {status.value}"
            )
        if from_store_id == to_store_id:
            raise ValidationError("Cannot transfer to the same store")

        transfer = Transfer(
            id=None,
            from_store_id=from_store_id,
            to_store_id=to_store_id,
            requested_by_user_id=requested_by_user_id,
            items=[],
            status=status,
            notes=_clean_notes(notes),
        )
        if requested_at is not None:
            transfer.requested_at = as_utc(requested_at)
        transfer.replace_items(lines)
        return transfer

    # --- Edits before approval ------------------------------------------------

    def replace_items(self, lines: list[TransferLine]) -> None:
        """Discard every line and recreate the set as requested lines.

        Edits never patch individual lines; the whole set is replaced.
        """
        self._ensure_editable("change items of")
        if not lines:
            raise ValidationError("Transfer must contain at least one item")
        next_id = self._next_item_id()
        self.items = [
            TransferItem(id=next_id + offset, line=line, is_requested=True)
            for offset, line in enumerate(lines)
        ]

    def update_details(
        self,
        from_store_id: int | None = None,
        to_store_id: int | None = None,
        requested_at: datetime | None = None,
        notes: str | None = None,
    ) -> None:
        self._ensure_editable("edit")
        new_from = from_store_id if from_store_id is not None else self.from_store_id
        new_to = to_store_id if to_store_id is not None else self.to_store_id
        if new_from == new_to:
            raise ValidationError("Cannot transfer to the same store")
        self.from_store_id = new_from
        self.to_store_id = new_to
        if requested_at is not None:
            self.requested_at = as_utc(requested_at)
        if notes is not None:
            self.notes = _clean_notes(notes)

    def change_status(self, new_status: TransferStatus) -> None:
        """Submit a draft (Draft -> Pending); re-stating the status is a no-op."""
        self._ensure_editable("edit")
        if new_status == self.status:
            return
        if self.status == TransferStatus.DRAFT and new_status == TransferStatus.PENDING:
            self.status = new_status
            return
        raise InvalidStateError(
            f"Cannot move transfer #{self.id} from {self.status.value} "
            f"to {new_status.value} by editing it"
        )

    # --- State transitions ----------------------------------------------------

    def approve(
        self,
        driver: Driver,
        shipped_lines: list[TransferLine],
        approver_user_id: int,
        notes: str | None = None,
    ) -> None:
        """Transition PENDING -> APPROVED.

        Shipped lines are appended next to the requested ones so both the
        request and the commitment stay on record.  Stock must already have
        been taken from the source store by the ledger.
        """
        self.ensure_status(TransferStatus.PENDING, "approve")
        if not shipped_lines:
            raise ValidationError("Approval must ship at least one item")

        next_id = self._next_item_id()
        for offset, line in enumerate(shipped_lines):
            self.items.append(
                TransferItem(id=next_id + offset, line=line, is_requested=False)
            )

        self.driver_id = driver.id
        self.driver_name = driver.name
        self.driver_email = driver.email
        self.approved_by_user_id = approver_user_id
        if notes is not None:
            self.notes = _clean_notes(notes)
        self.status = TransferStatus.APPROVED

    def reject(self, notes: str | None = None) -> None:
        """Transition PENDING -> REJECTED.  Nothing was reserved, so no stock moves."""
        self.ensure_status(TransferStatus.PENDING, "reject")
        if notes is not None:
            self.notes = _clean_notes(notes)
        self.status = TransferStatus.REJECTED

    def mark_delivered(self, received_at: datetime) -> None:
        """Transition APPROVED -> DELIVERED."""
        self.ensure_status(TransferStatus.APPROVED, "deliver")
        self.received_at = as_utc(received_at)
        self.status = TransferStatus.DELIVERED

    def ensure_status(self, expected: TransferStatus, action: str) -> None:
        if self.status != expected:
            raise InvalidStateError(
                f"Cannot {action} transfer #{self.id} — current status is "
                f"{self.status.value}, expected {expected.value}"
            )

    # --- Queries --------------------------------------------------------------

    @property
    def requested_lines(self) -> list[TransferLine]:
        return [item.line for item in self.items if item.is_requested]

    @property
    def shipped_lines(self) -> list[TransferLine]:
        return [item.line for item in self.items if not item.is_requested]

    def distribute(self, is_requested: bool) -> DistributedItems:
        """Split the lines carrying ``is_requested`` into raw-item and recipe lists."""
        inventory_items: list[tuple[int, Decimal]] = []
        recipes: list[tuple[int, Decimal]] = []
        for item in self.items:
            if item.is_requested != is_requested:
                continue
            if isinstance(item.line, RecipeLine):
                recipes.append((item.line.recipe_id, item.quantity))
            else:
                inventory_items.append((item.line.inventory_item_id, item.quantity))
        return DistributedItems(inventory_items=inventory_items, recipes=recipes)

    def involves_store(self, store_id: int) -> bool:
        return store_id in (self.from_store_id, self.to_store_id)

    # --- Internal helpers -----------------------------------------------------

    def _ensure_editable(self, action: str) -> None:
        if self.status not in EDITABLE_STATUSES:
            raise InvalidStateError(
                f"Cannot {action} transfer #{self.id} in {self.status.value} status"
            )

    def _next_item_id(self) -> int:
        return max((item.id for item in self.items), default=0) + 1


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _clean_notes(notes: str | None) -> str | None:
    if notes is None or not notes.strip():
        return None
    return notes.strip()
