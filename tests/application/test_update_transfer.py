"""Integration tests for the UpdateTransfer use case."""

from datetime import datetime, timezone

import pytest

from tms.application.dto import TransferLineSpec
from tms.application.reject_transfer import RejectTransferHandler
from tms.application.update_transfer import UpdateTransferHandler
from tms.domain.exceptions import InvalidStateError, NotFoundError, ValidationError
from tms.domain.model.transfer import TransferStatus
from tms.domain.model.value_objects import Quantity, RawItemLine, RecipeLine
from tests.fakes import (
    FakeUnitOfWork,
    RecordingEventSink,
    fixed_clock,
    request_transfer,
    seeded_database,
)


def _setup(status: str = "Pending"):
    db = seeded_database()
    transfer_id = request_transfer(db, status=status)
    sink = RecordingEventSink()
    handler = UpdateTransferHandler(FakeUnitOfWork(db), sink, clock=fixed_clock)
    return db, sink, handler, transfer_id


class TestUpdateTransfer:

    def test_items_replaced_as_a_whole(self):
        db, _, handler, transfer_id = _setup()

        handler.handle(
            transfer_id,
            actor_user_id=9,
            items=[
                TransferLineSpec(quantity="3", recipe_id=10),
                TransferLineSpec(quantity="1", inventory_item_id=2),
            ],
        )

        t = db.transfer(transfer_id)
        assert t.requested_lines == [
            RecipeLine(10, Quantity.of(3)),
            RawItemLine(2, Quantity.of(1)),
        ]
        assert [i.id for i in t.items] == [2, 3]

    def test_details_updated(self):
        db, sink, handler, transfer_id = _setup()
        when = datetime(2024, 6, 1, tzinfo=timezone.utc)

        handler.handle(transfer_id, 9, to_store_id=3, requested_at=when, notes="  moved ")

        t = db.transfer(transfer_id)
        assert (t.from_store_id, t.to_store_id) == (1, 3)
        assert t.requested_at == when
        assert t.notes == "moved"
        assert sink.events == []

    def test_draft_submitted_emits_event(self):
        db, sink, handler, transfer_id = _setup(status="Draft")

        handler.handle(transfer_id, 9, status="pending")

        assert db.transfer(transfer_id).status == TransferStatus.PENDING
        [event] = sink.events
        assert (event.from_state, event.to_state) == (TransferStatus.DRAFT, TransferStatus.PENDING)

    def test_status_cannot_be_approved_by_edit(self):
        db, _, handler, transfer_id = _setup()
        with pytest.raises(InvalidStateError, match="by editing it"):
            handler.handle(transfer_id, 9, status="Approved")
        assert db.transfer(transfer_id).status == TransferStatus.PENDING

    def test_closed_transfer_cannot_be_edited(self):
        db, _, handler, transfer_id = _setup()
        RejectTransferHandler(FakeUnitOfWork(db), RecordingEventSink()).handle(transfer_id, 4)

        with pytest.raises(InvalidStateError, match="Rejected status"):
            handler.handle(transfer_id, 9, notes="too late")

    def test_bad_edit_leaves_transfer_untouched(self):
        db, _, handler, transfer_id = _setup()
        before = db.copy()

        with pytest.raises(ValidationError, match="same store"):
            handler.handle(
                transfer_id, 9,
                to_store_id=1,
                items=[TransferLineSpec(quantity="1", inventory_item_id=2)],
            )

        assert db.snapshot == before

    def test_empty_item_set_rejected(self):
        _, _, handler, transfer_id = _setup()
        with pytest.raises(ValidationError, match="at least one item"):
            handler.handle(transfer_id, 9, items=[])

    def test_unknown_store_rejected(self):
        _, _, handler, transfer_id = _setup()
        with pytest.raises(NotFoundError, match="Store #77 not found"):
            handler.handle(transfer_id, 9, from_store_id=77)

    def test_unknown_transfer_rejected(self):
        _, _, handler, _ = _setup()
        with pytest.raises(NotFoundError, match="Transfer #55 not found"):
            handler.handle(55, 9, notes="x")
