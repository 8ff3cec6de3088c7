"""Unit tests for the Transfer aggregate and its state machine."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from tms.domain.exceptions import InvalidStateError, ValidationError
from tms.domain.model.catalog import Driver
from tms.domain.model.transfer import Transfer, TransferStatus
from tms.domain.model.value_objects import Quantity, RawItemLine, RecipeLine

DRIVER = Driver(id=1, name="Dana", email="dana@example.com", store_id=1)
NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _line(item_id: int = 1, qty: str = "5") -> RawItemLine:
    return RawItemLine(item_id, Quantity.of(qty))


def _transfer(status: TransferStatus = TransferStatus.PENDING) -> Transfer:
    t = Transfer.create(
        from_store_id=1,
        to_store_id=2,
        requested_by_user_id=9,
        lines=[_line(1, "5"), RecipeLine(7, Quantity.of("2"))],
    )
    t.id = 1
    t.status = status
    return t


def _apply(transfer: Transfer, action: str) -> None:
    if action == "approve":
        transfer.approve(DRIVER, [_line(1, "5")], approver_user_id=3)
    elif action == "reject":
        transfer.reject()
    else:
        transfer.mark_delivered(NOW)


class TestCreate:

    def test_defaults_to_pending(self):
        t = _transfer()
        assert t.status == TransferStatus.PENDING
        assert [i.id for i in t.items] == [1, 2]
        assert all(i.is_requested for i in t.items)

    def test_may_start_as_draft(self):
        t = Transfer.create(1, 2, 9, [_line()], status=TransferStatus.DRAFT)
        assert t.status == TransferStatus.DRAFT

    @pytest.mark.parametrize(
        "status", [TransferStatus.APPROVED, TransferStatus.REJECTED, TransferStatus.DELIVERED]
    )
    def test_cannot_start_past_pending(self, status):
        with pytest.raises(ValidationError, match="starts as Draft or Pending"):
            Transfer.create(1, 2, 9, [_line()], status=status)

    def test_same_store_rejected(self):
        with pytest.raises(ValidationError, match="same store"):
            Transfer.create(1, 1, 9, [_line()])

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Transfer.create(1, 2, 9, [])

    def test_blank_notes_dropped(self):
        t = Transfer.create(1, 2, 9, [_line()], notes="   ")
        assert t.notes is None


class TestStatusParse:

    def test_case_insensitive(self):
        assert TransferStatus.parse(" pending ") == TransferStatus.PENDING

    def test_unknown_rejected(self):
        with pytest.raises(ValidationError, match="Unknown transfer status"):
            TransferStatus.parse("Shipped")


# ── Legality table ───────────────────────────────────────────────────────────

LEGAL = {
    (TransferStatus.PENDING, "approve"): TransferStatus.APPROVED,
    (TransferStatus.PENDING, "reject"): TransferStatus.REJECTED,
    (TransferStatus.APPROVED, "deliver"): TransferStatus.DELIVERED,
}

CASES = [
    (status, action)
    for status in TransferStatus
    for action in ("approve", "reject", "deliver")
]


class TestTransitions:

    @pytest.mark.parametrize("status,action", CASES)
    def test_legality(self, status, action):
        t = _transfer(status)
        expected = LEGAL.get((status, action))

        if expected is None:
            with pytest.raises(InvalidStateError, match=f"current status is {status.value}"):
                _apply(t, action)
            assert t.status == status
        else:
            _apply(t, action)
            assert t.status == expected

    def test_approve_appends_shipped_lines_and_driver(self):
        t = _transfer()
        t.approve(DRIVER, [_line(1, "10"), _line(2, "4")], approver_user_id=3, notes=" ok ")

        assert [i.id for i in t.items] == [1, 2, 3, 4]
        assert t.shipped_lines == [_line(1, "10"), _line(2, "4")]
        assert len(t.requested_lines) == 2
        assert (t.driver_id, t.driver_name, t.driver_email) == (1, "Dana", "dana@example.com")
        assert t.approved_by_user_id == 3
        assert t.notes == "ok"

    def test_approve_without_lines_rejected(self):
        t = _transfer()
        with pytest.raises(ValidationError, match="at least one item"):
            t.approve(DRIVER, [], approver_user_id=3)
        assert t.status == TransferStatus.PENDING

    def test_deliver_records_received_at(self):
        t = _transfer(TransferStatus.APPROVED)
        t.mark_delivered(NOW)
        assert t.received_at == NOW


class TestEdits:

    def test_replace_items_continues_ids(self):
        t = _transfer()
        t.replace_items([_line(4, "1")])
        assert [i.id for i in t.items] == [3]
        assert t.requested_lines == [_line(4, "1")]

    def test_draft_can_be_submitted(self):
        t = _transfer(TransferStatus.DRAFT)
        t.change_status(TransferStatus.PENDING)
        assert t.status == TransferStatus.PENDING

    def test_restating_status_is_noop(self):
        t = _transfer()
        t.change_status(TransferStatus.PENDING)
        assert t.status == TransferStatus.PENDING

    def test_edit_cannot_approve(self):
        t = _transfer()
        with pytest.raises(InvalidStateError, match="by editing it"):
            t.change_status(TransferStatus.APPROVED)

    def test_pending_cannot_go_back_to_draft(self):
        t = _transfer()
        with pytest.raises(InvalidStateError):
            t.change_status(TransferStatus.DRAFT)

    @pytest.mark.parametrize(
        "status", [TransferStatus.APPROVED, TransferStatus.REJECTED, TransferStatus.DELIVERED]
    )
    def test_closed_transfer_not_editable(self, status):
        t = _transfer(status)
        with pytest.raises(InvalidStateError, match="Cannot edit"):
            t.update_details(notes="late")
        with pytest.raises(InvalidStateError, match="Cannot change items of"):
            t.replace_items([_line()])

    def test_update_details_rejects_same_store(self):
        t = _transfer()
        with pytest.raises(ValidationError, match="same store"):
            t.update_details(to_store_id=1)


class TestDistribute:

    def test_splits_requested_lines_by_kind(self):
        t = _transfer()
        result = t.distribute(is_requested=True)
        assert result.inventory_items == [(1, Decimal("5"))]
        assert result.recipes == [(7, Decimal("2"))]

    def test_shipped_lines_empty_before_approval(self):
        result = _transfer().distribute(is_requested=False)
        assert result.inventory_items == []
        assert result.recipes == []


class TestTimestampsAndNotes:

    def test_naive_requested_at_taken_as_utc(self):
        t = Transfer.create(1, 2, 9, [_line()], requested_at=datetime(2024, 1, 1, 8, 0))
        assert t.requested_at == datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
        assert t.requested_at.tzinfo is not None

    def test_offset_requested_at_converted_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        t = _transfer()
        t.update_details(requested_at=datetime(2024, 1, 1, 10, 0, tzinfo=plus_two))
        assert t.requested_at == datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
        assert t.requested_at.utcoffset() == timedelta(0)

    def test_naive_received_at_taken_as_utc(self):
        t = _transfer(TransferStatus.APPROVED)
        t.mark_delivered(datetime(2024, 5, 2, 9, 30))
        assert t.received_at == datetime(2024, 5, 2, 9, 30, tzinfo=timezone.utc)

    def test_blank_notes_cleared_on_every_edit(self):
        t = _transfer()
        t.notes = "keep"
        t.update_details(notes="   ")
        assert t.notes is None

        t.approve(DRIVER, [_line()], approver_user_id=3, notes="  ")
        assert t.notes is None

    def test_blank_reject_notes_cleared(self):
        t = _transfer()
        t.reject(notes=" ")
        assert t.notes is None
