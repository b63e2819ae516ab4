"""Tests for conflict detection."""

from __future__ import annotations

import uuid
from datetime import date

import pytest

from court_scheduler.core.errors import ConflictError
from court_scheduler.models import CourtClosure, Reservation, ReservationStatus, ReservationType
from court_scheduler.services.conflict_service import (
    ConflictCandidate,
    ConflictKind,
    ensure_no_conflicts,
    find_conflicts,
    is_slot_available,
)

DAY = date(2024, 6, 12)


def _reservation(
    court: int = 3,
    time_start: str = "09:00",
    time_end: str = "10:30",
    *,
    status: ReservationStatus = ReservationStatus.ACTIVE,
    booking_id: str = "1203-0900",
    customer_name: str | None = "Jordan Lee",
) -> Reservation:
    return Reservation(
        id=uuid.uuid4(),
        booking_id=booking_id,
        date=DAY,
        court=court,
        time_start=time_start,
        time_end=time_end,
        booking_type=ReservationType.OPEN,
        customer_name=customer_name,
        status=status,
        checked_in=False,
    )


def _closure(
    court: str = "all",
    time_start: str | None = None,
    time_end: str | None = None,
    *,
    is_active: bool = True,
) -> CourtClosure:
    return CourtClosure(
        closure_id=uuid.uuid4(),
        date=DAY,
        court=court,
        time_start=time_start,
        time_end=time_end,
        reason="Resurfacing",
        is_active=is_active,
    )


def test_overlap_reports_window(grid) -> None:
    existing = _reservation()
    candidate = ConflictCandidate(DAY, 3, "10:00", "11:00")

    conflicts = find_conflicts([candidate], [existing], [], grid=grid)

    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert conflict.kind is ConflictKind.RESERVATION
    assert conflict.booking_id == "1203-0900"
    assert (conflict.overlap_start, conflict.overlap_end) == ("10:00", "10:30")
    assert conflict.label == "Jordan Lee"


def test_touching_endpoints_do_not_conflict(grid) -> None:
    candidate = ConflictCandidate(DAY, 3, "10:30", "11:30")
    assert find_conflicts([candidate], [_reservation()], [], grid=grid) == []


def test_other_court_date_and_inactive_rows_are_ignored(grid) -> None:
    reservations = [
        _reservation(court=4),
        _reservation(status=ReservationStatus.CANCELLED),
        _reservation(status=ReservationStatus.NO_SHOW),
    ]
    candidates = [
        ConflictCandidate(DAY, 3, "09:00", "10:30"),
        ConflictCandidate(date(2024, 6, 13), 4, "09:00", "10:30"),
    ]
    assert find_conflicts(candidates, reservations, [], grid=grid) == []


def test_excluded_booking_does_not_block_its_own_move(grid) -> None:
    existing = _reservation()
    candidate = ConflictCandidate(DAY, 3, "09:30", "11:00", exclude_id=existing.id)
    assert is_slot_available(candidate, [existing], [], grid=grid)


def test_exclusion_matches_row_not_booking_code(grid) -> None:
    moving = uuid.uuid4()
    other = _reservation(customer_name="Other Month")
    candidate = ConflictCandidate(DAY, 3, "09:00", "10:30", exclude_id=moving)

    conflicts = find_conflicts([candidate], [other], [], grid=grid)

    assert [conflict.label for conflict in conflicts] == ["Other Month"]


def test_label_falls_back_to_category(grid) -> None:
    existing = _reservation(customer_name=None)
    conflicts = find_conflicts(
        [ConflictCandidate(DAY, 3, "09:00", "10:00")], [existing], [], grid=grid
    )
    assert conflicts[0].label == "open"


def test_internal_duplicates_are_reported_once(grid) -> None:
    candidates = [
        ConflictCandidate(DAY, 5, "18:00", "19:30"),
        ConflictCandidate(DAY, 5, "18:00", "19:30"),
        ConflictCandidate(DAY, 6, "18:00", "19:30"),
        ConflictCandidate(DAY, 5, "18:00", "19:30"),
    ]

    conflicts = find_conflicts(candidates, [], [], grid=grid)

    assert [conflict.kind for conflict in conflicts] == [ConflictKind.INTERNAL] * 2
    assert [conflict.candidate_index for conflict in conflicts] == [1, 3]
    assert all(conflict.duplicate_of == 0 for conflict in conflicts)


def test_all_day_closure_blocks_every_court(grid) -> None:
    candidate = ConflictCandidate(DAY, 11, "20:00", "21:00")

    conflicts = find_conflicts([candidate], [], [_closure()], grid=grid)

    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert conflict.kind is ConflictKind.CLOSURE
    assert (conflict.time_start, conflict.time_end) == ("08:30", "21:00")
    assert conflict.label == "Resurfacing"
    assert conflict.closure_id is not None


def test_partial_closure_on_one_court(grid) -> None:
    closure = _closure(court="2", time_start="12:00", time_end="14:00")
    blocked = ConflictCandidate(DAY, 2, "13:30", "15:00")
    free_court = ConflictCandidate(DAY, 3, "13:30", "15:00")
    after = ConflictCandidate(DAY, 2, "14:00", "15:00")

    conflicts = find_conflicts([blocked, free_court], [], [closure], grid=grid)

    assert [conflict.candidate_index for conflict in conflicts] == [0]
    assert find_conflicts([after], [], [closure], grid=grid) == []


def test_inactive_closure_is_ignored(grid) -> None:
    candidate = ConflictCandidate(DAY, 1, "09:00", "10:00")
    assert find_conflicts([candidate], [], [_closure(is_active=False)], grid=grid) == []


def test_every_conflict_is_reported(grid) -> None:
    candidate = ConflictCandidate(DAY, 3, "09:00", "12:00")
    reservations = [
        _reservation(),
        _reservation(time_start="11:00", time_end="12:30", booking_id="1203-1100"),
    ]

    conflicts = find_conflicts([candidate], reservations, [_closure(court="3")], grid=grid)

    assert [conflict.kind for conflict in conflicts] == [
        ConflictKind.RESERVATION,
        ConflictKind.RESERVATION,
        ConflictKind.CLOSURE,
    ]


def test_ensure_no_conflicts_raises(grid) -> None:
    candidate = ConflictCandidate(DAY, 3, "10:00", "11:00")
    with pytest.raises(ConflictError) as excinfo:
        ensure_no_conflicts([candidate], [_reservation()], [], grid=grid)
    assert len(excinfo.value.conflicts) == 1
    assert excinfo.value.conflicts[0].to_dict()["overlap_start"] == "10:00"
