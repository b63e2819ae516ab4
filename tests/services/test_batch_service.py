"""Tests for request expansion and batch planning."""

from __future__ import annotations

import random
from datetime import date
from decimal import Decimal

import pytest

from court_scheduler.core.errors import ConflictError, InvalidTime, ValidationError
from court_scheduler.models import (
    CourtClosure,
    PaymentMethod,
    PaymentStatus,
    Reservation,
    ReservationStatus,
    ReservationType,
    Team,
    Tournament,
)
from court_scheduler.services import batch_service
from court_scheduler.services.batch_service import BatchRequest

WEDNESDAY = date(2024, 6, 12)


def _open_request(**overrides) -> BatchRequest:
    values = {
        "booking_type": ReservationType.OPEN,
        "time_start": "09:00",
        "dates": [WEDNESDAY],
        "courts": [3],
        "customer_name": "Jordan Lee",
        "customer_phone": "501-555-0123",
    }
    values.update(overrides)
    return BatchRequest(**values)


def _plan(request: BatchRequest, settings, *, reservations=(), closures=(), **kwargs):
    return batch_service.plan_batch(
        request,
        reservations=list(reservations),
        closures=list(closures),
        settings=settings,
        rng=random.Random(1),
        **kwargs,
    )


def _existing(court: int, time_start: str, time_end: str) -> Reservation:
    return Reservation(
        booking_id=f"12{court:02d}-{time_start.replace(':', '')}",
        date=WEDNESDAY,
        court=court,
        time_start=time_start,
        time_end=time_end,
        booking_type=ReservationType.OPEN,
        customer_name="Existing Player",
        status=ReservationStatus.ACTIVE,
        checked_in=False,
    )


def test_single_open_booking(settings) -> None:
    plan = _plan(_open_request(), settings)

    assert len(plan.drafts) == 1
    draft = plan.drafts[0]
    assert draft.booking_id == "1203-0900"
    assert draft.group_id is None
    assert (draft.time_start, draft.time_end) == ("09:00", "10:30")
    assert draft.payment_amount == Decimal("10.00")
    assert draft.payment_status is PaymentStatus.PENDING
    assert plan.conflicts == [] and plan.skipped == []


def test_weekly_repeat_across_courts_shares_group(settings) -> None:
    request = _open_request(courts=[1, 2], repeat_weeks=3, time_start="18:00", time_end="19:00")

    plan = _plan(request, settings)

    assert len(plan.drafts) == 6
    assert {draft.date for draft in plan.drafts} == {
        date(2024, 6, 12),
        date(2024, 6, 19),
        date(2024, 6, 26),
    }
    group_ids = {draft.group_id for draft in plan.drafts}
    assert len(group_ids) == 1
    assert group_ids.pop().startswith("GRP-0612-")
    assert all(draft.payment_amount == Decimal("12.00") for draft in plan.drafts)


def test_conflict_without_force_raises(settings) -> None:
    existing = _existing(3, "09:00", "10:30")
    request = _open_request(time_start="10:00", time_end="11:00")

    with pytest.raises(ConflictError) as excinfo:
        _plan(request, settings, reservations=[existing])

    conflict = excinfo.value.conflicts[0]
    assert (conflict.overlap_start, conflict.overlap_end) == ("10:00", "10:30")


def test_force_skips_conflicting_slots(settings) -> None:
    existing = _existing(3, "09:00", "10:30")
    request = _open_request(courts=[3, 4])

    plan = _plan(request, settings, reservations=[existing], force=True)

    assert [draft.court for draft in plan.drafts] == [4]
    assert [draft.court for draft in plan.skipped] == [3]
    assert len(plan.conflicts) == 1


def test_force_skips_internal_duplicates(settings) -> None:
    request = _open_request(dates=[WEDNESDAY, WEDNESDAY], courts=[5])

    plan = _plan(request, settings, force=True)

    assert len(plan.drafts) == 1
    assert len(plan.skipped) == 1
    assert plan.conflicts[0].duplicate_of == 0


def test_force_with_everything_blocked_raises(settings) -> None:
    closure = CourtClosure(date=WEDNESDAY, court="all", reason="Tournament setup", is_active=True)
    with pytest.raises(ConflictError):
        _plan(_open_request(courts=[1, 2]), settings, closures=[closure], force=True)


def test_team_booking_is_metered_and_invoiced(settings) -> None:
    team = Team(
        team_id="T-USTA-1",
        team_name="Little Rock Aces",
        team_type="team_usta",
        court_rate=Decimal("15.00"),
        contact_phone="501-555-0100",
    )
    request = BatchRequest(
        booking_type=ReservationType.TEAM_USTA,
        time_start="18:00",
        dates=[WEDNESDAY],
        courts=[7, 8],
        entity_id="T-USTA-1",
    )

    plan = _plan(request, settings, entity=team)

    assert len(plan.drafts) == 2
    draft = plan.drafts[0]
    assert draft.time_end == "19:30"
    assert draft.payment_amount == Decimal("22.50")
    assert draft.payment_status is PaymentStatus.INVOICED
    assert draft.payment_method is PaymentMethod.INVOICE
    assert draft.participant_count == batch_service.TEAM_PARTICIPANT_COUNT
    assert draft.customer_name == "Little Rock Aces"
    assert draft.customer_phone == "501-555-0100"
    assert draft.notes == "Team booking for Little Rock Aces"


def test_high_school_team_is_waived_with_one_hour_block(settings) -> None:
    team = Team(
        team_id="T-HS-1",
        team_name="Central High",
        team_type="high_school",
        court_rate=Decimal("0.00"),
    )
    request = BatchRequest(
        booking_type=ReservationType.TEAM_HS,
        time_start="15:30",
        dates=[WEDNESDAY],
        courts=[1],
        entity_id="T-HS-1",
    )

    draft = _plan(request, settings, entity=team).drafts[0]

    assert draft.time_end == "16:30"
    assert draft.payment_amount == Decimal("0.00")
    assert draft.payment_status is PaymentStatus.WAIVED


def test_tournament_defaults_from_entity(settings) -> None:
    tournament = Tournament(
        tournament_id="TRN-1",
        name="Fall Classic",
        start_date=date(2024, 9, 20),
        end_date=date(2024, 9, 22),
        default_courts="1, 2",
        court_rate=Decimal("20.00"),
    )
    request = BatchRequest(
        booking_type=ReservationType.TOURNAMENT,
        time_start="08:30",
        time_end="10:00",
        entity_id="TRN-1",
    )

    plan = _plan(request, settings, entity=tournament)

    assert len(plan.drafts) == 6
    assert {draft.court for draft in plan.drafts} == {1, 2}
    assert all(draft.payment_amount == Decimal("30.00") for draft in plan.drafts)
    assert plan.drafts[0].notes == "Tournament booking for Fall Classic"


def test_explicit_amount_wins(settings) -> None:
    request = _open_request(payment_amount=Decimal("5"), payment_status=PaymentStatus.PAID)
    draft = _plan(request, settings).drafts[0]
    assert draft.payment_amount == Decimal("5.00")
    assert draft.payment_status is PaymentStatus.PAID


def test_free_category_prices_at_zero(settings) -> None:
    request = BatchRequest(
        booking_type=ReservationType.MAINTENANCE,
        time_start="08:30",
        time_end="09:30",
        dates=[WEDNESDAY],
        courts=[9],
    )
    draft = _plan(request, settings).drafts[0]
    assert draft.payment_amount == Decimal("0.00")
    assert draft.payment_status is PaymentStatus.NA


@pytest.mark.parametrize(
    "overrides",
    [
        {"courts": []},
        {"dates": []},
        {"courts": [18]},
        {"courts": [0]},
        {"dates": [date(2023, 12, 31)]},
        {"repeat_weeks": 0},
        {"repeat_weeks": 53},
        {"customer_name": "  "},
        {"time_start": "10:00", "time_end": "09:30"},
        {"time_start": "20:30", "time_end": "21:30"},
    ],
)
def test_invalid_requests_are_rejected(settings, overrides) -> None:
    with pytest.raises(ValidationError):
        _plan(_open_request(**overrides), settings)


def test_misaligned_start_is_rejected(settings) -> None:
    with pytest.raises(InvalidTime):
        _plan(_open_request(time_start="09:15"), settings)


def test_default_end_is_clamped_at_close(settings) -> None:
    draft = _plan(_open_request(time_start="20:00"), settings).drafts[0]
    assert draft.time_end == "21:00"


def test_expand_request_keeps_duplicates(grid) -> None:
    request = _open_request(dates=[WEDNESDAY, WEDNESDAY], courts=[1, 1])
    drafts = batch_service.expand_request(request, grid=grid, rng=random.Random(3))
    assert len(drafts) == 4


def test_team_block_hours() -> None:
    assert batch_service.team_block_hours("high_school") == Decimal("1.0")
    assert batch_service.team_block_hours(ReservationType.TEAM_HS) == Decimal("1.0")
    assert batch_service.team_block_hours("team_college") == Decimal("1.5")
