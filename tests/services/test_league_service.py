"""Tests for league night planning."""

from __future__ import annotations

import random
from datetime import date
from decimal import Decimal

import pytest

from court_scheduler.core.errors import ConflictError, ValidationError
from court_scheduler.models import (
    PaymentMethod,
    PaymentStatus,
    Reservation,
    ReservationStatus,
    ReservationType,
    Team,
)
from court_scheduler.services import league_service
from court_scheduler.services.league_service import LeagueMatch, LeagueRequest

MONDAY = date(2024, 6, 10)


def _plan(request: LeagueRequest, settings, *, reservations=(), team=None):
    return league_service.plan_league_night(
        request,
        reservations=list(reservations),
        closures=[],
        team=team,
        settings=settings,
        rng=random.Random(3),
    )


def _league_team(rate: str = "14.00") -> Team:
    return Team(
        team_id="T-MNL",
        team_name="Monday Night League",
        team_type="team_other",
        court_rate=Decimal(rate),
        contact_phone="501-555-0199",
    )


def test_sessions_share_one_group_with_their_own_courts(settings) -> None:
    request = LeagueRequest(
        date=MONDAY,
        matches=[
            LeagueMatch(court=1, session=0, competitor1="Avery", competitor2="Blake"),
            LeagueMatch(court=2, session=0, competitor1="Casey"),
            LeagueMatch(court=1, session=1, competitor1="Drew", competitor2="Emery"),
            LeagueMatch(court=3, session=1),
        ],
        created_by="MNL",
    )

    plan = _plan(request, settings, team=_league_team())

    assert [(d.court, d.time_start, d.time_end) for d in plan.drafts] == [
        (1, "18:00", "19:30"),
        (2, "18:00", "19:30"),
        (1, "19:30", "21:00"),
    ]
    assert [d.booking_id for d in plan.drafts] == ["1001-1800", "1002-1800", "1001-1930"]
    assert len({d.group_id for d in plan.drafts}) == 1
    assert plan.drafts[0].group_id.startswith("GRP-0610-")

    second = plan.drafts[1]
    assert second.customer_name == "Casey vs TBD"
    assert second.notes == "Monday Night League - Casey vs TBD"
    assert second.booking_type is ReservationType.TEAM_OTHER
    assert second.entity_id == "T-MNL"
    assert second.customer_phone == "501-555-0199"
    assert second.payment_status is PaymentStatus.INVOICED
    assert second.payment_method is PaymentMethod.INVOICE
    assert second.payment_amount == Decimal("14.00")
    assert second.participant_count == 4


def test_flat_league_rate_without_team(settings) -> None:
    request = LeagueRequest(
        date=MONDAY, matches=[LeagueMatch(court=5, competitor1="Avery")]
    )

    (draft,) = _plan(request, settings).drafts

    assert draft.payment_amount == Decimal("12.00")
    assert draft.entity_id == "MNL"


def test_conflict_rejects_whole_night(settings) -> None:
    taken = Reservation(
        booking_id="1002-1930",
        date=MONDAY,
        court=2,
        time_start="19:00",
        time_end="20:00",
        booking_type=ReservationType.OPEN,
        customer_name="Late Player",
        status=ReservationStatus.ACTIVE,
        checked_in=False,
    )
    request = LeagueRequest(
        date=MONDAY,
        matches=[
            LeagueMatch(court=1, session=0, competitor1="Avery"),
            LeagueMatch(court=2, session=1, competitor1="Blake"),
        ],
    )

    with pytest.raises(ConflictError) as excinfo:
        _plan(request, settings, reservations=[taken])

    (conflict,) = excinfo.value.conflicts
    assert conflict.candidate_index == 1
    assert conflict.label == "Late Player"


@pytest.mark.parametrize(
    ("request_kwargs", "message"),
    [
        ({"matches": [LeagueMatch(court=1)]}, "at least one court"),
        ({"matches": [LeagueMatch(court=1, session=2, competitor1="A")]}, "unknown session"),
        ({"matches": [LeagueMatch(court=18, competitor1="A")]}, "outside 1-17"),
        ({"matches": [LeagueMatch(court=1, competitor1="A")], "sessions": []}, "session"),
        (
            {"matches": [LeagueMatch(court=1, competitor1="A")], "sessions": ["20:00"]},
            "outside operating hours",
        ),
        (
            {"matches": [LeagueMatch(court=1, competitor1="A")], "date": date(2023, 12, 4)},
            "before the schedule start",
        ),
    ],
)
def test_invalid_league_requests(settings, request_kwargs, message) -> None:
    values = {"date": MONDAY, **request_kwargs}
    with pytest.raises(ValidationError, match=message):
        _plan(LeagueRequest(**values), settings)
