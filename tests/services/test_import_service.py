"""Tests for spreadsheet imports."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select

from court_scheduler.core.errors import ValidationError
from court_scheduler.db.session import get_sessionmaker
from court_scheduler.models import (
    Court,
    CourtClosure,
    Reservation,
    ReservationStatus,
    Team,
    Tournament,
)
from court_scheduler.services import import_service

pytestmark = pytest.mark.asyncio

RESERVATION_ROWS = [
    {
        "booking_id": "1203-0900",
        "date": "6/12/2030",
        "court": "3",
        "time_start": "9:00 AM",
        "time_end": "10:30 AM",
        "booking_type": "open",
        "customer_name": "Jordan Lee",
        "payment_status": "refunded",
        "payment_amount": "$10.00",
        "status": "cancelled",
        "cancel_reason": "weather",
        "refund_status": "full",
        "checked_in": "FALSE",
    },
    {
        "booking_id": "1203-0900",
        "date": "6/12/2030",
        "court": "3",
        "time_start": "9:00 AM",
        "time_end": "10:30 AM",
        "booking_type": "open",
        "customer_name": "Sam Rivera",
        "payment_amount": "10",
        "status": "active",
        "checked_in": "",
    },
]


async def test_import_sheets_creates_then_updates(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    sheets = {
        "courts": [{"court_number": "17", "court_name": "Stadium", "display_order": "17"}],
        "teams": [
            {
                "team_id": "T-1",
                "name": "Little Rock Aces",
                "team_type": "team_usta",
                "court_rate": "$15",
            }
        ],
        "tournaments": [
            {"tournament_id": "TRN-1", "name": "Fall Classic", "default_courts": "1,2"}
        ],
        "closures": [{"closure_id": "CL-1", "date": "6/13/2030", "reason": "Ice"}],
        "reservations": RESERVATION_ROWS,
    }

    async with sessionmaker() as session:
        results = await import_service.import_sheets(session, **sheets)
    assert {stats.name: stats.created for stats in results} == {
        "courts": 1,
        "teams": 1,
        "contractors": 0,
        "tournaments": 1,
        "closures": 1,
        "reservations": 2,
    }

    async with sessionmaker() as session:
        again = await import_service.import_sheets(session, **sheets)
    assert all(stats.created == 0 for stats in again)
    assert sum(stats.updated for stats in again) == 6

    async with sessionmaker() as session:
        team = await session.get(Team, "T-1")
        assert team.court_rate == Decimal("15.00")
        tournament = await session.get(Tournament, "TRN-1")
        assert tournament.default_court_numbers() == [1, 2]
        assert (await session.get(Court, 17)).court_name == "Stadium"
        closures = (await session.execute(select(CourtClosure))).scalars().all()
        assert [closure.date for closure in closures] == [date(2030, 6, 13)]
        rows = (
            (await session.execute(select(Reservation).order_by(Reservation.created_at)))
            .scalars()
            .all()
        )
    assert sorted(row.status.value for row in rows) == ["active", "cancelled"]
    active = next(row for row in rows if row.status is ReservationStatus.ACTIVE)
    assert active.customer_name == "Sam Rivera"
    assert active.time_start == "09:00"


async def test_dry_run_writes_nothing(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        results = await import_service.import_sheets(
            session, reservations=RESERVATION_ROWS, dry_run=True
        )
    assert results[-1].created == 2

    async with sessionmaker() as session:
        rows = (await session.execute(select(Reservation))).scalars().all()
    assert rows == []


async def test_invalid_row_aborts_whole_import(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(ValidationError, match="Closure row 2"):
            await import_service.import_sheets(
                session,
                courts=[{"court_number": 1, "court_name": "Court 1"}],
                closures=[{"date": "2030-06-13", "court": "north"}],
            )

    async with sessionmaker() as session:
        assert (await session.execute(select(Court))).scalars().all() == []


async def test_reversed_reservation_row_aborts_import(reset_database, db_url: str) -> None:
    reversed_row = {**RESERVATION_ROWS[0], "time_start": "10:00 AM", "time_end": "9:00 AM"}
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(ValidationError, match="Reservation row 3 is invalid"):
            await import_service.import_sheets(
                session, reservations=[RESERVATION_ROWS[0], reversed_row]
            )

    async with sessionmaker() as session:
        assert (await session.execute(select(Reservation))).scalars().all() == []
