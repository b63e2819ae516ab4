"""Booking and group identifiers.

Booking codes are ``DDCC-HHMM``: day of month, court, start hour and minute,
e.g. ``1517-1830`` is court 17 at 18:30 on the 15th. The code is a pure
function of those three values, so it repeats from one month to the next;
the reservation date always travels with it.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from datetime import date, time

from court_scheduler.core.config import Settings, get_settings
from court_scheduler.core.errors import InvalidBookingId
from court_scheduler.services.time_grid import MINUTES_PER_HOUR, TimeGrid

_BOOKING_ID_PATTERN = re.compile(r"^(\d{2})(\d{2})-(\d{2})(\d{2})$")
GROUP_ID_PREFIX = "GRP"


@dataclass(slots=True, frozen=True)
class BookingIdParts:
    """Components decoded from a booking code."""

    day: int
    court: int
    hour: int
    minute: int


def generate_booking_id(
    booking_date: date,
    court: int,
    time_start: str | time,
    *,
    grid: TimeGrid | None = None,
) -> str:
    grid = grid or TimeGrid.from_settings()
    minutes = grid.to_minutes(time_start)
    if not 0 < court < 100:
        raise InvalidBookingId(f"Court {court} cannot be encoded in two digits")
    hour, minute = divmod(minutes, MINUTES_PER_HOUR)
    return f"{booking_date.day:02d}{court:02d}-{hour:02d}{minute:02d}"


def generate_group_id(booking_date: date, *, rng: random.Random | None = None) -> str:
    """Tag for rows created together; carries no uniqueness guarantee."""

    suffix = (rng or random).randint(0, 999)
    return f"{GROUP_ID_PREFIX}-{booking_date.month:02d}{booking_date.day:02d}-{suffix:03d}"


def parse_booking_id(code: str) -> BookingIdParts:
    match = _BOOKING_ID_PATTERN.match(code or "")
    if match is None:
        raise InvalidBookingId(f"Booking id {code!r} is not in DDCC-HHMM format")
    day, court, hour, minute = (int(part) for part in match.groups())
    return BookingIdParts(day=day, court=court, hour=hour, minute=minute)


def is_valid_booking_id(code: str, *, settings: Settings | None = None) -> bool:
    """Strict format check against the configured courts and hours."""

    settings = settings or get_settings()
    try:
        parts = parse_booking_id(code)
    except InvalidBookingId:
        return False
    return (
        1 <= parts.day <= 31
        and 1 <= parts.court <= settings.total_courts
        and settings.day_start.hour <= parts.hour <= settings.day_end.hour
        and parts.minute < MINUTES_PER_HOUR
        and parts.minute % settings.slot_minutes == 0
    )
