"""Court rate engine.

Two calculations coexist and are not interchangeable:

* ``total_rate`` prices general bookings at a flat base rate per court,
  selected by prime/non-prime time, regardless of duration.
* ``hourly_total`` meters team, tournament and contractor rentals at the
  linked entity's per-hour court rate. Reports reconstruct historical totals
  with this form.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from court_scheduler.core.config import Settings, get_settings
from court_scheduler.core.errors import ValidationError
from court_scheduler.models.reservation import PaymentStatus, ReservationType
from court_scheduler.services.time_grid import (
    MINUTES_PER_HOUR,
    TimeGrid,
    hours_between,
    parse_time,
)

MONEY_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


class PricingMode(str, enum.Enum):
    """How a booking category is charged."""

    STANDARD = "standard"
    FREE = "free"
    WAIVED = "waived"


# Every category must appear here; a missing entry is a configuration error,
# never an implicit free booking.
_PRICING_MODES: dict[ReservationType, PricingMode] = {
    ReservationType.OPEN: PricingMode.STANDARD,
    ReservationType.CONTRACTOR: PricingMode.STANDARD,
    ReservationType.TEAM_USTA: PricingMode.STANDARD,
    ReservationType.TEAM_HS: PricingMode.WAIVED,
    ReservationType.TEAM_COLLEGE: PricingMode.STANDARD,
    ReservationType.TEAM_OTHER: PricingMode.STANDARD,
    ReservationType.TOURNAMENT: PricingMode.STANDARD,
    ReservationType.MAINTENANCE: PricingMode.FREE,
    ReservationType.HOLD: PricingMode.FREE,
}

METERED_TYPES: frozenset[ReservationType] = frozenset(
    {
        ReservationType.CONTRACTOR,
        ReservationType.TEAM_USTA,
        ReservationType.TEAM_COLLEGE,
        ReservationType.TEAM_OTHER,
        ReservationType.TOURNAMENT,
    }
)


def to_money(value: Decimal | int | str) -> Decimal:
    return Decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def _to_str(value: Decimal) -> str:
    return f"{value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP):.2f}"


def _coerce_category(category: ReservationType | str) -> ReservationType:
    try:
        return ReservationType(category)
    except ValueError as exc:
        raise ValidationError(f"Unknown booking type {category!r}") from exc


def pricing_mode(category: ReservationType | str) -> PricingMode:
    resolved = _coerce_category(category)
    try:
        return _PRICING_MODES[resolved]
    except KeyError as exc:
        raise ValidationError(f"No pricing policy configured for {resolved.value}") from exc


def is_free_booking(category: ReservationType | str) -> bool:
    return pricing_mode(category) is not PricingMode.STANDARD


def is_metered(category: ReservationType | str) -> bool:
    return _coerce_category(category) in METERED_TYPES


def default_payment_status(category: ReservationType | str) -> PaymentStatus:
    mode = pricing_mode(category)
    if mode is PricingMode.WAIVED:
        return PaymentStatus.WAIVED
    if mode is PricingMode.FREE:
        return PaymentStatus.NA
    return PaymentStatus.PENDING


def _is_prime_minute(
    booking_date: date, minutes: int, settings: Settings
) -> bool:
    if booking_date.weekday() >= 5:
        return True
    return minutes >= parse_time(settings.prime_start)


def is_prime_time(
    booking_date: date,
    time_start: str | time,
    *,
    settings: Settings | None = None,
) -> bool:
    """Weekends are prime all day; weekdays from the prime start onwards."""

    settings = settings or get_settings()
    return _is_prime_minute(booking_date, parse_time(time_start), settings)


def base_rate(
    booking_date: date,
    time_start: str | time,
    category: ReservationType | str,
    *,
    settings: Settings | None = None,
) -> Decimal:
    settings = settings or get_settings()
    if pricing_mode(category) is not PricingMode.STANDARD:
        return ZERO
    if is_prime_time(booking_date, time_start, settings=settings):
        return to_money(settings.prime_rate)
    return to_money(settings.non_prime_rate)


def _validate_court_count(court_count: int) -> None:
    if court_count < 1:
        raise ValidationError("At least one court is required")


def total_rate(
    booking_date: date,
    time_start: str | time,
    time_end: str | time,
    category: ReservationType | str,
    court_count: int = 1,
    *,
    settings: Settings | None = None,
) -> Decimal:
    """Flat general-purpose price: base rate times courts, duration ignored."""

    _validate_court_count(court_count)
    if parse_time(time_start) >= parse_time(time_end):
        raise ValidationError("Start time must be before end time")
    rate = base_rate(booking_date, time_start, category, settings=settings)
    return to_money(rate * court_count)


def hourly_total(
    time_start: str | time,
    time_end: str | time,
    court_rate: Decimal | int | str,
    court_count: int = 1,
) -> Decimal:
    """Metered price: hours times the entity's per-hour court rate times courts."""

    _validate_court_count(court_count)
    hours = hours_between(time_start, time_end)
    if hours <= 0:
        raise ValidationError("Start time must be before end time")
    rate = Decimal(court_rate)
    if rate < 0:
        raise ValidationError("Court rate cannot be negative")
    return to_money(hours * rate * court_count)


def rate_description(
    booking_date: date, time_start: str | time, *, settings: Settings | None = None
) -> str:
    settings = settings or get_settings()
    if is_prime_time(booking_date, time_start, settings=settings):
        return f"Prime Time (${_to_str(settings.prime_rate)})"
    return f"Non-Prime (${_to_str(settings.non_prime_rate)})"


@dataclass(slots=True)
class RateBreakdown:
    """Prime/non-prime split of a booking, priced per hour."""

    total_hours: Decimal
    prime_hours: Decimal
    non_prime_hours: Decimal
    prime_rate: Decimal
    non_prime_rate: Decimal
    court_count: int
    total: Decimal
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_hours": str(self.total_hours),
            "prime_hours": str(self.prime_hours),
            "non_prime_hours": str(self.non_prime_hours),
            "prime_rate": _to_str(self.prime_rate),
            "non_prime_rate": _to_str(self.non_prime_rate),
            "court_count": self.court_count,
            "total": _to_str(self.total),
            "description": self.description,
        }


def _format_hours(hours: Decimal) -> str:
    return f"{hours.normalize():f}"


def _format_rate(rate: Decimal) -> str:
    if rate == rate.to_integral_value():
        return f"${int(rate)}"
    return f"${_to_str(rate)}"


def rate_breakdown(
    booking_date: date,
    time_start: str | time,
    time_end: str | time,
    category: ReservationType | str,
    court_count: int = 1,
    *,
    grid: TimeGrid | None = None,
    settings: Settings | None = None,
) -> RateBreakdown:
    """Split a booking into prime and non-prime hours, slot by slot."""

    settings = settings or get_settings()
    grid = grid or TimeGrid.from_settings(settings)
    _validate_court_count(court_count)
    prime_rate = to_money(settings.prime_rate)
    non_prime_rate = to_money(settings.non_prime_rate)

    if is_free_booking(category):
        return RateBreakdown(
            total_hours=Decimal("0"),
            prime_hours=Decimal("0"),
            non_prime_hours=Decimal("0"),
            prime_rate=prime_rate,
            non_prime_rate=non_prime_rate,
            court_count=court_count,
            total=ZERO,
            description="No charge",
        )

    start, end = grid.validate_interval(time_start, time_end)
    prime_slots = 0
    non_prime_slots = 0
    for minutes in grid.slot_starts(start, end):
        if _is_prime_minute(booking_date, minutes, settings):
            prime_slots += 1
        else:
            non_prime_slots += 1

    slot_hours = Decimal(grid.slot_minutes) / Decimal(MINUTES_PER_HOUR)
    prime_hours = prime_slots * slot_hours
    non_prime_hours = non_prime_slots * slot_hours
    total = to_money(
        (prime_hours * prime_rate + non_prime_hours * non_prime_rate) * court_count
    )

    parts: list[str] = []
    if non_prime_hours:
        label = f"{_format_hours(non_prime_hours)}hr @ {_format_rate(non_prime_rate)}"
        parts.append(label if prime_hours else f"{label} (Non-Prime)")
    if prime_hours:
        label = f"{_format_hours(prime_hours)}hr @ {_format_rate(prime_rate)}"
        parts.append(label if non_prime_hours else f"{label} (Prime)")
    description = " + ".join(parts)
    if court_count > 1:
        description += f" × {court_count} courts"

    return RateBreakdown(
        total_hours=prime_hours + non_prime_hours,
        prime_hours=prime_hours,
        non_prime_hours=non_prime_hours,
        prime_rate=prime_rate,
        non_prime_rate=non_prime_rate,
        court_count=court_count,
        total=total,
        description=description,
    )
