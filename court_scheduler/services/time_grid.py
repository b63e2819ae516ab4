"""Slot grid and time arithmetic shared by the scheduling engine.

Times travel through the engine as zero-padded 24 hour ``HH:MM`` strings.
Every boundary must sit on a multiple of the slot step; values that do not
are rejected rather than rounded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import time
from decimal import Decimal

from court_scheduler.core.config import Settings, get_settings
from court_scheduler.core.errors import InvalidTime, ValidationError

MINUTES_PER_HOUR = 60
_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_time(value: str | time) -> int:
    """Return minutes since midnight for a strict ``HH:MM`` value."""

    if isinstance(value, time):
        return value.hour * MINUTES_PER_HOUR + value.minute
    if not isinstance(value, str):
        raise InvalidTime(f"Time must be an HH:MM string, got {value!r}")
    match = _TIME_PATTERN.match(value.strip())
    if match is None:
        raise InvalidTime(f"Time {value!r} is not in HH:MM format")
    return int(match.group(1)) * MINUTES_PER_HOUR + int(match.group(2))


def format_minutes(minutes: int) -> str:
    hours, mins = divmod(minutes, MINUTES_PER_HOUR)
    return f"{hours:02d}:{mins:02d}"


def hours_between(time_start: str | time, time_end: str | time) -> Decimal:
    """Duration in hours between two times, e.g. ``09:00``-``10:30`` is 1.5."""

    start = parse_time(time_start)
    end = parse_time(time_end)
    return Decimal(end - start) / Decimal(MINUTES_PER_HOUR)


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open interval test; touching endpoints do not overlap."""

    return a_start < b_end and a_end > b_start


@dataclass(slots=True, frozen=True)
class TimeGrid:
    """Operating window ``[open, close)`` divided into fixed slots."""

    open_minutes: int
    close_minutes: int
    slot_minutes: int = 30
    default_duration_minutes: int = 90

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> TimeGrid:
        settings = settings or get_settings()
        return cls(
            open_minutes=parse_time(settings.day_start),
            close_minutes=parse_time(settings.day_end),
            slot_minutes=settings.slot_minutes,
            default_duration_minutes=settings.default_duration_minutes,
        )

    @property
    def open_time(self) -> str:
        return format_minutes(self.open_minutes)

    @property
    def close_time(self) -> str:
        return format_minutes(self.close_minutes)

    def to_minutes(self, value: str | time) -> int:
        """Parse a time and require it to sit on the slot grid."""

        minutes = parse_time(value)
        if minutes % self.slot_minutes:
            raise InvalidTime(
                f"Time {format_minutes(minutes)} is not aligned to "
                f"{self.slot_minutes}-minute slots"
            )
        return minutes

    def normalize(self, value: str | time) -> str:
        return format_minutes(self.to_minutes(value))

    def start_times(self) -> list[str]:
        """All valid start times, from opening up to the last slot."""

        return [
            format_minutes(minutes)
            for minutes in range(self.open_minutes, self.close_minutes, self.slot_minutes)
        ]

    def end_time_options(self, time_start: str | time) -> list[str]:
        start = self.to_minutes(time_start)
        if not self.open_minutes <= start < self.close_minutes:
            return []
        options = [
            format_minutes(minutes)
            for minutes in range(
                start + self.slot_minutes, self.close_minutes, self.slot_minutes
            )
        ]
        options.append(self.close_time)
        return options

    def default_end_time(
        self, time_start: str | time, duration_minutes: int | None = None
    ) -> str:
        """Start plus the default duration, clamped to closing time."""

        start = self.to_minutes(time_start)
        duration = duration_minutes or self.default_duration_minutes
        return format_minutes(min(start + duration, self.close_minutes))

    def validate_interval(
        self, time_start: str | time, time_end: str | time
    ) -> tuple[str, str]:
        """Return the normalized ``(start, end)`` pair of a bookable interval."""

        start = self.to_minutes(time_start)
        end = self.to_minutes(time_end)
        if start >= end:
            raise ValidationError(
                f"Start time {format_minutes(start)} must be before end time "
                f"{format_minutes(end)}"
            )
        if start < self.open_minutes or end > self.close_minutes:
            raise ValidationError(
                f"{format_minutes(start)}-{format_minutes(end)} falls outside "
                f"operating hours {self.open_time}-{self.close_time}"
            )
        return format_minutes(start), format_minutes(end)

    overlaps = staticmethod(overlaps)

    def slot_starts(self, time_start: str | time, time_end: str | time) -> list[int]:
        """Start minute of every slot covered by an interval."""

        start = self.to_minutes(time_start)
        end = self.to_minutes(time_end)
        return list(range(start, end, self.slot_minutes))


def default_grid() -> TimeGrid:
    """Grid built from the current settings."""
    return TimeGrid.from_settings(get_settings())
