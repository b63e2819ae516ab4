"""Scheduling error taxonomy."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from court_scheduler.services.conflict_service import Conflict


class SchedulingError(Exception):
    """Base class for every failure raised by the scheduling engine."""


class ValidationError(SchedulingError, ValueError):
    """Malformed input rejected before any conflict check runs."""


class InvalidTime(ValidationError):
    """A time value that is not ``HH:MM`` or not aligned to the slot grid."""


class InvalidBookingId(ValidationError):
    """A booking code that is not a well-formed ``DDCC-HHMM`` value."""


class ConflictError(SchedulingError):
    """One or more candidates overlap existing reservations or closures."""

    stale = False

    def __init__(self, conflicts: Sequence[Conflict], message: str | None = None) -> None:
        self.conflicts = list(conflicts)
        count = len(self.conflicts)
        default = f"{count} conflicting slot{'s' if count != 1 else ''} found"
        super().__init__(message or default)


class StaleWriteConflict(ConflictError):
    """A conflict detected at the write boundary after a clean local check."""

    stale = True


class LifecycleError(SchedulingError, ValueError):
    """A state transition guard was violated."""


class NotActive(LifecycleError):
    """The reservation is no longer active."""


class AlreadyCheckedIn(LifecycleError):
    """The reservation has already been checked in."""


class NotYetElapsed(LifecycleError):
    """The reservation has not ended yet."""


__all__ = [
    "AlreadyCheckedIn",
    "ConflictError",
    "InvalidBookingId",
    "InvalidTime",
    "LifecycleError",
    "NotActive",
    "NotYetElapsed",
    "SchedulingError",
    "StaleWriteConflict",
    "ValidationError",
]
