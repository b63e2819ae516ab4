"""Conflict detection against reservations, closures and the request itself.

The detector is a pure function over snapshots supplied by the caller. It
reports every overlap it finds and never resolves one; whether to abandon,
adjust or skip is decided upstream.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from court_scheduler.core.errors import ConflictError
from court_scheduler.models.closure import ALL_COURTS
from court_scheduler.models.reservation import ReservationStatus
from court_scheduler.services.time_grid import TimeGrid, format_minutes, overlaps, parse_time


class ConflictKind(str, enum.Enum):
    INTERNAL = "internal"
    RESERVATION = "reservation"
    CLOSURE = "closure"


@dataclass(slots=True, frozen=True)
class ConflictCandidate:
    """A proposed booking slot to check."""

    date: date
    court: int
    time_start: str
    time_end: str
    exclude_id: uuid.UUID | None = None


@dataclass(slots=True)
class Conflict:
    """One overlap between a candidate and a blocking entry."""

    kind: ConflictKind
    candidate: ConflictCandidate
    candidate_index: int
    time_start: str
    time_end: str
    overlap_start: str
    overlap_end: str
    label: str
    booking_id: str | None = None
    closure_id: str | None = None
    duplicate_of: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "date": self.candidate.date.isoformat(),
            "court": self.candidate.court,
            "candidate_start": self.candidate.time_start,
            "candidate_end": self.candidate.time_end,
            "candidate_index": self.candidate_index,
            "time_start": self.time_start,
            "time_end": self.time_end,
            "overlap_start": self.overlap_start,
            "overlap_end": self.overlap_end,
            "label": self.label,
            "booking_id": self.booking_id,
            "closure_id": self.closure_id,
            "duplicate_of": self.duplicate_of,
        }


def _closure_covers(closure: Any, court: int) -> bool:
    value = str(closure.court if closure.court is not None else ALL_COURTS).strip().lower()
    if value == ALL_COURTS:
        return True
    return value.isdigit() and int(value) == court


def _closure_window(closure: Any, grid: TimeGrid) -> tuple[int, int]:
    start = parse_time(closure.time_start) if closure.time_start else grid.open_minutes
    end = parse_time(closure.time_end) if closure.time_end else grid.close_minutes
    return start, end


def _reservation_label(reservation: Any) -> str:
    if reservation.customer_name:
        return reservation.customer_name
    category = reservation.booking_type
    return getattr(category, "value", category) or "Reservation"


def _is_active(reservation: Any) -> bool:
    return reservation.status == ReservationStatus.ACTIVE


def find_conflicts(
    candidates: Sequence[ConflictCandidate],
    reservations: Iterable[Any],
    closures: Iterable[Any],
    *,
    grid: TimeGrid | None = None,
) -> list[Conflict]:
    """Return every conflict for the candidates, internal duplicates first."""

    grid = grid or TimeGrid.from_settings()
    windows = [
        (grid.to_minutes(candidate.time_start), grid.to_minutes(candidate.time_end))
        for candidate in candidates
    ]
    conflicts: list[Conflict] = []

    for index, candidate in enumerate(candidates):
        start, end = windows[index]
        for earlier in range(index):
            other = candidates[earlier]
            if other.date != candidate.date or other.court != candidate.court:
                continue
            other_start, other_end = windows[earlier]
            if not overlaps(start, end, other_start, other_end):
                continue
            conflicts.append(
                Conflict(
                    kind=ConflictKind.INTERNAL,
                    candidate=candidate,
                    candidate_index=index,
                    time_start=format_minutes(other_start),
                    time_end=format_minutes(other_end),
                    overlap_start=format_minutes(max(start, other_start)),
                    overlap_end=format_minutes(min(end, other_end)),
                    label="Duplicate slot in this request",
                    duplicate_of=earlier,
                )
            )
            break

    active = [item for item in reservations if _is_active(item)]
    for index, candidate in enumerate(candidates):
        start, end = windows[index]
        for reservation in active:
            if reservation.date != candidate.date or reservation.court != candidate.court:
                continue
            if candidate.exclude_id is not None and reservation.id == candidate.exclude_id:
                continue
            other_start = parse_time(reservation.time_start)
            other_end = parse_time(reservation.time_end)
            if not overlaps(start, end, other_start, other_end):
                continue
            conflicts.append(
                Conflict(
                    kind=ConflictKind.RESERVATION,
                    candidate=candidate,
                    candidate_index=index,
                    time_start=format_minutes(other_start),
                    time_end=format_minutes(other_end),
                    overlap_start=format_minutes(max(start, other_start)),
                    overlap_end=format_minutes(min(end, other_end)),
                    label=_reservation_label(reservation),
                    booking_id=reservation.booking_id,
                )
            )

    open_closures = [item for item in closures if item.is_active]
    for index, candidate in enumerate(candidates):
        start, end = windows[index]
        for closure in open_closures:
            if closure.date != candidate.date or not _closure_covers(closure, candidate.court):
                continue
            other_start, other_end = _closure_window(closure, grid)
            if not overlaps(start, end, other_start, other_end):
                continue
            conflicts.append(
                Conflict(
                    kind=ConflictKind.CLOSURE,
                    candidate=candidate,
                    candidate_index=index,
                    time_start=format_minutes(other_start),
                    time_end=format_minutes(other_end),
                    overlap_start=format_minutes(max(start, other_start)),
                    overlap_end=format_minutes(min(end, other_end)),
                    label=closure.reason or "Court closed",
                    closure_id=str(closure.closure_id) if closure.closure_id else None,
                )
            )

    return conflicts


def ensure_no_conflicts(
    candidates: Sequence[ConflictCandidate],
    reservations: Iterable[Any],
    closures: Iterable[Any],
    *,
    grid: TimeGrid | None = None,
) -> None:
    conflicts = find_conflicts(candidates, reservations, closures, grid=grid)
    if conflicts:
        raise ConflictError(conflicts)


def is_slot_available(
    candidate: ConflictCandidate,
    reservations: Iterable[Any],
    closures: Iterable[Any],
    *,
    grid: TimeGrid | None = None,
) -> bool:
    return not find_conflicts([candidate], reservations, closures, grid=grid)
