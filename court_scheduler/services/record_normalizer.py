"""Normalization of spreadsheet rows into strict records and ORM rows.

Row numbers in error messages count the header as row 1, matching what staff
see in the sheet.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from court_scheduler.core.config import Settings, get_settings
from court_scheduler.core.errors import ValidationError
from court_scheduler.models.closure import CourtClosure
from court_scheduler.models.reservation import Reservation
from court_scheduler.schemas.records import (
    ClosureRecord,
    ContractorRecord,
    CourtRecord,
    ReservationRecord,
    TeamRecord,
    TournamentRecord,
    normalize_time,
    parse_sheet_bool,
)
from court_scheduler.services.time_grid import TimeGrid

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

_HEADER_ROWS = 1
_SHEET_CLOSURE_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "court-scheduler/closures")

__all__ = [
    "closure_from_record",
    "normalize_closure_rows",
    "normalize_contractor_rows",
    "normalize_court_rows",
    "normalize_reservation_rows",
    "normalize_team_rows",
    "normalize_time",
    "normalize_tournament_rows",
    "parse_sheet_bool",
    "reservation_from_record",
]


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "row"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


def _normalize_rows(
    model: type[RecordT],
    rows: Iterable[Mapping[str, Any]],
    label: str,
    check: Callable[[RecordT], None] | None = None,
) -> list[RecordT]:
    records: list[RecordT] = []
    for index, row in enumerate(rows):
        row_number = index + _HEADER_ROWS + 1
        try:
            record = model.model_validate(dict(row))
        except PydanticValidationError as exc:
            raise ValidationError(
                f"{label} row {row_number} is invalid: {_describe(exc)}"
            ) from exc
        if check is not None:
            try:
                check(record)
            except ValidationError as exc:
                raise ValidationError(f"{label} row {row_number} is invalid: {exc}") from exc
        records.append(record)
    logger.debug("Normalized %s %s row(s)", len(records), label.lower())
    return records


def _reservation_check(settings: Settings) -> Callable[[ReservationRecord], None]:
    grid = TimeGrid.from_settings(settings)

    def check(record: ReservationRecord) -> None:
        record.time_start, record.time_end = grid.validate_interval(
            record.time_start, record.time_end
        )
        if record.date < settings.schedule_start_date:
            raise ValidationError(
                f"Date {record.date.isoformat()} is before the schedule start "
                f"{settings.schedule_start_date.isoformat()}"
            )
        if not 1 <= record.court <= settings.total_courts:
            raise ValidationError(f"Court {record.court} is outside 1-{settings.total_courts}")

    return check


def _closure_check(settings: Settings) -> Callable[[ClosureRecord], None]:
    grid = TimeGrid.from_settings(settings)

    def check(record: ClosureRecord) -> None:
        if (record.time_start is None) != (record.time_end is None):
            raise ValidationError("Provide both start and end times, or neither")
        if record.time_start is not None and record.time_end is not None:
            record.time_start, record.time_end = grid.validate_interval(
                record.time_start, record.time_end
            )

    return check


def normalize_reservation_rows(
    rows: Iterable[Mapping[str, Any]], *, settings: Settings | None = None
) -> list[ReservationRecord]:
    """Strict records whose times sit on the grid and whose slot is bookable."""

    check = _reservation_check(settings or get_settings())
    return _normalize_rows(ReservationRecord, rows, "Reservation", check)


def normalize_closure_rows(
    rows: Iterable[Mapping[str, Any]], *, settings: Settings | None = None
) -> list[ClosureRecord]:
    check = _closure_check(settings or get_settings())
    return _normalize_rows(ClosureRecord, rows, "Closure", check)


def normalize_court_rows(rows: Iterable[Mapping[str, Any]]) -> list[CourtRecord]:
    return _normalize_rows(CourtRecord, rows, "Court")


def normalize_team_rows(rows: Iterable[Mapping[str, Any]]) -> list[TeamRecord]:
    return _normalize_rows(TeamRecord, rows, "Team")


def normalize_contractor_rows(rows: Iterable[Mapping[str, Any]]) -> list[ContractorRecord]:
    return _normalize_rows(ContractorRecord, rows, "Contractor")


def normalize_tournament_rows(rows: Iterable[Mapping[str, Any]]) -> list[TournamentRecord]:
    return _normalize_rows(TournamentRecord, rows, "Tournament")


def reservation_from_record(record: ReservationRecord) -> Reservation:
    return Reservation(**record.model_dump(exclude_none=True))


def _closure_uuid(value: str | None) -> uuid.UUID:
    if not value:
        return uuid.uuid4()
    try:
        return uuid.UUID(value)
    except ValueError:
        # Sheet ids such as "CL-0042" map to a stable UUID.
        return uuid.uuid5(_SHEET_CLOSURE_NAMESPACE, value)


def closure_from_record(record: ClosureRecord) -> CourtClosure:
    data = record.model_dump(exclude={"closure_id"})
    return CourtClosure(closure_id=_closure_uuid(record.closure_id), **data)
