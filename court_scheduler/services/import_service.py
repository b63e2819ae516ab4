"""Load normalized spreadsheet exports into the database.

Rows are upserted by their natural keys: court number, entity id, closure id,
and ``(booking_id, date, status)`` for reservations. Historical cancelled
rows share booking codes with the active row that replaced them, so the
status is part of the reservation key.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from court_scheduler.core.errors import ValidationError
from court_scheduler.models.closure import CourtClosure
from court_scheduler.models.court import Court
from court_scheduler.models.partner import Contractor, Team, Tournament
from court_scheduler.models.reservation import Reservation
from court_scheduler.services import record_normalizer

logger = logging.getLogger(__name__)

Rows = Iterable[Mapping[str, Any]]


@dataclass(slots=True)
class ImportStats:
    name: str
    processed: int = 0
    created: int = 0
    updated: int = 0

    def create(self) -> None:
        self.processed += 1
        self.created += 1

    def update(self) -> None:
        self.processed += 1
        self.updated += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "processed": self.processed,
            "created": self.created,
            "updated": self.updated,
        }


def _apply(target: Any, values: Mapping[str, Any]) -> None:
    for key, value in values.items():
        setattr(target, key, value)


async def _upsert(
    session: AsyncSession,
    model: type[Any],
    key: Any,
    values: Mapping[str, Any],
    stats: ImportStats,
) -> None:
    existing = await session.get(model, key)
    if existing is None:
        session.add(model(**values))
        stats.create()
    else:
        _apply(existing, values)
        stats.update()


async def import_courts(session: AsyncSession, rows: Rows) -> ImportStats:
    stats = ImportStats("courts")
    for record in record_normalizer.normalize_court_rows(rows):
        await _upsert(session, Court, record.court_number, record.model_dump(), stats)
    return stats


async def import_teams(session: AsyncSession, rows: Rows) -> ImportStats:
    stats = ImportStats("teams")
    for record in record_normalizer.normalize_team_rows(rows):
        await _upsert(session, Team, record.team_id, record.model_dump(), stats)
    return stats


async def import_contractors(session: AsyncSession, rows: Rows) -> ImportStats:
    stats = ImportStats("contractors")
    for record in record_normalizer.normalize_contractor_rows(rows):
        await _upsert(session, Contractor, record.contractor_id, record.model_dump(), stats)
    return stats


async def import_tournaments(session: AsyncSession, rows: Rows) -> ImportStats:
    stats = ImportStats("tournaments")
    for record in record_normalizer.normalize_tournament_rows(rows):
        values = record.model_dump()
        values["default_courts"] = ",".join(str(court) for court in record.default_courts) or None
        await _upsert(session, Tournament, record.tournament_id, values, stats)
    return stats


async def import_closures(session: AsyncSession, rows: Rows) -> ImportStats:
    stats = ImportStats("closures")
    for record in record_normalizer.normalize_closure_rows(rows):
        closure = record_normalizer.closure_from_record(record)
        existing = await session.get(CourtClosure, closure.closure_id)
        if existing is None:
            session.add(closure)
            stats.create()
        else:
            _apply(existing, record.model_dump(exclude={"closure_id"}))
            stats.update()
    return stats


async def import_reservations(session: AsyncSession, rows: Rows) -> ImportStats:
    stats = ImportStats("reservations")
    for record in record_normalizer.normalize_reservation_rows(rows):
        result = await session.execute(
            select(Reservation).where(
                Reservation.booking_id == record.booking_id,
                Reservation.date == record.date,
                Reservation.status == record.status,
            )
        )
        existing = result.scalars().first()
        if existing is None:
            session.add(record_normalizer.reservation_from_record(record))
            stats.create()
        else:
            _apply(existing, record.model_dump(exclude_none=True))
            stats.update()
    return stats


async def import_sheets(
    session: AsyncSession,
    *,
    courts: Rows = (),
    teams: Rows = (),
    contractors: Rows = (),
    tournaments: Rows = (),
    closures: Rows = (),
    reservations: Rows = (),
    dry_run: bool = False,
) -> list[ImportStats]:
    """Import every sheet in one transaction; any invalid row aborts the lot."""

    steps = (
        (import_courts, courts),
        (import_teams, teams),
        (import_contractors, contractors),
        (import_tournaments, tournaments),
        (import_closures, closures),
        (import_reservations, reservations),
    )
    results: list[ImportStats] = []
    try:
        for step, rows in steps:
            stats = await step(session, rows)
            await session.flush()
            results.append(stats)
    except (ValidationError, IntegrityError) as exc:
        await session.rollback()
        logger.warning("Sheet import aborted: %s", exc)
        raise

    if dry_run:
        await session.rollback()
    else:
        await session.commit()
    for stats in results:
        logger.info(
            "%s: processed=%s created=%s updated=%s%s",
            stats.name,
            stats.processed,
            stats.created,
            stats.updated,
            " (dry run)" if dry_run else "",
        )
    return results
