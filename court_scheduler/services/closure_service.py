"""Court closure management."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from court_scheduler.core.config import Settings, get_settings
from court_scheduler.core.errors import ValidationError
from court_scheduler.models.closure import ALL_COURTS, CourtClosure
from court_scheduler.services.time_grid import TimeGrid

logger = logging.getLogger(__name__)


def _normalize_court(court: int | str | None, settings: Settings) -> str:
    if court is None:
        return ALL_COURTS
    text = str(court).strip().lower()
    if text == ALL_COURTS:
        return ALL_COURTS
    if not text.isdigit() or not 1 <= int(text) <= settings.total_courts:
        raise ValidationError(
            f"Closure court must be 'all' or 1-{settings.total_courts}, got {court!r}"
        )
    return str(int(text))


async def list_closures(
    session: AsyncSession,
    *,
    closure_date: date | None = None,
    include_inactive: bool = False,
) -> Sequence[CourtClosure]:
    stmt = select(CourtClosure).order_by(CourtClosure.date, CourtClosure.time_start)
    if closure_date is not None:
        stmt = stmt.where(CourtClosure.date == closure_date)
    if not include_inactive:
        stmt = stmt.where(CourtClosure.is_active.is_(True))
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_closure(session: AsyncSession, *, closure_id: uuid.UUID) -> CourtClosure | None:
    return await session.get(CourtClosure, closure_id)


async def create_closure(
    session: AsyncSession,
    *,
    closure_date: date,
    court: int | str | None = None,
    time_start: str | None = None,
    time_end: str | None = None,
    reason: str | None = None,
    settings: Settings | None = None,
) -> CourtClosure:
    """Record a blackout; omit both times to close the whole day."""

    settings = settings or get_settings()
    if (time_start is None) != (time_end is None):
        raise ValidationError("Provide both start and end times, or neither")
    if time_start is not None and time_end is not None:
        grid = TimeGrid.from_settings(settings)
        time_start, time_end = grid.validate_interval(time_start, time_end)

    closure = CourtClosure(
        date=closure_date,
        court=_normalize_court(court, settings),
        time_start=time_start,
        time_end=time_end,
        reason=reason,
        is_active=True,
    )
    session.add(closure)
    await session.commit()
    await session.refresh(closure)
    logger.info(
        "Closed court %s on %s %s-%s",
        closure.court,
        closure.date,
        closure.time_start or "open",
        closure.time_end or "close",
    )
    return closure


async def deactivate_closure(session: AsyncSession, *, closure: CourtClosure) -> CourtClosure:
    closure.is_active = False
    await session.commit()
    await session.refresh(closure)
    logger.info("Deactivated closure %s", closure.closure_id)
    return closure
