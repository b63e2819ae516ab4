"""Court reference data."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from court_scheduler.core.config import Settings, get_settings
from court_scheduler.models.court import Court, CourtStatus

logger = logging.getLogger(__name__)

STADIUM_COURT_NAME = "Stadium"


def default_court_name(court_number: int, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    if court_number == settings.stadium_court_number:
        return STADIUM_COURT_NAME
    return f"Court {court_number}"


async def list_courts(session: AsyncSession) -> Sequence[Court]:
    result = await session.execute(select(Court).order_by(Court.display_order, Court.court_number))
    return result.scalars().all()


async def ensure_default_courts(
    session: AsyncSession, *, settings: Settings | None = None
) -> int:
    """Insert any of courts ``1..total_courts`` that are missing."""

    settings = settings or get_settings()
    existing = set((await session.execute(select(Court.court_number))).scalars().all())
    missing = [
        number for number in range(1, settings.total_courts + 1) if number not in existing
    ]
    for number in missing:
        session.add(
            Court(
                court_number=number,
                court_name=default_court_name(number, settings),
                display_order=number,
                status=CourtStatus.OPEN,
            )
        )
    if missing:
        await session.commit()
        logger.info("Seeded %s court(s)", len(missing))
    return len(missing)
