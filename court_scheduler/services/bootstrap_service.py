"""Bootstrap helpers for default data."""

from __future__ import annotations

from court_scheduler.core.config import get_settings
from court_scheduler.db.session import get_sessionmaker
from court_scheduler.services.court_service import ensure_default_courts


async def seed_default_courts() -> int:
    """Create the facility's courts if they do not yet exist."""

    settings = get_settings()
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        return await ensure_default_courts(session, settings=settings)
