"""Seed the facility's courts."""
from __future__ import annotations

import asyncio

from court_scheduler.core.config import get_settings
from court_scheduler.db.session import get_sessionmaker
from court_scheduler.services.court_service import ensure_default_courts


async def seed_courts() -> None:
    settings = get_settings()
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        created = await ensure_default_courts(session, settings=settings)
    print(f"Seeded {created} court(s).")


def main() -> None:
    asyncio.run(seed_courts())


if __name__ == "__main__":
    main()
