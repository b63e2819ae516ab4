"""Test fixtures for the court scheduler."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from court_scheduler.core.config import Settings, get_settings
from court_scheduler.db.base import Base
from court_scheduler.db.session import dispose_engine, get_sessionmaker
from court_scheduler.main import app
from court_scheduler.models import Contractor, Team, Tournament
from court_scheduler.services import court_service
from court_scheduler.services.time_grid import TimeGrid


@pytest.fixture()
def settings() -> Settings:
    """Settings with the facility defaults, independent of the environment."""
    return Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///:memory:")


@pytest.fixture()
def grid(settings: Settings) -> TimeGrid:
    return TimeGrid.from_settings(settings)


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def app_context(
    reset_database: AsyncIterator[None], db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client with courts and rate entities seeded."""
    sessionmaker = get_sessionmaker(db_url)

    async with sessionmaker() as session:
        await court_service.ensure_default_courts(session)
        session.add_all(
            [
                Team(
                    team_id="T-USTA-1",
                    team_name="Little Rock Aces",
                    team_type="team_usta",
                    court_rate=Decimal("15.00"),
                    contact_phone="501-555-0100",
                ),
                Team(
                    team_id="T-HS-1",
                    team_name="Central High",
                    team_type="high_school",
                    court_rate=Decimal("0.00"),
                ),
                Contractor(
                    contractor_id="C-1",
                    name="Pat Pro",
                    phone="501-555-0199",
                    court_rate=Decimal("8.00"),
                ),
                Tournament(
                    tournament_id="TRN-1",
                    name="Fall Classic",
                    default_courts="1,2",
                    court_rate=Decimal("20.00"),
                ),
            ]
        )
        await session.commit()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield {"client": client, "db_url": db_url}
