"""Async engines and sessions for the reservation store."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from court_scheduler.core.config import Settings, get_settings

_engine_cache: dict[str, AsyncEngine] = {}
_sessionmaker_cache: dict[str, async_sessionmaker[AsyncSession]] = {}


def _resolve_database_url(override: str | None = None) -> str:
    return override or get_settings().database_url


def engine_options(url: str, settings: Settings | None = None) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` by backend.

    SQLite serializes writers, so concurrent desks wait on the busy timeout
    instead of failing with "database is locked". Server databases get a
    sized, pre-pinged pool.
    """

    settings = settings or get_settings()
    options: dict[str, Any] = {"echo": settings.database_echo}
    if make_url(url).get_backend_name() == "sqlite":
        options["connect_args"] = {"timeout": settings.sqlite_busy_timeout}
    else:
        options["pool_pre_ping"] = True
        options["pool_size"] = settings.database_pool_size
    return options


def get_engine(database_url: str | None = None) -> AsyncEngine:
    url = _resolve_database_url(database_url)
    engine = _engine_cache.get(url)
    if engine is None:
        engine = create_async_engine(url, **engine_options(url))
        _engine_cache[url] = engine
    return engine


def get_sessionmaker(
    database_url: str | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Return (and cache) a sessionmaker bound to the engine for ``database_url``."""
    url = _resolve_database_url(database_url)
    sessionmaker = _sessionmaker_cache.get(url)
    if sessionmaker is None:
        sessionmaker = async_sessionmaker(
            get_engine(url), expire_on_commit=False, class_=AsyncSession
        )
        _sessionmaker_cache[url] = sessionmaker
    return sessionmaker


async def get_session() -> AsyncIterator[AsyncSession]:
    async with get_sessionmaker()() as session:
        yield session


async def dispose_engine(database_url: str | None = None) -> None:
    """Dispose the cached engine and drop its sessionmaker."""
    url = _resolve_database_url(database_url)
    _sessionmaker_cache.pop(url, None)
    engine = _engine_cache.pop(url, None)
    if engine is not None:
        await engine.dispose()
