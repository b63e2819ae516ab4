"""Tests for engine configuration."""

from __future__ import annotations

from court_scheduler.core.config import Settings
from court_scheduler.db.session import engine_options


def test_sqlite_engine_waits_on_busy_database() -> None:
    options = engine_options(
        "sqlite+aiosqlite:///./courts.db", Settings(SQLITE_BUSY_TIMEOUT=5)
    )
    assert options["connect_args"] == {"timeout": 5.0}
    assert "pool_size" not in options
    assert options["echo"] is False


def test_server_engine_gets_pre_pinged_pool() -> None:
    options = engine_options(
        "postgresql+asyncpg://scheduler@localhost/courts",
        Settings(DATABASE_POOL_SIZE=10, DATABASE_ECHO=True),
    )
    assert options["pool_pre_ping"] is True
    assert options["pool_size"] == 10
    assert options["echo"] is True
    assert "connect_args" not in options
