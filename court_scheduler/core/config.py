"""Application configuration via pydantic settings."""

from datetime import date, time
from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from typing import Any

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "Rebsamen Tennis Center Court Scheduler"
    api_v1_prefix: str = "/api/v1"

    database_url: str = Field(
        "sqlite+aiosqlite:///./court_scheduler.db", alias="DATABASE_URL"
    )
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")
    database_echo: bool = Field(False, alias="DATABASE_ECHO")
    sqlite_busy_timeout: float = Field(30.0, alias="SQLITE_BUSY_TIMEOUT", gt=0)
    database_pool_size: int = Field(5, alias="DATABASE_POOL_SIZE", ge=1)

    facility_timezone: str = Field("America/Chicago", alias="FACILITY_TIMEZONE")

    # Time grid
    day_start: time = Field(time(8, 30), alias="DAY_START")
    day_end: time = Field(time(21, 0), alias="DAY_END")
    slot_minutes: int = Field(30, alias="SLOT_MINUTES", gt=0, le=60)
    default_duration_minutes: int = Field(90, alias="DEFAULT_DURATION_MINUTES", gt=0)
    schedule_start_date: date = Field(date(2024, 1, 1), alias="SCHEDULE_START_DATE")

    # Courts
    total_courts: int = Field(17, alias="TOTAL_COURTS", ge=1, le=99)
    stadium_court_number: int | None = Field(17, alias="STADIUM_COURT_NUMBER")

    # Rates
    prime_start: time = Field(time(17, 0), alias="PRIME_START")
    prime_rate: Decimal = Field(Decimal("12.00"), alias="PRIME_RATE", ge=Decimal("0"))
    non_prime_rate: Decimal = Field(
        Decimal("10.00"), alias="NON_PRIME_RATE", ge=Decimal("0")
    )
    league_block_rate: Decimal = Field(
        Decimal("12.00"), alias="LEAGUE_BLOCK_RATE", ge=Decimal("0")
    )

    # Cancellation policy
    refund_full_notice_hours: int = Field(24, alias="REFUND_FULL_NOTICE_HOURS", ge=0)
    refund_grace_minutes: int = Field(120, alias="REFUND_GRACE_MINUTES", ge=0)
    no_show_grace_minutes: int = Field(0, alias="NO_SHOW_GRACE_MINUTES", ge=0)

    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        alias="CORS_ALLOW_ORIGINS",
    )
    cors_allow_credentials: bool = Field(False, alias="CORS_ALLOW_CREDENTIALS")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[2] / ".env",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    def model_post_init(self, __context: Any) -> None:
        """Reject an operating window that cannot hold a single slot."""

        if self.day_start >= self.day_end:
            raise ValueError("DAY_START must be before DAY_END")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()
