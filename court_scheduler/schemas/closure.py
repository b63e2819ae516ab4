"""Pydantic schemas for court closures."""
from __future__ import annotations

import datetime as dt
import uuid

from pydantic import BaseModel, ConfigDict, field_validator

from court_scheduler.models.closure import ALL_COURTS


class ClosureCreate(BaseModel):
    """Payload for closing one court, or all courts, on a date."""

    date: dt.date
    court: str = ALL_COURTS
    time_start: str | None = None
    time_end: str | None = None
    reason: str | None = None

    @field_validator("court", mode="before")
    @classmethod
    def _court_as_text(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class ClosureRead(BaseModel):
    closure_id: uuid.UUID
    date: dt.date
    court: str
    time_start: str | None = None
    time_end: str | None = None
    reason: str | None = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
