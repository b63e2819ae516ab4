"""Pydantic schemas for courts."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from court_scheduler.models.court import CourtStatus


class CourtRead(BaseModel):
    court_number: int
    court_name: str
    display_order: int
    status: CourtStatus

    model_config = ConfigDict(from_attributes=True)
