"""Court closures."""
from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import Boolean, Date, String
from sqlalchemy.orm import Mapped, mapped_column

from court_scheduler.db.base import Base
from court_scheduler.models.mixins import TimestampMixin

ALL_COURTS = "all"


class CourtClosure(TimestampMixin, Base):
    """Administrative blackout of one court, or all courts, on a date."""

    __tablename__ = "court_closures"

    closure_id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    court: Mapped[str] = mapped_column(String(8), nullable=False, default=ALL_COURTS)
    time_start: Mapped[str | None] = mapped_column(String(5))
    time_end: Mapped[str | None] = mapped_column(String(5))
    reason: Mapped[str | None] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def applies_to(self, court: int) -> bool:
        """Return whether the closure covers the given court number."""
        value = (self.court or ALL_COURTS).strip().lower()
        if value == ALL_COURTS:
            return True
        return value.isdigit() and int(value) == court
