"""Court reference data."""
from __future__ import annotations

import enum

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from court_scheduler.db.base import Base
from court_scheduler.models.mixins import TimestampMixin


class CourtStatus(str, enum.Enum):
    """Operational status shown to staff; closures remain authoritative."""

    OPEN = "open"
    CLOSED = "closed"
    MAINTENANCE = "maintenance"


class Court(TimestampMixin, Base):
    """A physical court."""

    __tablename__ = "courts"

    court_number: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    court_name: Mapped[str] = mapped_column(String(64), nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[CourtStatus] = mapped_column(
        Enum(
            CourtStatus,
            name="courtstatus",
            values_callable=lambda enum_cls: [item.value for item in enum_cls],
        ),
        nullable=False,
        default=CourtStatus.OPEN,
    )
