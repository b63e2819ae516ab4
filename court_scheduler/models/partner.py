"""Teams, contractors and tournaments that reservations link to."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import Date, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from court_scheduler.db.base import Base
from court_scheduler.models.mixins import TimestampMixin


class Team(TimestampMixin, Base):
    """League or school team renting courts at a per-hour rate."""

    __tablename__ = "teams"

    team_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    team_name: Mapped[str] = mapped_column(String(255), nullable=False)
    team_type: Mapped[str] = mapped_column(String(32), nullable=False)
    court_rate: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    contact_name: Mapped[str | None] = mapped_column(String(255))
    contact_phone: Mapped[str | None] = mapped_column(String(32))
    season_start: Mapped[dt.date | None] = mapped_column(Date)
    season_end: Mapped[dt.date | None] = mapped_column(Date)

    @property
    def entity_id(self) -> str:
        return self.team_id

    @property
    def display_name(self) -> str:
        return self.team_name


class Contractor(TimestampMixin, Base):
    """Teaching professional renting courts for lessons."""

    __tablename__ = "contractors"

    contractor_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32))
    court_rate: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )

    @property
    def entity_id(self) -> str:
        return self.contractor_id

    @property
    def display_name(self) -> str:
        return self.name


class Tournament(TimestampMixin, Base):
    """Multi-day event occupying a set of courts."""

    __tablename__ = "tournaments"

    tournament_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[dt.date | None] = mapped_column(Date)
    end_date: Mapped[dt.date | None] = mapped_column(Date)
    default_courts: Mapped[str | None] = mapped_column(String(128))
    court_rate: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )

    @property
    def entity_id(self) -> str:
        return self.tournament_id

    @property
    def display_name(self) -> str:
        return self.name

    def default_court_numbers(self) -> list[int]:
        if not self.default_courts:
            return []
        return [
            int(part.strip())
            for part in self.default_courts.split(",")
            if part.strip().isdigit()
        ]
