"""Reservation models."""
from __future__ import annotations

import datetime as dt
import enum
import uuid
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Enum, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from court_scheduler.db.base import Base
from court_scheduler.models.mixins import TimestampMixin


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [item.value for item in enum_cls]


class ReservationType(str, enum.Enum):
    """Booking categories; the set is closed."""

    OPEN = "open"
    CONTRACTOR = "contractor"
    TEAM_USTA = "team_usta"
    TEAM_HS = "team_hs"
    TEAM_COLLEGE = "team_college"
    TEAM_OTHER = "team_other"
    TOURNAMENT = "tournament"
    MAINTENANCE = "maintenance"
    HOLD = "hold"


class ReservationStatus(str, enum.Enum):
    """Lifecycle states for reservations."""

    ACTIVE = "active"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"
    COMPLETED = "completed"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    WAIVED = "waived"
    INVOICED = "invoiced"
    REFUNDED = "refunded"
    NA = "na"


class PaymentMethod(str, enum.Enum):
    POS = "pos"
    CASH = "cash"
    CHECK = "check"
    INVOICE = "invoice"
    CARD = "card"
    NA = "na"


class CancelReason(str, enum.Enum):
    """Why a reservation was cancelled."""

    CUSTOMER = "customer"
    WEATHER = "weather"
    FACILITY = "facility"
    NO_SHOW = "no_show"
    OTHER = "other"


class RefundStatus(str, enum.Enum):
    NONE = "none"
    PARTIAL = "partial"
    FULL = "full"
    CREDIT = "credit"
    NA = "na"


class Reservation(TimestampMixin, Base):
    """A booked slot on one court for one date."""

    __tablename__ = "reservations"
    __table_args__ = (Index("ix_reservations_date_court", "date", "court"),)

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    booking_id: Mapped[str] = mapped_column(String(9), nullable=False, index=True)
    group_id: Mapped[str | None] = mapped_column(String(16), index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    court: Mapped[int] = mapped_column(Integer, nullable=False)
    time_start: Mapped[str] = mapped_column(String(5), nullable=False)
    time_end: Mapped[str] = mapped_column(String(5), nullable=False)
    booking_type: Mapped[ReservationType] = mapped_column(
        Enum(ReservationType, name="reservationtype", values_callable=_enum_values),
        nullable=False,
    )
    entity_id: Mapped[str | None] = mapped_column(String(64))
    customer_name: Mapped[str | None] = mapped_column(String(255))
    customer_phone: Mapped[str | None] = mapped_column(String(32))

    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="paymentstatus", values_callable=_enum_values),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    payment_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), default=Decimal("0.00"), nullable=False
    )
    payment_method: Mapped[PaymentMethod | None] = mapped_column(
        Enum(PaymentMethod, name="paymentmethod", values_callable=_enum_values)
    )
    notes: Mapped[str | None] = mapped_column(String(1024))
    participant_count: Mapped[int | None] = mapped_column(Integer)
    is_youth: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    status: Mapped[ReservationStatus] = mapped_column(
        Enum(ReservationStatus, name="reservationstatus", values_callable=_enum_values),
        default=ReservationStatus.ACTIVE,
        nullable=False,
    )
    created_by: Mapped[str | None] = mapped_column(String(64))

    checked_in: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    checked_in_by: Mapped[str | None] = mapped_column(String(64))
    checked_in_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True))

    cancel_reason: Mapped[CancelReason | None] = mapped_column(
        Enum(CancelReason, name="cancelreason", values_callable=_enum_values)
    )
    cancelled_by: Mapped[str | None] = mapped_column(String(64))
    cancelled_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True))
    refund_status: Mapped[RefundStatus | None] = mapped_column(
        Enum(RefundStatus, name="refundstatus", values_callable=_enum_values)
    )
    refund_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    refund_note: Mapped[str | None] = mapped_column(String(1024))
