"""Pydantic schemas for reservations."""
from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from court_scheduler.models.reservation import (
    CancelReason,
    PaymentMethod,
    PaymentStatus,
    RefundStatus,
    ReservationStatus,
    ReservationType,
)


class ReservationBatchCreate(BaseModel):
    """Payload for booking one or more slots in a single submission."""

    booking_type: ReservationType
    time_start: str
    time_end: str | None = None
    dates: list[dt.date] = Field(default_factory=list)
    courts: list[int] = Field(default_factory=list)
    repeat_weeks: int = 1
    entity_id: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    payment_status: PaymentStatus | None = None
    payment_amount: Decimal | None = Field(default=None, ge=Decimal("0"))
    payment_method: PaymentMethod | None = None
    notes: str | None = None
    participant_count: int | None = Field(default=None, ge=0)
    is_youth: bool = False
    created_by: str | None = None
    force: bool = False


class LeagueMatchCreate(BaseModel):
    court: int
    session: int = Field(default=0, ge=0)
    competitor1: str | None = None
    competitor2: str | None = None


class LeagueNightCreate(BaseModel):
    """Payload for a league night: session start times and per-court matches."""

    date: dt.date
    sessions: list[str] = Field(default_factory=lambda: ["18:00", "19:30"], min_length=1)
    matches: list[LeagueMatchCreate] = Field(min_length=1)
    entity_id: str | None = None
    created_by: str | None = None


class ReservationUpdate(BaseModel):
    """Mutable reservation fields."""

    date: dt.date | None = None
    court: int | None = None
    time_start: str | None = None
    time_end: str | None = None
    booking_type: ReservationType | None = None
    entity_id: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    payment_status: PaymentStatus | None = None
    payment_amount: Decimal | None = Field(default=None, ge=Decimal("0"))
    payment_method: PaymentMethod | None = None
    notes: str | None = None
    participant_count: int | None = Field(default=None, ge=0)
    is_youth: bool | None = None


class ReservationRead(BaseModel):
    """Serialized reservation representation."""

    id: uuid.UUID
    booking_id: str
    group_id: str | None = None
    date: dt.date
    court: int
    time_start: str
    time_end: str
    booking_type: ReservationType
    entity_id: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    payment_status: PaymentStatus
    payment_amount: Decimal
    payment_method: PaymentMethod | None = None
    notes: str | None = None
    participant_count: int | None = None
    is_youth: bool
    status: ReservationStatus
    effective_status: ReservationStatus | None = None
    created_by: str | None = None
    created_at: dt.datetime | None = None
    modified_at: dt.datetime | None = None
    checked_in: bool
    checked_in_by: str | None = None
    checked_in_at: dt.datetime | None = None
    cancel_reason: CancelReason | None = None
    cancelled_by: str | None = None
    cancelled_at: dt.datetime | None = None
    refund_status: RefundStatus | None = None
    refund_amount: Decimal | None = None
    refund_note: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ReservationCheckInRequest(BaseModel):
    """Payload for reservation check-in."""

    actor: str = Field(min_length=1)
    checked_in_at: dt.datetime | None = None


class ReservationCancelRequest(BaseModel):
    """Payload for cancelling; an omitted refund status takes the suggestion."""

    reason: CancelReason
    actor: str = Field(min_length=1)
    refund_status: RefundStatus | None = None
    refund_amount: Decimal | None = Field(default=None, ge=Decimal("0"))
    refund_note: str | None = None


class ReservationNoShowRequest(BaseModel):
    actor: str = Field(min_length=1)


class RefundSuggestionRead(BaseModel):
    suggested_refund: RefundStatus
    label: str
    explanation: str
    suggested_amount: Decimal | None = None


class ConflictRead(BaseModel):
    """One overlap reported for a requested slot."""

    kind: str
    date: dt.date
    court: int
    candidate_start: str
    candidate_end: str
    candidate_index: int
    time_start: str
    time_end: str
    overlap_start: str
    overlap_end: str
    label: str
    booking_id: str | None = None
    closure_id: str | None = None
    duplicate_of: int | None = None


class SkippedSlot(BaseModel):
    date: dt.date
    court: int
    time_start: str
    time_end: str


class ReservationBatchResult(BaseModel):
    """Authoritative result of a batch submission."""

    group_id: str | None = None
    created: list[ReservationRead] = Field(default_factory=list)
    skipped: list[SkippedSlot] = Field(default_factory=list)
    conflicts: list[ConflictRead] = Field(default_factory=list)
