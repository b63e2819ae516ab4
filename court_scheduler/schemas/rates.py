"""Pydantic schemas for rate quotes."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from court_scheduler.models.reservation import PaymentStatus, ReservationType


class RateQuoteRequest(BaseModel):
    """Price a prospective booking; ``court_rate`` enables the metered total."""

    date: dt.date
    time_start: str
    time_end: str
    booking_type: ReservationType
    court_count: int = Field(default=1, ge=1)
    court_rate: Decimal | None = Field(default=None, ge=Decimal("0"))


class RateBreakdownRead(BaseModel):
    total_hours: Decimal
    prime_hours: Decimal
    non_prime_hours: Decimal
    prime_rate: Decimal
    non_prime_rate: Decimal
    court_count: int
    total: Decimal
    description: str


class RateQuoteResponse(BaseModel):
    is_prime_time: bool
    is_free: bool
    rate_description: str
    base_rate: Decimal
    total: Decimal
    default_payment_status: PaymentStatus
    hourly_total: Decimal | None = None
    breakdown: RateBreakdownRead
