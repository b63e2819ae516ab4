"""Refund suggestions for cancellations.

Suggestions are advisory. Nothing here mutates a reservation; staff may
override the suggestion when cancelling.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo

from court_scheduler.core.config import Settings, get_settings
from court_scheduler.core.errors import ValidationError
from court_scheduler.models.reservation import CancelReason, RefundStatus
from court_scheduler.services.time_grid import MINUTES_PER_HOUR, parse_time

MONEY_PLACES = Decimal("0.01")

CANCEL_REASON_LABELS: dict[CancelReason, str] = {
    CancelReason.CUSTOMER: "Customer Request",
    CancelReason.WEATHER: "Weather",
    CancelReason.FACILITY: "Facility Issue",
    CancelReason.NO_SHOW: "No-Show",
    CancelReason.OTHER: "Other",
}

REFUND_STATUS_LABELS: dict[RefundStatus, str] = {
    RefundStatus.NONE: "No Refund",
    RefundStatus.PARTIAL: "Partial Refund",
    RefundStatus.FULL: "Full Refund",
    RefundStatus.CREDIT: "Credit for Future",
    RefundStatus.NA: "N/A",
}


@dataclass(slots=True)
class RefundSuggestion:
    suggested_refund: RefundStatus
    explanation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "suggested_refund": self.suggested_refund.value,
            "explanation": self.explanation,
        }


def cancel_reason_label(reason: CancelReason | str) -> str:
    try:
        return CANCEL_REASON_LABELS[CancelReason(reason)]
    except ValueError:
        return str(reason)


def refund_status_label(status: RefundStatus | str) -> str:
    try:
        return REFUND_STATUS_LABELS[RefundStatus(status)]
    except ValueError:
        return str(status)


def _customer_suggestion(
    booking_date: date,
    time_start: str | time,
    now: datetime,
    settings: Settings,
) -> RefundSuggestion:
    hour, minute = divmod(parse_time(time_start), MINUTES_PER_HOUR)
    tz = ZoneInfo(settings.facility_timezone)
    start = datetime(
        booking_date.year, booking_date.month, booking_date.day, hour, minute, tzinfo=tz
    )
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    remaining = start - now

    if remaining <= timedelta(0):
        return RefundSuggestion(
            RefundStatus.NONE, "Cancelled after the reservation start time"
        )
    if remaining >= timedelta(hours=settings.refund_full_notice_hours):
        return RefundSuggestion(
            RefundStatus.FULL,
            f"Cancelled at least {settings.refund_full_notice_hours} hours in advance",
        )
    if remaining < timedelta(minutes=settings.refund_grace_minutes):
        return RefundSuggestion(
            RefundStatus.NONE,
            f"Cancelled less than {settings.refund_grace_minutes} minutes before start",
        )
    return RefundSuggestion(
        RefundStatus.PARTIAL,
        f"Cancelled with less than {settings.refund_full_notice_hours} hours notice",
    )


def suggest_refund(
    reason: CancelReason | str,
    booking_date: date,
    time_start: str | time,
    *,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> RefundSuggestion:
    """Suggest a refund disposition from the reason and the notice given."""

    settings = settings or get_settings()
    try:
        reason = CancelReason(reason)
    except ValueError as exc:
        raise ValidationError(f"Unknown cancel reason {reason!r}") from exc

    if reason in (CancelReason.FACILITY, CancelReason.WEATHER):
        return RefundSuggestion(
            RefundStatus.FULL, f"{cancel_reason_label(reason)}: full refund"
        )
    if reason is CancelReason.NO_SHOW:
        return RefundSuggestion(RefundStatus.NONE, "No-show: no refund")
    if reason is CancelReason.OTHER:
        return RefundSuggestion(RefundStatus.PARTIAL, "Staff discretion")

    now = now or datetime.now(ZoneInfo(settings.facility_timezone))
    return _customer_suggestion(booking_date, time_start, now, settings)


def suggested_refund_amount(
    suggestion: RefundSuggestion, payment_amount: Decimal | int | str | None
) -> Decimal | None:
    """Amount matching a suggestion; ``None`` when staff must decide."""

    amount = Decimal(payment_amount or 0).quantize(MONEY_PLACES)
    if suggestion.suggested_refund is RefundStatus.FULL:
        return amount
    if suggestion.suggested_refund in (RefundStatus.NONE, RefundStatus.NA):
        return Decimal("0.00")
    return None
