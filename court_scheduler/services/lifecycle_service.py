"""Reservation lifecycle transitions.

``active`` is the only state with outgoing transitions. ``cancelled`` and
``no_show`` are terminal; ``completed`` is never written and is only derived
for reads once an active reservation's end has passed. Check-in is a flag on
an active reservation, not a state of its own.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo

from court_scheduler.core.config import Settings, get_settings
from court_scheduler.core.errors import (
    AlreadyCheckedIn,
    NotActive,
    NotYetElapsed,
    ValidationError,
)
from court_scheduler.models.reservation import (
    CancelReason,
    PaymentStatus,
    RefundStatus,
    ReservationStatus,
)
from court_scheduler.services.time_grid import MINUTES_PER_HOUR, parse_time

logger = logging.getLogger(__name__)

_ALLOWED_STATUS_TRANSITIONS: dict[ReservationStatus, set[ReservationStatus]] = {
    ReservationStatus.ACTIVE: {ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW},
    ReservationStatus.CANCELLED: set(),
    ReservationStatus.NO_SHOW: set(),
    ReservationStatus.COMPLETED: set(),
}

_REFUNDING_STATUSES = {RefundStatus.FULL, RefundStatus.PARTIAL, RefundStatus.CREDIT}
MONEY_PLACES = Decimal("0.01")


def facility_now(settings: Settings | None = None) -> datetime:
    """Current wall clock time at the facility."""

    settings = settings or get_settings()
    return datetime.now(ZoneInfo(settings.facility_timezone))


def _localize(value: datetime | None, settings: Settings) -> datetime:
    if value is None:
        return facility_now(settings)
    if value.tzinfo is None:
        return value.replace(tzinfo=ZoneInfo(settings.facility_timezone))
    return value


def _local_datetime(reservation: Any, value: str, settings: Settings) -> datetime:
    hour, minute = divmod(parse_time(value), MINUTES_PER_HOUR)
    return datetime(
        reservation.date.year,
        reservation.date.month,
        reservation.date.day,
        hour,
        minute,
        tzinfo=ZoneInfo(settings.facility_timezone),
    )


def reservation_start(reservation: Any, settings: Settings | None = None) -> datetime:
    settings = settings or get_settings()
    return _local_datetime(reservation, reservation.time_start, settings)


def reservation_end(reservation: Any, settings: Settings | None = None) -> datetime:
    settings = settings or get_settings()
    return _local_datetime(reservation, reservation.time_end, settings)


def _current_status(reservation: Any) -> ReservationStatus:
    return ReservationStatus(reservation.status)


def _ensure_transition(reservation: Any, target: ReservationStatus) -> None:
    current = _current_status(reservation)
    allowed = _ALLOWED_STATUS_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise NotActive(
            f"Reservation {reservation.booking_id} is {current.value}; "
            f"cannot move to {target.value}"
        )


def _ensure_active(reservation: Any) -> None:
    current = _current_status(reservation)
    if current is not ReservationStatus.ACTIVE:
        raise NotActive(f"Reservation {reservation.booking_id} is {current.value}")


def ensure_editable(reservation: Any) -> None:
    """Edits are accepted only while the reservation is active."""

    _ensure_active(reservation)


def effective_status(
    reservation: Any,
    now: datetime | None = None,
    *,
    settings: Settings | None = None,
) -> ReservationStatus:
    settings = settings or get_settings()
    current = _current_status(reservation)
    if current is ReservationStatus.ACTIVE:
        if _localize(now, settings) >= reservation_end(reservation, settings):
            return ReservationStatus.COMPLETED
    return current


def can_mark_no_show(
    reservation: Any,
    now: datetime | None = None,
    *,
    settings: Settings | None = None,
) -> bool:
    settings = settings or get_settings()
    if _current_status(reservation) is not ReservationStatus.ACTIVE:
        return False
    if reservation.checked_in:
        return False
    deadline = reservation_end(reservation, settings) + timedelta(
        minutes=settings.no_show_grace_minutes
    )
    return _localize(now, settings) >= deadline


def check_in(
    reservation: Any,
    *,
    actor: str,
    at: datetime | None = None,
    settings: Settings | None = None,
) -> Any:
    settings = settings or get_settings()
    _ensure_active(reservation)
    if reservation.checked_in:
        raise AlreadyCheckedIn(
            f"Reservation {reservation.booking_id} was already checked in"
            f" by {reservation.checked_in_by or 'staff'}"
        )
    reservation.checked_in = True
    reservation.checked_in_by = actor
    reservation.checked_in_at = _localize(at, settings)
    logger.info(
        "Reservation %s on %s checked in by %s",
        reservation.booking_id,
        reservation.date,
        actor,
    )
    return reservation


def cancel(
    reservation: Any,
    *,
    reason: CancelReason | str,
    actor: str,
    refund_status: RefundStatus | str = RefundStatus.NONE,
    refund_amount: Decimal | None = None,
    refund_note: str | None = None,
    at: datetime | None = None,
    settings: Settings | None = None,
) -> Any:
    settings = settings or get_settings()
    _ensure_transition(reservation, ReservationStatus.CANCELLED)
    try:
        reason = CancelReason(reason)
        refund_status = RefundStatus(refund_status)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    if refund_amount is not None:
        refund_amount = Decimal(refund_amount).quantize(MONEY_PLACES)
        if refund_amount < 0:
            raise ValidationError("Refund amount cannot be negative")
    elif refund_status is RefundStatus.FULL:
        refund_amount = Decimal(reservation.payment_amount or 0).quantize(MONEY_PLACES)

    reservation.status = ReservationStatus.CANCELLED
    reservation.cancel_reason = reason
    reservation.cancelled_by = actor
    reservation.cancelled_at = _localize(at, settings)
    reservation.refund_status = refund_status
    reservation.refund_amount = refund_amount
    reservation.refund_note = refund_note
    if (
        refund_status in _REFUNDING_STATUSES
        and reservation.payment_status == PaymentStatus.PAID
    ):
        reservation.payment_status = PaymentStatus.REFUNDED
    logger.info(
        "Reservation %s on %s cancelled by %s (reason=%s, refund=%s)",
        reservation.booking_id,
        reservation.date,
        actor,
        reason.value,
        refund_status.value,
    )
    return reservation


def mark_no_show(
    reservation: Any,
    *,
    actor: str,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> Any:
    settings = settings or get_settings()
    _ensure_transition(reservation, ReservationStatus.NO_SHOW)
    if reservation.checked_in:
        raise AlreadyCheckedIn(
            f"Reservation {reservation.booking_id} was checked in; it cannot be a no-show"
        )
    current = _localize(now, settings)
    if not can_mark_no_show(reservation, current, settings=settings):
        raise NotYetElapsed(
            f"Reservation {reservation.booking_id} ends at {reservation.time_end}; "
            "it cannot be marked as a no-show yet"
        )
    reservation.status = ReservationStatus.NO_SHOW
    reservation.cancel_reason = CancelReason.NO_SHOW
    reservation.cancelled_by = actor
    reservation.cancelled_at = current
    reservation.refund_status = RefundStatus.NONE
    logger.info(
        "Reservation %s on %s marked no-show by %s",
        reservation.booking_id,
        reservation.date,
        actor,
    )
    return reservation
