"""ORM models package export."""

from court_scheduler.models.closure import ALL_COURTS, CourtClosure
from court_scheduler.models.court import Court, CourtStatus
from court_scheduler.models.partner import Contractor, Team, Tournament
from court_scheduler.models.reservation import (
    CancelReason,
    PaymentMethod,
    PaymentStatus,
    RefundStatus,
    Reservation,
    ReservationStatus,
    ReservationType,
)

__all__ = [
    "ALL_COURTS",
    "CancelReason",
    "Contractor",
    "Court",
    "CourtClosure",
    "CourtStatus",
    "PaymentMethod",
    "PaymentStatus",
    "RefundStatus",
    "Reservation",
    "ReservationStatus",
    "ReservationType",
    "Team",
    "Tournament",
]
