"""Expansion of booking requests into individual reservation drafts.

A request names one start time, a list of dates, a list of courts and an
optional weekly repeat count. ``plan_batch`` turns it into a provisional set
of priced drafts with booking ids; the persistence layer writes that set
atomically and has the final word on conflicts.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from court_scheduler.core.config import Settings, get_settings
from court_scheduler.core.errors import ConflictError, ValidationError
from court_scheduler.models.reservation import (
    PaymentMethod,
    PaymentStatus,
    ReservationType,
)
from court_scheduler.services import rate_service
from court_scheduler.services.booking_id_service import (
    generate_booking_id,
    generate_group_id,
)
from court_scheduler.services.conflict_service import (
    Conflict,
    ConflictCandidate,
    find_conflicts,
)
from court_scheduler.services.time_grid import MINUTES_PER_HOUR, TimeGrid

logger = logging.getLogger(__name__)

MAX_REPEAT_WEEKS = 52
TEAM_PARTICIPANT_COUNT = 4

TEAM_TYPES: frozenset[ReservationType] = frozenset(
    {
        ReservationType.TEAM_USTA,
        ReservationType.TEAM_HS,
        ReservationType.TEAM_COLLEGE,
        ReservationType.TEAM_OTHER,
    }
)

# Block length in hours by team type, as stored on team records.
_TEAM_BLOCK_HOURS: dict[str, Decimal] = {
    "high_school": Decimal("1.0"),
    "team_hs": Decimal("1.0"),
}
_DEFAULT_TEAM_BLOCK_HOURS = Decimal("1.5")


def team_block_hours(team_type: str | ReservationType | None) -> Decimal:
    key = getattr(team_type, "value", team_type) or ""
    return _TEAM_BLOCK_HOURS.get(str(key).strip().lower(), _DEFAULT_TEAM_BLOCK_HOURS)


@dataclass(slots=True)
class BatchRequest:
    """A single booking submission before expansion."""

    booking_type: ReservationType
    time_start: str
    dates: list[date] = field(default_factory=list)
    courts: list[int] = field(default_factory=list)
    time_end: str | None = None
    repeat_weeks: int = 1
    entity_id: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    payment_status: PaymentStatus | None = None
    payment_amount: Decimal | None = None
    payment_method: PaymentMethod | None = None
    notes: str | None = None
    participant_count: int | None = None
    is_youth: bool = False
    created_by: str | None = None


@dataclass(slots=True)
class ReservationDraft:
    """Provisional reservation produced by the expander."""

    date: date
    court: int
    time_start: str
    time_end: str
    booking_type: ReservationType
    booking_id: str | None = None
    group_id: str | None = None
    entity_id: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_amount: Decimal = Decimal("0.00")
    payment_method: PaymentMethod | None = None
    notes: str | None = None
    participant_count: int | None = None
    is_youth: bool = False
    created_by: str | None = None

    def to_candidate(self) -> ConflictCandidate:
        return ConflictCandidate(
            date=self.date,
            court=self.court,
            time_start=self.time_start,
            time_end=self.time_end,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "booking_id": self.booking_id,
            "group_id": self.group_id,
            "date": self.date.isoformat(),
            "court": self.court,
            "time_start": self.time_start,
            "time_end": self.time_end,
            "booking_type": self.booking_type.value,
            "entity_id": self.entity_id,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "payment_status": self.payment_status.value,
            "payment_amount": f"{self.payment_amount:.2f}",
            "payment_method": self.payment_method.value if self.payment_method else None,
            "notes": self.notes,
            "participant_count": self.participant_count,
            "is_youth": self.is_youth,
            "created_by": self.created_by,
        }


@dataclass(slots=True)
class BatchPlan:
    drafts: list[ReservationDraft]
    conflicts: list[Conflict]
    skipped: list[ReservationDraft]


def validate_request(
    request: BatchRequest,
    *,
    grid: TimeGrid,
    settings: Settings,
) -> None:
    if not request.dates:
        raise ValidationError("At least one date is required")
    if not request.courts:
        raise ValidationError("At least one court is required")
    for court in request.courts:
        if not 1 <= court <= settings.total_courts:
            raise ValidationError(
                f"Court {court} is outside 1-{settings.total_courts}"
            )
    for booking_date in request.dates:
        if booking_date < settings.schedule_start_date:
            raise ValidationError(
                f"Date {booking_date.isoformat()} is before the schedule start "
                f"{settings.schedule_start_date.isoformat()}"
            )
    if not 1 <= request.repeat_weeks <= MAX_REPEAT_WEEKS:
        raise ValidationError(f"repeat_weeks must be between 1 and {MAX_REPEAT_WEEKS}")
    if request.booking_type is ReservationType.OPEN and not (request.customer_name or "").strip():
        raise ValidationError("Customer name is required for open play bookings")
    grid.to_minutes(request.time_start)
    if request.time_end is not None:
        grid.validate_interval(request.time_start, request.time_end)


def resolve_end_time(
    request: BatchRequest,
    *,
    grid: TimeGrid,
    entity: Any | None = None,
) -> str:
    """Explicit end, else the team block length, else the grid default."""

    if request.time_end is not None:
        return grid.normalize(request.time_end)
    if request.booking_type in TEAM_TYPES:
        team_type = getattr(entity, "team_type", None) or request.booking_type
        hours = team_block_hours(team_type)
        return grid.default_end_time(request.time_start, int(hours * MINUTES_PER_HOUR))
    return grid.default_end_time(request.time_start)


def _entity_dates(request: BatchRequest, entity: Any | None) -> list[date]:
    if request.dates or entity is None:
        return list(request.dates)
    start = getattr(entity, "start_date", None)
    end = getattr(entity, "end_date", None) or start
    if start is None:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def _entity_courts(request: BatchRequest, entity: Any | None) -> list[int]:
    if request.courts or entity is None:
        return list(request.courts)
    default_courts = getattr(entity, "default_court_numbers", None)
    return list(default_courts()) if default_courts else []


def requested_dates(request: BatchRequest, entity: Any | None = None) -> list[date]:
    """Every date a request touches, weekly repeats included."""

    weeks = max(request.repeat_weeks, 1)
    return [
        booking_date + timedelta(weeks=week)
        for booking_date in _entity_dates(request, entity)
        for week in range(weeks)
    ]


def apply_entity_defaults(request: BatchRequest, entity: Any | None) -> BatchRequest:
    """Fill courts, dates and contact fields from a linked record."""

    if entity is None:
        return request
    request.dates = _entity_dates(request, entity)
    request.courts = _entity_courts(request, entity)
    request.entity_id = request.entity_id or getattr(entity, "entity_id", None)
    request.customer_name = request.customer_name or getattr(entity, "display_name", None)
    request.customer_phone = (
        request.customer_phone
        or getattr(entity, "contact_phone", None)
        or getattr(entity, "phone", None)
    )
    if request.booking_type in TEAM_TYPES:
        if request.participant_count is None:
            request.participant_count = TEAM_PARTICIPANT_COUNT
        if request.notes is None:
            request.notes = f"Team booking for {request.customer_name}"
    elif request.booking_type is ReservationType.TOURNAMENT and request.notes is None:
        request.notes = f"Tournament booking for {request.customer_name}"
    return request


def expand_request(
    request: BatchRequest,
    *,
    time_end: str | None = None,
    grid: TimeGrid | None = None,
    rng: random.Random | None = None,
) -> list[ReservationDraft]:
    """Every date, every weekly repeat of it, every court.

    Duplicate ``(date, court)`` pairs are kept so they surface as internal
    conflicts.
    """

    grid = grid or TimeGrid.from_settings()
    time_start = grid.normalize(request.time_start)
    end = time_end or request.time_end or grid.default_end_time(time_start)
    drafts = [
        ReservationDraft(
            date=booking_date + timedelta(weeks=week),
            court=court,
            time_start=time_start,
            time_end=grid.normalize(end),
            booking_type=request.booking_type,
            entity_id=request.entity_id,
            customer_name=request.customer_name,
            customer_phone=request.customer_phone,
            payment_method=request.payment_method,
            notes=request.notes,
            participant_count=request.participant_count,
            is_youth=request.is_youth,
            created_by=request.created_by,
        )
        for booking_date in request.dates
        for week in range(request.repeat_weeks)
        for court in request.courts
    ]
    if len(drafts) > 1:
        group_id = generate_group_id(drafts[0].date, rng=rng)
        for draft in drafts:
            draft.group_id = group_id
    return drafts


def price_draft(
    draft: ReservationDraft,
    request: BatchRequest,
    *,
    entity: Any | None = None,
    settings: Settings | None = None,
) -> ReservationDraft:
    settings = settings or get_settings()
    category = draft.booking_type
    metered = entity is not None and rate_service.is_metered(category)

    if request.payment_amount is not None:
        draft.payment_amount = rate_service.to_money(request.payment_amount)
    elif rate_service.is_free_booking(category):
        draft.payment_amount = rate_service.ZERO
    elif metered:
        draft.payment_amount = rate_service.hourly_total(
            draft.time_start, draft.time_end, entity.court_rate
        )
    else:
        draft.payment_amount = rate_service.base_rate(
            draft.date, draft.time_start, category, settings=settings
        )

    if request.payment_status is not None:
        draft.payment_status = request.payment_status
    elif metered:
        draft.payment_status = PaymentStatus.INVOICED
    else:
        draft.payment_status = rate_service.default_payment_status(category)

    if draft.payment_method is None and metered:
        draft.payment_method = PaymentMethod.INVOICE
    return draft


def plan_batch(
    request: BatchRequest,
    *,
    reservations: Iterable[Any],
    closures: Iterable[Any],
    entity: Any | None = None,
    force: bool = False,
    grid: TimeGrid | None = None,
    settings: Settings | None = None,
    rng: random.Random | None = None,
) -> BatchPlan:
    """Validate, expand, conflict-check, price and identify a request.

    Without ``force`` any conflict raises ``ConflictError``. With ``force``
    conflicting drafts are skipped and reported; they are never booked over.
    """

    settings = settings or get_settings()
    grid = grid or TimeGrid.from_settings(settings)
    request = apply_entity_defaults(request, entity)
    validate_request(request, grid=grid, settings=settings)
    time_end = resolve_end_time(request, grid=grid, entity=entity)
    grid.validate_interval(request.time_start, time_end)

    drafts = expand_request(request, time_end=time_end, grid=grid, rng=rng)
    conflicts = find_conflicts(
        [draft.to_candidate() for draft in drafts], reservations, closures, grid=grid
    )
    skipped: list[ReservationDraft] = []
    if conflicts:
        if not force:
            raise ConflictError(conflicts)
        blocked = {conflict.candidate_index for conflict in conflicts}
        skipped = [draft for index, draft in enumerate(drafts) if index in blocked]
        drafts = [draft for index, draft in enumerate(drafts) if index not in blocked]
        logger.info(
            "Skipping %s conflicting slot(s) of %s requested",
            len(skipped),
            len(skipped) + len(drafts),
        )
        if not drafts:
            raise ConflictError(conflicts, "Every requested slot conflicts")

    for draft in drafts:
        price_draft(draft, request, entity=entity, settings=settings)
        draft.booking_id = generate_booking_id(
            draft.date, draft.court, draft.time_start, grid=grid
        )
    return BatchPlan(drafts=drafts, conflicts=conflicts, skipped=skipped)
