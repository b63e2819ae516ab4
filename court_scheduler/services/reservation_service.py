"""Reservation persistence and the authoritative write boundary."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from court_scheduler.core.config import Settings, get_settings
from court_scheduler.core.errors import ConflictError, StaleWriteConflict, ValidationError
from court_scheduler.models.closure import CourtClosure
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
from court_scheduler.services import league_service, lifecycle_service
from court_scheduler.services.batch_service import (
    TEAM_TYPES,
    BatchPlan,
    BatchRequest,
    ReservationDraft,
    plan_batch,
    requested_dates,
)
from court_scheduler.services.booking_id_service import generate_booking_id
from court_scheduler.services.conflict_service import (
    Conflict,
    ConflictCandidate,
    find_conflicts,
)
from court_scheduler.services.time_grid import TimeGrid

logger = logging.getLogger(__name__)

Entity = Team | Contractor | Tournament


@dataclass(slots=True)
class BatchResult:
    """Authoritative outcome of a batch write."""

    created: list[Reservation]
    skipped: list[ReservationDraft] = field(default_factory=list)
    conflicts: list[Conflict] = field(default_factory=list)


async def list_reservations(
    session: AsyncSession,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    court: int | None = None,
    status: ReservationStatus | None = None,
    skip: int = 0,
    limit: int = 500,
) -> Sequence[Reservation]:
    stmt = select(Reservation)
    if start_date is not None:
        stmt = stmt.where(Reservation.date >= start_date)
    if end_date is not None:
        stmt = stmt.where(Reservation.date <= end_date)
    if court is not None:
        stmt = stmt.where(Reservation.court == court)
    if status is not None:
        stmt = stmt.where(Reservation.status == status)
    stmt = (
        stmt.order_by(Reservation.date, Reservation.court, Reservation.time_start)
        .offset(skip)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_reservation(
    session: AsyncSession,
    *,
    booking_id: str,
    booking_date: date,
) -> Reservation | None:
    """Look up a booking code on a date; the active row wins over history."""

    stmt = select(Reservation).where(
        Reservation.booking_id == booking_id, Reservation.date == booking_date
    )
    result = await session.execute(stmt)
    rows = list(result.scalars().all())
    if not rows:
        return None
    active = [row for row in rows if row.status == ReservationStatus.ACTIVE]
    if active:
        return active[0]
    return max(rows, key=lambda row: row.created_at.timestamp() if row.created_at else 0.0)


async def load_snapshot(
    session: AsyncSession,
    *,
    dates: Iterable[date],
    lock: bool = False,
) -> tuple[list[Reservation], list[CourtClosure]]:
    """Active reservations and closures for the given dates."""

    wanted = sorted(set(dates))
    if not wanted:
        return [], []
    reservation_stmt = select(Reservation).where(
        Reservation.date.in_(wanted), Reservation.status == ReservationStatus.ACTIVE
    )
    closure_stmt = select(CourtClosure).where(
        CourtClosure.date.in_(wanted), CourtClosure.is_active.is_(True)
    )
    if lock:
        reservation_stmt = reservation_stmt.with_for_update()
        closure_stmt = closure_stmt.with_for_update()
    reservations = (await session.execute(reservation_stmt)).scalars().all()
    closures = (await session.execute(closure_stmt)).scalars().all()
    return list(reservations), list(closures)


async def load_entity(
    session: AsyncSession,
    *,
    booking_type: ReservationType,
    entity_id: str | None,
) -> Entity | None:
    if not entity_id:
        return None
    if booking_type in TEAM_TYPES:
        model: type[Entity] = Team
    elif booking_type is ReservationType.CONTRACTOR:
        model = Contractor
    elif booking_type is ReservationType.TOURNAMENT:
        model = Tournament
    else:
        return None
    entity = await session.get(model, entity_id)
    if entity is None:
        raise ValidationError(f"No {model.__name__.lower()} with id {entity_id!r}")
    return entity


async def plan_reservations(
    session: AsyncSession,
    request: BatchRequest,
    *,
    force: bool = False,
    settings: Settings | None = None,
) -> BatchPlan:
    """Pre-flight plan against the current store contents."""

    settings = settings or get_settings()
    entity = await load_entity(
        session, booking_type=request.booking_type, entity_id=request.entity_id
    )
    reservations, closures = await load_snapshot(
        session, dates=requested_dates(request, entity)
    )
    return plan_batch(
        request,
        reservations=reservations,
        closures=closures,
        entity=entity,
        force=force,
        settings=settings,
    )


def _reservation_from_draft(draft: ReservationDraft) -> Reservation:
    return Reservation(
        booking_id=draft.booking_id,
        group_id=draft.group_id,
        date=draft.date,
        court=draft.court,
        time_start=draft.time_start,
        time_end=draft.time_end,
        booking_type=draft.booking_type,
        entity_id=draft.entity_id,
        customer_name=draft.customer_name,
        customer_phone=draft.customer_phone,
        payment_status=draft.payment_status,
        payment_amount=draft.payment_amount,
        payment_method=draft.payment_method,
        notes=draft.notes,
        participant_count=draft.participant_count,
        is_youth=draft.is_youth,
        status=ReservationStatus.ACTIVE,
        created_by=draft.created_by,
        checked_in=False,
    )


async def write_batch(
    session: AsyncSession,
    drafts: Sequence[ReservationDraft],
    *,
    settings: Settings | None = None,
) -> list[Reservation]:
    """Re-check and insert a planned batch in one transaction.

    Raises ``StaleWriteConflict`` when the store changed since the plan was
    made; nothing from the batch is written in that case.
    """

    settings = settings or get_settings()
    if not drafts:
        raise ValidationError("Nothing to write")
    grid = TimeGrid.from_settings(settings)
    reservations, closures = await load_snapshot(
        session, dates=[draft.date for draft in drafts], lock=True
    )
    conflicts = find_conflicts(
        [draft.to_candidate() for draft in drafts], reservations, closures, grid=grid
    )
    if conflicts:
        await session.rollback()
        logger.warning(
            "Rejected batch of %s reservation(s): %s slot(s) taken since planning",
            len(drafts),
            len(conflicts),
        )
        raise StaleWriteConflict(conflicts)

    created = [_reservation_from_draft(draft) for draft in drafts]
    session.add_all(created)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise
    for reservation in created:
        await session.refresh(reservation)
    logger.info(
        "Created %s reservation(s) group=%s",
        len(created),
        created[0].group_id,
    )
    return created


async def create_batch(
    session: AsyncSession,
    request: BatchRequest,
    *,
    force: bool = False,
    settings: Settings | None = None,
) -> BatchResult:
    plan = await plan_reservations(session, request, force=force, settings=settings)
    created = await write_batch(session, plan.drafts, settings=settings)
    return BatchResult(created=created, skipped=plan.skipped, conflicts=plan.conflicts)


async def find_league_team(
    session: AsyncSession, *, team_id: str | None = None
) -> Team | None:
    """The named team, else the first team whose name mentions the league."""

    if team_id:
        team = await session.get(Team, team_id)
        if team is None:
            raise ValidationError(f"No team with id {team_id!r}")
        return team
    stmt = (
        select(Team)
        .where(Team.team_name.ilike(f"%{league_service.LEAGUE_NAME}%"))
        .order_by(Team.team_id)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def create_league_night(
    session: AsyncSession,
    request: league_service.LeagueRequest,
    *,
    settings: Settings | None = None,
) -> BatchResult:
    settings = settings or get_settings()
    team = await find_league_team(session, team_id=request.entity_id)
    reservations, closures = await load_snapshot(session, dates=[request.date])
    plan = league_service.plan_league_night(
        request,
        reservations=reservations,
        closures=closures,
        team=team,
        settings=settings,
    )
    created = await write_batch(session, plan.drafts, settings=settings)
    return BatchResult(created=created)


async def update_reservation(
    session: AsyncSession,
    *,
    reservation: Reservation,
    booking_date: date | None = None,
    court: int | None = None,
    time_start: str | None = None,
    time_end: str | None = None,
    booking_type: ReservationType | None = None,
    entity_id: str | None = None,
    customer_name: str | None = None,
    customer_phone: str | None = None,
    payment_status: PaymentStatus | None = None,
    payment_amount: Decimal | None = None,
    payment_method: PaymentMethod | None = None,
    notes: str | None = None,
    participant_count: int | None = None,
    is_youth: bool | None = None,
    settings: Settings | None = None,
) -> Reservation:
    """Apply an edit; moves are re-checked against the store."""

    settings = settings or get_settings()
    lifecycle_service.ensure_editable(reservation)
    grid = TimeGrid.from_settings(settings)

    new_date = booking_date or reservation.date
    new_court = court if court is not None else reservation.court
    new_start, new_end = grid.validate_interval(
        time_start or reservation.time_start, time_end or reservation.time_end
    )
    if new_date < settings.schedule_start_date:
        raise ValidationError(f"Date {new_date.isoformat()} is before the schedule start")
    if not 1 <= new_court <= settings.total_courts:
        raise ValidationError(f"Court {new_court} is outside 1-{settings.total_courts}")

    moved = (
        new_date != reservation.date
        or new_court != reservation.court
        or new_start != reservation.time_start
        or new_end != reservation.time_end
    )
    if moved:
        reservations, closures = await load_snapshot(session, dates=[new_date], lock=True)
        candidate = ConflictCandidate(
            date=new_date,
            court=new_court,
            time_start=new_start,
            time_end=new_end,
            exclude_id=reservation.id,
        )
        conflicts = find_conflicts([candidate], reservations, closures, grid=grid)
        if conflicts:
            await session.rollback()
            raise ConflictError(conflicts)

    identity_changed = (
        new_date != reservation.date
        or new_court != reservation.court
        or new_start != reservation.time_start
    )
    reservation.date = new_date
    reservation.court = new_court
    reservation.time_start = new_start
    reservation.time_end = new_end
    if identity_changed:
        reservation.booking_id = generate_booking_id(new_date, new_court, new_start, grid=grid)

    updates = {
        "booking_type": booking_type,
        "entity_id": entity_id,
        "customer_name": customer_name,
        "customer_phone": customer_phone,
        "payment_status": payment_status,
        "payment_amount": payment_amount,
        "payment_method": payment_method,
        "notes": notes,
        "participant_count": participant_count,
        "is_youth": is_youth,
    }
    for name, value in updates.items():
        if value is not None:
            setattr(reservation, name, value)

    await session.commit()
    await session.refresh(reservation)
    logger.info("Updated reservation %s on %s", reservation.booking_id, reservation.date)
    return reservation


async def check_in_reservation(
    session: AsyncSession,
    *,
    reservation: Reservation,
    actor: str,
    at: datetime | None = None,
) -> Reservation:
    lifecycle_service.check_in(reservation, actor=actor, at=at)
    await session.commit()
    await session.refresh(reservation)
    return reservation


async def cancel_reservation(
    session: AsyncSession,
    *,
    reservation: Reservation,
    reason: CancelReason,
    actor: str,
    refund_status: RefundStatus = RefundStatus.NONE,
    refund_amount: Decimal | None = None,
    refund_note: str | None = None,
) -> Reservation:
    lifecycle_service.cancel(
        reservation,
        reason=reason,
        actor=actor,
        refund_status=refund_status,
        refund_amount=refund_amount,
        refund_note=refund_note,
    )
    await session.commit()
    await session.refresh(reservation)
    return reservation


async def mark_no_show(
    session: AsyncSession,
    *,
    reservation: Reservation,
    actor: str,
    now: datetime | None = None,
) -> Reservation:
    lifecycle_service.mark_no_show(reservation, actor=actor, now=now)
    await session.commit()
    await session.refresh(reservation)
    return reservation
