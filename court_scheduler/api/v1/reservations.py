"""Reservation management API."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from court_scheduler.api import deps
from court_scheduler.api.errors import http_error
from court_scheduler.core.errors import SchedulingError
from court_scheduler.models.reservation import (
    CancelReason,
    Reservation,
    ReservationStatus,
)
from court_scheduler.schemas.reservation import (
    ConflictRead,
    LeagueNightCreate,
    RefundSuggestionRead,
    ReservationBatchCreate,
    ReservationBatchResult,
    ReservationCancelRequest,
    ReservationCheckInRequest,
    ReservationNoShowRequest,
    ReservationRead,
    ReservationUpdate,
    SkippedSlot,
)
from court_scheduler.services import (
    league_service,
    lifecycle_service,
    refund_policy_service,
    reservation_service,
)
from court_scheduler.services.batch_service import BatchRequest

router = APIRouter()


def _to_read(reservation: Reservation) -> ReservationRead:
    read = ReservationRead.model_validate(reservation)
    read.effective_status = lifecycle_service.effective_status(reservation)
    return read


def _to_batch_result(result: reservation_service.BatchResult) -> ReservationBatchResult:
    return ReservationBatchResult(
        group_id=result.created[0].group_id,
        created=[_to_read(obj) for obj in result.created],
        skipped=[
            SkippedSlot(
                date=draft.date,
                court=draft.court,
                time_start=draft.time_start,
                time_end=draft.time_end,
            )
            for draft in result.skipped
        ],
        conflicts=[ConflictRead(**conflict.to_dict()) for conflict in result.conflicts],
    )


async def _get_or_404(
    session: AsyncSession, booking_date: date, booking_id: str
) -> Reservation:
    reservation = await reservation_service.get_reservation(
        session, booking_id=booking_id, booking_date=booking_date
    )
    if reservation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found"
        )
    return reservation


@router.get("", response_model=list[ReservationRead], summary="List reservations")
async def list_reservations(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    start_date: date | None = None,
    end_date: date | None = None,
    court: int | None = None,
    reservation_status: Annotated[ReservationStatus | None, Query(alias="status")] = None,
    skip: int = 0,
    limit: int = 500,
) -> list[ReservationRead]:
    reservations = await reservation_service.list_reservations(
        session,
        start_date=start_date,
        end_date=end_date,
        court=court,
        status=reservation_status,
        skip=skip,
        limit=min(limit, 1000),
    )
    return [_to_read(obj) for obj in reservations]


@router.post(
    "",
    response_model=ReservationBatchResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create reservations",
)
async def create_reservations(
    payload: ReservationBatchCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationBatchResult:
    request = BatchRequest(**payload.model_dump(exclude={"force"}))
    try:
        result = await reservation_service.create_batch(
            session, request, force=payload.force
        )
    except SchedulingError as exc:
        raise http_error(exc) from exc
    return _to_batch_result(result)


@router.post(
    "/league-night",
    response_model=ReservationBatchResult,
    status_code=status.HTTP_201_CREATED,
    summary="Book a league night",
)
async def create_league_night(
    payload: LeagueNightCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationBatchResult:
    request = league_service.LeagueRequest(
        date=payload.date,
        sessions=list(payload.sessions),
        matches=[
            league_service.LeagueMatch(**match.model_dump()) for match in payload.matches
        ],
        entity_id=payload.entity_id,
        created_by=payload.created_by,
    )
    try:
        result = await reservation_service.create_league_night(session, request)
    except SchedulingError as exc:
        raise http_error(exc) from exc
    return _to_batch_result(result)


@router.get(
    "/{booking_date}/{booking_id}",
    response_model=ReservationRead,
    summary="Get reservation",
)
async def get_reservation(
    booking_date: date,
    booking_id: str,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    reservation = await _get_or_404(session, booking_date, booking_id)
    return _to_read(reservation)


@router.patch(
    "/{booking_date}/{booking_id}",
    response_model=ReservationRead,
    summary="Update reservation",
)
async def update_reservation(
    booking_date: date,
    booking_id: str,
    payload: ReservationUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    reservation = await _get_or_404(session, booking_date, booking_id)
    changes = payload.model_dump(exclude_unset=True)
    if "date" in changes:
        changes["booking_date"] = changes.pop("date")
    try:
        reservation = await reservation_service.update_reservation(
            session, reservation=reservation, **changes
        )
    except SchedulingError as exc:
        raise http_error(exc) from exc
    return _to_read(reservation)


@router.post(
    "/{booking_date}/{booking_id}/check-in",
    response_model=ReservationRead,
    summary="Check in reservation",
)
async def check_in_reservation(
    booking_date: date,
    booking_id: str,
    payload: ReservationCheckInRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    reservation = await _get_or_404(session, booking_date, booking_id)
    try:
        reservation = await reservation_service.check_in_reservation(
            session,
            reservation=reservation,
            actor=payload.actor,
            at=payload.checked_in_at,
        )
    except SchedulingError as exc:
        raise http_error(exc) from exc
    return _to_read(reservation)


@router.post(
    "/{booking_date}/{booking_id}/cancel",
    response_model=ReservationRead,
    summary="Cancel reservation",
)
async def cancel_reservation(
    booking_date: date,
    booking_id: str,
    payload: ReservationCancelRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    reservation = await _get_or_404(session, booking_date, booking_id)
    refund_status = payload.refund_status
    refund_amount = payload.refund_amount
    refund_note = payload.refund_note
    try:
        if refund_status is None:
            suggestion = refund_policy_service.suggest_refund(
                payload.reason, reservation.date, reservation.time_start
            )
            refund_status = suggestion.suggested_refund
            if refund_amount is None:
                refund_amount = refund_policy_service.suggested_refund_amount(
                    suggestion, reservation.payment_amount
                )
            refund_note = refund_note or suggestion.explanation
        reservation = await reservation_service.cancel_reservation(
            session,
            reservation=reservation,
            reason=payload.reason,
            actor=payload.actor,
            refund_status=refund_status,
            refund_amount=refund_amount,
            refund_note=refund_note,
        )
    except SchedulingError as exc:
        raise http_error(exc) from exc
    return _to_read(reservation)


@router.post(
    "/{booking_date}/{booking_id}/no-show",
    response_model=ReservationRead,
    summary="Mark reservation as no-show",
)
async def mark_no_show(
    booking_date: date,
    booking_id: str,
    payload: ReservationNoShowRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    reservation = await _get_or_404(session, booking_date, booking_id)
    try:
        reservation = await reservation_service.mark_no_show(
            session, reservation=reservation, actor=payload.actor
        )
    except SchedulingError as exc:
        raise http_error(exc) from exc
    return _to_read(reservation)


@router.get(
    "/{booking_date}/{booking_id}/refund-suggestion",
    response_model=RefundSuggestionRead,
    summary="Suggest a refund for a cancellation",
)
async def refund_suggestion(
    booking_date: date,
    booking_id: str,
    reason: CancelReason,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> RefundSuggestionRead:
    reservation = await _get_or_404(session, booking_date, booking_id)
    suggestion = refund_policy_service.suggest_refund(
        reason, reservation.date, reservation.time_start
    )
    return RefundSuggestionRead(
        suggested_refund=suggestion.suggested_refund,
        label=refund_policy_service.refund_status_label(suggestion.suggested_refund),
        explanation=suggestion.explanation,
        suggested_amount=refund_policy_service.suggested_refund_amount(
            suggestion, reservation.payment_amount
        ),
    )
