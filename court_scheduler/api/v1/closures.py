"""Court closure API."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from court_scheduler.api import deps
from court_scheduler.api.errors import http_error
from court_scheduler.core.errors import SchedulingError
from court_scheduler.schemas.closure import ClosureCreate, ClosureRead
from court_scheduler.services import closure_service

router = APIRouter()


@router.get("", response_model=list[ClosureRead], summary="List closures")
async def list_closures(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    closure_date: Annotated[date | None, Query(alias="date")] = None,
    include_inactive: bool = False,
) -> list[ClosureRead]:
    closures = await closure_service.list_closures(
        session, closure_date=closure_date, include_inactive=include_inactive
    )
    return [ClosureRead.model_validate(obj) for obj in closures]


@router.post(
    "",
    response_model=ClosureRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create closure",
)
async def create_closure(
    payload: ClosureCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClosureRead:
    try:
        closure = await closure_service.create_closure(
            session,
            closure_date=payload.date,
            court=payload.court,
            time_start=payload.time_start,
            time_end=payload.time_end,
            reason=payload.reason,
        )
    except SchedulingError as exc:
        raise http_error(exc) from exc
    return ClosureRead.model_validate(closure)


@router.post(
    "/{closure_id}/deactivate",
    response_model=ClosureRead,
    summary="Deactivate closure",
)
async def deactivate_closure(
    closure_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClosureRead:
    closure = await closure_service.get_closure(session, closure_id=closure_id)
    if closure is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Closure not found"
        )
    closure = await closure_service.deactivate_closure(session, closure=closure)
    return ClosureRead.model_validate(closure)
