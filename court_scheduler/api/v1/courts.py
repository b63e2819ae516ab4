"""Court listing API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from court_scheduler.api import deps
from court_scheduler.schemas.court import CourtRead
from court_scheduler.services import court_service

router = APIRouter()


@router.get("", response_model=list[CourtRead], summary="List courts")
async def list_courts(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[CourtRead]:
    courts = await court_service.list_courts(session)
    return [CourtRead.model_validate(court) for court in courts]
