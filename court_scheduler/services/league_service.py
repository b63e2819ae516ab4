"""League nights: several sessions on one date, each with its own courts.

Every match is a fixed 1.5 hour block billed to the league team at a flat
per-block rate. The whole night is one group and is either written in full
or not at all.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
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
from court_scheduler.services.batch_service import (
    TEAM_PARTICIPANT_COUNT,
    BatchPlan,
    ReservationDraft,
)
from court_scheduler.services.booking_id_service import (
    generate_booking_id,
    generate_group_id,
)
from court_scheduler.services.conflict_service import find_conflicts
from court_scheduler.services.time_grid import TimeGrid, format_minutes

logger = logging.getLogger(__name__)

LEAGUE_NAME = "Monday Night League"
LEAGUE_ENTITY_ID = "MNL"
LEAGUE_BLOCK_MINUTES = 90
DEFAULT_SESSION_STARTS = ("18:00", "19:30")
UNKNOWN_COMPETITOR = "TBD"


@dataclass(slots=True)
class LeagueMatch:
    """One court in one session; ``session`` indexes ``LeagueRequest.sessions``."""

    court: int
    session: int = 0
    competitor1: str | None = None
    competitor2: str | None = None

    @property
    def has_competitors(self) -> bool:
        return bool((self.competitor1 or "").strip() or (self.competitor2 or "").strip())

    @property
    def title(self) -> str:
        first = (self.competitor1 or "").strip() or UNKNOWN_COMPETITOR
        second = (self.competitor2 or "").strip() or UNKNOWN_COMPETITOR
        return f"{first} vs {second}"


@dataclass(slots=True)
class LeagueRequest:
    date: date
    matches: list[LeagueMatch]
    sessions: list[str] = field(default_factory=lambda: list(DEFAULT_SESSION_STARTS))
    entity_id: str | None = None
    created_by: str | None = None


def block_rate(team: Any | None, settings: Settings | None = None) -> Decimal:
    """The team's court rate per block, else the configured league rate."""

    settings = settings or get_settings()
    rate = getattr(team, "court_rate", None)
    if rate:
        return rate_service.to_money(rate)
    return rate_service.to_money(settings.league_block_rate)


def session_window(time_start: str, *, grid: TimeGrid) -> tuple[str, str]:
    start = grid.to_minutes(time_start)
    return grid.validate_interval(
        format_minutes(start), format_minutes(start + LEAGUE_BLOCK_MINUTES)
    )


def _validate(request: LeagueRequest, *, settings: Settings) -> list[LeagueMatch]:
    if not request.sessions:
        raise ValidationError("At least one session is required")
    if request.date < settings.schedule_start_date:
        raise ValidationError(
            f"Date {request.date.isoformat()} is before the schedule start "
            f"{settings.schedule_start_date.isoformat()}"
        )
    for match in request.matches:
        if not 0 <= match.session < len(request.sessions):
            raise ValidationError(f"Match on court {match.court} names an unknown session")
        if not 1 <= match.court <= settings.total_courts:
            raise ValidationError(f"Court {match.court} is outside 1-{settings.total_courts}")
    played = [match for match in request.matches if match.has_competitors]
    if not played:
        raise ValidationError("Enter competitor names for at least one court")
    return played


def plan_league_night(
    request: LeagueRequest,
    *,
    reservations: Iterable[Any],
    closures: Iterable[Any],
    team: Any | None = None,
    grid: TimeGrid | None = None,
    settings: Settings | None = None,
    rng: random.Random | None = None,
) -> BatchPlan:
    """Drafts for every match with at least one competitor named.

    Matches without competitors are left off. Any conflict rejects the night.
    """

    settings = settings or get_settings()
    grid = grid or TimeGrid.from_settings(settings)
    played = _validate(request, settings=settings)
    windows = [session_window(start, grid=grid) for start in request.sessions]

    rate = block_rate(team, settings)
    entity_id = getattr(team, "team_id", None) or request.entity_id or LEAGUE_ENTITY_ID
    phone = getattr(team, "contact_phone", None)
    drafts = []
    for match in played:
        time_start, time_end = windows[match.session]
        drafts.append(
            ReservationDraft(
                date=request.date,
                court=match.court,
                time_start=time_start,
                time_end=time_end,
                booking_type=ReservationType.TEAM_OTHER,
                entity_id=entity_id,
                customer_name=match.title,
                customer_phone=phone,
                payment_status=PaymentStatus.INVOICED,
                payment_amount=rate,
                payment_method=PaymentMethod.INVOICE,
                notes=f"{LEAGUE_NAME} - {match.title}",
                participant_count=TEAM_PARTICIPANT_COUNT,
                created_by=request.created_by,
            )
        )

    conflicts = find_conflicts(
        [draft.to_candidate() for draft in drafts], reservations, closures, grid=grid
    )
    if conflicts:
        raise ConflictError(conflicts)

    group_id = generate_group_id(request.date, rng=rng)
    for draft in drafts:
        draft.group_id = group_id
        draft.booking_id = generate_booking_id(
            draft.date, draft.court, draft.time_start, grid=grid
        )
    logger.info(
        "Planned %s league match(es) across %s session(s) on %s",
        len(drafts),
        len({draft.time_start for draft in drafts}),
        request.date,
    )
    return BatchPlan(drafts=drafts, conflicts=[], skipped=[])
