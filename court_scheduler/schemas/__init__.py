"""Schema exports."""

from court_scheduler.schemas.closure import ClosureCreate, ClosureRead
from court_scheduler.schemas.court import CourtRead
from court_scheduler.schemas.rates import (
    RateBreakdownRead,
    RateQuoteRequest,
    RateQuoteResponse,
)
from court_scheduler.schemas.records import (
    ClosureRecord,
    ContractorRecord,
    CourtRecord,
    ReservationRecord,
    TeamRecord,
    TournamentRecord,
)
from court_scheduler.schemas.reservation import (
    ConflictRead,
    LeagueMatchCreate,
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

__all__ = [
    "ClosureCreate",
    "ClosureRead",
    "ClosureRecord",
    "ConflictRead",
    "ContractorRecord",
    "CourtRead",
    "CourtRecord",
    "LeagueMatchCreate",
    "LeagueNightCreate",
    "RateBreakdownRead",
    "RateQuoteRequest",
    "RateQuoteResponse",
    "RefundSuggestionRead",
    "ReservationBatchCreate",
    "ReservationBatchResult",
    "ReservationCancelRequest",
    "ReservationCheckInRequest",
    "ReservationNoShowRequest",
    "ReservationRead",
    "ReservationRecord",
    "ReservationUpdate",
    "SkippedSlot",
    "TeamRecord",
    "TournamentRecord",
]
