"""Service layer exports."""
from court_scheduler.services import (
    batch_service,
    booking_id_service,
    closure_service,
    conflict_service,
    court_service,
    import_service,
    league_service,
    lifecycle_service,
    rate_service,
    record_normalizer,
    refund_policy_service,
    reservation_service,
    time_grid,
)

__all__ = [
    "batch_service",
    "booking_id_service",
    "closure_service",
    "conflict_service",
    "court_service",
    "import_service",
    "league_service",
    "lifecycle_service",
    "rate_service",
    "record_normalizer",
    "refund_policy_service",
    "reservation_service",
    "time_grid",
]
