"""Translation of scheduling errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from court_scheduler.core.errors import (
    ConflictError,
    LifecycleError,
    SchedulingError,
)


def conflict_detail(exc: ConflictError) -> dict[str, object]:
    """Body shared by pre-flight and write-time conflicts."""

    return {
        "message": str(exc),
        "stale": exc.stale,
        "conflicts": [conflict.to_dict() for conflict in exc.conflicts],
    }


def http_error(exc: SchedulingError) -> HTTPException:
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=conflict_detail(exc))
    if isinstance(exc, LifecycleError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
