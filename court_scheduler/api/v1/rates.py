"""Rate quote API."""

from __future__ import annotations

from fastapi import APIRouter

from court_scheduler.api.errors import http_error
from court_scheduler.core.errors import SchedulingError
from court_scheduler.schemas.rates import (
    RateBreakdownRead,
    RateQuoteRequest,
    RateQuoteResponse,
)
from court_scheduler.services import rate_service

router = APIRouter()


@router.post("/quote", response_model=RateQuoteResponse, summary="Quote a booking")
async def quote(payload: RateQuoteRequest) -> RateQuoteResponse:
    try:
        breakdown = rate_service.rate_breakdown(
            payload.date,
            payload.time_start,
            payload.time_end,
            payload.booking_type,
            payload.court_count,
        )
        total = rate_service.total_rate(
            payload.date,
            payload.time_start,
            payload.time_end,
            payload.booking_type,
            payload.court_count,
        )
        hourly_total = None
        if payload.court_rate is not None:
            hourly_total = rate_service.hourly_total(
                payload.time_start,
                payload.time_end,
                payload.court_rate,
                payload.court_count,
            )
        return RateQuoteResponse(
            is_prime_time=rate_service.is_prime_time(payload.date, payload.time_start),
            is_free=rate_service.is_free_booking(payload.booking_type),
            rate_description=rate_service.rate_description(payload.date, payload.time_start),
            base_rate=rate_service.base_rate(
                payload.date, payload.time_start, payload.booking_type
            ),
            total=total,
            default_payment_status=rate_service.default_payment_status(payload.booking_type),
            hourly_total=hourly_total,
            breakdown=RateBreakdownRead(
                total_hours=breakdown.total_hours,
                prime_hours=breakdown.prime_hours,
                non_prime_hours=breakdown.non_prime_hours,
                prime_rate=breakdown.prime_rate,
                non_prime_rate=breakdown.non_prime_rate,
                court_count=breakdown.court_count,
                total=breakdown.total,
                description=breakdown.description,
            ),
        )
    except SchedulingError as exc:
        raise http_error(exc) from exc
