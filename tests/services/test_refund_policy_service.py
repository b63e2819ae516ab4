"""Tests for refund suggestions."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from court_scheduler.core.errors import ValidationError
from court_scheduler.models import CancelReason, RefundStatus
from court_scheduler.services import refund_policy_service
from court_scheduler.services.refund_policy_service import RefundSuggestion

CENTRAL = ZoneInfo("America/Chicago")
DAY = date(2024, 6, 12)
START = datetime(2024, 6, 12, 18, 0, tzinfo=CENTRAL)


def _suggest(reason, before: timedelta, settings) -> RefundSuggestion:
    return refund_policy_service.suggest_refund(
        reason, DAY, "18:00", now=START - before, settings=settings
    )


@pytest.mark.parametrize("reason", [CancelReason.FACILITY, CancelReason.WEATHER])
def test_facility_and_weather_get_full_refund(settings, reason: CancelReason) -> None:
    suggestion = _suggest(reason, timedelta(minutes=-30), settings)
    assert suggestion.suggested_refund is RefundStatus.FULL


def test_weather_explanation(settings) -> None:
    assert _suggest("weather", timedelta(hours=1), settings).explanation == (
        "Weather: full refund"
    )


def test_no_show_gets_nothing(settings) -> None:
    suggestion = _suggest(CancelReason.NO_SHOW, timedelta(days=3), settings)
    assert suggestion.suggested_refund is RefundStatus.NONE


def test_other_is_staff_discretion(settings) -> None:
    suggestion = _suggest(CancelReason.OTHER, timedelta(hours=3), settings)
    assert suggestion.suggested_refund is RefundStatus.PARTIAL
    assert suggestion.explanation == "Staff discretion"


@pytest.mark.parametrize(
    ("before", "expected"),
    [
        (timedelta(hours=24), RefundStatus.FULL),
        (timedelta(days=5), RefundStatus.FULL),
        (timedelta(hours=23, minutes=59), RefundStatus.PARTIAL),
        (timedelta(minutes=120), RefundStatus.PARTIAL),
        (timedelta(minutes=119), RefundStatus.NONE),
        (timedelta(0), RefundStatus.NONE),
        (timedelta(hours=-1), RefundStatus.NONE),
    ],
)
def test_customer_notice_windows(settings, before: timedelta, expected: RefundStatus) -> None:
    suggestion = _suggest(CancelReason.CUSTOMER, before, settings)
    assert suggestion.suggested_refund is expected


def test_notice_windows_follow_settings(settings) -> None:
    strict = settings.model_copy(update={"refund_full_notice_hours": 48})
    suggestion = _suggest(CancelReason.CUSTOMER, timedelta(hours=30), strict)
    assert suggestion.suggested_refund is RefundStatus.PARTIAL


def test_unknown_reason_is_rejected(settings) -> None:
    with pytest.raises(ValidationError):
        _suggest("rain-check", timedelta(hours=1), settings)


def test_suggested_amounts() -> None:
    full = RefundSuggestion(RefundStatus.FULL, "")
    none = RefundSuggestion(RefundStatus.NONE, "")
    partial = RefundSuggestion(RefundStatus.PARTIAL, "")
    assert refund_policy_service.suggested_refund_amount(full, Decimal("24")) == Decimal("24.00")
    assert refund_policy_service.suggested_refund_amount(none, Decimal("24")) == Decimal("0.00")
    assert refund_policy_service.suggested_refund_amount(partial, Decimal("24")) is None


def test_labels() -> None:
    assert refund_policy_service.cancel_reason_label("customer") == "Customer Request"
    assert refund_policy_service.refund_status_label(RefundStatus.CREDIT) == "Credit for Future"
    assert refund_policy_service.refund_status_label("mystery") == "mystery"
