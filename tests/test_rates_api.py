"""Rate quote API tests."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from court_scheduler.main import app

pytestmark = pytest.mark.asyncio


async def _quote(payload: dict[str, object]):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post("/api/v1/rates/quote", json=payload)


async def test_quote_spanning_prime_start() -> None:
    response = await _quote(
        {
            "date": "2024-06-12",
            "time_start": "15:30",
            "time_end": "18:00",
            "booking_type": "open",
            "court_count": 2,
            "court_rate": "15",
        }
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["is_prime_time"] is False
    assert body["is_free"] is False
    assert body["rate_description"] == "Non-Prime ($10.00)"
    assert body["base_rate"] == "10.00"
    assert body["total"] == "20.00"
    assert body["hourly_total"] == "75.00"
    assert body["default_payment_status"] == "pending"
    assert body["breakdown"]["total"] == "54.00"
    assert body["breakdown"]["description"] == "1.5hr @ $10 + 1hr @ $12 × 2 courts"


async def test_quote_for_waived_team() -> None:
    response = await _quote(
        {
            "date": "2024-06-15",
            "time_start": "09:00",
            "time_end": "10:00",
            "booking_type": "team_hs",
        }
    )
    body = response.json()
    assert body["is_free"] is True
    assert body["total"] == "0.00"
    assert body["default_payment_status"] == "waived"
    assert body["hourly_total"] is None


async def test_quote_rejects_reversed_interval() -> None:
    response = await _quote(
        {
            "date": "2024-06-12",
            "time_start": "18:00",
            "time_end": "17:00",
            "booking_type": "open",
        }
    )
    assert response.status_code == 400
