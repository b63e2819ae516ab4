"""Court closure API tests."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.asyncio

DAY = "2030-06-13"


async def _book_court_two(client):
    return await client.post(
        "/api/v1/reservations",
        json={
            "booking_type": "open",
            "time_start": "13:00",
            "time_end": "14:00",
            "dates": [DAY],
            "courts": [2],
            "customer_name": "Jordan Lee",
        },
    )


async def test_partial_closure_blocks_then_releases(app_context: dict[str, object]) -> None:
    client = app_context["client"]

    created = await client.post(
        "/api/v1/closures",
        json={
            "date": DAY,
            "court": 2,
            "time_start": "12:00",
            "time_end": "14:00",
            "reason": "Junior clinic",
        },
    )
    assert created.status_code == 201, created.text
    closure = created.json()
    assert closure["court"] == "2"
    assert closure["is_active"] is True

    blocked = await _book_court_two(client)
    assert blocked.status_code == 409
    (conflict,) = blocked.json()["detail"]["conflicts"]
    assert conflict["kind"] == "closure"
    assert conflict["label"] == "Junior clinic"
    assert conflict["closure_id"] == closure["closure_id"]

    deactivated = await client.post(f"/api/v1/closures/{closure['closure_id']}/deactivate")
    assert deactivated.status_code == 200
    assert deactivated.json()["is_active"] is False

    assert (await _book_court_two(client)).status_code == 201


async def test_full_day_closure_covers_all_courts(app_context: dict[str, object]) -> None:
    client = app_context["client"]
    created = await client.post("/api/v1/closures", json={"date": DAY, "reason": "Ice"})
    assert created.status_code == 201
    assert created.json()["court"] == "all"
    assert created.json()["time_start"] is None

    blocked = await _book_court_two(client)
    assert blocked.status_code == 409

    listing = await client.get("/api/v1/closures", params={"date": DAY})
    assert [item["reason"] for item in listing.json()] == ["Ice"]


@pytest.mark.parametrize(
    "payload",
    [
        {"date": DAY, "time_start": "12:00"},
        {"date": DAY, "court": 18},
        {"date": DAY, "court": "north"},
        {"date": DAY, "time_start": "14:00", "time_end": "12:00"},
    ],
)
async def test_invalid_closures_return_400(
    app_context: dict[str, object], payload: dict[str, object]
) -> None:
    response = await app_context["client"].post("/api/v1/closures", json=payload)
    assert response.status_code == 400


async def test_deactivate_unknown_closure(app_context: dict[str, object]) -> None:
    response = await app_context["client"].post(
        "/api/v1/closures/00000000-0000-0000-0000-000000000000/deactivate"
    )
    assert response.status_code == 404
