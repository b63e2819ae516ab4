"""Health endpoint smoke test."""

import uuid

import pytest
from httpx import ASGITransport, AsyncClient

from court_scheduler.main import app


@pytest.mark.asyncio
async def test_healthcheck_returns_ok() -> None:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["service"] == "Rebsamen Tennis Center Court Scheduler"
    assert payload["facility_timezone"] == "America/Chicago"


@pytest.mark.asyncio
async def test_responses_carry_request_id() -> None:
    request_id = uuid.uuid4().hex
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health", headers={"X-Request-ID": request_id})
    assert response.headers["X-Request-ID"] == request_id
