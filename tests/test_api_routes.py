"""Tests for the HTTP route layer."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from preflight.api.server import create_app
from preflight.config import Settings
from preflight.schemas.system import PingParams


@pytest.fixture
def app():
    return create_app(Settings(default_timezone="Asia/Tokyo"))


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_datetime_uses_configured_fallback_zone(client):
    response = await client.get("/api/v1/system/datetime")
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["error"] is None
    assert body["data"]["timezone"] == "Asia/Tokyo"
    assert body["meta"]["ts"].endswith("Z")
    assert body["meta"]["route"] == "system/datetime"


@pytest.mark.asyncio
async def test_datetime_with_query_zone(client):
    response = await client.get("/api/v1/system/datetime", params={"timezone": "UTC"})
    assert response.json()["data"]["timezone"] == "UTC"


@pytest.mark.asyncio
async def test_datetime_invalid_zone(client):
    response = await client.get("/api/v1/system/datetime", params={"timezone": "Not/AZone"})
    assert response.status_code == 400
    body = response.json()
    assert body == {
        "ok": False,
        "data": None,
        "meta": body["meta"],
        "error": "Invalid time zone specified: Not/AZone",
    }


@pytest.mark.asyncio
async def test_ping_route(client):
    response = await client.get("/api/v1/system/ping", params={"message": "hi"})
    assert response.status_code == 200
    assert response.json()["data"] == {"pong": True, "message": "hi"}


@pytest.mark.asyncio
async def test_route_calls_shared_service_function(client):
    fake = AsyncMock(return_value={"pong": True, "message": "x"})
    with patch("preflight.api.server.system_ping", fake):
        response = await client.get("/api/v1/system/ping", params={"message": "x"})
    assert response.json()["ok"] is True
    fake.assert_awaited_once_with(PingParams(message="x"))


@pytest.mark.asyncio
async def test_unexpected_service_error_is_enveloped(client):
    with patch("preflight.api.server.system_ping", AsyncMock(side_effect=RuntimeError("down"))):
        response = await client.get("/api/v1/system/ping")
    assert response.status_code == 500
    assert response.json()["error"] == "down"


@pytest.mark.asyncio
async def test_custom_api_prefix():
    app = create_app(Settings(api_prefix="/api/v2"))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        response = await c.get("/api/v2/system/ping")
    assert response.status_code == 200
