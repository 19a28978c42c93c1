"""Tests for health endpoints."""

from unittest.mock import patch

from httpx import ASGITransport, AsyncClient

from stockledger.api.main import app


async def _get(path: str):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        return await ac.get(path)


async def test_root_health_check():
    response = await _get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data


async def test_api_health_with_database(migrated_db):
    response = await _get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "sqlite"
    assert data["database_latency_ms"] >= 0
    assert "uptime_seconds" in data


async def test_api_health_degraded():
    with patch(
        "stockledger.infrastructure.storage.sqlite.get_pool",
        side_effect=OSError("disk unavailable"),
    ):
        response = await _get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert "disk unavailable" in data["database"]
