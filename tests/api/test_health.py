"""Tests for health endpoints."""

from httpx import AsyncClient

from buildstock import __version__


async def test_root_health_check(async_client: AsyncClient):
    """Root health endpoint needs no identity."""
    response = await async_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__}


async def test_api_health_check(async_client: AsyncClient):
    response = await async_client.get("/api/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["uptime_seconds"] >= 0
    assert data["database"] is None


async def test_db_health(async_client: AsyncClient, ledger_db):
    response = await async_client.get("/api/health/db")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"]["name"] == "sqlite"
    assert data["database"]["available"] is True
