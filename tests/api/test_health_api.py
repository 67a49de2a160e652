"""Tests for health endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from stockroom import __version__
from stockroom.api.dependencies import get_pool
from stockroom.api.main import app


@pytest.fixture
async def client(pool):
    app.dependency_overrides[get_pool] = lambda: pool
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_pool, None)


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert data["uptime_seconds"] >= 0

    async def test_db_health(self, client):
        response = await client.get("/api/health/db")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"]["name"] == "sqlite"
        assert data["database"]["available"] is True

    async def test_root_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_request_id_header(self, client):
        response = await client.get("/api/health")
        assert "X-Request-ID" in response.headers
        assert "X-Response-Time" in response.headers

    async def test_caller_request_id_is_echoed(self, client):
        response = await client.get("/api/health", headers={"X-Request-ID": "trace-42"})
        assert response.headers["X-Request-ID"] == "trace-42"
