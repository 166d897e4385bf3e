"""Tests for the health endpoint."""

from contextlib import asynccontextmanager
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from stock_ledger.api.dependencies import get_db_pool
from stock_ledger.api.main import app
from stock_ledger.infrastructure.storage.sqlite import ConnectionPool


class BrokenPool(ConnectionPool):
    @asynccontextmanager
    async def acquire(self):
        raise OSError("unable to open database file")
        yield


@pytest.fixture
async def health_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_db_pool, None)


async def test_healthy_with_database(health_client: AsyncClient, tmp_path: Path):
    pool = ConnectionPool(tmp_path / "health.db", pool_size=1)
    app.dependency_overrides[get_db_pool] = lambda: pool

    response = await health_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "ok"
    assert data["version"] == "1.0.0"
    await pool.close()


async def test_unhealthy_when_database_unreachable(health_client: AsyncClient):
    """Should report rather than fail when SQLite cannot be reached."""
    app.dependency_overrides[get_db_pool] = lambda: BrokenPool(Path("unused.db"))

    response = await health_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database"] == "unreachable"


async def test_request_id_echoed(health_client: AsyncClient, tmp_path: Path):
    pool = ConnectionPool(tmp_path / "health.db", pool_size=1)
    app.dependency_overrides[get_db_pool] = lambda: pool

    response = await health_client.get("/health", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"
    await pool.close()
