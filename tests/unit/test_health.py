"""
Tests for health check endpoints.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from memoreel.config import Settings
from memoreel.db.pool import DatabasePoolManager
from memoreel.dependencies import get_db
from memoreel.main import create_app


@pytest.fixture
def app():
    app = create_app(Settings(_env_file=None))
    yield app
    app.dependency_overrides.clear()


def _db_reporting(health: dict) -> MagicMock:
    db = MagicMock()
    db.health_check = AsyncMock(return_value=health)
    return db


def test_healthz_endpoint(app):
    """Test the basic health check endpoint."""
    response = TestClient(app).get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "memoreel-backend"}


def test_healthz_echoes_request_id(app):
    response = TestClient(app).get("/healthz", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"


def test_readyz_database_healthy(app):
    """Test readiness endpoint when the pool answers."""
    db = _db_reporting(
        {
            "healthy": True,
            "connection_time_ms": 1.2,
            "pool_stats": {"pool_size": 2, "pool_available": 2},
        }
    )
    app.dependency_overrides[get_db] = lambda: db

    response = TestClient(app).get("/readyz")

    assert response.status_code == 200
    data = response.json()
    assert data["overall_ok"] is True
    check = data["checks"]["database"]
    assert check["ok"] is True
    assert check["pool_stats"]["pool_size"] == 2
    assert isinstance(check["latency_ms"], (int, float))


def test_readyz_database_unhealthy(app):
    """Readiness still answers 200 but reports the failing database."""
    db = _db_reporting({"healthy": False, "error": "Connection failed"})
    app.dependency_overrides[get_db] = lambda: db

    response = TestClient(app).get("/readyz")

    assert response.status_code == 200
    data = response.json()
    assert data["overall_ok"] is False
    assert data["checks"]["database"]["error"] == "Connection failed"


def test_readyz_with_uninitialized_pool(app):
    app.dependency_overrides[get_db] = lambda: DatabasePoolManager(Settings(_env_file=None))

    response = TestClient(app).get("/readyz")

    data = response.json()
    assert data["overall_ok"] is False
    assert data["checks"]["database"]["error"] == "Pool not initialized"
