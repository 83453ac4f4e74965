"""Tests for the application lifespan: pool construction, startup check, teardown."""

import threading
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from app.api.deps import get_pool
from app.core.config import settings
from app.core.pool import PoolConnectionError
from app.main import app


def test_lifespan_builds_verifies_and_disposes_pool() -> None:
    pool = MagicMock()
    verified = threading.Event()
    pool.verify.side_effect = lambda: verified.set() or False
    pool.query.return_value = [{"status": 1}]

    with patch("app.main.create_pool_manager", return_value=pool) as factory:
        with TestClient(app) as client:
            assert app.state.pool is pool
            assert verified.wait(timeout=2)
            r = client.get(f"{settings.API_V1_STR}/hello")
            assert r.status_code == 200
            pool.dispose.assert_not_called()

    factory.assert_called_once_with(settings)
    pool.dispose.assert_called_once()


def test_startup_survives_unreachable_database() -> None:
    """A failing startup check does not stop the app from serving the health endpoint."""
    pool = MagicMock()
    pool.verify.return_value = False
    pool.query.side_effect = PoolConnectionError("Cannot connect")

    with patch("app.main.create_pool_manager", return_value=pool):
        with TestClient(app) as client:
            r = client.get(f"{settings.API_V1_STR}/hello")
    assert r.status_code == 503
    assert r.json() == {"status": "DOWN", "message": "Database unavailable"}


def test_unhandled_error_uses_envelope_without_detail(pool: MagicMock) -> None:
    """An exception no route maps is a generic 500 in the error envelope."""
    pool.query.side_effect = RuntimeError("secret-internal-detail")
    app.dependency_overrides[get_pool] = lambda: pool
    try:
        client = TestClient(app, raise_server_exceptions=False)
        r = client.get(f"{settings.API_V1_STR}/projects")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.json() == {"status": "error", "message": "Internal server error"}
    assert "secret-internal-detail" not in r.text


def test_validation_error_uses_envelope(client: TestClient) -> None:
    r = client.post(f"{settings.API_V1_STR}/projects", json={"name": 5, "status": []})
    assert r.status_code == 422
    data = r.json()
    assert data["status"] == "error"
    assert "status: " in data["message"]
