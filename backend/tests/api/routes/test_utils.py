"""Tests for the /api/hello health check."""

from unittest.mock import MagicMock

import pymysql
import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.pool import PoolConnectionError


def _url() -> str:
    return f"{settings.API_V1_STR}/hello"


def test_health_check_up(client: TestClient, pool: MagicMock) -> None:
    pool.query.return_value = [{"status": 1}]
    r = client.get(_url())
    assert r.status_code == 200
    assert r.json() == {"status": "UP", "results": [{"status": 1}]}
    pool.query.assert_called_once_with("SELECT 1 AS status")


@pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
def test_health_check_accepts_any_method(
    client: TestClient, pool: MagicMock, method: str
) -> None:
    pool.query.return_value = [{"status": 1}]
    r = client.request(method, _url())
    assert r.status_code == 200
    assert r.json()["status"] == "UP"


def test_health_check_head(client: TestClient, pool: MagicMock) -> None:
    pool.query.return_value = [{"status": 1}]
    r = client.head(_url())
    assert r.status_code == 200
    pool.query.assert_called_once_with("SELECT 1 AS status")


@pytest.mark.parametrize(
    "error",
    [
        PoolConnectionError("Cannot connect to web_user@mysql-wn:3306/web_notifications"),
        pymysql.err.OperationalError(1045, "Access denied for user 'web_user'"),
    ],
)
def test_health_check_down_returns_503(
    client: TestClient, pool: MagicMock, error: Exception
) -> None:
    pool.query.side_effect = error
    r = client.get(_url())
    assert r.status_code == 503
    assert r.json() == {"status": "DOWN", "message": "Database unavailable"}
    assert "Access denied" not in r.text
