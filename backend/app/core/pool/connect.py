"""
MySQL connection helpers for the application pool.

Opens pymysql connections from Settings and runs parameterised statements;
rows come back as plain dicts so handlers can serialise them directly.
"""

from collections.abc import Mapping, Sequence
from typing import Any

import pymysql

from app.core.config import Settings

QueryParams = Sequence[Any] | Mapping[str, Any] | None


class PoolError(Exception):
    """Base class for connection pool failures."""


class PoolConnectionError(PoolError):
    """Opening a connection failed (bad credentials, unreachable host, timeout)."""


def describe_target(config: Settings) -> str:
    """user@host:port/db, without the password."""
    return f"{config.DB_USER}@{config.DB_HOST}:{config.DB_PORT}/{config.DB_NAME}"


def connect(config: Settings) -> pymysql.connections.Connection:
    """
    Open one connection to the application database.

    Raises PoolConnectionError on any driver or socket failure; never retries.
    """
    try:
        return pymysql.connect(
            host=config.DB_HOST,
            port=int(config.DB_PORT),
            user=config.DB_USER,
            password=config.DB_PASSWORD.get_secret_value(),
            database=config.DB_NAME,
            connect_timeout=config.DB_CONNECT_TIMEOUT_MS / 1000,
            charset="utf8mb4",
            autocommit=False,
        )
    except (pymysql.err.MySQLError, OSError) as e:
        raise PoolConnectionError(
            f"Cannot connect to {describe_target(config)}: {e}"
        ) from e


def execute(conn: Any, sql: str, params: QueryParams = None) -> Any:
    """
    Execute SQL and return the cursor. Caller uses cursor_to_dicts(cursor) or cursor.rowcount.

    Empty params are passed as None so literal '%' in parameterless SQL is left alone.
    """
    cur = conn.cursor()
    try:
        if params:
            cur.execute(sql, params)
        else:
            cur.execute(sql)
    except Exception:
        cur.close()
        raise
    return cur


def cursor_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor result to list of dicts."""
    desc = cursor.description
    if not desc:
        return []
    names = [d[0] for d in desc]
    return [dict(zip(names, row, strict=True)) for row in cursor.fetchall()]
