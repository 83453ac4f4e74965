"""
Bounded connection pool for the application database.

One PoolManager is built per process at startup and handed to request
handlers through a FastAPI dependency. At most DB_CONNECTION_LIMIT
connections exist at once; callers beyond that wait on a condition
variable (DB_QUEUE_LIMIT = 0 means waiters are never turned away).
Idle connections past the keep-alive delay are pinged on checkout.
"""

import logging
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, NamedTuple

from app.core.config import Settings

from .connect import (
    PoolError,
    QueryParams,
    connect,
    cursor_to_dicts,
    describe_target,
    execute,
)
from .health import health_check

_log = logging.getLogger(__name__)


class PoolQueueFullError(PoolError):
    """All connections are leased and the wait queue is at DB_QUEUE_LIMIT."""


class PoolClosedError(PoolError):
    """The pool has been disposed."""


class _PoolEntry(NamedTuple):
    conn: Any
    last_used: float  # time.monotonic() when last returned to pool


class WriteResult(NamedTuple):
    rowcount: int
    last_insert_id: int | None


class PoolManager:
    """Bounded pool of MySQL connections with keep-alive pings and blocking checkout."""

    def __init__(self, config: Settings) -> None:
        self._config = config
        self._limit: int = config.DB_CONNECTION_LIMIT
        self._queue_limit: int = config.DB_QUEUE_LIMIT
        self._keepalive: bool = config.DB_KEEPALIVE
        self._keepalive_delay: float = config.DB_KEEPALIVE_INITIAL_DELAY_MS / 1000
        self._idle: list[_PoolEntry] = []
        self._leased: dict[int, _PoolEntry] = {}
        self._pending = 0  # slots reserved by callers that are opening or reviving
        self._waiting = 0
        self._closed = False
        self._cond = threading.Condition()

    @property
    def target(self) -> str:
        return describe_target(self._config)

    # ------------------------------------------------------------------
    # Acquire / release
    # ------------------------------------------------------------------

    def acquire(self) -> Any:
        """
        Lease a connection, waiting while the pool is exhausted.

        Raises PoolConnectionError if a new connection cannot be opened,
        PoolQueueFullError if DB_QUEUE_LIMIT waiters are already queued.
        """
        entry = self._reserve()
        try:
            if entry is not None:
                entry = self._revive(entry)
            if entry is None:
                entry = _PoolEntry(conn=connect(self._config), last_used=time.monotonic())
        except BaseException:
            with self._cond:
                self._pending -= 1
                self._cond.notify()
            raise

        with self._cond:
            self._pending -= 1
            self._leased[id(entry.conn)] = entry
        return entry.conn

    def release(self, conn: Any) -> None:
        """Return a leased connection; it is rolled back first and closed if that fails."""
        with self._cond:
            entry = self._leased.pop(id(conn), None)
        if entry is None:
            raise ValueError("Connection was not leased from this pool")

        keep = True
        try:
            conn.rollback()
        except Exception:
            _log.warning("Discarding connection to %s: rollback failed", self.target, exc_info=True)
            keep = False

        with self._cond:
            if keep and not self._closed:
                self._idle.append(entry._replace(last_used=time.monotonic()))
            else:
                keep = False
            self._cond.notify()
        if not keep:
            self._close_quiet(conn)

    @contextmanager
    def lease(self) -> Iterator[Any]:
        """Scoped acquire; the connection goes back to the pool on every exit path."""
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def query(self, sql: str, params: QueryParams = None) -> list[dict[str, Any]]:
        """Run one parameterised statement on a pooled connection and return its rows."""
        with self.lease() as conn:
            cur = execute(conn, sql, params)
            try:
                rows = cursor_to_dicts(cur)
            finally:
                cur.close()
            conn.commit()
        return rows

    def execute(self, sql: str, params: QueryParams = None) -> WriteResult:
        """Run one INSERT/UPDATE/DELETE, commit, and report affected rows."""
        with self.lease() as conn:
            cur = execute(conn, sql, params)
            try:
                result = WriteResult(
                    rowcount=cur.rowcount,
                    last_insert_id=cur.lastrowid or None,
                )
            finally:
                cur.close()
            conn.commit()
        return result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def verify(self) -> bool:
        """
        Startup diagnostic: one acquire/release cycle with a SELECT 1.

        Logs the outcome and never raises, so a broken database does not
        stop the process from booting (the health endpoint must stay reachable).
        """
        try:
            with self.lease() as conn:
                ok = health_check(conn)
        except PoolError as e:
            _log.error("Pool test: connection to %s failed: %s", self.target, e)
            return False
        if ok:
            _log.info("Pool test: connection to %s successful", self.target)
        else:
            _log.error("Pool test: connection to %s opened but SELECT 1 failed", self.target)
        return ok

    def dispose(self) -> None:
        """Close idle connections and refuse new leases. Leased ones close on release."""
        with self._cond:
            self._closed = True
            entries = self._idle
            self._idle = []
            self._cond.notify_all()
        for e in entries:
            self._close_quiet(e.conn)
        _log.info("Connection pool for %s disposed", self.target)

    def stats(self) -> dict[str, int]:
        """Return pool statistics for monitoring."""
        with self._cond:
            return {
                "limit": self._limit,
                "in_use": len(self._leased) + self._pending,
                "idle": len(self._idle),
                "waiting": self._waiting,
            }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _size(self) -> int:
        return len(self._idle) + len(self._leased) + self._pending

    def _reserve(self) -> _PoolEntry | None:
        """Claim a slot: an idle entry, or None meaning 'open a new connection'."""
        with self._cond:
            while True:
                if self._closed:
                    raise PoolClosedError(f"Connection pool for {self.target} is closed")
                if self._idle:
                    self._pending += 1
                    return self._idle.pop()
                if self._size() < self._limit:
                    self._pending += 1
                    return None
                if self._queue_limit and self._waiting >= self._queue_limit:
                    raise PoolQueueFullError(
                        f"Connection pool for {self.target} exhausted "
                        f"({self._limit} in use, {self._waiting} waiting)"
                    )
                self._waiting += 1
                try:
                    self._cond.wait()
                finally:
                    self._waiting -= 1

    def _revive(self, entry: _PoolEntry) -> _PoolEntry | None:
        """Ping a connection idle longer than the keep-alive delay; None if it is dead."""
        if not self._keepalive:
            return entry
        if time.monotonic() - entry.last_used < self._keepalive_delay:
            return entry
        try:
            entry.conn.ping(reconnect=True)
            return entry
        except Exception:
            _log.info("Dropping stale connection to %s", self.target, exc_info=True)
            self._close_quiet(entry.conn)
            return None

    @staticmethod
    def _close_quiet(conn: Any) -> None:
        try:
            conn.close()
        except Exception:
            pass


def create_pool_manager(config: Settings) -> PoolManager:
    """Build the process-wide pool; no connection is opened until first use."""
    pool = PoolManager(config)
    _log.info(
        "Connection pool for %s: limit=%d queue_limit=%d connect_timeout=%dms keepalive=%s",
        pool.target,
        config.DB_CONNECTION_LIMIT,
        config.DB_QUEUE_LIMIT,
        config.DB_CONNECT_TIMEOUT_MS,
        config.DB_KEEPALIVE,
    )
    return pool

