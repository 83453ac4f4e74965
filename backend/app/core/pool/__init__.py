"""
Connection pool for the application MySQL database.

pymysql does the talking; PoolManager bounds and reuses the connections.
"""

from .connect import (
    PoolConnectionError,
    PoolError,
    connect,
    cursor_to_dicts,
    execute,
)
from .health import health_check
from .manager import (
    PoolClosedError,
    PoolManager,
    PoolQueueFullError,
    WriteResult,
    create_pool_manager,
)

__all__ = [
    "connect",
    "execute",
    "cursor_to_dicts",
    "health_check",
    "PoolManager",
    "create_pool_manager",
    "WriteResult",
    "PoolError",
    "PoolConnectionError",
    "PoolQueueFullError",
    "PoolClosedError",
]
