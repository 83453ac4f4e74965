import threading
from typing import Any

from sqlmodel import create_engine

from app.core.config import Settings, settings


def engine_options(config: Settings) -> dict[str, Any]:
    """
    QueuePool options matching core.pool.PoolManager's limits.

    No overflow past DB_CONNECTION_LIMIT. With DB_QUEUE_LIMIT = 0 a checkout
    waits as long as the platform allows; SQLAlchemy has no waiter count, so
    a bounded queue is approximated by giving up after the connect timeout.
    """
    if config.DB_QUEUE_LIMIT == 0:
        pool_timeout = threading.TIMEOUT_MAX
    else:
        pool_timeout = config.DB_CONNECT_TIMEOUT_MS / 1000
    return {
        "echo": config.DB_ECHO,
        "pool_size": config.DB_CONNECTION_LIMIT,
        "max_overflow": 0,
        "pool_timeout": pool_timeout,
        "pool_pre_ping": config.DB_KEEPALIVE,
        "pool_recycle": 3600,
        "connect_args": {"connect_timeout": config.DB_CONNECT_TIMEOUT_MS / 1000},
    }


engine = create_engine(settings.SQLALCHEMY_DATABASE_URI, **engine_options(settings))
