import logging
from typing import Any

import pymysql

from .connect import execute

_log = logging.getLogger(__name__)

HEALTH_SQL = "SELECT 1 AS status"


def health_check(conn: Any) -> bool:
    """True when *conn* answers the health query with the single row (1,)."""
    try:
        cur = execute(conn, HEALTH_SQL)
    except (pymysql.err.MySQLError, OSError) as e:
        _log.warning("Health query failed: %s", e)
        return False
    try:
        row = cur.fetchone()
    except (pymysql.err.MySQLError, OSError) as e:
        _log.warning("Health query returned no readable row: %s", e)
        return False
    finally:
        cur.close()
    return row is not None and tuple(row)[:1] == (1,)
