import logging
from typing import Any

from fastapi import APIRouter

from app.api.deps import PoolDep
from app.api.errors import DATA_ACCESS_ERRORS, ServiceUnavailable
from app.schemas import HealthOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["utils"])

# Any method is accepted
HEALTH_METHODS = ["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"]


@router.api_route("/hello", methods=HEALTH_METHODS, response_model=HealthOut)
def health_check(pool: PoolDep) -> Any:
    """
    Liveness of the service and its database.

    Runs SELECT 1 through the connection pool. 200 with the raw rows when the
    database answers; 503 {"status": "DOWN"} when it does not.
    """
    try:
        results = pool.query("SELECT 1 AS status")
    except DATA_ACCESS_ERRORS as e:
        logger.error("Health check failed for %s: %s", pool.target, e)
        raise ServiceUnavailable("Database unavailable") from e
    return HealthOut(results=results)
