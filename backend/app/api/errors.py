"""
API error variants and the JSON envelope they render to.

Handlers raise one of these; app.main turns it into a response. Internal
error detail is logged, never sent to the client.
"""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import pymysql
from sqlalchemy.exc import SQLAlchemyError

from app.core.pool import PoolError

logger = logging.getLogger(__name__)

# Errors a single data-access call can surface: pool/driver (raw SQL) or ORM
DATA_ACCESS_ERRORS: tuple[type[Exception], ...] = (
    PoolError,
    pymysql.err.MySQLError,
    SQLAlchemyError,
)


class ApiError(Exception):
    """Base variant: {"status": "error", "message": ...}."""

    status_code: int = 500
    tag: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def headers(self) -> dict[str, str] | None:
        return None

    def to_content(self) -> dict[str, Any]:
        return {"status": self.tag, "message": self.message}


class ValidationFailed(ApiError):
    status_code = 400


class NotFound(ApiError):
    status_code = 404


class Conflict(ApiError):
    status_code = 409


class InternalError(ApiError):
    status_code = 500


class ServiceUnavailable(ApiError):
    status_code = 503
    tag = "DOWN"


class MethodNotAllowed(ApiError):
    """405 with a bare {"message": ...} body and an Allow header."""

    status_code = 405

    def __init__(self, allowed: Sequence[str] = ("GET",)) -> None:
        super().__init__("Method Not Allowed")
        self.allowed = list(allowed)

    @property
    def headers(self) -> dict[str, str] | None:
        return {"Allow": ", ".join(self.allowed)}

    def to_content(self) -> dict[str, Any]:
        return {"message": self.message}


@contextmanager
def translate_db_errors(
    message: str,
    errors: tuple[type[Exception], ...] = DATA_ACCESS_ERRORS,
) -> Iterator[None]:
    """Log a failure of one of *errors* and re-raise it as a 500 carrying only *message*."""
    try:
        yield
    except ApiError:
        raise
    except errors as e:
        logger.error("%s: %s", message, e, exc_info=True)
        raise InternalError(message) from e
