import re
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Request
from sqlmodel import Session

from app.api.errors import ValidationFailed
from app.core.db import engine
from app.core.pool import PoolManager

_INT_RE = re.compile(r"[+-]?[0-9]+")


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def get_pool(request: Request) -> PoolManager:
    """The PoolManager built in the app lifespan."""
    return request.app.state.pool


SessionDep = Annotated[Session, Depends(get_db)]
PoolDep = Annotated[PoolManager, Depends(get_pool)]


def parse_id(raw: str, message: str) -> int:
    """
    Parse a path segment as an integer id.

    Only an optional sign followed by ASCII digits is accepted: "12.5", "1e3",
    "" and "abc" all raise ValidationFailed(message).
    """
    if not _INT_RE.fullmatch(raw or ""):
        raise ValidationFailed(message)
    return int(raw)
