from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.api.deps import get_db, get_pool
from app.core.pool import PoolManager
from app.main import app


@pytest.fixture(name="db")
def db_fixture() -> Generator[Session, None, None]:
    """In-memory SQLite with the ORM tables; shared across threads for TestClient."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture(name="pool")
def pool_fixture() -> MagicMock:
    """Stand-in for the process PoolManager; tests set query/execute results."""
    pool = MagicMock(spec=PoolManager)
    pool.target = "web_user@mysql-test:3306/web_notifications"
    return pool


@pytest.fixture(name="client")
def client_fixture(db: Session, pool: MagicMock) -> Generator[TestClient, None, None]:
    """TestClient without lifespan: pool and session come from the overrides."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_pool] = lambda: pool
    yield TestClient(app)
    app.dependency_overrides.clear()
