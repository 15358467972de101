"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe checks the test engine
    - Timer registry reset per test: no custom events or timer state leak between tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - StaticPool: every session shares the single in-memory connection
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from cubetimer.db.base import Base
from cubetimer.infrastructure.database import get_db, DatabaseSessionManager
import cubetimer.infrastructure.database as db_module
from cubetimer.main import app
from cubetimer.services import timer_registry


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    timer_registry.reset_registry()

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
    timer_registry.reset_registry()


@pytest.fixture
def complete_solve(client):
    """Drive one attempt through the timer: hold, release at start + 500, stop."""
    async def _run(
        event_id: str = "333", start: int = 0, elapsed: int = 10_000,
    ) -> dict:
        await client.post(
            f"/api/v1/timer/{event_id}/press", json={"timestamp_ms": start},
        )
        await client.post(
            f"/api/v1/timer/{event_id}/release", json={"timestamp_ms": start + 500},
        )
        resp = await client.post(
            f"/api/v1/timer/{event_id}/press",
            json={"timestamp_ms": start + 500 + elapsed},
        )
        assert resp.status_code == 200
        return resp.json()
    return _run
