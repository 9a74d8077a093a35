"""Shared fixtures: a throwaway SQLite database per test, API clients, and factories."""

import uuid
from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from tracker.app.api.deps import get_event_recorder, get_identity_resolver
from tracker.app.db import Base, configure_sqlite, get_db
from tracker.app.main import app
from tracker.app.models import FeatureRequest, FeatureStatus, StatusChange
from tracker.app.services.auth import StaticKeyResolver
from tracker.app.services.feature_requests import utcnow

TEST_API_KEY = "test-api-key"
TEST_CALLER = "current-user"


class MemoryEventRecorder:
    """Collects recorded events so tests can assert on them."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def record(self, event: str, attributes: dict[str, Any]) -> None:
        self.events.append((event, attributes))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    configure_sqlite(test_engine.sync_engine)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------


@pytest.fixture
def recorder() -> MemoryEventRecorder:
    return MemoryEventRecorder()


@pytest.fixture
def api_app(session_factory, recorder):
    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_identity_resolver] = lambda: StaticKeyResolver(
        {TEST_API_KEY: TEST_CALLER}
    )
    app.dependency_overrides[get_event_recorder] = lambda: recorder
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(api_app) -> AsyncGenerator[AsyncClient, None]:
    """Client that sends a valid API key on every request."""
    async with AsyncClient(
        transport=ASGITransport(app=api_app),
        base_url="http://test",
        headers={"x-api-key": TEST_API_KEY},
    ) as c:
        yield c


@pytest.fixture
async def anon_client(api_app) -> AsyncGenerator[AsyncClient, None]:
    """Client without credentials."""
    async with AsyncClient(transport=ASGITransport(app=api_app), base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


async def create_feature_request(
    db: AsyncSession,
    title: str = "Test Feature",
    description: str | None = None,
    status: str = FeatureStatus.NEW.value,
    created_by: str = TEST_CALLER,
    created_at: str | None = None,
) -> FeatureRequest:
    now = created_at or utcnow()
    feature = FeatureRequest(
        id=str(uuid.uuid4()),
        title=title,
        description=description,
        status=status,
        created_by=created_by,
        created_at=now,
        updated_at=now,
        status_history=[],
    )
    db.add(feature)
    await db.flush()
    return feature


async def create_status_change(
    db: AsyncSession,
    feature_request_id: str,
    old_status: str = FeatureStatus.NEW.value,
    new_status: str = FeatureStatus.IN_PROGRESS.value,
    changed_by: str = TEST_CALLER,
) -> StatusChange:
    change = StatusChange(
        id=str(uuid.uuid4()),
        feature_request_id=feature_request_id,
        old_status=old_status,
        new_status=new_status,
        changed_at=utcnow(),
        changed_by=changed_by,
    )
    db.add(change)
    await db.flush()
    return change
