"""Service test fixtures — async DB, storefront seeds and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Route tests reach the database through the real get_db: app.state.db is a
      DatabaseSessionManager on the test engine, so error mapping stays in play
    - Only the event emitter dependency is overridden
    - Emitted events are recorded, never written

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service/route tests
    - file_session_factory for concurrency tests: a file database with
      BEGIN IMMEDIATE makes concurrent transactions serialize on the write lock,
      the way row locks do on a real server
    - bcrypt_rounds=4: hashing cost is irrelevant to the behaviour under test
"""

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import get_event_emitter
from app.config import Settings
from app.db.base import Base
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.security import TokenIssuer
from app.main import app
from app.services.signup_orchestrator import SignupOrchestrator
from app import models  # noqa: F401


class RecordingEmitter:
    """EventEmitter stand-in that keeps every emitted event in memory."""

    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    def emit(self, event_type, **fields):
        self.events.append((event_type, fields))
        return True

    def types(self) -> list[str]:
        return [event_type for event_type, _ in self.events]


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret="test-access-secret",
        jwt_refresh_secret="test-refresh-secret",
        bcrypt_rounds=4,
    )


@pytest.fixture
def issuer(settings):
    return TokenIssuer(settings)


@pytest.fixture
def events():
    return RecordingEmitter()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
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
async def file_session_factory(tmp_path):
    """Sessions on a file database whose transactions take the write lock up front."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'race.db'}",
        connect_args={"timeout": 30},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def orchestrator(test_db, issuer, events, settings):
    return SignupOrchestrator(test_db, issuer, events, settings)


@pytest.fixture
async def creator(orchestrator):
    """A signed-up creator: account, profile, ACTIVE store 'acme'."""
    return await orchestrator.signup_as_creator(
        email="ada@example.com",
        username="ada",
        password="correct-horse",
        slug="acme",
        full_name="Ada Lovelace",
    )


@pytest.fixture
async def rival(orchestrator):
    """A second creator, owner of store 'rival'."""
    return await orchestrator.signup_as_creator(
        email="grace@example.com",
        username="grace",
        password="correct-horse",
        slug="rival",
        full_name="Grace Hopper",
    )


@pytest.fixture
async def client(test_engine, test_session_factory, events):
    """FastAPI test client on the test engine, events recorded."""
    app.dependency_overrides[get_event_emitter] = lambda: events
    app.state.db = DatabaseSessionManager.from_engine(
        test_engine, test_session_factory,
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    del app.state.db
