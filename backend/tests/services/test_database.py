"""Database session manager — error mapping and the request dependency.

Tests cover:
    - An IntegrityError inside session() is rolled back and re-raised as DatabaseError
    - Work committed before the failure survives, the failed write does not
    - get_db yields sessions from the manager on app.state.db
    - health_check reports a live engine
"""

from types import SimpleNamespace

import pytest
from sqlalchemy import func, select

from app.core.errors import DatabaseError
from app.infrastructure.database import DatabaseSessionManager, get_db
from app.models.account import Account


def _account(email: str, username: str) -> Account:
    return Account(email=email, username=username, password_hash="x", role="USER")


@pytest.fixture
def manager(test_engine, test_session_factory):
    return DatabaseSessionManager.from_engine(test_engine, test_session_factory)


async def test_integrity_error_becomes_database_error(manager, test_session_factory):
    async with manager.session() as db:
        db.add(_account("ada@example.com", "ada"))
        await db.commit()

    with pytest.raises(DatabaseError) as exc:
        async with manager.session() as db:
            db.add(_account("ada@example.com", "ada2"))
            await db.commit()

    assert exc.value.http_status == 503
    assert exc.value.code == "DATABASE_ERROR"
    async with test_session_factory() as db:
        count = await db.scalar(select(func.count()).select_from(Account))
    assert count == 1


async def test_get_db_reads_manager_from_app_state(manager):
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(db=manager)))
    sessions = get_db(request)
    db = await anext(sessions)
    assert await db.scalar(select(func.count()).select_from(Account)) == 0
    await sessions.aclose()


async def test_get_db_without_manager_fails_loudly():
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))
    with pytest.raises(RuntimeError, match="Database not initialized"):
        await anext(get_db(request))


async def test_health_check(manager):
    assert await manager.health_check() is True
