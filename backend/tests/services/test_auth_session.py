"""Auth Session — login, refresh rotation, logout and the current account.

Tests cover:
    - Login with valid credentials issues a pair and records the refresh token
    - Wrong password and unknown email fail the same way
    - refresh() rotates: the presented token is revoked and cannot be reused
    - logout() revokes every active refresh token
"""

from uuid import uuid4

import pytest
from sqlalchemy import select

from app.core.errors import AuthenticationError, ResourceNotFoundError
from app.infrastructure.security import digest_token
from app.models.refresh_token import RefreshToken
from app.services.auth_session import AuthSessionService


@pytest.fixture
def sessions(test_db, issuer, events):
    return AuthSessionService(test_db, issuer, events)


async def _active_tokens(db, account_id) -> list[RefreshToken]:
    result = await db.execute(
        select(RefreshToken)
        .where(RefreshToken.account_id == account_id)
        .where(RefreshToken.revoked.is_(False)),
    )
    return list(result.scalars().all())


async def test_login_issues_and_records_tokens(sessions, creator, test_db, events):
    account, pair = await sessions.login("ada@example.com", "correct-horse")

    assert account.id == creator.account.id
    hashes = {t.token_hash for t in await _active_tokens(test_db, account.id)}
    assert digest_token(pair.refresh_token) in hashes
    assert events.types()[-1] == "LOGIN_SUCCESS"


@pytest.mark.parametrize("email, password", [
    ("ada@example.com", "wrong-password"),
    ("nobody@example.com", "correct-horse"),
    ("ada@example.com", "p" * 100),
])
async def test_login_rejects_bad_credentials(sessions, creator, email, password):
    with pytest.raises(AuthenticationError) as exc:
        await sessions.login(email, password)
    assert exc.value.message == "Invalid credentials"


async def test_refresh_rotates_token(sessions, creator, test_db):
    old = creator.tokens.refresh_token
    pair = await sessions.refresh(old)

    assert pair.refresh_token != old
    active = {t.token_hash for t in await _active_tokens(test_db, creator.account.id)}
    assert digest_token(pair.refresh_token) in active
    assert digest_token(old) not in active

    with pytest.raises(AuthenticationError):
        await sessions.refresh(old)


async def test_refresh_rejects_access_token(sessions, creator):
    with pytest.raises(AuthenticationError):
        await sessions.refresh(creator.tokens.access_token)


async def test_logout_revokes_all(sessions, creator, test_db, events):
    await sessions.login("ada@example.com", "correct-horse")
    await sessions.logout(creator.account.id)

    assert await _active_tokens(test_db, creator.account.id) == []
    assert events.types()[-1] == "LOGOUT"
    with pytest.raises(AuthenticationError):
        await sessions.refresh(creator.tokens.refresh_token)


async def test_current_account(sessions, creator):
    account = await sessions.current_account(creator.account.id)
    assert account.username == "ada"
    with pytest.raises(ResourceNotFoundError):
        await sessions.current_account(uuid4())
