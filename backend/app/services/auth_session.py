"""Auth Session Service — login, refresh-token rotation, logout and current account.

Invariants:
    - Every issued refresh token has a persisted SHA-256 record with a 7-day expiry
    - refresh() revokes the presented record and records the new one in ONE commit
    - Invalid credentials never reveal whether the email exists
    - Analytics events emitted only after commit, never awaited

Design Decisions:
    - record_refresh_token is shared with the signup orchestrator: both write the
      record inside their own transaction and leave the commit to the caller
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import AccountId, EventType
from app.core.errors import AuthenticationError, ResourceNotFoundError
from app.core.repository_protocols import EventEmitter
from app.core.slug_rules import as_utc
from app.infrastructure.security import (
    TokenIssuer, TokenPair, digest_token, verify_password,
)
from app.models.account import Account
from app.models.refresh_token import RefreshToken

logger = logging.getLogger(__name__)


async def record_refresh_token(
    db: AsyncSession, account_id: AccountId, pair: TokenPair,
) -> RefreshToken:
    """Persist the hashed refresh token. Caller commits."""
    record = RefreshToken(
        account_id=account_id,
        token_hash=digest_token(pair.refresh_token),
        expires_at=pair.refresh_expires_at,
        revoked=False,
    )
    db.add(record)
    await db.flush()
    return record


class AuthSessionService:
    """Credential exchange for existing accounts."""

    def __init__(self, db: AsyncSession, issuer: TokenIssuer, events: EventEmitter):
        self.db = db
        self.issuer = issuer
        self.events = events

    async def login(self, email: str, password: str) -> tuple[Account, TokenPair]:
        result = await self.db.execute(select(Account).where(Account.email == email))
        account = result.scalar_one_or_none()
        if account is None or not verify_password(password, account.password_hash):
            raise AuthenticationError("Invalid credentials")

        pair = self.issuer.issue(account)
        await record_refresh_token(self.db, account.id, pair)
        await self.db.commit()

        self.events.emit(EventType.LOGIN_SUCCESS.value, account_id=account.id)
        return account, pair

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Rotate: revoke the presented token and issue a new pair."""
        payload = self.issuer.decode_refresh(refresh_token)
        account_id = AccountId(UUID(payload["sub"]))

        result = await self.db.execute(
            select(RefreshToken)
            .where(RefreshToken.account_id == account_id)
            .where(RefreshToken.token_hash == digest_token(refresh_token))
            .where(RefreshToken.revoked.is_(False)),
        )
        record = result.scalar_one_or_none()
        if record is None:
            raise AuthenticationError("Refresh token not found or revoked")
        if as_utc(record.expires_at) < datetime.now(timezone.utc):
            raise AuthenticationError("Refresh token expired")

        account = await self.db.get(Account, account_id)
        if account is None:
            raise AuthenticationError("Account not found")

        record.revoked = True
        pair = self.issuer.issue(account)
        await record_refresh_token(self.db, account.id, pair)
        await self.db.commit()

        self.events.emit(EventType.TOKEN_REFRESHED.value, account_id=account.id)
        return pair

    async def logout(self, account_id: AccountId) -> None:
        """Revoke every active refresh token of the account."""
        await self.db.execute(
            update(RefreshToken)
            .where(RefreshToken.account_id == account_id)
            .where(RefreshToken.revoked.is_(False))
            .values(revoked=True),
        )
        await self.db.commit()
        self.events.emit(EventType.LOGOUT.value, account_id=account_id)

    async def current_account(self, account_id: AccountId) -> Account:
        account = await self.db.get(Account, account_id)
        if account is None:
            raise ResourceNotFoundError("Account", str(account_id))
        return account
