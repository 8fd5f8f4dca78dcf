"""Signup Orchestrator — all-or-nothing account creation, with or without a storefront.

Invariants:
    - signup_as_creator writes, in program order and inside ONE transaction:
      slug reservation -> account -> creator profile -> store + theme -> slug activation
      -> refresh-token record; then commits once
    - Any failure before the commit rolls back every write (the slug row included)
    - ConflictError (email/username/slug) propagates unchanged, naming the field
    - Every other failure is logged with slug/email/username/step and surfaced as
      SignupFailedError, without storage detail
    - The registration event is emitted only after a successful commit and can
      never affect the response

Design Decisions:
    - No application lock: concurrent signups for one slug are arbitrated by the
      store_slugs.slug unique constraint (ADR: delegate uniqueness to storage)
    - Store row created in the same transaction: a creator never exists without an
      ACTIVE storefront bound to the reserved slug
    - Email/username races that slip past the pre-check surface as IntegrityError on
      the account flush and are mapped back to a field-specific ConflictError
"""

import logging
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.core.domain_types import (
    AccountRole, EventType, StoreStatus, StoreType,
)
from app.core.errors import ConflictError, SignupFailedError
from app.core.repository_protocols import EventEmitter
from app.infrastructure.security import TokenIssuer, TokenPair, hash_password
from app.models.account import Account
from app.models.creator_profile import CreatorProfile
from app.models.slug_reservation import SlugReservation
from app.models.store import Store
from app.models.store_theme import StoreTheme
from app.services.auth_session import record_refresh_token
from app.services.slug_ledger import SlugLedger

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "User with this email already exists"
USERNAME_TAKEN = "Username already taken"


@dataclass
class SignupResult:
    account: Account
    tokens: TokenPair
    profile: CreatorProfile | None = None
    store: Store | None = None
    reservation: SlugReservation | None = None


class SignupOrchestrator:
    """Composes identity, profile and slug activation into one atomic unit."""

    def __init__(
        self,
        db: AsyncSession,
        issuer: TokenIssuer,
        events: EventEmitter,
        settings: Settings,
    ):
        self.db = db
        self.issuer = issuer
        self.events = events
        self.bcrypt_rounds = settings.bcrypt_rounds
        self.ledger = SlugLedger(
            db, timedelta(hours=settings.slug_reservation_ttl_hours),
        )

    async def signup(self, email: str, username: str, password: str) -> SignupResult:
        """Plain (non-creator) account + refresh record, one transaction."""
        step = "check_identity"
        try:
            await self._ensure_identity_free(email, username)
            step = "create_account"
            account = await self._create_account(
                email, username, password, AccountRole.USER,
            )
            step = "issue_tokens"
            tokens = await self._issue_tokens(account)
            step = "commit"
            await self.db.commit()
        except ConflictError:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            _log_failure(step, e, email=email, username=username)
            raise SignupFailedError(step) from e

        self.events.emit(
            EventType.USER_REGISTERED.value,
            account_id=account.id, role=AccountRole.USER.value,
        )
        return SignupResult(account=account, tokens=tokens)

    async def signup_as_creator(
        self,
        email: str,
        username: str,
        password: str,
        slug: str,
        full_name: str,
        timezone: str | None = None,
        country_code: str | None = None,
    ) -> SignupResult:
        """Create creator account with an ACTIVE storefront slug, or nothing at all."""
        step = "check_identity"
        try:
            await self._ensure_identity_free(email, username)
            step = "reserve_slug"
            reservation = await self.ledger.reserve(slug)
            step = "create_account"
            account = await self._create_account(
                email, username, password, AccountRole.CREATOR,
            )
            step = "create_profile"
            profile = await self._create_profile(
                account, full_name, timezone, country_code,
            )
            step = "create_store"
            store = await self._create_store(profile, slug, full_name)
            step = "activate_slug"
            await self.ledger.activate(reservation, account.id)
            step = "issue_tokens"
            tokens = await self._issue_tokens(account)
            step = "commit"
            await self.db.commit()
        except ConflictError as e:
            await self.db.rollback()
            logger.info(
                f"Creator signup rejected: {e.message}",
                extra={"slug": slug, "step": step, "error_code": e.code},
            )
            raise
        except Exception as e:
            await self.db.rollback()
            _log_failure(step, e, email=email, username=username, slug=slug)
            raise SignupFailedError(step) from e

        self.events.emit(
            EventType.CREATOR_REGISTERED.value,
            account_id=account.id, creator_id=profile.id,
            slug=slug, full_name=full_name,
        )
        return SignupResult(
            account=account, tokens=tokens, profile=profile,
            store=store, reservation=reservation,
        )

    # ─── steps ──────────────────────────────────────────────────

    async def _ensure_identity_free(self, email: str, username: str) -> None:
        result = await self.db.execute(
            select(Account.id).where(Account.email == email),
        )
        if result.first() is not None:
            raise ConflictError("email", EMAIL_TAKEN)
        result = await self.db.execute(
            select(Account.id).where(Account.username == username),
        )
        if result.first() is not None:
            raise ConflictError("username", USERNAME_TAKEN)

    async def _create_account(
        self, email: str, username: str, password: str, role: AccountRole,
    ) -> Account:
        account = Account(
            email=email,
            username=username,
            password_hash=hash_password(password, self.bcrypt_rounds),
            role=role.value,
            is_email_verified=False,
        )
        self.db.add(account)
        try:
            await self.db.flush()
        except IntegrityError as e:
            field = _conflicting_field(e)
            raise ConflictError(
                field, EMAIL_TAKEN if field == "email" else USERNAME_TAKEN,
            )
        return account

    async def _create_profile(
        self,
        account: Account,
        full_name: str,
        timezone: str | None,
        country_code: str | None,
    ) -> CreatorProfile:
        profile = CreatorProfile(
            account_id=account.id,
            full_name=full_name,
            timezone=timezone or "UTC",
            country_code=country_code,
            onboarding_completed=False,
        )
        self.db.add(profile)
        await self.db.flush()
        return profile

    async def _create_store(
        self, profile: CreatorProfile, slug: str, name: str,
    ) -> Store:
        store = Store(
            creator_id=profile.id,
            slug=slug,
            name=name,
            type=StoreType.LINKSITE.value,
            status=int(StoreStatus.ACTIVE),
        )
        self.db.add(store)
        await self.db.flush()
        self.db.add(StoreTheme(store_id=store.id))
        await self.db.flush()
        return store

    async def _issue_tokens(self, account: Account) -> TokenPair:
        tokens = self.issuer.issue(account)
        await record_refresh_token(self.db, account.id, tokens)
        return tokens


def _conflicting_field(exc: IntegrityError) -> str:
    """Name the unique column reported by the driver (SQLite and Postgres both cite it)."""
    detail = str(exc.orig).lower()
    if "username" in detail:
        return "username"
    return "email"


def _log_failure(step: str, exc: Exception, **fields: str) -> None:
    logger.error(
        f"Signup failed at step '{step}': {exc}",
        extra={"step": step, **fields},
        exc_info=True,
    )
