"""Auth Routes — signup (plain and creator), login, token refresh, logout, me.

Invariants:
    - Bodies validated by Pydantic before any service call (400 on malformed input)
    - Signup endpoints answer 201 with the user, access token and refresh token
    - Conflicts surface as 409 naming the field; unexpected signup failures as 500
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import (
    Principal, get_current_principal, get_event_emitter, get_token_issuer,
)
from app.config import Settings, get_settings
from app.core.repository_protocols import EventEmitter
from app.infrastructure.database import get_db
from app.infrastructure.security import TokenIssuer
from app.models.account import Account
from app.schemas.auth import (
    AuthResponse, CreatorProfileSummary, CreatorSignupRequest, LoginRequest,
    RefreshRequest, SignupRequest, TokenResponse, UserResponse,
)
from app.services.auth_session import AuthSessionService
from app.services.signup_orchestrator import SignupOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _user_response(account: Account, store_slug: str | None = None) -> UserResponse:
    profile = account.creator_profile
    return UserResponse(
        id=account.id,
        email=account.email,
        username=account.username,
        role=account.role,
        creator_profile=(
            CreatorProfileSummary(
                full_name=profile.full_name, timezone=profile.timezone,
            )
            if profile is not None else None
        ),
        store_slug=store_slug,
    )


def _orchestrator(
    db: AsyncSession = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
    events: EventEmitter = Depends(get_event_emitter),
    settings: Settings = Depends(get_settings),
) -> SignupOrchestrator:
    return SignupOrchestrator(db, issuer, events, settings)


def _sessions(
    db: AsyncSession = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
    events: EventEmitter = Depends(get_event_emitter),
) -> AuthSessionService:
    return AuthSessionService(db, issuer, events)


@router.post(
    "/signup", response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def signup(
    body: SignupRequest,
    orchestrator: SignupOrchestrator = Depends(_orchestrator),
):
    """Register a plain (non-creator) account."""
    result = await orchestrator.signup(body.email, body.username, body.password)
    return AuthResponse(
        user=UserResponse(
            id=result.account.id,
            email=result.account.email,
            username=result.account.username,
            role=result.account.role,
        ),
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
    )


@router.post(
    "/creator-signup", response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def creator_signup(
    body: CreatorSignupRequest,
    orchestrator: SignupOrchestrator = Depends(_orchestrator),
):
    """Register a creator: account, profile, store and ACTIVE slug, atomically."""
    result = await orchestrator.signup_as_creator(
        email=body.email,
        username=body.username,
        password=body.password,
        slug=body.slug,
        full_name=body.full_name,
        timezone=body.timezone,
        country_code=body.country_code,
    )
    logger.info(
        "Creator registered",
        extra={"slug": body.slug, "account_id": str(result.account.id)},
    )
    return AuthResponse(
        user=UserResponse(
            id=result.account.id,
            email=result.account.email,
            username=result.account.username,
            role=result.account.role,
            creator_profile=CreatorProfileSummary(
                full_name=result.profile.full_name,
                timezone=result.profile.timezone,
            ),
            store_slug=result.reservation.slug,
        ),
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    sessions: AuthSessionService = Depends(_sessions),
):
    account, tokens = await sessions.login(body.email, body.password)
    return AuthResponse(
        user=_user_response(account),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    body: RefreshRequest,
    sessions: AuthSessionService = Depends(_sessions),
):
    """Rotate the refresh token; the presented one is revoked."""
    tokens = await sessions.refresh(body.refresh_token)
    return TokenResponse(
        access_token=tokens.access_token, refresh_token=tokens.refresh_token,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    principal: Principal = Depends(get_current_principal),
    sessions: AuthSessionService = Depends(_sessions),
):
    await sessions.logout(principal.account_id)


@router.get("/me", response_model=UserResponse)
async def me(
    principal: Principal = Depends(get_current_principal),
    sessions: AuthSessionService = Depends(_sessions),
):
    account = await sessions.current_account(principal.account_id)
    return _user_response(account)
