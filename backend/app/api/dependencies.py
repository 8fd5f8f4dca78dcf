"""API Dependencies — per-request wiring of settings, credentials and the event emitter.

Invariants:
    - Bearer authentication yields a Principal or raises AuthenticationError (401)
    - The event emitter is the dispatcher created by the lifespan (app.state.events)
    - Nothing here holds module-level state besides the HTTPBearer scheme

Design Decisions:
    - auto_error=False on HTTPBearer: a missing header becomes our AuthenticationError
      envelope instead of FastAPI's default 403
    - Services are constructed per request from the injected session, never cached
"""

from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import Settings, get_settings
from app.core.domain_types import AccountId
from app.core.errors import AuthenticationError
from app.core.repository_protocols import EventEmitter
from app.infrastructure.security import TokenIssuer

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, decoded from the access token."""
    account_id: AccountId
    email: str
    username: str
    role: str


def get_token_issuer(settings: Settings = Depends(get_settings)) -> TokenIssuer:
    return TokenIssuer(settings)


def get_event_emitter(request: Request) -> EventEmitter:
    emitter = getattr(request.app.state, "events", None)
    if emitter is None:
        raise RuntimeError("Event dispatcher not initialized")
    return emitter


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token provided")
    payload = issuer.decode_access(credentials.credentials)
    try:
        account_id = AccountId(UUID(payload["sub"]))
    except ValueError:
        raise AuthenticationError("Invalid access token")
    return Principal(
        account_id=account_id,
        email=payload.get("email", ""),
        username=payload.get("username", ""),
        role=payload.get("role", ""),
    )
