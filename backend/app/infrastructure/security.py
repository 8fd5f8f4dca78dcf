"""Credential Helpers — bcrypt password hashing and JWT issuance/verification.

Invariants:
    - Passwords are stored only as bcrypt hashes (work factor from settings)
    - Access and refresh tokens are signed with DIFFERENT secrets
    - Refresh tokens are persisted only as a SHA-256 digest (never the raw token)
    - Every token carries a unique jti, so two tokens issued in the same second differ
    - bcrypt reads at most 72 bytes: longer passwords are refused at hashing and
      never verify

Design Decisions:
    - SHA-256 digest for refresh records (not bcrypt): lookups by exact digest, and
      JWTs exceed bcrypt's 72-byte input limit
    - decode_* raise AuthenticationError; JWTError never leaks past this module
"""

import hashlib
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from app.config import Settings
from app.core.errors import AuthenticationError, InvalidInputError

ACCESS = "access"
REFRESH = "refresh"
BCRYPT_MAX_BYTES = 72


def password_fits(password: str) -> bool:
    return len(password.encode("utf-8")) <= BCRYPT_MAX_BYTES


def hash_password(password: str, rounds: int = 12) -> str:
    """Generate a bcrypt hash for the password."""
    if not password_fits(password):
        raise InvalidInputError(
            f"Password cannot be longer than {BCRYPT_MAX_BYTES} bytes", "password",
        )
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    if not password_fits(password):
        return False
    return bcrypt.checkpw(
        password.encode("utf-8"), hashed_password.encode("utf-8"),
    )


def digest_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    refresh_expires_at: datetime


class TokenIssuer:
    """Issues and verifies the access/refresh JWT pair."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def issue(self, account: Any) -> TokenPair:
        """Issue a fresh pair for an object exposing id, email, username, role."""
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(account.id),
            "email": account.email,
            "username": account.username,
            "role": _role_value(account.role),
        }
        access_exp = now + timedelta(
            minutes=self._settings.access_token_expire_minutes,
        )
        refresh_exp = now + timedelta(
            days=self._settings.refresh_token_expire_days,
        )
        access = self._encode(
            claims, ACCESS, now, access_exp, self._settings.jwt_secret,
        )
        refresh = self._encode(
            claims, REFRESH, now, refresh_exp, self._settings.jwt_refresh_secret,
        )
        return TokenPair(access, refresh, refresh_exp)

    def decode_access(self, token: str) -> dict:
        return self._decode(token, ACCESS, self._settings.jwt_secret)

    def decode_refresh(self, token: str) -> dict:
        return self._decode(token, REFRESH, self._settings.jwt_refresh_secret)

    def _encode(
        self, claims: dict, token_type: str,
        issued_at: datetime, expires_at: datetime, secret: str,
    ) -> str:
        payload = {
            **claims,
            "token_type": token_type,
            "jti": uuid.uuid4().hex,
            "iat": issued_at,
            "exp": expires_at,
        }
        return jwt.encode(payload, secret, algorithm=self._settings.jwt_algorithm)

    def _decode(self, token: str, token_type: str, secret: str) -> dict:
        try:
            payload = jwt.decode(
                token, secret, algorithms=[self._settings.jwt_algorithm],
            )
        except JWTError:
            raise AuthenticationError(f"Invalid or expired {token_type} token")
        if payload.get("token_type") != token_type or not payload.get("sub"):
            raise AuthenticationError(f"Invalid {token_type} token")
        return payload


def _role_value(role: Any) -> str:
    return role.value if hasattr(role, "value") else str(role)
