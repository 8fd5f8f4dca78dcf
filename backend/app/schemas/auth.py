"""Auth Schemas — signup, login and token exchange payloads.

Invariants:
    - Slug format validated here (lowercase letters, digits, hyphen; 3-30) so a
      malformed slug never reaches the ledger
    - Email validated and lower-cased; username and full name stripped
    - Signup passwords fit bcrypt's 72-byte input (UTF-8), so hashing never fails
"""

from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.core.slug_rules import is_valid_slug
from app.infrastructure.security import BCRYPT_MAX_BYTES, password_fits
from app.schemas.base import CamelModel


class SignupRequest(CamelModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(min_length=8, max_length=128)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, v: str) -> str:
        if not password_fits(v):
            raise ValueError(f"password cannot exceed {BCRYPT_MAX_BYTES} bytes")
        return v


class CreatorSignupRequest(SignupRequest):
    """Creator signup — account, profile and storefront slug in one request."""
    slug: str
    full_name: str = Field(min_length=1, max_length=120)
    timezone: str | None = Field(None, max_length=64)
    country_code: str | None = Field(None, min_length=2, max_length=2)

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v: str) -> str:
        if not is_valid_slug(v):
            raise ValueError(
                "slug must be 3-30 characters of lowercase letters, digits or hyphens",
            )
        return v

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("fullName cannot be empty or whitespace")
        return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class RefreshRequest(CamelModel):
    refresh_token: str = Field(min_length=1)


class CreatorProfileSummary(CamelModel):
    full_name: str
    timezone: str


class UserResponse(CamelModel):
    id: UUID
    email: str
    username: str
    role: str
    creator_profile: CreatorProfileSummary | None = None
    store_slug: str | None = None


class TokenResponse(CamelModel):
    access_token: str
    refresh_token: str


class AuthResponse(TokenResponse):
    user: UserResponse
