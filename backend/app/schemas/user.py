"""User Schemas — public user view, profile edits and the paginated listing.

Invariants:
    - bio at most 500 characters, profileImage a URL of at most 500
    - fullName and timezone cannot be cleared with null; bio, profileImage and
      countryCode can
    - socials values are merged into the stored map, never replace it wholesale
"""

from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.base import CamelModel, PartialUpdate


class CreatorProfileUpdate(PartialUpdate):
    non_nullable = ("full_name", "timezone")

    full_name: str | None = Field(None, min_length=1, max_length=120)
    profile_image: str | None = Field(None, max_length=500, pattern=r"^https?://")
    bio: str | None = Field(None, max_length=500)
    socials: dict[str, str] | None = None
    timezone: str | None = Field(None, min_length=1, max_length=64)
    country_code: str | None = Field(None, min_length=2, max_length=2)

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("fullName cannot be empty or whitespace")
        return v


class UserProfileUpdate(CamelModel):
    creator_profile: CreatorProfileUpdate | None = None


class PublicCreatorProfile(CamelModel):
    full_name: str
    profile_image: str | None = None
    bio: str | None = None
    socials: dict[str, Any] = Field(default_factory=dict)

    @field_validator("socials", mode="before")
    @classmethod
    def empty_socials(cls, v: Any) -> Any:
        return v or {}


class UserPublic(CamelModel):
    id: UUID
    email: str
    username: str
    creator_profile: PublicCreatorProfile | None = None


class PageMeta(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class UserListResponse(CamelModel):
    users: list[UserPublic]
    meta: PageMeta
