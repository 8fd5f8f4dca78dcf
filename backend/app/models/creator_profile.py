"""CreatorProfile ORM — display/profile data of a creator account.

Invariants:
    - At most one per account (account_id unique)
    - Created with its Account at creator signup, or by the profile upsert
    - timezone defaults to "UTC"; onboarding_completed starts False

Design Decisions:
    - Products hang off the profile (not the account): parent of the product ordering;
      removal relies on the products.creator_id ON DELETE CASCADE
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class CreatorProfile(Base):
    """Creator profile entity — 1:1 with Account."""
    __tablename__ = "creator_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    account_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    full_name: Mapped[str] = mapped_column(String(120), nullable=False)
    timezone: Mapped[str] = mapped_column(
        String(64), nullable=False, default="UTC",
    )
    country_code: Mapped[str | None] = mapped_column(String(2), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    socials: Mapped[dict | None] = mapped_column(JSON, nullable=True, default=dict)
    onboarding_completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    account: Mapped["Account"] = relationship(
        "Account", back_populates="creator_profile",
    )