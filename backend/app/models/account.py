"""Account ORM — persists a login identity (plain user, creator or admin).

Invariants:
    - email and username are each globally unique (DB constraint is the arbiter)
    - password_hash is a bcrypt hash, never the raw password
    - identity fields are immutable after signup

Design Decisions:
    - role stored as string: values from AccountRole (core/domain_types.py)
    - creator_profile is 1:1: created at creator signup, or later through the
      profile upsert (role unchanged)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class Account(Base):
    """Account entity — one per signup."""
    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    username: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="USER",
    )
    is_email_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    creator_profile: Mapped["CreatorProfile"] = relationship(
        "CreatorProfile", back_populates="account", uselist=False,
        lazy="selectin",
    )
