"""Store ORM — the storefront owned by a creator.

Invariants:
    - One store per creator profile (creator_id unique)
    - slug is unique and equals the ACTIVE slug reservation created at signup
    - status: DRAFT(0) | ACTIVE(1) | ARCHIVED(2); only ACTIVE stores are public

Design Decisions:
    - Sections and pages are NOT mapped as relationships: they are always read
      through the ordered collection queries, which own the ordering guarantee
    - Child rows removed by FK ON DELETE CASCADE
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, SmallInteger, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class Store(Base):
    """Store aggregate root — parent of sections and pages."""
    __tablename__ = "stores"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    creator_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("creator_profiles.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="linksite",
    )
    status: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, default=1,
    )
    slug: Mapped[str] = mapped_column(
        String(30), nullable=False, unique=True,
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
