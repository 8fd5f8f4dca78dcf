"""SlugReservation ORM — ledger row tracking a storefront slug through its lifecycle.

Invariants:
    - At most one row per slug value (unique constraint — sole arbiter under races)
    - owner_id is NULL only while state == RESERVED
    - Once ACTIVE, owner_id never changes for the life of the row
    - Deleting the owning account deletes its rows (CASCADE), freeing the slug
    - state transitions: RESERVED -> ACTIVE (signup commit) -> RELEASED (abandonment)

Design Decisions:
    - Expiry of RESERVED rows is computed at read time (core/slug_rules.py), so there
      is no EXPIRED state and no sweeper
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class SlugReservation(Base):
    """Slug ledger entry."""
    __tablename__ = "store_slugs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    slug: Mapped[str] = mapped_column(
        String(30), nullable=False, unique=True,
    )
    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=True, index=True,
    )
    state: Mapped[str] = mapped_column(
        String(20), nullable=False, default="RESERVED",
    )
    reserved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    activated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
