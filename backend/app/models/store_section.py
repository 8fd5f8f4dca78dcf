"""StoreSection ORM — a link-in-bio section, ordered within its store.

Invariants:
    - Always belongs to a Store (store_id FK)
    - position is an integer ordering key among the store's sections
    - status: DRAFT(0) | PUBLISHED(1) | HIDDEN(2); new sections start PUBLISHED

Design Decisions:
    - (store_id, position) indexed but NOT unique: a partial reorder may legitimately
      leave two siblings on one position, and a swap must not fail mid-batch
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, SmallInteger, DateTime, JSON, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class StoreSection(Base):
    __tablename__ = "store_sections"
    __table_args__ = (
        Index("ix_store_sections_store_id_position", "store_id", "position"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    store_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, default=1,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
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
