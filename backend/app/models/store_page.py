"""StorePage ORM — a product landing page, ordered within its store.

Invariants:
    - Always belongs to a Store (store_id FK); slug globally unique
    - status: DRAFT(0) | PUBLISHED(1) | ARCHIVED(2); new pages start DRAFT
    - Owns its blocks: deleting a page deletes its blocks

Design Decisions:
    - blocks relationship with delete-orphan cascade: ORM cascade works on SQLite,
      where FK cascades are off unless enabled per connection
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, SmallInteger, DateTime, JSON, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class StorePage(Base):
    __tablename__ = "store_pages"
    __table_args__ = (
        Index("ix_store_pages_store_id_position", "store_id", "position"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    store_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
    )
    product_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
    )
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, default=0,
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

    blocks: Mapped[list["PageBlock"]] = relationship(
        "PageBlock", back_populates="page",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="PageBlock.position",
    )
