"""StoreTheme ORM — visual configuration of a store (1:1)."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base

DEFAULT_THEME = {
    "primaryColor": "#000000",
    "secondaryColor": "#FFFFFF",
    "fontFamily": "Inter",
    "fontSize": "16px",
    "borderRadius": "8px",
    "buttonStyle": "rounded",
}


class StoreTheme(Base):
    __tablename__ = "store_themes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    store_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    config: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=lambda: dict(DEFAULT_THEME),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
