"""Store Builder Schemas — store settings, sections, pages, blocks, theme and reorder batches.

Invariants:
    - Types are validated against the domain enums; status codes against the IntEnums
    - Reorder batches: at least one item, positions >= 0, ids unique within the batch
    - Update models are partial: routes forward model_dump(exclude_unset=True);
      explicit null is refused for NOT NULL columns
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from app.core.domain_types import (
    BlockType, PageStatus, PageType, SectionStatus, SectionType, StoreType,
)
from app.core.ordering import PositionUpdate
from app.schemas.base import CamelModel, PartialUpdate


# --- Store --------------------------------------------------------------------

class StoreResponse(CamelModel):
    id: UUID
    creator_id: UUID
    slug: str
    name: str
    description: str | None = None
    type: str
    status: int
    created_at: datetime
    updated_at: datetime


class StoreUpdate(PartialUpdate):
    non_nullable = ("name", "type")

    name: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = Field(None, max_length=2000)
    type: StoreType | None = None


# --- Reorder ------------------------------------------------------------------

class PositionItem(CamelModel):
    id: UUID
    position: int = Field(ge=0)

    def to_update(self) -> PositionUpdate:
        return PositionUpdate(id=self.id, position=self.position)


def check_unique_ids(items: list[PositionItem]) -> list[PositionItem]:
    """Reject a batch that lists one id twice."""
    ids = [item.id for item in items]
    if len(ids) != len(set(ids)):
        raise ValueError("each id may appear only once per reorder batch")
    return items


class SectionsReorder(CamelModel):
    sections: list[PositionItem] = Field(min_length=1)

    @field_validator("sections")
    @classmethod
    def unique_ids(cls, v: list[PositionItem]) -> list[PositionItem]:
        return check_unique_ids(v)


class PagesReorder(CamelModel):
    pages: list[PositionItem] = Field(min_length=1)

    @field_validator("pages")
    @classmethod
    def unique_ids(cls, v: list[PositionItem]) -> list[PositionItem]:
        return check_unique_ids(v)


class BlocksReorder(CamelModel):
    blocks: list[PositionItem] = Field(min_length=1)

    @field_validator("blocks")
    @classmethod
    def unique_ids(cls, v: list[PositionItem]) -> list[PositionItem]:
        return check_unique_ids(v)


# --- Sections -----------------------------------------------------------------

class SectionCreate(CamelModel):
    type: SectionType
    data: dict[str, Any] = Field(default_factory=dict)
    position: int | None = Field(None, ge=0)


class SectionUpdate(PartialUpdate):
    non_nullable = ("type", "data", "status")

    type: SectionType | None = None
    data: dict[str, Any] | None = None
    status: SectionStatus | None = None


class SectionResponse(CamelModel):
    id: UUID
    store_id: UUID
    type: str
    status: int
    position: int
    data: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class SectionListResponse(CamelModel):
    sections: list[SectionResponse]


# --- Pages --------------------------------------------------------------------

class PageCreate(CamelModel):
    slug: str = Field(min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")
    type: PageType
    product_id: UUID | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    position: int | None = Field(None, ge=0)


class PageUpdate(PartialUpdate):
    non_nullable = ("slug", "type", "data", "status")

    slug: str | None = Field(None, min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")
    type: PageType | None = None
    product_id: UUID | None = None
    data: dict[str, Any] | None = None
    status: PageStatus | None = None


class PageResponse(CamelModel):
    id: UUID
    store_id: UUID
    product_id: UUID | None = None
    slug: str
    type: str
    status: int
    position: int
    data: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class PageListResponse(CamelModel):
    pages: list[PageResponse]


# --- Blocks -------------------------------------------------------------------

class BlockCreate(CamelModel):
    type: BlockType
    data: dict[str, Any] = Field(default_factory=dict)
    position: int | None = Field(None, ge=0)


class BlockUpdate(PartialUpdate):
    non_nullable = ("type", "data")

    type: BlockType | None = None
    data: dict[str, Any] | None = None


class BlockResponse(CamelModel):
    id: UUID
    page_id: UUID
    type: str
    position: int
    data: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class BlockListResponse(CamelModel):
    blocks: list[BlockResponse]


# --- Theme --------------------------------------------------------------------

class ThemeUpdate(CamelModel):
    config: dict[str, Any] = Field(min_length=1)


class ThemeResponse(CamelModel):
    id: UUID
    store_id: UUID
    config: dict[str, Any]
    updated_at: datetime
