"""Storefront Schemas — the public (and builder-preview) store aggregate."""

from datetime import datetime
from typing import Any
from uuid import UUID

from app.schemas.base import CamelModel
from app.schemas.product import ProductResponse
from app.schemas.store_builder import (
    BlockResponse, PageResponse, SectionResponse, ThemeResponse,
)
from app.services.storefront_reader import StorefrontAggregate


class CreatorPublic(CamelModel):
    """Public creator fields only: no account data."""
    id: UUID
    full_name: str
    profile_image: str | None = None
    bio: str | None = None
    socials: dict[str, Any] | None = None


class PageWithBlocks(PageResponse):
    blocks: list[BlockResponse] = []


class StorefrontResponse(CamelModel):
    id: UUID
    slug: str
    name: str
    description: str | None = None
    type: str
    status: int
    created_at: datetime
    updated_at: datetime
    creator_profile: CreatorPublic
    theme: ThemeResponse | None = None
    products: list[ProductResponse]
    sections: list[SectionResponse]
    pages: list[PageWithBlocks]

    @classmethod
    def from_aggregate(cls, aggregate: StorefrontAggregate) -> "StorefrontResponse":
        store = aggregate.store
        return cls(
            id=store.id,
            slug=store.slug,
            name=store.name,
            description=store.description,
            type=store.type,
            status=store.status,
            created_at=store.created_at,
            updated_at=store.updated_at,
            creator_profile=CreatorPublic.model_validate(aggregate.creator),
            theme=(
                ThemeResponse.model_validate(aggregate.theme)
                if aggregate.theme is not None else None
            ),
            products=[ProductResponse.model_validate(p) for p in aggregate.products],
            sections=[SectionResponse.model_validate(s) for s in aggregate.sections],
            pages=[
                PageWithBlocks(
                    **PageResponse.model_validate(view.page).model_dump(),
                    blocks=[BlockResponse.model_validate(b) for b in view.blocks],
                )
                for view in aggregate.pages
            ],
        )
