"""Product Schemas — catalog create/update payloads and responses.

Invariants:
    - price >= 0, currency is a 3-letter code
    - status changes validated against ProductStatus (400 on unknown values)
    - description and thumbnailUrl may be cleared with null; other fields may not
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from app.core.domain_types import ProductStatus, ProductType
from app.schemas.base import CamelModel, PartialUpdate
from app.schemas.store_builder import PositionItem, check_unique_ids


class ProductCreate(CamelModel):
    type: ProductType
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=10_000)
    price: float = Field(ge=0)
    currency: str | None = Field(None, pattern=r"^[A-Z]{3}$")
    thumbnail_url: str | None = Field(None, max_length=500)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class ProductUpdate(PartialUpdate):
    non_nullable = ("type", "title", "price", "currency", "status")

    type: ProductType | None = None
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=10_000)
    price: float | None = Field(None, ge=0)
    currency: str | None = Field(None, pattern=r"^[A-Z]{3}$")
    thumbnail_url: str | None = Field(None, max_length=500)
    status: ProductStatus | None = None


class ProductStatusUpdate(CamelModel):
    status: ProductStatus


class ProductsReorder(CamelModel):
    products: list[PositionItem] = Field(min_length=1)

    @field_validator("products")
    @classmethod
    def unique_ids(cls, v: list[PositionItem]) -> list[PositionItem]:
        return check_unique_ids(v)


class ProductResponse(CamelModel):
    id: UUID
    creator_id: UUID
    type: str
    title: str
    description: str | None = None
    price: float
    currency: str
    thumbnail_url: str | None = None
    status: str
    position: int
    created_at: datetime
    updated_at: datetime


class ProductListResponse(CamelModel):
    products: list[ProductResponse]
