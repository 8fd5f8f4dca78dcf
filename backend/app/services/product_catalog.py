"""Product Catalog — a creator's sellable items, ordered by position.

Invariants:
    - Every mutation requires the caller's creator profile to own the product (403)
    - A caller without a creator profile gets 404 with signup guidance
    - New products start DRAFT at the end of the catalog (append semantics)
    - reorder rejects the whole batch on a missing product (404) or a product of
      another creator (403); nothing is written in either case
"""

import logging
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import AccountId, ProductStatus
from app.core.errors import ForbiddenError, ResourceNotFoundError
from app.core.ordering import PositionUpdate
from app.models.creator_profile import CreatorProfile
from app.models.product import Product
from app.services.ordered_collection import PRODUCTS, OrderedCollection

logger = logging.getLogger(__name__)

PRODUCT_EDITABLE = (
    "type", "title", "description", "price", "currency", "thumbnail_url", "status",
)
NO_PROFILE = (
    "Creator profile not found. Please use the creator-signup endpoint "
    "to create a creator account."
)


class ProductCatalogService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.products = OrderedCollection(db, PRODUCTS)

    async def list_products(self, account_id: AccountId) -> list[Product]:
        profile = await self._profile_of(account_id)
        return await self.products.list(profile.id)

    async def get_product(self, product_id: UUID) -> Product:
        return await self.products.get(product_id)

    async def create_product(
        self,
        account_id: AccountId,
        type: str,
        title: str,
        price: float,
        description: str | None = None,
        currency: str | None = None,
        thumbnail_url: str | None = None,
    ) -> Product:
        profile = await self._profile_of(account_id)
        product = await self.products.append(
            profile.id,
            type=type,
            title=title,
            description=description,
            price=price,
            currency=currency or "USD",
            thumbnail_url=thumbnail_url,
            status=ProductStatus.DRAFT.value,
        )
        logger.info(
            "Product created",
            extra={"entity_id": str(product.id), "parent_id": str(profile.id)},
        )
        return product

    async def update_product(
        self, account_id: AccountId, product_id: UUID, changes: dict[str, Any],
    ) -> Product:
        product = await self._owned_product(account_id, product_id)
        for name in PRODUCT_EDITABLE:
            if name in changes:
                value = changes[name]
                setattr(product, name, value.value if isinstance(value, Enum) else value)
        await self.db.commit()
        await self.db.refresh(product)
        return product

    async def update_status(
        self, account_id: AccountId, product_id: UUID, status: ProductStatus,
    ) -> Product:
        return await self.update_product(
            account_id, product_id, {"status": ProductStatus(status).value},
        )

    async def delete_product(self, account_id: AccountId, product_id: UUID) -> None:
        await self._owned_product(account_id, product_id)
        await self.products.remove(product_id)

    async def reorder_products(
        self, account_id: AccountId, updates: list[PositionUpdate],
    ) -> list[Product]:
        profile = await self._profile_of(account_id)
        return await self.products.reorder(profile.id, updates)

    async def _profile_of(self, account_id: AccountId) -> CreatorProfile:
        result = await self.db.execute(
            select(CreatorProfile).where(CreatorProfile.account_id == account_id),
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            raise ResourceNotFoundError(
                "CreatorProfile", str(account_id), message=NO_PROFILE,
            )
        return profile

    async def _owned_product(self, account_id: AccountId, product_id: UUID) -> Product:
        product = await self.products.get(product_id)
        result = await self.db.execute(
            select(CreatorProfile.id).where(CreatorProfile.account_id == account_id),
        )
        if result.scalar_one_or_none() != product.creator_id:
            raise ForbiddenError("Product", str(product_id))
        return product
