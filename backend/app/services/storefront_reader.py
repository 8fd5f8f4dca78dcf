"""Storefront Reader — read-only assembly of the full store aggregate.

Invariants:
    - Never writes
    - by_slug() only serves ACTIVE stores and only PUBLISHED products/sections/pages
    - by_owner() serves the caller's store with every status (builder preview)
    - Every list ascending by position (ties by created_at, then id)
    - Blocks nested under their page, in the page's own block order

Design Decisions:
    - Lists read through OrderedCollection instead of ORM relationships: one place
      owns the ordering guarantee, and the identity map cannot hand back a stale
      collection
"""

from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import (
    AccountId, PageStatus, ProductStatus, SectionStatus, StoreStatus,
)
from app.core.errors import ResourceNotFoundError
from app.models.creator_profile import CreatorProfile
from app.models.page_block import PageBlock
from app.models.product import Product
from app.models.store import Store
from app.models.store_page import StorePage
from app.models.store_section import StoreSection
from app.models.store_theme import StoreTheme
from app.services.ordered_collection import (
    BLOCKS, PAGES, PRODUCTS, SECTIONS, OrderedCollection,
)


@dataclass
class PageView:
    page: StorePage
    blocks: list[PageBlock] = field(default_factory=list)


@dataclass
class StorefrontAggregate:
    store: Store
    creator: CreatorProfile
    theme: StoreTheme | None
    products: list[Product]
    sections: list[StoreSection]
    pages: list[PageView]


class StorefrontReader:
    """Composes store, creator, theme and ordered children into one read model."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def by_slug(self, slug: str) -> StorefrontAggregate:
        """Public storefront: ACTIVE store, PUBLISHED content only."""
        result = await self.db.execute(
            select(Store)
            .where(Store.slug == slug)
            .where(Store.status == int(StoreStatus.ACTIVE)),
        )
        store = result.scalar_one_or_none()
        if store is None:
            raise ResourceNotFoundError(
                "Store", slug, message="Store not found or is not active",
            )
        return await self._assemble(store, published_only=True)

    async def by_owner(self, account_id: AccountId) -> StorefrontAggregate:
        """Builder preview of the caller's store, every status included."""
        result = await self.db.execute(
            select(Store)
            .join(CreatorProfile, Store.creator_id == CreatorProfile.id)
            .where(CreatorProfile.account_id == account_id),
        )
        store = result.scalar_one_or_none()
        if store is None:
            raise ResourceNotFoundError("Store", str(account_id))
        return await self._assemble(store, published_only=False)

    async def _assemble(
        self, store: Store, published_only: bool,
    ) -> StorefrontAggregate:
        creator = await self.db.get(CreatorProfile, store.creator_id)
        theme_result = await self.db.execute(
            select(StoreTheme).where(StoreTheme.store_id == store.id),
        )

        if published_only:
            product_filter = [ProductStatus.PUBLISHED.value]
            section_filter = [int(SectionStatus.PUBLISHED)]
            page_filter = [int(PageStatus.PUBLISHED)]
        else:
            product_filter = section_filter = page_filter = None

        products = await OrderedCollection(self.db, PRODUCTS).list(
            store.creator_id, product_filter,
        )
        sections = await OrderedCollection(self.db, SECTIONS).list(
            store.id, section_filter,
        )
        blocks = OrderedCollection(self.db, BLOCKS)
        pages = [
            PageView(page=page, blocks=await blocks.list(page.id))
            for page in await OrderedCollection(self.db, PAGES).list(
                store.id, page_filter,
            )
        ]

        return StorefrontAggregate(
            store=store,
            creator=creator,
            theme=theme_result.scalar_one_or_none(),
            products=products,
            sections=sections,
            pages=pages,
        )
