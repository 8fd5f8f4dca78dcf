"""Store Builder — creator-side editing of the store, its sections, pages, blocks and theme.

Invariants:
    - Every mutation checks that the caller's creator profile owns the store (403 otherwise)
    - Ordering of sections, pages and blocks goes through OrderedCollection only
    - Page slugs are globally unique (409 on duplicate, checked before the write)
    - Deleting a page deletes its blocks (ORM cascade)

Design Decisions:
    - Ownership resolved through the store for blocks (block -> page -> store): blocks
      carry no store column of their own
    - Partial updates take a dict of present fields (schemas use exclude_unset), so
      "not sent" and "sent as null" stay distinguishable
    - The store itself is created by the signup orchestrator, never here
"""

import logging
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import AccountId, PageId, StoreId
from app.core.errors import ConflictError, ForbiddenError, ResourceNotFoundError
from app.core.ordering import PositionUpdate
from app.models.creator_profile import CreatorProfile
from app.models.page_block import PageBlock
from app.models.store import Store
from app.models.store_page import StorePage
from app.models.store_section import StoreSection
from app.models.store_theme import DEFAULT_THEME, StoreTheme
from app.services.ordered_collection import (
    BLOCKS, PAGES, SECTIONS, OrderedCollection,
)

logger = logging.getLogger(__name__)

STORE_EDITABLE = ("name", "description", "type")
SECTION_EDITABLE = ("type", "data", "status")
PAGE_EDITABLE = ("slug", "type", "product_id", "data", "status")
BLOCK_EDITABLE = ("type", "data")


class StoreBuilderService:
    """Owner-checked editing operations over one store aggregate."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.sections = OrderedCollection(db, SECTIONS)
        self.pages = OrderedCollection(db, PAGES)
        self.blocks = OrderedCollection(db, BLOCKS)

    # ─── Store ──────────────────────────────────────────────────

    async def get_store(self, account_id: AccountId) -> Store:
        """The caller's own store (created at creator signup)."""
        profile = await self._profile_of(account_id)
        result = await self.db.execute(
            select(Store).where(Store.creator_id == profile.id),
        )
        store = result.scalar_one_or_none()
        if store is None:
            raise ResourceNotFoundError(
                "Store", str(profile.id),
                message="Store not found. Store is created during creator signup.",
            )
        return store

    async def update_store(
        self, account_id: AccountId, store_id: StoreId, changes: dict[str, Any],
    ) -> Store:
        store = await self._owned_store(account_id, store_id)
        _apply(store, changes, STORE_EDITABLE)
        await self.db.commit()
        await self.db.refresh(store)
        return store

    # ─── Sections ───────────────────────────────────────────────

    async def list_sections(self, store_id: StoreId) -> list[StoreSection]:
        await self._store(store_id)
        return await self.sections.list(store_id)

    async def create_section(
        self,
        account_id: AccountId,
        store_id: StoreId,
        type: str,
        data: dict,
        position: int | None = None,
    ) -> StoreSection:
        await self._owned_store(account_id, store_id)
        return await self.sections.append(
            store_id, position, type=type, data=data,
        )

    async def update_section(
        self, account_id: AccountId, section_id: UUID, changes: dict[str, Any],
    ) -> StoreSection:
        section = await self.sections.get(section_id)
        await self._owned_store(account_id, section.store_id)
        _apply(section, changes, SECTION_EDITABLE)
        await self.db.commit()
        await self.db.refresh(section)
        return section

    async def delete_section(self, account_id: AccountId, section_id: UUID) -> None:
        section = await self.sections.get(section_id)
        await self._owned_store(account_id, section.store_id)
        await self.sections.remove(section_id)

    async def reorder_sections(
        self, account_id: AccountId, store_id: StoreId, updates: list[PositionUpdate],
    ) -> list[StoreSection]:
        await self._owned_store(account_id, store_id)
        return await self.sections.reorder(store_id, updates)

    # ─── Pages ──────────────────────────────────────────────────

    async def list_pages(self, store_id: StoreId) -> list[StorePage]:
        await self._store(store_id)
        return await self.pages.list(store_id)

    async def create_page(
        self,
        account_id: AccountId,
        store_id: StoreId,
        slug: str,
        type: str,
        product_id: UUID | None = None,
        data: dict | None = None,
        position: int | None = None,
    ) -> StorePage:
        await self._owned_store(account_id, store_id)
        await self._ensure_page_slug_free(slug)
        return await self.pages.append(
            store_id, position,
            slug=slug, type=type, product_id=product_id, data=data or {},
        )

    async def update_page(
        self, account_id: AccountId, page_id: PageId, changes: dict[str, Any],
    ) -> StorePage:
        page = await self.pages.get(page_id)
        await self._owned_store(account_id, page.store_id)
        new_slug = changes.get("slug")
        if new_slug and new_slug != page.slug:
            await self._ensure_page_slug_free(new_slug)
        _apply(page, changes, PAGE_EDITABLE)
        await self.db.commit()
        await self.db.refresh(page)
        return page

    async def delete_page(self, account_id: AccountId, page_id: PageId) -> None:
        page = await self.pages.get(page_id)
        await self._owned_store(account_id, page.store_id)
        # blocks may have been appended through this session since the page loaded
        await self.db.refresh(page, attribute_names=["blocks"])
        await self.pages.remove(page_id)

    async def reorder_pages(
        self, account_id: AccountId, store_id: StoreId, updates: list[PositionUpdate],
    ) -> list[StorePage]:
        await self._owned_store(account_id, store_id)
        return await self.pages.reorder(store_id, updates)

    # ─── Blocks ─────────────────────────────────────────────────

    async def list_blocks(self, page_id: PageId) -> list[PageBlock]:
        await self.pages.get(page_id)
        return await self.blocks.list(page_id)

    async def create_block(
        self,
        account_id: AccountId,
        page_id: PageId,
        type: str,
        data: dict,
        position: int | None = None,
    ) -> PageBlock:
        page = await self.pages.get(page_id)
        await self._owned_store(account_id, page.store_id)
        return await self.blocks.append(page_id, position, type=type, data=data)

    async def update_block(
        self, account_id: AccountId, block_id: UUID, changes: dict[str, Any],
    ) -> PageBlock:
        block = await self.blocks.get(block_id)
        page = await self.pages.get(block.page_id)
        await self._owned_store(account_id, page.store_id)
        _apply(block, changes, BLOCK_EDITABLE)
        await self.db.commit()
        await self.db.refresh(block)
        return block

    async def delete_block(self, account_id: AccountId, block_id: UUID) -> None:
        block = await self.blocks.get(block_id)
        page = await self.pages.get(block.page_id)
        await self._owned_store(account_id, page.store_id)
        await self.blocks.remove(block_id)

    async def reorder_blocks(
        self, account_id: AccountId, page_id: PageId, updates: list[PositionUpdate],
    ) -> list[PageBlock]:
        page = await self.pages.get(page_id)
        await self._owned_store(account_id, page.store_id)
        return await self.blocks.reorder(page_id, updates)

    # ─── Theme ──────────────────────────────────────────────────

    async def get_theme(self, store_id: StoreId) -> StoreTheme:
        result = await self.db.execute(
            select(StoreTheme).where(StoreTheme.store_id == store_id),
        )
        theme = result.scalar_one_or_none()
        if theme is None:
            raise ResourceNotFoundError(
                "StoreTheme", str(store_id),
                message="Theme not found for this store",
            )
        return theme

    async def update_theme(
        self, account_id: AccountId, store_id: StoreId, config: dict[str, Any],
    ) -> StoreTheme:
        """Merge config over the current theme, creating it when missing."""
        await self._owned_store(account_id, store_id)
        result = await self.db.execute(
            select(StoreTheme).where(StoreTheme.store_id == store_id),
        )
        theme = result.scalar_one_or_none()
        if theme is None:
            theme = StoreTheme(store_id=store_id, config={**DEFAULT_THEME, **config})
            self.db.add(theme)
        else:
            theme.config = {**theme.config, **config}
        await self.db.commit()
        await self.db.refresh(theme)
        return theme

    # ─── Ownership ──────────────────────────────────────────────

    async def _profile_of(self, account_id: AccountId) -> CreatorProfile:
        result = await self.db.execute(
            select(CreatorProfile).where(CreatorProfile.account_id == account_id),
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            raise ResourceNotFoundError(
                "CreatorProfile", str(account_id),
                message=(
                    "Creator profile not found. Please use the creator-signup "
                    "endpoint to create a creator account."
                ),
            )
        return profile

    async def _store(self, store_id: StoreId) -> Store:
        store = await self.db.get(Store, store_id)
        if store is None:
            raise ResourceNotFoundError("Store", str(store_id))
        return store

    async def _owned_store(self, account_id: AccountId, store_id: StoreId) -> Store:
        store = await self._store(store_id)
        result = await self.db.execute(
            select(CreatorProfile.id).where(CreatorProfile.account_id == account_id),
        )
        if result.scalar_one_or_none() != store.creator_id:
            logger.warning(
                "Store mutation by non-owner rejected",
                extra={"account_id": str(account_id), "parent_id": str(store_id)},
            )
            raise ForbiddenError("Store", str(store_id))
        return store

    async def _ensure_page_slug_free(self, slug: str) -> None:
        result = await self.db.execute(
            select(StorePage.id).where(StorePage.slug == slug),
        )
        if result.first() is not None:
            raise ConflictError("slug", "Slug already exists")


def _apply(entity: Any, changes: dict[str, Any], editable: tuple[str, ...]) -> None:
    for name in editable:
        if name in changes:
            setattr(entity, name, _plain(changes[name]))


def _plain(value: Any) -> Any:
    """Enum members are stored by value."""
    return value.value if isinstance(value, Enum) else value
