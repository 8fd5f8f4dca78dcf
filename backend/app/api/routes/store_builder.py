"""Store Builder Routes — store settings, sections, pages, blocks and theme.

Invariants:
    - Reads of sections/pages/blocks/theme are public; every mutation needs a bearer token
    - Ownership is enforced in StoreBuilderService (403), never in the route
    - Reorder endpoints answer with the parent's full, freshly ordered list

Design Decisions:
    - One router for the whole builder surface: paths span /stores, /sections,
      /pages and /blocks but share one service
    - Partial updates forwarded as model_dump(exclude_unset=True)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import Principal, get_current_principal
from app.core.domain_types import PageId, StoreId
from app.infrastructure.database import get_db
from app.schemas.store_builder import (
    BlockCreate, BlockListResponse, BlockResponse, BlocksReorder, BlockUpdate,
    PageCreate, PageListResponse, PageResponse, PagesReorder, PageUpdate,
    SectionCreate, SectionListResponse, SectionResponse, SectionsReorder,
    SectionUpdate, StoreResponse, StoreUpdate, ThemeResponse, ThemeUpdate,
)
from app.schemas.storefront import StorefrontResponse
from app.services.store_builder import StoreBuilderService
from app.services.storefront_reader import StorefrontReader

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["store-builder"])


def _builder(db: AsyncSession = Depends(get_db)) -> StoreBuilderService:
    return StoreBuilderService(db)


# --- Store --------------------------------------------------------------------

@router.get("/stores/self", response_model=StoreResponse)
async def get_own_store(
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    """The caller's store, created at creator signup."""
    return await builder.get_store(principal.account_id)


@router.get("/stores/self/preview", response_model=StorefrontResponse)
async def preview_own_store(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Full aggregate of the caller's store, drafts included."""
    aggregate = await StorefrontReader(db).by_owner(principal.account_id)
    return StorefrontResponse.from_aggregate(aggregate)


@router.patch("/stores/{store_id}", response_model=StoreResponse)
async def update_store(
    store_id: StoreId,
    body: StoreUpdate,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    return await builder.update_store(
        principal.account_id, store_id, body.model_dump(exclude_unset=True),
    )


# --- Sections -----------------------------------------------------------------

@router.get("/stores/{store_id}/sections", response_model=SectionListResponse)
async def list_sections(
    store_id: StoreId, builder: StoreBuilderService = Depends(_builder),
):
    return {"sections": await builder.list_sections(store_id)}


@router.post(
    "/stores/{store_id}/sections", response_model=SectionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_section(
    store_id: StoreId,
    body: SectionCreate,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    return await builder.create_section(
        principal.account_id, store_id,
        type=body.type.value, data=body.data, position=body.position,
    )


@router.patch("/stores/{store_id}/sections/order", response_model=SectionListResponse)
async def reorder_sections(
    store_id: StoreId,
    body: SectionsReorder,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    """Apply a batch of section positions atomically."""
    sections = await builder.reorder_sections(
        principal.account_id, store_id,
        [item.to_update() for item in body.sections],
    )
    return {"sections": sections}


@router.patch("/sections/{section_id}", response_model=SectionResponse)
async def update_section(
    section_id: UUID,
    body: SectionUpdate,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    return await builder.update_section(
        principal.account_id, section_id, body.model_dump(exclude_unset=True),
    )


@router.delete("/sections/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_section(
    section_id: UUID,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    await builder.delete_section(principal.account_id, section_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Pages --------------------------------------------------------------------

@router.get("/stores/{store_id}/pages", response_model=PageListResponse)
async def list_pages(
    store_id: StoreId, builder: StoreBuilderService = Depends(_builder),
):
    return {"pages": await builder.list_pages(store_id)}


@router.post(
    "/stores/{store_id}/pages", response_model=PageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_page(
    store_id: StoreId,
    body: PageCreate,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    return await builder.create_page(
        principal.account_id, store_id,
        slug=body.slug, type=body.type.value, product_id=body.product_id,
        data=body.data, position=body.position,
    )


@router.patch("/stores/{store_id}/pages/order", response_model=PageListResponse)
async def reorder_pages(
    store_id: StoreId,
    body: PagesReorder,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    pages = await builder.reorder_pages(
        principal.account_id, store_id,
        [item.to_update() for item in body.pages],
    )
    return {"pages": pages}


@router.patch("/pages/{page_id}", response_model=PageResponse)
async def update_page(
    page_id: PageId,
    body: PageUpdate,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    return await builder.update_page(
        principal.account_id, page_id, body.model_dump(exclude_unset=True),
    )


@router.delete("/pages/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_page(
    page_id: PageId,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    """Delete a page together with its blocks."""
    await builder.delete_page(principal.account_id, page_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Blocks -------------------------------------------------------------------

@router.get("/pages/{page_id}/blocks", response_model=BlockListResponse)
async def list_blocks(
    page_id: PageId, builder: StoreBuilderService = Depends(_builder),
):
    return {"blocks": await builder.list_blocks(page_id)}


@router.post(
    "/pages/{page_id}/blocks", response_model=BlockResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_block(
    page_id: PageId,
    body: BlockCreate,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    return await builder.create_block(
        principal.account_id, page_id,
        type=body.type.value, data=body.data, position=body.position,
    )


@router.patch("/pages/{page_id}/blocks/order", response_model=BlockListResponse)
async def reorder_blocks(
    page_id: PageId,
    body: BlocksReorder,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    blocks = await builder.reorder_blocks(
        principal.account_id, page_id,
        [item.to_update() for item in body.blocks],
    )
    return {"blocks": blocks}


@router.patch("/blocks/{block_id}", response_model=BlockResponse)
async def update_block(
    block_id: UUID,
    body: BlockUpdate,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    return await builder.update_block(
        principal.account_id, block_id, body.model_dump(exclude_unset=True),
    )


@router.delete("/blocks/{block_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_block(
    block_id: UUID,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    await builder.delete_block(principal.account_id, block_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Theme --------------------------------------------------------------------

@router.get("/stores/{store_id}/theme", response_model=ThemeResponse)
async def get_theme(
    store_id: StoreId, builder: StoreBuilderService = Depends(_builder),
):
    return await builder.get_theme(store_id)


@router.patch("/stores/{store_id}/theme", response_model=ThemeResponse)
async def update_theme(
    store_id: StoreId,
    body: ThemeUpdate,
    principal: Principal = Depends(get_current_principal),
    builder: StoreBuilderService = Depends(_builder),
):
    return await builder.update_theme(principal.account_id, store_id, body.config)
