"""Product Routes — the caller's catalog: CRUD, status changes and reordering.

Invariants:
    - Every endpoint requires a bearer token except the single-product read,
      which is public like the storefront
    - /products/reorder is declared before /products/{product_id} so it is never
      captured by the id route
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import Principal, get_current_principal
from app.infrastructure.database import get_db
from app.schemas.product import (
    ProductCreate, ProductListResponse, ProductResponse, ProductsReorder,
    ProductStatusUpdate, ProductUpdate,
)
from app.services.product_catalog import ProductCatalogService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/products", tags=["products"])


def _catalog(db: AsyncSession = Depends(get_db)) -> ProductCatalogService:
    return ProductCatalogService(db)


@router.get("", response_model=ProductListResponse)
async def list_products(
    principal: Principal = Depends(get_current_principal),
    catalog: ProductCatalogService = Depends(_catalog),
):
    return {"products": await catalog.list_products(principal.account_id)}


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    principal: Principal = Depends(get_current_principal),
    catalog: ProductCatalogService = Depends(_catalog),
):
    return await catalog.create_product(
        principal.account_id,
        type=body.type.value,
        title=body.title,
        price=body.price,
        description=body.description,
        currency=body.currency,
        thumbnail_url=body.thumbnail_url,
    )


@router.patch("/reorder", response_model=ProductListResponse)
async def reorder_products(
    body: ProductsReorder,
    principal: Principal = Depends(get_current_principal),
    catalog: ProductCatalogService = Depends(_catalog),
):
    """Apply a batch of product positions atomically."""
    products = await catalog.reorder_products(
        principal.account_id, [item.to_update() for item in body.products],
    )
    return {"products": products}


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: UUID,
    catalog: ProductCatalogService = Depends(_catalog),
):
    return await catalog.get_product(product_id)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    principal: Principal = Depends(get_current_principal),
    catalog: ProductCatalogService = Depends(_catalog),
):
    return await catalog.update_product(
        principal.account_id, product_id, body.model_dump(exclude_unset=True),
    )


@router.patch("/{product_id}/status", response_model=ProductResponse)
async def update_product_status(
    product_id: UUID,
    body: ProductStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    catalog: ProductCatalogService = Depends(_catalog),
):
    return await catalog.update_status(principal.account_id, product_id, body.status)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: UUID,
    principal: Principal = Depends(get_current_principal),
    catalog: ProductCatalogService = Depends(_catalog),
):
    await catalog.delete_product(principal.account_id, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
