"""Public Routes — the storefront as visitors see it.

Invariants:
    - No authentication; only ACTIVE stores and PUBLISHED content are served
    - Mounted outside /api/v1 (storefront URLs are shared publicly)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database import get_db
from app.schemas.storefront import StorefrontResponse
from app.services.storefront_reader import StorefrontReader

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/store/{slug}", response_model=StorefrontResponse)
async def get_storefront(slug: str, db: AsyncSession = Depends(get_db)):
    aggregate = await StorefrontReader(db).by_slug(slug)
    return StorefrontResponse.from_aggregate(aggregate)
