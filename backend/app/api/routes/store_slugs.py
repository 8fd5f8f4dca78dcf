"""Store Slug Routes — public availability check for storefront slugs.

Invariants:
    - Read-only: checking never reserves (reservation happens only inside creator signup)
    - Malformed slugs rejected with 400 before the ledger is consulted
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.slug_rules import SLUG_PATTERN
from app.infrastructure.database import get_db
from app.schemas.store_slug import SlugAvailabilityResponse
from app.services.slug_ledger import SlugLedger

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/store-slugs", tags=["store-slugs"])


@router.get("/check", response_model=SlugAvailabilityResponse)
async def check_slug(
    slug: str = Query(..., pattern=SLUG_PATTERN.pattern),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Is this slug free to claim at creator signup?"""
    ledger = SlugLedger(db, timedelta(hours=settings.slug_reservation_ttl_hours))
    availability = await ledger.check_availability(slug)
    return SlugAvailabilityResponse(
        available=availability.available, message=availability.message,
    )
