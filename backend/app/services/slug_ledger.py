"""Slug Ledger — reservation lifecycle and availability checks for storefront slugs.

Invariants:
    - check_availability never writes (stale RESERVED rows are ignored, not deleted)
    - reserve() inserts a RESERVED row with no owner and flushes immediately, so the
      unique constraint on store_slugs.slug decides races; the loser gets ConflictError
    - reserve() does NOT apply soft expiry: any existing row conflicts
    - activate() binds the owner exactly once; it never commits (caller owns the transaction)

Design Decisions:
    - Pure decision in core/slug_rules.py, IO here (ADR: functional core, imperative shell)
    - IntegrityError mapped to ConflictError at the flush site: the orchestrator sees
      the same error kind for the pre-check and the constraint path
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import AccountId, SlugState
from app.core.errors import ConflictError
from app.core.slug_rules import Availability, RESERVED_TTL, evaluate_availability
from app.models.slug_reservation import SlugReservation

logger = logging.getLogger(__name__)

SLUG_TAKEN = "Slug already taken"


class SlugLedger:
    """Identifier reservation ledger bound to one database session."""

    def __init__(self, db: AsyncSession, ttl: timedelta = RESERVED_TTL):
        self.db = db
        self.ttl = ttl

    async def find(self, slug: str) -> SlugReservation | None:
        result = await self.db.execute(
            select(SlugReservation).where(SlugReservation.slug == slug),
        )
        return result.scalar_one_or_none()

    async def check_availability(
        self, slug: str, now: datetime | None = None,
    ) -> Availability:
        """Availability verdict with time-boxed semantics for RESERVED rows."""
        row = await self.find(slug)
        if row is None:
            return evaluate_availability(None, None, now or _utcnow(), self.ttl)
        return evaluate_availability(
            SlugState(row.state), row.reserved_at, now or _utcnow(), self.ttl,
        )

    async def reserve(self, slug: str) -> SlugReservation:
        """Insert a RESERVED row. Must run inside the caller's transaction."""
        if await self.find(slug) is not None:
            raise ConflictError("slug", SLUG_TAKEN)

        reservation = SlugReservation(
            slug=slug,
            state=SlugState.RESERVED.value,
            reserved_at=_utcnow(),
            owner_id=None,
        )
        self.db.add(reservation)
        try:
            await self.db.flush()
        except IntegrityError:
            logger.info("Slug lost reservation race", extra={"slug": slug})
            raise ConflictError("slug", SLUG_TAKEN)
        return reservation

    async def activate(
        self, reservation: SlugReservation, owner_id: AccountId,
    ) -> SlugReservation:
        """Bind owner and mark ACTIVE, immediately before the enclosing commit."""
        if (
            reservation.state == SlugState.ACTIVE.value
            and reservation.owner_id != owner_id
        ):
            raise ConflictError("slug", SLUG_TAKEN)
        reservation.owner_id = owner_id
        reservation.state = SlugState.ACTIVE.value
        reservation.activated_at = _utcnow()
        await self.db.flush()
        return reservation


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
