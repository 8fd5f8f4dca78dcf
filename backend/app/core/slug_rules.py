"""Slug Rules — pure format and availability decisions for storefront slugs.

Invariants:
    - evaluate_availability is PURE: takes the row snapshot and "now", returns a verdict
    - Soft expiry is a computed predicate (is_expired), never a stored state transition
    - RESERVED_TTL (24h) is the default window; callers may pass a configured one

Design Decisions:
    - Read-time expiry over a sweeper job: the stale RESERVED row persists and is
      merely ignored by availability checks (ADR: keep behaviour identical to the
      existing ledger; reserve() still conflicts on such rows)
    - Naive timestamps are treated as UTC: SQLite drops tzinfo on round-trip
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from app.core.domain_types import SlugState


SLUG_PATTERN = re.compile(r"^[a-z0-9-]{3,30}$")
RESERVED_TTL = timedelta(hours=24)

MSG_AVAILABLE = "Slug is available"
MSG_IN_USE = "Slug is already in use"
MSG_RESERVED = "Slug is reserved. Please try again later"
MSG_UNAVAILABLE = "Slug is unavailable"


@dataclass(frozen=True)
class Availability:
    """Verdict returned by the ledger's availability check."""
    available: bool
    message: str


def is_valid_slug(slug: str) -> bool:
    """Lowercase letters, digits and hyphens, 3-30 characters."""
    return bool(SLUG_PATTERN.fullmatch(slug))


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_expired(
    reserved_at: datetime, now: datetime, ttl: timedelta = RESERVED_TTL,
) -> bool:
    """True when a RESERVED row is older than the reservation window."""
    return as_utc(now) - as_utc(reserved_at) > ttl


def evaluate_availability(
    state: SlugState | None,
    reserved_at: datetime | None,
    now: datetime,
    ttl: timedelta = RESERVED_TTL,
) -> Availability:
    """Decide availability from a row snapshot. state=None means no row exists."""
    if state is None or state == SlugState.RELEASED:
        return Availability(True, MSG_AVAILABLE)
    if state == SlugState.ACTIVE:
        return Availability(False, MSG_IN_USE)
    if state == SlugState.RESERVED:
        if reserved_at is not None and is_expired(reserved_at, now, ttl):
            return Availability(True, MSG_AVAILABLE)
        return Availability(False, MSG_RESERVED)
    return Availability(False, MSG_UNAVAILABLE)
