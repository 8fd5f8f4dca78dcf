"""User Directory — profile reads and edits, paginated listing, account deletion.

Invariants:
    - update_profile upserts the creator profile; socials are merged key by key,
      every other field is replaced
    - A profile created here needs a fullName (the column is NOT NULL)
    - delete_account removes the account and everything it owns in ONE commit,
      children before parents, so the slug it held is free again afterwards
    - Listing is ordered newest first; page and limit are validated by the route

Design Decisions:
    - Explicit deletes instead of relying on ON DELETE CASCADE: SQLite only
      enforces foreign keys when asked, the server does it anyway
    - Events emitted only after commit, never awaited
"""

import logging
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import AccountId, EventType
from app.core.errors import InvalidInputError, ResourceNotFoundError
from app.core.repository_protocols import EventEmitter
from app.models.account import Account
from app.models.creator_profile import CreatorProfile
from app.models.page_block import PageBlock
from app.models.product import Product
from app.models.refresh_token import RefreshToken
from app.models.slug_reservation import SlugReservation
from app.models.store import Store
from app.models.store_page import StorePage
from app.models.store_section import StoreSection
from app.models.store_theme import StoreTheme

logger = logging.getLogger(__name__)

PROFILE_EDITABLE = ("full_name", "profile_image", "bio", "timezone", "country_code")


class UserDirectory:

    def __init__(self, db: AsyncSession, events: EventEmitter):
        self.db = db
        self.events = events

    async def get_user(self, account_id: AccountId) -> Account:
        result = await self.db.execute(
            select(Account)
            .where(Account.id == account_id)
            .execution_options(populate_existing=True),
        )
        account = result.scalar_one_or_none()
        if account is None:
            raise ResourceNotFoundError("User", str(account_id), message="User not found")
        return account

    async def list_users(self, page: int, limit: int) -> tuple[list[Account], int]:
        total = await self.db.scalar(select(func.count()).select_from(Account))
        result = await self.db.execute(
            select(Account)
            .order_by(Account.created_at.desc(), Account.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .execution_options(populate_existing=True),
        )
        return list(result.scalars().all()), total or 0

    async def update_profile(
        self, account_id: AccountId, changes: dict[str, Any],
    ) -> Account:
        """Create or edit the caller's creator profile."""
        account = await self.get_user(account_id)
        if not changes:
            return account
        profile = account.creator_profile
        if profile is None:
            if not changes.get("full_name"):
                raise InvalidInputError(
                    "fullName is required to create a creator profile", "fullName",
                )
            profile = CreatorProfile(account_id=account.id, socials={})
            self.db.add(profile)
            account.creator_profile = profile

        for name in PROFILE_EDITABLE:
            if name in changes:
                setattr(profile, name, changes[name])
        if changes.get("socials") is not None:
            profile.socials = {**(profile.socials or {}), **changes["socials"]}

        await self.db.commit()
        await self.db.refresh(profile)
        self.events.emit(
            EventType.PROFILE_UPDATED.value,
            account_id=account.id, creator_id=profile.id,
        )
        return account

    async def delete_account(self, account_id: AccountId) -> None:
        account = await self.get_user(account_id)
        profile_id = account.creator_profile.id if account.creator_profile else None

        statements = []
        if profile_id is not None:
            store_ids = select(Store.id).where(Store.creator_id == profile_id)
            page_ids = select(StorePage.id).where(StorePage.store_id.in_(store_ids))
            statements += [
                delete(PageBlock).where(PageBlock.page_id.in_(page_ids)),
                delete(StorePage).where(StorePage.store_id.in_(store_ids)),
                delete(StoreSection).where(StoreSection.store_id.in_(store_ids)),
                delete(StoreTheme).where(StoreTheme.store_id.in_(store_ids)),
                delete(Store).where(Store.creator_id == profile_id),
                delete(Product).where(Product.creator_id == profile_id),
                delete(CreatorProfile).where(CreatorProfile.id == profile_id),
            ]
        statements += [
            delete(SlugReservation).where(SlugReservation.owner_id == account_id),
            delete(RefreshToken).where(RefreshToken.account_id == account_id),
            delete(Account).where(Account.id == account_id),
        ]
        for statement in statements:
            await self.db.execute(statement)
        await self.db.commit()

        logger.info("Account deleted", extra={"entity_id": str(account_id)})
        self.events.emit(EventType.ACCOUNT_DELETED.value, account_id=account_id)
