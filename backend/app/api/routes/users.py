"""User Routes — the caller's own profile plus the public user directory.

Invariants:
    - /users/profile requires a bearer token; listing and lookup by id are public
    - /users/profile is declared before /users/{user_id} so it is never captured
      by the id route
    - Listing: page >= 1, 1 <= limit <= 100 (400 otherwise), newest accounts first
"""

import logging
import math

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import Principal, get_current_principal, get_event_emitter
from app.core.domain_types import AccountId
from app.core.repository_protocols import EventEmitter
from app.infrastructure.database import get_db
from app.schemas.user import PageMeta, UserListResponse, UserProfileUpdate, UserPublic
from app.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


def _directory(
    db: AsyncSession = Depends(get_db),
    events: EventEmitter = Depends(get_event_emitter),
) -> UserDirectory:
    return UserDirectory(db, events)


@router.get("/profile", response_model=UserPublic)
async def get_profile(
    principal: Principal = Depends(get_current_principal),
    users: UserDirectory = Depends(_directory),
):
    return await users.get_user(principal.account_id)


@router.put("/profile", response_model=UserPublic)
async def update_profile(
    body: UserProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    users: UserDirectory = Depends(_directory),
):
    """Create or edit the caller's creator profile; socials are merged."""
    changes = (
        body.creator_profile.model_dump(exclude_unset=True)
        if body.creator_profile is not None else {}
    )
    return await users.update_profile(principal.account_id, changes)


@router.delete("/profile", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile(
    principal: Principal = Depends(get_current_principal),
    users: UserDirectory = Depends(_directory),
):
    await users.delete_account(principal.account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    users: UserDirectory = Depends(_directory),
):
    accounts, total = await users.list_users(page, limit)
    return UserListResponse(
        users=[UserPublic.model_validate(account) for account in accounts],
        meta=PageMeta(
            total=total, page=page, limit=limit,
            total_pages=math.ceil(total / limit),
        ),
    )


@router.get("/{user_id}", response_model=UserPublic)
async def get_user(
    user_id: AccountId,
    users: UserDirectory = Depends(_directory),
):
    return await users.get_user(user_id)
