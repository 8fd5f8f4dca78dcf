"""Ordered Collection Manager — one protocol for sections, pages, blocks and products.

Invariants:
    - append() without an explicit position lands at max(sibling positions) + 1, or 0
    - reorder() validates the WHOLE batch (existence + parent) before writing anything
    - reorder() writes every position and commits once; any failure rolls back
    - list() is ascending by position, then created_at, then id; scoped to one parent
    - remove() never renumbers the remaining siblings

Design Decisions:
    - One generic collection parameterised by CollectionSpec over four near-identical
      services (ADR: the protocol is the same, only the table and parent column differ)
    - Pure checks in core/ordering.py; this module only loads rows and writes positions
    - Parent mismatch error kind chosen per collection: products answer 403 (ownership),
      the rest 404 (an id outside the parent does not exist from its point of view)
    - No renumbering or duplicate detection in a partial batch: untouched siblings may
      share a position with a moved row, and list() breaks such ties deterministically
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ForbiddenError, ResourceNotFoundError, StorefrontError
from app.core.ordering import (
    PositionUpdate, ViolationKind, find_reorder_violation, next_position,
)
from app.models.page_block import PageBlock
from app.models.product import Product
from app.models.store_page import StorePage
from app.models.store_section import StoreSection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionSpec:
    """Describes one ordered table: its model, parent column and error labels."""
    model: type
    parent_field: str
    label: str
    forbid_foreign_parent: bool = False

    @property
    def parent_column(self):
        return getattr(self.model, self.parent_field)


SECTIONS = CollectionSpec(StoreSection, "store_id", "Section")
PAGES = CollectionSpec(StorePage, "store_id", "Page")
BLOCKS = CollectionSpec(PageBlock, "page_id", "Block")
PRODUCTS = CollectionSpec(
    Product, "creator_id", "Product", forbid_foreign_parent=True,
)


class OrderedCollection:
    """Position-ordered children of one parent kind, bound to a session."""

    def __init__(self, db: AsyncSession, spec: CollectionSpec):
        self.db = db
        self.spec = spec

    async def get(self, entity_id: UUID):
        entity = await self.db.get(self.spec.model, entity_id)
        if entity is None:
            raise ResourceNotFoundError(self.spec.label, str(entity_id))
        return entity

    async def append(
        self, parent_id: UUID, position: int | None = None, **fields: Any,
    ):
        """Insert at the end of the parent's list (or at an explicit position)."""
        if position is None:
            result = await self.db.execute(
                select(func.max(self.spec.model.position))
                .where(self.spec.parent_column == parent_id),
            )
            position = next_position(result.scalar())

        entity = self.spec.model(
            **{self.spec.parent_field: parent_id},
            position=position,
            **fields,
        )
        self.db.add(entity)
        await self.db.commit()
        await self.db.refresh(entity)
        return entity

    async def reorder(
        self, parent_id: UUID, updates: list[PositionUpdate],
    ) -> list:
        """Apply a batch of (id, position) pairs atomically; returns the fresh list."""
        try:
            entities = await self._load(updates)
            owners = {
                entity.id: getattr(entity, self.spec.parent_field)
                for entity in entities.values()
            }
            violation = find_reorder_violation(parent_id, updates, owners)
            if violation is not None:
                raise self._violation_error(violation.entity_id, violation.kind)

            for update in updates:
                entities[update.id].position = update.position
            await self.db.commit()
        except StorefrontError:
            await self.db.rollback()
            raise
        except Exception:
            await self.db.rollback()
            logger.error(
                f"{self.spec.label} reorder failed",
                extra={"parent_id": str(parent_id)},
                exc_info=True,
            )
            raise

        logger.info(
            f"{self.spec.label} positions updated ({len(updates)} items)",
            extra={"parent_id": str(parent_id)},
        )
        return await self.list(parent_id)

    async def remove(self, entity_id: UUID) -> None:
        entity = await self.get(entity_id)
        await self.db.delete(entity)
        await self.db.commit()

    async def _load(self, updates: list[PositionUpdate]) -> dict:
        ids = [update.id for update in updates]
        if not ids:
            return {}
        result = await self.db.execute(
            select(self.spec.model).where(self.spec.model.id.in_(ids)),
        )
        return {entity.id: entity for entity in result.scalars().all()}

    def _violation_error(
        self, entity_id: UUID, kind: ViolationKind,
    ) -> StorefrontError:
        if kind == ViolationKind.FOREIGN_PARENT and self.spec.forbid_foreign_parent:
            return ForbiddenError(self.spec.label, str(entity_id))
        return ResourceNotFoundError(self.spec.label, str(entity_id))

    async def list(
        self,
        parent_id: UUID,
        visible_statuses: Iterable[Any] | None = None,
    ) -> list:
        """Children of one parent, ascending by position with stable tie-breakers."""
        model = self.spec.model
        query = select(model).where(self.spec.parent_column == parent_id)
        if visible_statuses is not None:
            query = query.where(model.status.in_(list(visible_statuses)))
        query = query.order_by(model.position, model.created_at, model.id)
        result = await self.db.execute(query)
        return list(result.scalars().all())
