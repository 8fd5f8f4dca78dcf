"""Ordering Rules — pure position arithmetic for ordered sibling collections.

Invariants:
    - next_position is PURE: max sibling position + 1, or 0 for an empty parent
    - find_reorder_violation inspects the whole batch before any write happens
    - A batch entry is valid only if the id exists AND belongs to the given parent

Design Decisions:
    - Parent mismatch reported separately from "missing": the shell decides which
      error kind each collection raises (products answer 403, the rest 404)
    - No renumbering and no duplicate detection: a partial batch may collide with
      untouched siblings, and that is the caller's responsibility
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class ViolationKind(str, Enum):
    MISSING = "missing"
    FOREIGN_PARENT = "foreign_parent"


@dataclass(frozen=True)
class PositionUpdate:
    """One (id, position) pair of a reorder batch."""
    id: UUID
    position: int


@dataclass(frozen=True)
class ReorderViolation:
    entity_id: UUID
    kind: ViolationKind


def next_position(max_position: int | None) -> int:
    """Append position for a parent whose highest sibling position is max_position."""
    if max_position is None:
        return 0
    return max_position + 1


def find_reorder_violation(
    parent_id: UUID,
    updates: list[PositionUpdate],
    owners: dict[UUID, UUID],
) -> ReorderViolation | None:
    """First batch entry that is unknown or owned by another parent, in batch order.

    owners maps each loaded entity id to its parent id.
    """
    for update in updates:
        owner = owners.get(update.id)
        if owner is None:
            return ReorderViolation(update.id, ViolationKind.MISSING)
        if owner != parent_id:
            return ReorderViolation(update.id, ViolationKind.FOREIGN_PARENT)
    return None
