"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Event persistence accessed through a Protocol type
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the dispatcher awaits them from its
      own background task, never from a request handler
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol
from uuid import UUID

from app.core.domain_types import AccountId, CreatorId


@dataclass(frozen=True)
class AnalyticsRecord:
    """Event captured by the fire-and-forget dispatcher."""
    event_type: str
    account_id: AccountId | None = None
    creator_id: CreatorId | None = None
    product_id: UUID | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class EventSink(Protocol):
    """Contract for analytics persistence — implemented by shell."""
    async def write(self, record: AnalyticsRecord) -> None: ...


class EventEmitter(Protocol):
    """Contract the services use to publish events after commit."""
    def emit(self, event_type: str, **fields: Any) -> bool: ...
