"""Event Dispatcher — fire-and-forget analytics through a bounded queue.

Invariants:
    - emit() never blocks and never raises: a full queue drops the event with a warning
    - A single background task drains the queue; sink failures are logged, never propagated
    - Events are only emitted after the business transaction has committed
    - stop() drains what is already queued before cancelling the worker

Design Decisions:
    - asyncio.Queue(maxsize) over create_task-per-event: bounded memory under bursts
    - Sink injected (EventSink protocol): the drain loop has no knowledge of the ORM
    - DatabaseEventSink opens its own session per event: the request session is
      already closed when the drain runs
"""

import asyncio
import contextlib
import logging
from typing import Any

from app.core.repository_protocols import AnalyticsRecord, EventSink
from app.infrastructure.database import DatabaseSessionManager
from app.models.analytics_event import AnalyticsEvent

logger = logging.getLogger(__name__)

_ID_FIELDS = ("account_id", "creator_id", "product_id")


class EventDispatcher:
    """Bounded queue + background drain task."""

    def __init__(self, sink: EventSink, max_size: int = 1000):
        self._sink = sink
        self._queue: asyncio.Queue[AnalyticsRecord] = asyncio.Queue(maxsize=max_size)
        self._worker: asyncio.Task | None = None
        self.dropped = 0

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self) -> None:
        if self.running:
            return
        self._worker = asyncio.create_task(self._drain(), name="analytics-drain")

    async def stop(self) -> None:
        """Flush pending events, then cancel the worker."""
        if not self.running:
            return
        await self._queue.join()
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None

    async def flush(self) -> None:
        """Wait until every queued event has been handed to the sink."""
        if self.running:
            await self._queue.join()

    def emit(self, event_type: str, **fields: Any) -> bool:
        """Queue an event. Returns False when it was dropped."""
        try:
            ids = {key: fields.pop(key, None) for key in _ID_FIELDS}
            record = AnalyticsRecord(event_type=event_type, payload=fields, **ids)
            self._queue.put_nowait(record)
            return True
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Analytics queue full, event dropped",
                extra={"event_type": event_type},
            )
            return False
        except Exception as e:
            logger.error(
                f"Failed to queue analytics event: {e}",
                extra={"event_type": event_type},
            )
            return False

    async def _drain(self) -> None:
        while True:
            record = await self._queue.get()
            try:
                await self._sink.write(record)
            except Exception as e:
                logger.error(
                    f"Analytics event tracking error: {e}",
                    extra={"event_type": record.event_type},
                    exc_info=True,
                )
            finally:
                self._queue.task_done()


class DatabaseEventSink:
    """Persists AnalyticsRecord rows into analytics_events."""

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    async def write(self, record: AnalyticsRecord) -> None:
        async with self._manager.session() as db:
            db.add(AnalyticsEvent(
                event_type=record.event_type,
                account_id=record.account_id,
                creator_id=record.creator_id,
                product_id=record.product_id,
                payload=record.payload,
                created_at=record.occurred_at,
            ))
            await db.commit()
        logger.debug(
            "Analytics event tracked",
            extra={"event_type": record.event_type, "account_id": record.account_id},
        )
