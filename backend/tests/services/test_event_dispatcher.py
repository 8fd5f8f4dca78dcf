"""Event Dispatcher — bounded queue, background drain and database sink.

Tests cover:
    - Emitted events reach the sink with id fields split from the payload
    - A full queue drops the event (emit returns False, never raises)
    - Sink failures are logged and do not stop the drain
    - stop() flushes pending events
    - DatabaseEventSink writes one analytics_events row per record
"""

import logging
from uuid import uuid4

from sqlalchemy import select

from app.core.repository_protocols import AnalyticsRecord
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.event_dispatcher import DatabaseEventSink, EventDispatcher
from app.models.analytics_event import AnalyticsEvent


class ListSink:
    def __init__(self, fail_on: str | None = None):
        self.records: list[AnalyticsRecord] = []
        self.fail_on = fail_on

    async def write(self, record: AnalyticsRecord) -> None:
        if record.event_type == self.fail_on:
            raise RuntimeError("sink down")
        self.records.append(record)


async def test_emit_reaches_sink():
    sink = ListSink()
    dispatcher = EventDispatcher(sink)
    dispatcher.start()
    account_id = uuid4()

    assert dispatcher.emit("LOGIN_SUCCESS", account_id=account_id, source="web")
    await dispatcher.flush()
    await dispatcher.stop()

    (record,) = sink.records
    assert record.event_type == "LOGIN_SUCCESS"
    assert record.account_id == account_id
    assert record.payload == {"source": "web"}


async def test_full_queue_drops_event(caplog):
    dispatcher = EventDispatcher(ListSink(), max_size=1)
    # not started: nothing drains the queue
    assert dispatcher.emit("A") is True
    with caplog.at_level(logging.WARNING):
        assert dispatcher.emit("B") is False
    assert dispatcher.dropped == 1
    assert "queue full" in caplog.text


async def test_sink_error_is_logged_and_drain_continues(caplog):
    sink = ListSink(fail_on="BROKEN")
    dispatcher = EventDispatcher(sink)
    dispatcher.start()

    with caplog.at_level(logging.ERROR):
        dispatcher.emit("BROKEN")
        dispatcher.emit("FINE")
        await dispatcher.flush()
    await dispatcher.stop()

    assert [r.event_type for r in sink.records] == ["FINE"]
    assert "Analytics event tracking error" in caplog.text


async def test_stop_flushes_pending_events():
    sink = ListSink()
    dispatcher = EventDispatcher(sink)
    dispatcher.start()
    for n in range(5):
        dispatcher.emit("TICK", n=n)

    await dispatcher.stop()

    assert [r.payload["n"] for r in sink.records] == [0, 1, 2, 3, 4]
    assert not dispatcher.running


async def test_database_sink_writes_row(test_engine, test_session_factory):
    manager = DatabaseSessionManager.from_engine(test_engine, test_session_factory)
    account_id, creator_id = uuid4(), uuid4()

    await DatabaseEventSink(manager).write(AnalyticsRecord(
        event_type="CREATOR_REGISTERED",
        account_id=account_id,
        creator_id=creator_id,
        payload={"slug": "acme"},
    ))

    async with test_session_factory() as db:
        row = (await db.execute(select(AnalyticsEvent))).scalar_one()
    assert row.event_type == "CREATOR_REGISTERED"
    assert row.account_id == account_id
    assert row.creator_id == creator_id
    assert row.payload == {"slug": "acme"}
