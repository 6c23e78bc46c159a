import logging
from unittest.mock import AsyncMock

import pytest

from models.events import EngineEvent
from utils.event_bus import EventBus

# ------------------------- Fixtures ------------------------- #

@pytest.fixture
def bus():
    return EventBus()

# ------------------------- Tests ------------------------- #

def test_publish_without_loop_delivers_inline(bus):
    seen = []
    bus.subscribe("trade_closed", seen.append)

    bus.publish("trade_closed", {"id": "1"})

    assert seen == [{"id": "1"}]


def test_enum_and_string_topics_are_interchangeable(bus):
    seen = []
    bus.subscribe("ready_for_live", seen.append)

    bus.publish(EngineEvent.READY_FOR_LIVE, "go")

    assert seen == ["go"]


def test_unsubscribe_stops_delivery(bus):
    seen = []
    bus.subscribe(EngineEvent.MODE_CHANGED, seen.append)
    bus.unsubscribe(EngineEvent.MODE_CHANGED, seen.append)

    bus.publish(EngineEvent.MODE_CHANGED, "live")

    assert seen == []


def test_failing_handler_is_logged_and_others_still_run(bus, caplog):
    seen = []

    def boom(_payload):
        raise RuntimeError("handler broke")

    bus.subscribe("initialized", boom)
    bus.subscribe("initialized", seen.append)

    with caplog.at_level(logging.ERROR):
        bus.publish("initialized", 1)

    assert seen == [1]
    assert "handler error on initialized" in caplog.text


@pytest.mark.asyncio
async def test_events_are_delivered_in_order_inside_loop(bus):
    seen = []
    bus.subscribe("trade_opened", seen.append)

    for i in range(5):
        bus.publish("trade_opened", i)
    assert seen == []  # queued, not yet delivered

    await bus.join()
    assert seen == [0, 1, 2, 3, 4]
    await bus.aclose()


@pytest.mark.asyncio
async def test_async_handlers_are_awaited(bus):
    handler = AsyncMock()
    bus.subscribe("trade_closed", handler)

    bus.publish("trade_closed", "payload")
    await bus.join()

    handler.assert_awaited_once_with("payload")
    await bus.aclose()
