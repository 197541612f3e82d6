import asyncio

import pytest

from deskmate_ai.server.services.event_bus import EventBus, FanoutEmitter, QueueEmitter, get_event_bus


async def test_emit_reaches_every_subscriber():
    bus = EventBus()
    async with bus.subscribe() as first, bus.subscribe() as second:
        assert bus.subscriber_count == 2
        await bus.emit("streaming_chunk", {"chunk": "a"})
        assert first.get_nowait() == {"event": "streaming_chunk", "data": {"chunk": "a"}}
        assert second.get_nowait() == {"event": "streaming_chunk", "data": {"chunk": "a"}}
    assert bus.subscriber_count == 0


async def test_emit_without_subscribers_is_noop():
    await EventBus().emit("anything", {})


async def test_full_queue_drops_event():
    bus = EventBus(max_queue_size=1)
    async with bus.subscribe() as queue:
        await bus.emit("one", {})
        await bus.emit("two", {})
        assert queue.qsize() == 1
        assert queue.get_nowait()["event"] == "one"


async def test_queue_emitter_close_sentinel():
    emitter = QueueEmitter()
    await emitter.emit("a", {"x": 1})
    emitter.close()
    assert await asyncio.wait_for(emitter.queue.get(), 1) == {"event": "a", "data": {"x": 1}}
    assert await asyncio.wait_for(emitter.queue.get(), 1) is None


async def test_fanout_isolates_failures(emitter):
    class Broken:
        async def emit(self, event, payload):
            raise RuntimeError("gone")

    fanout = FanoutEmitter(Broken(), None, emitter)
    await fanout.emit("message_created", {"id": "m"})
    assert emitter.events == [("message_created", {"id": "m"})]


def test_get_event_bus_is_singleton():
    assert get_event_bus() is get_event_bus()
