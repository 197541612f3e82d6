"""
In-process event bus.

Notifications emitted by the agent runtime and the chat pipeline are fanned
out to every subscriber queue. Publishing never blocks; a subscriber whose
queue is full misses the event and a warning is logged.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Set

from deskmate_ai.core.events import EventEmitter, safe_emit
from deskmate_ai.core.logging_config import get_logger

logger = get_logger(__name__)

EventMessage = Dict[str, Any]


class EventBus:
    """Broadcast ``{"event", "data"}`` messages to subscriber queues."""

    def __init__(self, *, max_queue_size: int = 1000) -> None:
        self._max_queue_size = max_queue_size
        self._subscribers: Set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def emit(self, event: str, payload: Dict[str, Any]) -> None:
        message = {"event": event, "data": payload}
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(message)
            except asyncio.QueueFull:
                logger.warning(f"Subscriber queue full, dropped '{event}' event")

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator[asyncio.Queue]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._subscribers.add(queue)
        logger.debug(f"Event subscriber added ({len(self._subscribers)} active)")
        try:
            yield queue
        finally:
            self._subscribers.discard(queue)
            logger.debug(f"Event subscriber removed ({len(self._subscribers)} active)")


class QueueEmitter:
    """Emitter feeding a single unbounded queue, used to stream one chat turn."""

    def __init__(self) -> None:
        self.queue: asyncio.Queue = asyncio.Queue()

    async def emit(self, event: str, payload: Dict[str, Any]) -> None:
        self.queue.put_nowait({"event": event, "data": payload})

    def close(self) -> None:
        self.queue.put_nowait(None)


class FanoutEmitter:
    """Deliver every event to each wrapped emitter independently."""

    def __init__(self, *emitters: Optional[EventEmitter]) -> None:
        self._emitters: List[EventEmitter] = [e for e in emitters if e is not None]

    async def emit(self, event: str, payload: Dict[str, Any]) -> None:
        for emitter in self._emitters:
            await safe_emit(emitter, event, payload)


_event_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus
