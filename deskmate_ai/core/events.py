"""
Fire-and-forget event delivery.

Progress notifications (permission requests, streaming chunks, chat message
events) are delivered through an ``EventEmitter``. Delivery is best effort:
``safe_emit`` logs and drops a failed notification instead of aborting the
operation it describes.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from deskmate_ai.core.logging_config import get_logger

logger = get_logger(__name__)


class EventEmitter(Protocol):
    """Anything that can receive named events with a JSON payload."""

    async def emit(self, event: str, payload: Dict[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that discards every event."""

    async def emit(self, event: str, payload: Dict[str, Any]) -> None:
        return None


async def safe_emit(emitter: Optional[EventEmitter], event: str, payload: Dict[str, Any]) -> bool:
    """
    Deliver one event, never raising.

    Returns:
        True if the emitter accepted the event, False if it was dropped.
    """
    if emitter is None:
        return False
    try:
        await emitter.emit(event, payload)
    except Exception as e:
        logger.warning(f"Dropped '{event}' notification: {e}")
        return False
    return True
