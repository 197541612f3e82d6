from __future__ import annotations

import logging

import pytest

from deskmate_ai.core.events import NullEmitter, safe_emit

pytestmark = pytest.mark.asyncio


class _BrokenEmitter:
    async def emit(self, event, payload):
        raise ConnectionError("client went away")


async def test_delivers_events_in_order(emitter) -> None:
    assert await safe_emit(emitter, "a", {"n": 1}) is True
    assert await safe_emit(emitter, "b", {"n": 2}) is True
    assert emitter.names() == ["a", "b"]
    assert emitter.of_type("b") == [{"n": 2}]


async def test_missing_emitter_drops_event() -> None:
    assert await safe_emit(None, "a", {}) is False


async def test_null_emitter_accepts_event() -> None:
    assert await safe_emit(NullEmitter(), "a", {}) is True


async def test_failing_emitter_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="deskmate_ai.core.events"):
        assert await safe_emit(_BrokenEmitter(), "streaming_chunk", {}) is False
    assert "Dropped 'streaming_chunk' notification" in caplog.text
