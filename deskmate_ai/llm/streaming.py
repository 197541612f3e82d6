"""Streaming pipeline.

Reconstructs one logical reply from an incremental delivery and reports
progress through an ``EventEmitter``. Per completion the events are, in order::

    streaming_start    {message_id, chat_id}
    streaming_chunk    {message_id, chunk, full_content}      (zero or more)
    streaming_complete {message_id, content, chat_id}         (or streaming_error)

Native path (OpenAI-compatible vendor): raw bytes are decoded incrementally,
split into lines, ``data:`` payloads are parsed as JSON and the
``choices[0].delta.content`` deltas are accumulated until ``[DONE]``.

Simulated path (every other vendor): the full reply is fetched first and then
replayed word by word with a fixed pause between chunks. Every chunk keeps the
whitespace around its word, so concatenating the chunks yields the reply
unchanged.
"""

from __future__ import annotations

import asyncio
import codecs
import json
import re
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

import httpx

from deskmate_ai.core.events import EventEmitter, safe_emit
from deskmate_ai.core.logging_config import get_logger

from .adapters.base import ProviderAdapter
from .adapters.factory import get_adapter
from .config import ProviderConfig
from .errors import ProviderError, StreamingError
from .messages import NormalizedMessage

logger = get_logger(__name__)

STREAMING_START = "streaming_start"
STREAMING_CHUNK = "streaming_chunk"
STREAMING_COMPLETE = "streaming_complete"
STREAMING_ERROR = "streaming_error"

DONE_TOKEN = "[DONE]"
_DATA_PREFIX = "data:"
_WORD_CHUNK = re.compile(r"\s*\S+\s*|\s+")


class SseLineBuffer:
    """Turn arbitrary byte chunks into complete text lines.

    Multi-byte UTF-8 sequences and lines split across chunks are carried over
    to the next ``feed`` call.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, chunk: bytes) -> List[str]:
        text = self._pending + self._decoder.decode(chunk)
        lines = text.split("\n")
        self._pending = lines.pop()
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> List[str]:
        tail = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        return [tail.rstrip("\r")] if tail else []


def parse_data_line(line: str) -> Optional[str]:
    """Return the payload of a ``data:`` line, or ``None`` for any other line."""
    if not line.startswith(_DATA_PREFIX):
        return None
    payload = line[len(_DATA_PREFIX) :]
    return payload[1:] if payload.startswith(" ") else payload


def extract_delta(event: Any) -> Optional[str]:
    """Return ``choices[0].delta.content`` when present and textual."""
    try:
        content = event["choices"][0]["delta"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None


def split_words(text: str) -> List[str]:
    """Split a reply into the chunks of a simulated stream.

    Each chunk is one word with the whitespace that follows it; leading
    whitespace stays on the first chunk, so the chunks join back to ``text``.
    """
    return _WORD_CHUNK.findall(text)


@dataclass
class _Accumulator:
    text: str = ""


class StreamingPipeline:
    """Run streaming completions and emit progress events.

    Args:
        emitter: Receiver of the streaming events; delivery failures are logged and ignored.
        chunk_delay: Pause in seconds between simulated chunks.
        client: Optional shared ``httpx.AsyncClient`` handed to the adapters.
        timeout: Timeout in seconds for adapter-owned clients.
    """

    def __init__(
        self,
        *,
        emitter: Optional[EventEmitter] = None,
        chunk_delay: float = 0.05,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 60.0,
    ) -> None:
        self._emitter = emitter
        self._chunk_delay = chunk_delay
        self._client = client
        self._timeout = timeout

    async def run(
        self,
        config: ProviderConfig,
        messages: Sequence[NormalizedMessage],
        *,
        message_id: str,
        chat_id: Optional[str] = None,
    ) -> str:
        """
        Stream one completion.

        Returns:
            The final reply text; equal to the concatenation of every emitted chunk.

        Raises:
            StreamingError: If the completion fails; ``partial_content`` holds
                the text accumulated before the failure.
        """
        adapter = get_adapter(config.provider, client=self._client, timeout=self._timeout)
        await safe_emit(self._emitter, STREAMING_START, {"message_id": message_id, "chat_id": chat_id})
        acc = _Accumulator()
        try:
            if adapter.supports_native_streaming:
                content = await self._native(adapter, config, messages, message_id, acc)
            else:
                content = await self._simulated(adapter, config, messages, message_id, acc)
        except ProviderError as e:
            error = e if isinstance(e, StreamingError) else StreamingError(
                f"Streaming failed: {e}", partial_content=acc.text, provider=e.provider
            )
            if error is not e:
                error.__cause__ = e
            logger.error(f"Stream {message_id} failed after {len(error.partial_content)} chars: {e}")
            await safe_emit(
                self._emitter,
                STREAMING_ERROR,
                {
                    "message_id": message_id,
                    "chat_id": chat_id,
                    "error": str(error),
                    "partial_content": error.partial_content,
                },
            )
            raise error

        await safe_emit(
            self._emitter,
            STREAMING_COMPLETE,
            {"message_id": message_id, "content": content, "chat_id": chat_id},
        )
        logger.debug(f"Stream {message_id} completed with {len(content)} chars")
        return content

    async def _emit_chunk(self, message_id: str, chunk: str, acc: _Accumulator) -> None:
        acc.text += chunk
        await safe_emit(
            self._emitter,
            STREAMING_CHUNK,
            {"message_id": message_id, "chunk": chunk, "full_content": acc.text},
        )

    async def _consume(self, lines: Iterable[str], message_id: str, acc: _Accumulator) -> bool:
        """Process complete lines; return True once the terminator is seen."""
        for line in lines:
            payload = parse_data_line(line)
            if payload is None:
                continue
            if payload.strip() == DONE_TOKEN:
                return True
            try:
                event = json.loads(payload)
            except ValueError as e:
                raise StreamingError(
                    f"Malformed stream payload: {payload[:200]}", partial_content=acc.text
                ) from e
            if isinstance(event, dict) and "error" in event:
                raise StreamingError(f"Provider reported a stream error: {payload}", partial_content=acc.text)
            delta = extract_delta(event)
            if delta:
                await self._emit_chunk(message_id, delta, acc)
        return False

    async def _native(
        self,
        adapter: ProviderAdapter,
        config: ProviderConfig,
        messages: Sequence[NormalizedMessage],
        message_id: str,
        acc: _Accumulator,
    ) -> str:
        buffer = SseLineBuffer()
        async with aclosing(adapter.stream_bytes(config, messages)) as stream:
            async for raw in stream:
                if await self._consume(buffer.feed(raw), message_id, acc):
                    break
            else:
                await self._consume(buffer.flush(), message_id, acc)
        return acc.text

    async def _simulated(
        self,
        adapter: ProviderAdapter,
        config: ProviderConfig,
        messages: Sequence[NormalizedMessage],
        message_id: str,
        acc: _Accumulator,
    ) -> str:
        reply = await adapter.complete(config, messages)
        for chunk in split_words(reply):
            await self._emit_chunk(message_id, chunk, acc)
            if self._chunk_delay > 0:
                await asyncio.sleep(self._chunk_delay)
        return reply
