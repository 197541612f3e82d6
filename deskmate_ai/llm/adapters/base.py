"""Provider adapter base class.

Overview
--------
A provider adapter translates the wire-neutral ``NormalizedMessage`` list
into one vendor's HTTP request and maps the vendor's JSON response back to
plain text. Each vendor implements two hooks:

- ``build_request``: URL, headers and JSON body for a completion call.
- ``extract_text``: pull the reply text out of a decoded 2xx response.

Everything else (the POST, status handling, JSON decoding and error
mapping) is shared here.

Errors
------
- Non-2xx status: ``ProviderHTTPError`` with ``status_code`` and raw ``body``.
- 2xx body that is not JSON or lacks the expected field:
  ``ProviderResponseError`` with the raw ``body``.
- Transport failures (connect, timeout): ``ProviderTransportError``.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, Optional, Sequence

import httpx

from deskmate_ai.core.logging_config import get_logger

from ..config import ProviderConfig, ProviderKind
from ..errors import ProviderHTTPError, ProviderResponseError, ProviderTransportError
from ..messages import NormalizedMessage

logger = get_logger(__name__)

_BODY_EXCERPT = 500


@dataclass(frozen=True)
class PreparedRequest:
    """A fully built vendor request."""

    url: str
    json: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)


class ProviderAdapter(ABC):
    """Shared HTTP plumbing for vendor adapters.

    Args:
        client: Optional preconfigured ``httpx.AsyncClient``. When omitted, a
            short-lived client is created for every call.
        timeout: Timeout in seconds for the short-lived clients.
    """

    kind: ProviderKind
    supports_native_streaming: bool = False

    def __init__(self, *, client: Optional[httpx.AsyncClient] = None, timeout: float = 60.0) -> None:
        self._client = client
        self._timeout = timeout

    @abstractmethod
    def build_request(self, config: ProviderConfig, messages: Sequence[NormalizedMessage]) -> PreparedRequest:
        """Build the vendor request for a non-streaming completion."""

    @abstractmethod
    def extract_text(self, data: Any) -> str:
        """
        Return the reply text from a decoded response.

        Raises:
            KeyError, IndexError, TypeError: When the shape is not the expected one.
        """

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    def _http_error(self, status_code: int, body: str) -> ProviderHTTPError:
        logger.error(f"{self.kind.value} API request failed with {status_code}: {body[:_BODY_EXCERPT]}")
        return ProviderHTTPError(
            f"{self.kind.value} API request failed with status {status_code}: {body}",
            status_code=status_code,
            body=body,
            provider=self.kind.value,
        )

    def _response_error(self, reason: str, body: str) -> ProviderResponseError:
        logger.error(f"Invalid response format from {self.kind.value} API ({reason}): {body[:_BODY_EXCERPT]}")
        return ProviderResponseError(
            f"Invalid response format from {self.kind.value} API: {reason}. Response: {body}",
            body=body,
            provider=self.kind.value,
        )

    def parse_body(self, body: str) -> str:
        """Decode a 2xx body and extract the reply text, keeping the raw body on failure."""
        try:
            data = json.loads(body)
        except ValueError as e:
            raise self._response_error(f"body is not JSON ({e})", body) from e
        try:
            text = self.extract_text(data)
        except (KeyError, IndexError, TypeError) as e:
            raise self._response_error(f"missing field {e!s}", body) from e
        if not isinstance(text, str):
            raise self._response_error("reply text is not a string", body)
        return text

    async def complete(self, config: ProviderConfig, messages: Sequence[NormalizedMessage]) -> str:
        """
        Run one non-streaming completion.

        Returns:
            The reply text.

        Raises:
            ProviderError: Any subclass, see the module docstring.
        """
        request = self.build_request(config, messages)
        logger.debug(f"POST {request.url} ({self.kind.value}, model={config.model}, messages={len(messages)})")
        try:
            async with self._http() as client:
                response = await client.post(
                    request.url, json=request.json, headers=request.headers, params=request.params or None
                )
        except httpx.HTTPError as e:
            logger.error(f"{self.kind.value} transport failure: {e}")
            raise ProviderTransportError(f"{self.kind.value} request failed: {e}", provider=self.kind.value) from e

        logger.debug(f"{self.kind.value} responded with {response.status_code}")
        if not response.is_success:
            raise self._http_error(response.status_code, response.text)
        return self.parse_body(response.text)

    async def stream_bytes(
        self, config: ProviderConfig, messages: Sequence[NormalizedMessage]
    ) -> AsyncIterator[bytes]:
        """Yield the raw body of a native streaming completion."""
        raise NotImplementedError(f"{self.kind.value} does not support native streaming")
        yield b""  # pragma: no cover
