"""OpenAI chat-completions adapter, the only vendor with native streaming."""

from __future__ import annotations

from typing import Any, AsyncIterator, Dict, Sequence

import httpx

from deskmate_ai.core.logging_config import get_logger

from ..config import ProviderConfig, ProviderKind
from ..errors import ProviderTransportError
from ..messages import NormalizedMessage
from .base import PreparedRequest, ProviderAdapter

logger = get_logger(__name__)

OPENAI_DEFAULT_URL = "https://api.openai.com/v1/chat/completions"


class OpenAICompatibleAdapter(ProviderAdapter):
    """Adapter for ``/v1/chat/completions``-shaped APIs.

    Image parts are passed through unchanged since the normalized form is
    already the OpenAI vision shape.
    """

    kind = ProviderKind.openai
    supports_native_streaming = True

    def endpoint(self, config: ProviderConfig) -> str:
        return config.base_url or OPENAI_DEFAULT_URL

    def auth_headers(self, config: ProviderConfig) -> Dict[str, str]:
        return {"Authorization": f"Bearer {config.api_key}"}

    def build_body(self, config: ProviderConfig, messages: Sequence[NormalizedMessage], *, stream: bool) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "model": config.model,
            "messages": [{"role": m.role.value, "content": m.wire_content()} for m in messages],
            "temperature": config.temperature,
        }
        if config.max_tokens is not None:
            body["max_tokens"] = config.max_tokens
        if stream:
            body["stream"] = True
        return body

    def build_request(self, config: ProviderConfig, messages: Sequence[NormalizedMessage]) -> PreparedRequest:
        return PreparedRequest(
            url=self.endpoint(config),
            json=self.build_body(config, messages, stream=False),
            headers={"Content-Type": "application/json", **self.auth_headers(config)},
        )

    def extract_text(self, data: Any) -> str:
        return data["choices"][0]["message"]["content"]

    async def stream_bytes(
        self, config: ProviderConfig, messages: Sequence[NormalizedMessage]
    ) -> AsyncIterator[bytes]:
        """
        Open a ``stream: true`` completion and yield raw body bytes.

        Raises:
            ProviderHTTPError: If the vendor answers with a non-2xx status; the body is read first.
            ProviderTransportError: If the connection fails before or while streaming.
        """
        url = self.endpoint(config)
        headers = {"Content-Type": "application/json", "Accept": "text/event-stream", **self.auth_headers(config)}
        body = self.build_body(config, messages, stream=True)
        logger.debug(f"POST {url} (stream, {self.kind.value}, model={config.model})")
        try:
            async with self._http() as client:
                async with client.stream("POST", url, json=body, headers=headers) as response:
                    logger.debug(f"{self.kind.value} stream opened with {response.status_code}")
                    if not response.is_success:
                        raw = (await response.aread()).decode("utf-8", errors="replace")
                        raise self._http_error(response.status_code, raw)
                    async for chunk in response.aiter_bytes():
                        yield chunk
        except httpx.HTTPError as e:
            logger.error(f"{self.kind.value} stream transport failure: {e}")
            raise ProviderTransportError(f"{self.kind.value} stream failed: {e}", provider=self.kind.value) from e
