"""Anthropic Messages API adapter."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Union

from ..config import ProviderConfig, ProviderKind
from ..messages import ImagePart, MessageRole, NormalizedMessage, TextPart, split_data_url
from .base import PreparedRequest, ProviderAdapter

ANTHROPIC_DEFAULT_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_DEFAULT_MAX_TOKENS = 1000


def _image_block(url: str) -> Dict[str, Any]:
    inline = split_data_url(url)
    if inline is not None:
        media_type, data = inline
        return {"type": "image", "source": {"type": "base64", "media_type": media_type, "data": data}}
    return {"type": "image", "source": {"type": "url", "url": url}}


def to_anthropic_content(message: NormalizedMessage) -> Union[str, List[Dict[str, Any]]]:
    """Translate normalized content into Anthropic content blocks."""
    if isinstance(message.content, str):
        return message.content
    blocks: List[Dict[str, Any]] = []
    for part in message.content:
        if isinstance(part, TextPart):
            blocks.append({"type": "text", "text": part.text})
        elif isinstance(part, ImagePart):
            blocks.append(_image_block(part.image_url.url))
    return blocks


class AnthropicAdapter(ProviderAdapter):
    """Adapter for ``/v1/messages``.

    Roles collapse to ``user``/``assistant``; ``max_tokens`` is mandatory for
    this vendor so a default is always sent.
    """

    kind = ProviderKind.anthropic

    def build_request(self, config: ProviderConfig, messages: Sequence[NormalizedMessage]) -> PreparedRequest:
        body = {
            "model": config.model,
            "max_tokens": config.max_tokens or ANTHROPIC_DEFAULT_MAX_TOKENS,
            "temperature": config.temperature,
            "messages": [
                {
                    "role": "assistant" if m.role == MessageRole.assistant else "user",
                    "content": to_anthropic_content(m),
                }
                for m in messages
            ],
        }
        headers = {
            "x-api-key": config.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }
        return PreparedRequest(url=config.base_url or ANTHROPIC_DEFAULT_URL, json=body, headers=headers)

    def extract_text(self, data: Any) -> str:
        return data["content"][0]["text"]
