"""Google Gemini ``generateContent`` adapter."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..config import ProviderConfig, ProviderKind
from ..messages import ImagePart, MessageRole, NormalizedMessage, TextPart, split_data_url
from .base import PreparedRequest, ProviderAdapter

GOOGLE_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
GOOGLE_DEFAULT_MAX_OUTPUT_TOKENS = 1000


def to_google_parts(message: NormalizedMessage) -> List[Dict[str, Any]]:
    """Translate normalized content into Gemini ``parts``."""
    if isinstance(message.content, str):
        return [{"text": message.content}]
    parts: List[Dict[str, Any]] = []
    for part in message.content:
        if isinstance(part, TextPart):
            parts.append({"text": part.text})
        elif isinstance(part, ImagePart):
            inline = split_data_url(part.image_url.url)
            if inline is not None:
                mime_type, data = inline
                parts.append({"inline_data": {"mime_type": mime_type, "data": data}})
            else:
                parts.append({"file_data": {"file_uri": part.image_url.url}})
    return parts


class GoogleAdapter(ProviderAdapter):
    """Adapter for Gemini models.

    The model id is part of the URL path and the API key travels as the
    ``key`` query parameter. The assistant role is called ``model`` here.
    """

    kind = ProviderKind.google

    def build_request(self, config: ProviderConfig, messages: Sequence[NormalizedMessage]) -> PreparedRequest:
        base = (config.base_url or GOOGLE_DEFAULT_BASE_URL).rstrip("/")
        body = {
            "contents": [
                {
                    "role": "model" if m.role == MessageRole.assistant else "user",
                    "parts": to_google_parts(m),
                }
                for m in messages
            ],
            "generationConfig": {
                "temperature": config.temperature,
                "maxOutputTokens": config.max_tokens or GOOGLE_DEFAULT_MAX_OUTPUT_TOKENS,
            },
        }
        return PreparedRequest(
            url=f"{base}/{config.model}:generateContent",
            json=body,
            headers={"Content-Type": "application/json"},
            params={"key": config.api_key},
        )

    def extract_text(self, data: Any) -> str:
        return data["candidates"][0]["content"]["parts"][0]["text"]
