"""Ollama local ``/api/chat`` adapter."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from deskmate_ai.core.logging_config import get_logger

from ..config import ProviderConfig, ProviderKind
from ..messages import NormalizedMessage, split_data_url
from .base import PreparedRequest, ProviderAdapter

logger = get_logger(__name__)

OLLAMA_DEFAULT_BASE_URL = "http://localhost:11434"


def to_ollama_message(message: NormalizedMessage) -> Dict[str, Any]:
    """Flatten a message to ``{role, content, images?}``.

    Ollama only accepts base64 image payloads, so remote image URLs are left out.
    """
    out: Dict[str, Any] = {"role": message.role.value, "content": message.text()}
    images: List[str] = []
    for url in message.image_urls():
        inline = split_data_url(url)
        if inline is None:
            logger.warning(f"Ollama accepts only inline images; skipping {url[:80]}")
            continue
        images.append(inline[1])
    if images:
        out["images"] = images
    return out


class OllamaAdapter(ProviderAdapter):
    kind = ProviderKind.ollama

    def build_request(self, config: ProviderConfig, messages: Sequence[NormalizedMessage]) -> PreparedRequest:
        base = (config.base_url or OLLAMA_DEFAULT_BASE_URL).rstrip("/")
        body = {
            "model": config.model,
            "messages": [to_ollama_message(m) for m in messages],
            "stream": False,
            "options": {"temperature": config.temperature},
        }
        return PreparedRequest(url=f"{base}/api/chat", json=body, headers={"Content-Type": "application/json"})

    def extract_text(self, data: Any) -> str:
        return data["message"]["content"]
