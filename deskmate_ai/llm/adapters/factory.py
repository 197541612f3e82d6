"""Adapter selection by vendor tag."""

from __future__ import annotations

from typing import Dict, Optional, Type

import httpx

from ..config import ProviderKind
from .anthropic import AnthropicAdapter
from .base import ProviderAdapter
from .custom import CustomAdapter
from .google import GoogleAdapter
from .ollama import OllamaAdapter
from .openai_compatible import OpenAICompatibleAdapter

ADAPTERS: Dict[ProviderKind, Type[ProviderAdapter]] = {
    ProviderKind.openai: OpenAICompatibleAdapter,
    ProviderKind.anthropic: AnthropicAdapter,
    ProviderKind.google: GoogleAdapter,
    ProviderKind.ollama: OllamaAdapter,
    ProviderKind.custom: CustomAdapter,
}


def get_adapter(
    kind: ProviderKind | str, *, client: Optional[httpx.AsyncClient] = None, timeout: float = 60.0
) -> ProviderAdapter:
    """
    Instantiate the adapter for a vendor tag.

    Raises:
        ValueError: If ``kind`` is not a known vendor tag.
    """
    return ADAPTERS[ProviderKind(kind)](client=client, timeout=timeout)
