"""Adapter for self-hosted or third-party OpenAI-compatible endpoints."""

from __future__ import annotations

from typing import Dict

from ..config import ProviderConfig, ProviderKind
from ..errors import ProviderConfigurationError
from .openai_compatible import OpenAICompatibleAdapter


class CustomAdapter(OpenAICompatibleAdapter):
    """OpenAI request/response shape, but the base URL is mandatory and auth is optional.

    Streaming is simulated like the other non-OpenAI vendors.
    """

    kind = ProviderKind.custom
    supports_native_streaming = False

    def endpoint(self, config: ProviderConfig) -> str:
        if not config.base_url:
            raise ProviderConfigurationError("Base URL is required for custom providers", provider=self.kind.value)
        return config.base_url

    def auth_headers(self, config: ProviderConfig) -> Dict[str, str]:
        if not config.api_key:
            return {}
        return {"Authorization": f"Bearer {config.api_key}"}
