"""Vendor-specific provider adapters."""

from .anthropic import AnthropicAdapter
from .base import PreparedRequest, ProviderAdapter
from .custom import CustomAdapter
from .factory import ADAPTERS, get_adapter
from .google import GoogleAdapter
from .ollama import OllamaAdapter
from .openai_compatible import OpenAICompatibleAdapter

__all__ = [
    "ADAPTERS",
    "AnthropicAdapter",
    "CustomAdapter",
    "GoogleAdapter",
    "OllamaAdapter",
    "OpenAICompatibleAdapter",
    "PreparedRequest",
    "ProviderAdapter",
    "get_adapter",
]
