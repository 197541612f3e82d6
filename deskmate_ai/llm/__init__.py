"""Multi-vendor completion pipeline.

- ``messages``: the wire-neutral ``NormalizedMessage``.
- ``adapters``: one ``ProviderAdapter`` per vendor (OpenAI-compatible,
  Anthropic, Google, Ollama, Custom) sharing the HTTP and error plumbing.
- ``streaming``: the ``StreamingPipeline`` that turns a native SSE stream, or
  a full reply replayed word by word, into progress events.
"""

from .adapters import ProviderAdapter, get_adapter
from .config import ProviderConfig, ProviderKind
from .errors import (
    ProviderConfigurationError,
    ProviderError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTransportError,
    StreamingError,
)
from .messages import MessageRole, NormalizedMessage
from .streaming import StreamingPipeline

__all__ = [
    "MessageRole",
    "NormalizedMessage",
    "ProviderAdapter",
    "ProviderConfig",
    "ProviderConfigurationError",
    "ProviderError",
    "ProviderHTTPError",
    "ProviderKind",
    "ProviderResponseError",
    "ProviderTransportError",
    "StreamingError",
    "StreamingPipeline",
    "get_adapter",
]
