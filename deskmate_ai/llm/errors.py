"""Error types of the provider pipeline.

Purpose:
- Provide typed exceptions raised by provider adapters and the streaming pipeline.
- Keep the raw vendor response for diagnosis; a response that cannot be
  understood is never coerced into empty text.

Usage:
- Catch ``ProviderError`` for any failure of a completion call.
- Inspect ``ProviderHTTPError.status_code``/``body`` for vendor rejections.
- Inspect ``StreamingError.partial_content`` for the text received before a
  stream broke.
"""

from __future__ import annotations

from typing import Optional


class ProviderError(Exception):
    """Base error for provider completion failures.

    Args:
        message: Human-readable error description.
        provider: Vendor tag of the failing call, when known.
    """

    def __init__(self, message: str, *, provider: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider = provider


class ProviderConfigurationError(ProviderError):
    """The provider configuration cannot be used to build a request."""


class ProviderHTTPError(ProviderError):
    """The vendor answered with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int, body: str, provider: Optional[str] = None) -> None:
        super().__init__(message, provider=provider)
        self.status_code = status_code
        self.body = body


class ProviderResponseError(ProviderError):
    """A 2xx response did not have the expected shape."""

    def __init__(self, message: str, *, body: str, provider: Optional[str] = None) -> None:
        super().__init__(message, provider=provider)
        self.body = body


class ProviderTransportError(ProviderError):
    """The HTTP exchange itself failed (connect, read, timeout)."""


class StreamingError(ProviderError):
    """A stream broke after it started.

    Attributes:
        partial_content: Text accumulated from the deltas received before the failure.
    """

    def __init__(self, message: str, *, partial_content: str = "", provider: Optional[str] = None) -> None:
        super().__init__(message, provider=provider)
        self.partial_content = partial_content
