"""Provider configuration consumed by the adapters."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProviderKind(str, Enum):
    openai = "openai"
    anthropic = "anthropic"
    google = "google"
    ollama = "ollama"
    custom = "custom"


class ProviderConfig(BaseModel):
    """
    Read-only view of a stored provider configuration.

    Adapters only read these fields; persistence and the single-default rule
    belong to the record store.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = None
    name: str = ""
    provider: ProviderKind
    api_key: str = ""
    base_url: Optional[str] = Field(default=None, description="Overrides the vendor's default endpoint.")
    model: str
    temperature: float = 0.7
    max_tokens: Optional[int] = None
