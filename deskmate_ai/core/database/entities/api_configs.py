"""
Provider configuration entity model.

One row per configured LLM endpoint. At most one row is the default; the
repository enforces that when rows are created or updated.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field

from deskmate_ai.llm.config import ProviderConfig, ProviderKind

from ..base import Base, utc_now


class ApiConfigBase(Base):
    """Base fields for a provider configuration."""

    name: str = Field(description="Display name")
    provider: ProviderKind = Field(description="Vendor tag (openai, anthropic, google, ollama, custom)")
    api_key: str = Field(default="", description="Credential sent to the vendor")
    base_url: Optional[str] = Field(default=None, description="Endpoint override")
    model: str = Field(description="Model identifier")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: Optional[int] = Field(default=None, ge=1, description="Completion token limit")
    is_default: bool = Field(default=False, description="Whether this is the default configuration")


class ApiConfig(ApiConfigBase, table=True):
    """Persistent provider configuration.

    Table: api_configs
    """

    __tablename__ = "api_configs"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def to_provider_config(self) -> ProviderConfig:
        """Convert the row into the configuration the adapters consume."""
        return ProviderConfig(
            id=self.id,
            name=self.name,
            provider=ProviderKind(self.provider),
            api_key=self.api_key,
            base_url=self.base_url,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

    def __repr__(self) -> str:
        return f"ApiConfig(id={self.id}, name={self.name}, provider={self.provider})"
