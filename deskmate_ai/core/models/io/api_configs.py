"""
Provider configuration I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from deskmate_ai.llm.config import ProviderKind


class ApiConfigRead(BaseModel):
    """Schema for reading a provider configuration from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    provider: ProviderKind
    api_key: str
    base_url: Optional[str] = None
    model: str
    temperature: float
    max_tokens: Optional[int] = None
    is_default: bool
    created_at: datetime
    updated_at: datetime


class ApiConfigCreate(BaseModel):
    """Schema for creating a provider configuration via the API."""

    name: str = Field(description="Display name")
    provider: ProviderKind = Field(description="Vendor tag")
    api_key: str = Field(default="", description="Credential sent to the vendor")
    base_url: Optional[str] = Field(default=None, description="Endpoint override")
    model: str = Field(description="Model identifier")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, ge=1)
    is_default: bool = False


class ApiConfigUpdate(BaseModel):
    """Schema for updating a provider configuration via the API.

    The vendor tag of an existing configuration cannot change.
    """

    name: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, ge=1)
    is_default: Optional[bool] = None
