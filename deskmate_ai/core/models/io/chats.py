"""
Chat and message I/O models for API requests and responses.

These models are separate from the database entities so the HTTP contract
can evolve independently of the table layout.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from deskmate_ai.llm.messages import MessageRole


class ChatRead(BaseModel):
    """Schema for reading a chat from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str = Field(description="Chat title")
    api_config_id: Optional[str] = Field(default=None, description="Pinned provider configuration")
    created_at: datetime
    updated_at: datetime


class ChatSummaryRead(ChatRead):
    """Chat list entry with the latest message preview."""

    api_config_name: Optional[str] = None
    last_message: Optional[str] = None
    last_message_time: Optional[datetime] = None
    unread_count: int = 0


class ChatCreate(BaseModel):
    """Schema for creating a chat via the API."""

    title: str = Field(description="Chat title")
    api_config_id: Optional[str] = Field(default=None, description="Pinned provider configuration")


class ChatUpdate(BaseModel):
    """Schema for updating a chat via the API."""

    title: Optional[str] = None
    api_config_id: Optional[str] = None


class MessageRead(BaseModel):
    """Schema for reading a message from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    chat_id: str
    role: MessageRole
    content: str
    images: Optional[List[str]] = None
    created_at: datetime

    @field_validator("images", mode="before")
    @classmethod
    def _decode_images(cls, value):
        if isinstance(value, str):
            return json.loads(value) or None
        return value


class MessageCreate(BaseModel):
    """Schema for appending a message to a chat without running a completion."""

    role: MessageRole = MessageRole.user
    content: str = ""
    images: Optional[List[str]] = None


class SendMessageRequest(BaseModel):
    """Schema for one chat turn."""

    content: str = Field(default="", description="User message text")
    images: Optional[List[str]] = Field(default=None, description="Image URLs or data URLs")
