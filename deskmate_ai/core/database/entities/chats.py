"""
Chat entity model.

A chat is one conversation thread; it optionally pins the provider
configuration its completions run against.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, utc_now


class ChatBase(Base):
    """Base fields for a chat."""

    title: str = Field(description="Chat title")
    api_config_id: Optional[str] = Field(
        default=None, foreign_key="api_configs.id", description="Pinned provider configuration"
    )


class Chat(ChatBase, table=True):
    """Persistent chat thread.

    Table: chats
    """

    __tablename__ = "chats"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"Chat(id={self.id}, title={self.title})"
