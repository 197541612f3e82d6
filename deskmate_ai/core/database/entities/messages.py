"""
Message entity model.

Messages belong to one chat. Attached images are stored as a JSON array of
URLs or ``data:`` URLs in a text column.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from typing import List, Optional

from sqlmodel import Field

from deskmate_ai.llm.messages import MessageRole

from ..base import Base, utc_now


class Message(Base, table=True):
    """Single message within a chat.

    Table: messages
    """

    __tablename__ = "messages"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    chat_id: str = Field(foreign_key="chats.id", index=True)

    role: MessageRole = Field(description="Message sender role")
    content: str = Field(default="", description="Message text")
    images: Optional[str] = Field(default=None, description="JSON array of image URLs")

    created_at: datetime = Field(default_factory=utc_now, index=True)

    def get_images_list(self) -> Optional[List[str]]:
        """Attached image URLs, or ``None`` when the message has none."""
        if not self.images:
            return None
        return list(json.loads(self.images))

    def set_images_list(self, images: Optional[List[str]]) -> None:
        self.images = json.dumps(list(images)) if images else None

    def __repr__(self) -> str:
        return f"Message(id={self.id}, role={self.role}, chat_id={self.chat_id})"
