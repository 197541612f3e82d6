"""
Message repository.

Creating a message also moves its chat's ``updated_at`` to the message
timestamp, in the same commit.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.chats import Chat
from ..entities.messages import Message
from .base import AsyncBaseRepository, QueryBuilder


class MessageRepository(AsyncBaseRepository[Message]):
    """Repository for chat messages."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Message)

    async def create(self, message: Message) -> Message:
        self.session.add(message)
        chat = await self.session.get(Chat, message.chat_id)
        if chat is not None:
            chat.updated_at = message.created_at
            self.session.add(chat)
        await self.session.commit()
        await self.session.refresh(message)
        return message

    async def get_by_id(self, message_id: str) -> Optional[Message]:
        stmt = select(Message).where(Message.id == message_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, message: Message) -> Message:
        self.session.add(message)
        await self.session.commit()
        await self.session.refresh(message)
        return message

    async def delete(self, message_id: str) -> bool:
        message = await self.get_by_id(message_id)
        if message is None:
            return False
        await self.session.delete(message)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Message]:
        stmt = select(Message).order_by(Message.created_at.asc())  # type: ignore

        if filters:
            stmt = QueryBuilder.apply_filters(stmt, Message, filters)

        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)

        result = await self.session.exec(stmt)
        return list(result)

    async def list_for_chat(self, chat_id: str) -> List[Message]:
        """All messages of a chat, oldest first."""
        return await self.list(filters={"chat_id": chat_id})

    async def recent_for_chat(self, chat_id: str, limit: int) -> List[Message]:
        """The last ``limit`` messages of a chat, oldest first."""
        stmt = (
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at.desc())  # type: ignore
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(reversed(list(result)))
