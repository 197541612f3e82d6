"""
Chat repository.

Besides CRUD, lists chats together with the name of their provider
configuration and a preview of their latest message.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now
from ..entities.api_configs import ApiConfig
from ..entities.chats import Chat
from ..entities.messages import Message
from .base import AsyncBaseRepository, QueryBuilder


@dataclass(frozen=True)
class ChatOverview:
    """A chat row joined with its latest message."""

    chat: Chat
    api_config_name: Optional[str]
    last_message: Optional[str]
    last_message_time: Optional[datetime]


class ChatRepository(AsyncBaseRepository[Chat]):
    """Repository for chat threads."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Chat)

    async def create(self, chat: Chat) -> Chat:
        self.session.add(chat)
        await self.session.commit()
        await self.session.refresh(chat)
        return chat

    async def get_by_id(self, chat_id: str) -> Optional[Chat]:
        stmt = select(Chat).where(Chat.id == chat_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, chat: Chat) -> Chat:
        chat.updated_at = utc_now()
        self.session.add(chat)
        await self.session.commit()
        await self.session.refresh(chat)
        return chat

    async def delete(self, chat_id: str) -> bool:
        """Delete a chat and every message in it."""
        chat = await self.get_by_id(chat_id)
        if chat is None:
            return False
        messages = await self.session.exec(select(Message).where(Message.chat_id == chat_id))
        for message in messages.all():
            await self.session.delete(message)
        await self.session.flush()
        await self.session.delete(chat)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Chat]:
        stmt = select(Chat).order_by(Chat.updated_at.desc())  # type: ignore

        if filters:
            stmt = QueryBuilder.apply_filters(stmt, Chat, filters)

        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)

        result = await self.session.exec(stmt)
        return list(result)

    async def list_overviews(self) -> List[ChatOverview]:
        """List chats, most recently active first, with their last message."""
        ranked = select(
            Message.chat_id,
            Message.content,
            Message.created_at,
            func.row_number()
            .over(partition_by=Message.chat_id, order_by=Message.created_at.desc())  # type: ignore
            .label("rn"),
        ).subquery()
        stmt = (
            select(Chat, ApiConfig.name, ranked.c.content, ranked.c.created_at)
            .outerjoin(ApiConfig, Chat.api_config_id == ApiConfig.id)  # type: ignore
            .outerjoin(ranked, and_(ranked.c.chat_id == Chat.id, ranked.c.rn == 1))
            .order_by(Chat.updated_at.desc())  # type: ignore
        )
        result = await self.session.exec(stmt)
        return [
            ChatOverview(chat=chat, api_config_name=name, last_message=content, last_message_time=created_at)
            for chat, name, content, created_at in result
        ]

