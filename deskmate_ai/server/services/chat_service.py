"""
Chat turn service.

One turn persists the user's message, sends the recent history of the chat
to the configured provider and persists the reply. The streaming variant
reports progress through an ``EventEmitter``::

    message_created        the stored user message
    streaming_start ... streaming_complete / streaming_error
    final_message_created  the stored assistant message

The assistant message is stored under the id used by the streaming events.
"""

from __future__ import annotations

import uuid
from typing import List, Optional, Sequence

import httpx
from sqlmodel.ext.asyncio.session import AsyncSession

from deskmate_ai.core.database import (
    ApiConfig,
    ApiConfigRepository,
    Chat,
    ChatRepository,
    Message,
    MessageRepository,
    RecordNotFoundError,
    RecordStoreError,
)
from deskmate_ai.core.events import EventEmitter, safe_emit
from deskmate_ai.core.logging_config import get_logger
from deskmate_ai.core.models.io import MessageRead
from deskmate_ai.llm import MessageRole, NormalizedMessage, StreamingPipeline, get_adapter
from deskmate_ai.server.core.config import LLMRuntimeConfig, settings

logger = get_logger(__name__)

MESSAGE_CREATED = "message_created"
FINAL_MESSAGE_CREATED = "final_message_created"


class NoApiConfigurationError(RecordStoreError):
    """Neither the chat nor the store provides a provider configuration."""

    def __init__(self) -> None:
        super().__init__("No API configuration found")


def to_normalized(message: Message) -> NormalizedMessage:
    """Convert a stored message into the form the adapters consume."""
    return NormalizedMessage.build(message.role, message.content, message.get_images_list())


def _message_payload(message: Message) -> dict:
    return MessageRead.model_validate(message).model_dump(mode="json")


class ChatService:
    """Run chat turns against the chat's provider configuration."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        client: Optional[httpx.AsyncClient] = None,
        config: Optional[LLMRuntimeConfig] = None,
    ) -> None:
        self.chats = ChatRepository(session)
        self.messages = MessageRepository(session)
        self.api_configs = ApiConfigRepository(session)
        self._client = client
        self._config = config or settings.llm

    async def get_chat(self, chat_id: str) -> Chat:
        chat = await self.chats.get_by_id(chat_id)
        if chat is None:
            raise RecordNotFoundError("Chat", chat_id)
        return chat

    async def resolve_config(self, chat: Chat) -> ApiConfig:
        """Return the chat's pinned configuration, else the default one."""
        if chat.api_config_id:
            config = await self.api_configs.get_by_id(chat.api_config_id)
        else:
            config = await self.api_configs.get_default()
        if config is None:
            raise NoApiConfigurationError()
        return config

    async def _store(
        self,
        chat_id: str,
        role: MessageRole,
        content: str,
        images: Optional[Sequence[str]] = None,
        *,
        message_id: Optional[str] = None,
    ) -> Message:
        message = Message(chat_id=chat_id, role=role, content=content)
        if message_id is not None:
            message.id = message_id
        message.set_images_list(list(images) if images else None)
        return await self.messages.create(message)

    async def context_for(self, chat_id: str) -> List[NormalizedMessage]:
        """The last ``context_window`` messages of the chat, oldest first."""
        recent = await self.messages.recent_for_chat(chat_id, self._config.context_window)
        return [to_normalized(m) for m in recent]

    async def send_message(self, chat_id: str, text: str, images: Optional[Sequence[str]] = None) -> Message:
        """
        Run one non-streaming turn and return the stored assistant message.

        Raises:
            RecordNotFoundError: If the chat does not exist.
            NoApiConfigurationError: If no provider configuration applies.
            ProviderError: If the provider call fails; the user message stays stored.
        """
        chat = await self.get_chat(chat_id)
        api_config = await self.resolve_config(chat)
        await self._store(chat_id, MessageRole.user, text, images)
        context = await self.context_for(chat_id)

        adapter = get_adapter(api_config.provider, client=self._client, timeout=self._config.http_timeout)
        reply = await adapter.complete(api_config.to_provider_config(), context)
        logger.info(f"Chat {chat_id} completed with {api_config.provider} ({len(reply)} chars)")
        return await self._store(chat_id, MessageRole.assistant, reply)

    async def send_message_streaming(
        self,
        chat_id: str,
        text: str,
        images: Optional[Sequence[str]] = None,
        *,
        emitter: Optional[EventEmitter] = None,
        message_id: Optional[str] = None,
    ) -> str:
        """
        Run one streaming turn and return the assistant message id.

        Raises:
            RecordNotFoundError: If the chat does not exist.
            NoApiConfigurationError: If no provider configuration applies.
            StreamingError: If the stream fails; nothing is stored for the reply.
        """
        chat = await self.get_chat(chat_id)
        api_config = await self.resolve_config(chat)
        user_message = await self._store(chat_id, MessageRole.user, text, images)
        await safe_emit(emitter, MESSAGE_CREATED, _message_payload(user_message))
        context = await self.context_for(chat_id)

        message_id = message_id or str(uuid.uuid4())
        pipeline = StreamingPipeline(
            emitter=emitter,
            chunk_delay=self._config.stream_chunk_delay,
            client=self._client,
            timeout=self._config.http_timeout,
        )
        content = await pipeline.run(api_config.to_provider_config(), context, message_id=message_id, chat_id=chat_id)

        assistant = await self._store(chat_id, MessageRole.assistant, content, message_id=message_id)
        await safe_emit(emitter, FINAL_MESSAGE_CREATED, _message_payload(assistant))
        return assistant.id
