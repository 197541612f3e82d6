"""
Chat Endpoints.

CRUD for chats and their messages, plus the chat-turn endpoints:

- ``POST /{chat_id}/completions`` runs one turn and returns the stored reply.
- ``POST /{chat_id}/completions/stream`` runs one turn and streams its events
  (``message_created``, ``streaming_*``, ``final_message_created``) as
  server-sent events. The same events are published on the event bus.
"""

import asyncio
import json
from typing import List, Optional

from fastapi import APIRouter, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession
from sse_starlette.sse import EventSourceResponse

from deskmate_ai.core.database import (
    Chat,
    ChatRepository,
    Message,
    MessageRepository,
    RecordNotFoundError,
    RecordStoreError,
)
from deskmate_ai.core.database.repositories import ApiConfigRepository
from deskmate_ai.core.logging_config import get_logger
from deskmate_ai.core.models.io import (
    ChatCreate,
    ChatRead,
    ChatSummaryRead,
    ChatUpdate,
    MessageCreate,
    MessageRead,
    SendMessageRequest,
)
from deskmate_ai.llm import ProviderError, StreamingError
from deskmate_ai.server.services.chat_service import ChatService
from deskmate_ai.server.services.deps import (
    DbSessionDep,
    EventBusDep,
    HttpClientDep,
    SessionFactoryDep,
)
from deskmate_ai.server.services.event_bus import FanoutEmitter, QueueEmitter

logger = get_logger(__name__)

router = APIRouter()


async def _require_chat(repo: ChatRepository, chat_id: str) -> Chat:
    chat = await repo.get_by_id(chat_id)
    if chat is None:
        raise RecordNotFoundError("Chat", chat_id)
    return chat


async def _require_api_config(session: AsyncSession, api_config_id: Optional[str]) -> None:
    if api_config_id and await ApiConfigRepository(session).get_by_id(api_config_id) is None:
        raise RecordNotFoundError("API configuration", api_config_id)


@router.get(
    "",
    response_model=List[ChatSummaryRead],
    summary="List Chats",
    description="List chats, most recently active first, with a preview of their latest message.",
)
async def list_chats(session: DbSessionDep) -> List[ChatSummaryRead]:
    overviews = await ChatRepository(session).list_overviews()
    return [
        ChatSummaryRead(
            **ChatRead.model_validate(o.chat).model_dump(),
            api_config_name=o.api_config_name,
            last_message=o.last_message,
            last_message_time=o.last_message_time,
        )
        for o in overviews
    ]


@router.post(
    "",
    response_model=ChatRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Chat",
    responses={404: {"description": "API configuration not found"}},
)
async def create_chat(data: ChatCreate, session: DbSessionDep) -> ChatRead:
    await _require_api_config(session, data.api_config_id)
    chat = await ChatRepository(session).create(Chat.model_validate(data))
    return ChatRead.model_validate(chat)


@router.get(
    "/{chat_id}",
    response_model=ChatRead,
    summary="Get Chat",
    responses={404: {"description": "Chat not found"}},
)
async def get_chat(chat_id: str, session: DbSessionDep) -> ChatRead:
    return ChatRead.model_validate(await _require_chat(ChatRepository(session), chat_id))


@router.put(
    "/{chat_id}",
    response_model=ChatRead,
    summary="Update Chat",
    description="Rename a chat or change its pinned provider configuration.",
    responses={404: {"description": "Chat or API configuration not found"}},
)
async def update_chat(chat_id: str, data: ChatUpdate, session: DbSessionDep) -> ChatRead:
    repo = ChatRepository(session)
    chat = await _require_chat(repo, chat_id)
    changes = data.model_dump(exclude_unset=True)
    await _require_api_config(session, changes.get("api_config_id"))
    for key, value in changes.items():
        if key == "title" and value is None:
            continue
        setattr(chat, key, value)
    return ChatRead.model_validate(await repo.update(chat))


@router.delete(
    "/{chat_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Chat",
    description="Delete a chat and all of its messages.",
    responses={404: {"description": "Chat not found"}},
)
async def delete_chat(chat_id: str, session: DbSessionDep) -> Response:
    if not await ChatRepository(session).delete(chat_id):
        raise RecordNotFoundError("Chat", chat_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{chat_id}/messages",
    response_model=List[MessageRead],
    summary="List Messages",
    responses={404: {"description": "Chat not found"}},
)
async def list_messages(chat_id: str, session: DbSessionDep) -> List[MessageRead]:
    await _require_chat(ChatRepository(session), chat_id)
    messages = await MessageRepository(session).list_for_chat(chat_id)
    return [MessageRead.model_validate(m) for m in messages]


@router.post(
    "/{chat_id}/messages",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Append Message",
    description="Store a message without running a completion.",
    responses={404: {"description": "Chat not found"}},
)
async def create_message(chat_id: str, data: MessageCreate, session: DbSessionDep) -> MessageRead:
    await _require_chat(ChatRepository(session), chat_id)
    message = Message(chat_id=chat_id, role=data.role, content=data.content)
    message.set_images_list(data.images)
    return MessageRead.model_validate(await MessageRepository(session).create(message))


@router.delete(
    "/{chat_id}/messages/{message_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Message",
    responses={404: {"description": "Message not found"}},
)
async def delete_message(chat_id: str, message_id: str, session: DbSessionDep) -> Response:
    repo = MessageRepository(session)
    message = await repo.get_by_id(message_id)
    if message is None or message.chat_id != chat_id:
        raise RecordNotFoundError("Message", message_id)
    await repo.delete(message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{chat_id}/completions",
    response_model=MessageRead,
    summary="Send Message",
    description="Store the user message, run one completion and return the stored reply.",
    responses={
        404: {"description": "Chat not found"},
        400: {"description": "No API configuration found"},
        502: {"description": "Provider call failed"},
    },
)
async def send_message(
    chat_id: str, data: SendMessageRequest, session: DbSessionDep, client: HttpClientDep
) -> MessageRead:
    reply = await ChatService(session, client=client).send_message(chat_id, data.content, data.images)
    return MessageRead.model_validate(reply)


@router.post(
    "/{chat_id}/completions/stream",
    summary="Send Message (Streaming)",
    description="Run one completion and stream its progress as server-sent events.",
    responses={404: {"description": "Chat not found"}},
)
async def send_message_streaming(
    chat_id: str,
    data: SendMessageRequest,
    session: DbSessionDep,
    factory: SessionFactoryDep,
    client: HttpClientDep,
    bus: EventBusDep,
):
    await _require_chat(ChatRepository(session), chat_id)
    channel = QueueEmitter()
    emitter = FanoutEmitter(channel, bus)

    async def run_turn() -> str:
        try:
            async with factory() as turn_session:
                return await ChatService(turn_session, client=client).send_message_streaming(
                    chat_id, data.content, data.images, emitter=emitter
                )
        finally:
            channel.close()

    async def event_generator():
        task = asyncio.create_task(run_turn())
        try:
            while True:
                message = await channel.queue.get()
                if message is None:
                    break
                yield {"event": message["event"], "data": json.dumps(message["data"])}
            await task
        except StreamingError:
            logger.info(f"Streaming turn for chat {chat_id} ended with an error")
        except (RecordStoreError, ProviderError) as e:
            logger.error(f"Streaming turn for chat {chat_id} failed: {e}")
            yield {"event": "error", "data": json.dumps({"error": str(e)})}
        finally:
            if not task.done():
                task.cancel()

    return EventSourceResponse(event_generator())
