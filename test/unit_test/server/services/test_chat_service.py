import json

import httpx
import pytest

from deskmate_ai.core.database import ApiConfig, ApiConfigRepository, Chat, ChatRepository, Message, RecordNotFoundError
from deskmate_ai.llm import MessageRole, ProviderKind, StreamingError
from deskmate_ai.server.core.config import LLMRuntimeConfig
from deskmate_ai.server.services.chat_service import (
    FINAL_MESSAGE_CREATED,
    MESSAGE_CREATED,
    ChatService,
    NoApiConfigurationError,
    to_normalized,
)

pytestmark = pytest.mark.asyncio


@pytest.fixture
def llm_config() -> LLMRuntimeConfig:
    return LLMRuntimeConfig(http_timeout=5, stream_chunk_delay=0, context_window=3)


@pytest.fixture
def service(session, http_client, llm_config) -> ChatService:
    return ChatService(session, client=http_client, config=llm_config)


async def _default_config(session, **overrides) -> ApiConfig:
    values = {
        "name": "Mock",
        "provider": ProviderKind.openai,
        "api_key": "sk",
        "model": "gpt",
        "base_url": "http://mock/v1/chat/completions",
        "is_default": True,
    }
    values.update(overrides)
    return await ApiConfigRepository(session).create(ApiConfig(**values))


async def test_to_normalized_keeps_images():
    message = Message(chat_id="c", role=MessageRole.user, content="look")
    message.set_images_list(["https://img/a.png"])
    normalized = to_normalized(message)
    assert normalized.image_urls() == ["https://img/a.png"]
    assert normalized.text() == "look"


async def test_unknown_chat(service: ChatService):
    with pytest.raises(RecordNotFoundError):
        await service.send_message("ghost", "hi")


async def test_pinned_config_wins_over_default(session, service: ChatService):
    await _default_config(session)
    pinned = await _default_config(session, name="Pinned", provider=ProviderKind.ollama, is_default=False)
    chat = await ChatRepository(session).create(Chat(title="t", api_config_id=pinned.id))
    assert (await service.resolve_config(chat)).id == pinned.id


async def test_no_configuration(session, service: ChatService):
    chat = await ChatRepository(session).create(Chat(title="t"))
    with pytest.raises(NoApiConfigurationError):
        await service.resolve_config(chat)


async def test_context_is_limited_to_recent_messages(session, service: ChatService, mock_provider):
    await _default_config(session)
    chat = await ChatRepository(session).create(Chat(title="t"))
    for text in ("one", "two", "three"):
        await service.send_message(chat.id, text)

    last_request = json.loads(mock_provider.requests[-1].content)
    assert len(last_request["messages"]) == 3
    assert last_request["messages"][-1] == {"role": "user", "content": "three"}


async def test_streaming_turn_uses_one_message_id(session, service: ChatService, mock_provider, emitter):
    mock_provider.handler = lambda request: httpx.Response(
        200, json={"message": {"content": "simulated\n\nreply  here"}}
    )
    await _default_config(session, provider=ProviderKind.ollama, base_url="http://mock")
    chat = await ChatRepository(session).create(Chat(title="t"))

    message_id = await service.send_message_streaming(chat.id, "hi", emitter=emitter, message_id="fixed-id")

    assert message_id == "fixed-id"
    assert emitter.names()[0] == MESSAGE_CREATED
    assert emitter.names()[-1] == FINAL_MESSAGE_CREATED
    assert emitter.of_type(FINAL_MESSAGE_CREATED)[0]["id"] == "fixed-id"
    assert emitter.of_type("streaming_complete")[0]["content"] == "simulated\n\nreply  here"
    stored = await service.messages.get_by_id("fixed-id")
    assert stored.content == "simulated\n\nreply  here"
    assert stored.role == MessageRole.assistant


async def test_streaming_failure_stores_nothing_for_reply(session, service: ChatService, mock_provider, emitter):
    mock_provider.handler = lambda request: httpx.Response(503, text="busy")
    await _default_config(session)
    chat = await ChatRepository(session).create(Chat(title="t"))

    with pytest.raises(StreamingError):
        await service.send_message_streaming(chat.id, "hi", emitter=emitter)

    assert FINAL_MESSAGE_CREATED not in emitter.names()
    assert [m.role for m in await service.messages.list_for_chat(chat.id)] == [MessageRole.user]
