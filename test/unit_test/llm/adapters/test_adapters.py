from __future__ import annotations

import json
from typing import Callable, List

import httpx
import pytest

from deskmate_ai.llm.adapters import (
    AnthropicAdapter,
    CustomAdapter,
    GoogleAdapter,
    OllamaAdapter,
    OpenAICompatibleAdapter,
    get_adapter,
)
from deskmate_ai.llm.config import ProviderConfig, ProviderKind
from deskmate_ai.llm.errors import (
    ProviderConfigurationError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTransportError,
)
from deskmate_ai.llm.messages import NormalizedMessage

IMAGE = "data:image/png;base64,iVBORw0KGgo="


def _config(kind: ProviderKind, **kwargs) -> ProviderConfig:
    values = {"provider": kind, "api_key": "sk-test", "model": "m-1"}
    values.update(kwargs)
    return ProviderConfig(**values)


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _conversation() -> List[NormalizedMessage]:
    return [
        NormalizedMessage.build("user", "hi"),
        NormalizedMessage.build("assistant", "hello"),
        NormalizedMessage.build("user", "what is this", [IMAGE]),
    ]


def test_factory_covers_every_vendor() -> None:
    for kind in ProviderKind:
        assert get_adapter(kind).kind == kind
    assert isinstance(get_adapter("openai"), OpenAICompatibleAdapter)
    with pytest.raises(ValueError):
        get_adapter("mistral")


class TestRequestShapes:
    def test_openai_default_url_and_body(self) -> None:
        req = OpenAICompatibleAdapter().build_request(_config(ProviderKind.openai, max_tokens=50), _conversation())
        assert req.url == "https://api.openai.com/v1/chat/completions"
        assert req.headers["Authorization"] == "Bearer sk-test"
        assert req.json["model"] == "m-1"
        assert req.json["max_tokens"] == 50
        assert "stream" not in req.json
        assert req.json["messages"][2]["content"][1] == {"type": "image_url", "image_url": {"url": IMAGE}}

    def test_openai_omits_unset_max_tokens(self) -> None:
        req = OpenAICompatibleAdapter().build_request(_config(ProviderKind.openai), _conversation())
        assert "max_tokens" not in req.json

    def test_anthropic_body(self) -> None:
        req = AnthropicAdapter().build_request(_config(ProviderKind.anthropic), _conversation())
        assert req.url == "https://api.anthropic.com/v1/messages"
        assert req.headers["x-api-key"] == "sk-test"
        assert req.headers["anthropic-version"] == "2023-06-01"
        assert req.json["max_tokens"] == 1000
        assert [m["role"] for m in req.json["messages"]] == ["user", "assistant", "user"]
        assert req.json["messages"][2]["content"] == [
            {"type": "text", "text": "what is this"},
            {"type": "image", "source": {"type": "base64", "media_type": "image/png", "data": "iVBORw0KGgo="}},
        ]

    def test_google_body(self) -> None:
        req = GoogleAdapter().build_request(_config(ProviderKind.google, temperature=0.2), _conversation())
        assert req.url == "https://generativelanguage.googleapis.com/v1beta/models/m-1:generateContent"
        assert req.params == {"key": "sk-test"}
        assert [c["role"] for c in req.json["contents"]] == ["user", "model", "user"]
        assert req.json["contents"][2]["parts"][1] == {
            "inline_data": {"mime_type": "image/png", "data": "iVBORw0KGgo="}
        }
        assert req.json["generationConfig"] == {"temperature": 0.2, "maxOutputTokens": 1000}

    def test_ollama_body(self) -> None:
        messages = _conversation() + [NormalizedMessage.build("user", "remote", ["https://img/x.png"])]
        req = OllamaAdapter().build_request(_config(ProviderKind.ollama, base_url="http://box:11434/"), messages)
        assert req.url == "http://box:11434/api/chat"
        assert req.json["stream"] is False
        assert req.json["options"] == {"temperature": 0.7}
        assert req.json["messages"][2] == {"role": "user", "content": "what is this", "images": ["iVBORw0KGgo="]}
        assert "images" not in req.json["messages"][3]

    def test_custom_requires_base_url(self) -> None:
        with pytest.raises(ProviderConfigurationError, match="Base URL is required"):
            CustomAdapter().build_request(_config(ProviderKind.custom), _conversation())

    def test_custom_without_key_sends_no_auth(self) -> None:
        req = CustomAdapter().build_request(
            _config(ProviderKind.custom, api_key="", base_url="http://mock/v1/chat"), _conversation()
        )
        assert req.url == "http://mock/v1/chat"
        assert "Authorization" not in req.headers


class TestComplete:
    async def test_openai_reply(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "pong"}}]})

        adapter = OpenAICompatibleAdapter(client=_client(handler))
        reply = await adapter.complete(_config(ProviderKind.openai, base_url="http://mock/chat"), _conversation())
        assert reply == "pong"
        assert seen["body"]["messages"][0] == {"role": "user", "content": "hi"}

    async def test_google_key_in_query(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["key"] == "sk-test"
            assert request.url.path == "/models/m-1:generateContent"
            return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "gemini"}]}}]})

        adapter = GoogleAdapter(client=_client(handler))
        reply = await adapter.complete(_config(ProviderKind.google, base_url="http://mock/models"), _conversation())
        assert reply == "gemini"

    async def test_anthropic_and_ollama_replies(self) -> None:
        anthropic = AnthropicAdapter(
            client=_client(lambda r: httpx.Response(200, json={"content": [{"type": "text", "text": "claude"}]}))
        )
        ollama = OllamaAdapter(client=_client(lambda r: httpx.Response(200, json={"message": {"content": "llama"}})))
        assert await anthropic.complete(_config(ProviderKind.anthropic, base_url="http://mock/m"), _conversation()) == "claude"
        assert await ollama.complete(_config(ProviderKind.ollama, base_url="http://mock"), _conversation()) == "llama"

    async def test_non_2xx_keeps_status_and_body(self) -> None:
        adapter = AnthropicAdapter(client=_client(lambda r: httpx.Response(401, text='{"error":"bad key"}')))
        with pytest.raises(ProviderHTTPError) as exc:
            await adapter.complete(_config(ProviderKind.anthropic, base_url="http://mock/m"), _conversation())
        assert exc.value.status_code == 401
        assert exc.value.body == '{"error":"bad key"}'
        assert exc.value.provider == "anthropic"
        assert "401" in str(exc.value)

    async def test_unexpected_shape_keeps_body(self) -> None:
        adapter = OllamaAdapter(client=_client(lambda r: httpx.Response(200, text='{"done": true}')))
        with pytest.raises(ProviderResponseError) as exc:
            await adapter.complete(_config(ProviderKind.ollama, base_url="http://mock"), _conversation())
        assert exc.value.body == '{"done": true}'

    async def test_non_json_body(self) -> None:
        adapter = OpenAICompatibleAdapter(client=_client(lambda r: httpx.Response(200, text="<html>oops</html>")))
        with pytest.raises(ProviderResponseError) as exc:
            await adapter.complete(_config(ProviderKind.openai, base_url="http://mock/c"), _conversation())
        assert exc.value.body == "<html>oops</html>"

    async def test_non_string_reply_is_rejected(self) -> None:
        adapter = OpenAICompatibleAdapter(
            client=_client(lambda r: httpx.Response(200, json={"choices": [{"message": {"content": None}}]}))
        )
        with pytest.raises(ProviderResponseError):
            await adapter.complete(_config(ProviderKind.openai, base_url="http://mock/c"), _conversation())

    async def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        adapter = OllamaAdapter(client=_client(handler))
        with pytest.raises(ProviderTransportError):
            await adapter.complete(_config(ProviderKind.ollama, base_url="http://mock"), _conversation())
