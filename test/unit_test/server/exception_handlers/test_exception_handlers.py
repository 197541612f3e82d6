"""
Unit tests for server exception handlers.

Tests cover the global fallback and the mapping of domain errors to HTTP
status codes.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request

from deskmate_ai.agent_core.errors import SessionNotFoundError
from deskmate_ai.core.database.errors import RecordConflictError, RecordNotFoundError
from deskmate_ai.llm.errors import (
    ProviderError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTransportError,
    StreamingError,
)
from deskmate_ai.server.exception_handlers import setup_exception_handlers
from deskmate_ai.server.exception_handlers.domain_handlers import (
    no_api_configuration_handler,
    provider_error_handler,
    record_conflict_handler,
    record_not_found_handler,
    session_not_found_handler,
)
from deskmate_ai.server.exception_handlers.global_handler import global_exception_handler
from deskmate_ai.server.services.chat_service import NoApiConfigurationError


@pytest.fixture
def mock_request():
    """Create a mock request object."""
    request = Mock(spec=Request)
    request.method = "POST"
    request.url.path = "/api/v1/chats/c1/completions"
    request.query_params = {}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    return request


def _body(response) -> dict:
    return json.loads(response.body)


class TestGlobalExceptionHandler:
    async def test_logs_and_returns_error_id(self, mock_request):
        exc = ValueError("Test error")
        with patch("deskmate_ai.server.exception_handlers.global_handler.logger") as mock_logger:
            response = await global_exception_handler(mock_request, exc)

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args[1]["extra"]["error_type"] == "ValueError"
        assert response.status_code == 500
        body = _body(response)
        assert body["detail"] == "Internal server error"
        assert body["error_id"] == id(exc)
        assert body["error_type"] == "ValueError"

    async def test_handles_request_without_client(self, mock_request):
        mock_request.client = None
        response = await global_exception_handler(mock_request, RuntimeError("x"))
        assert response.status_code == 500


class TestDomainHandlers:
    async def test_not_found_errors(self, mock_request):
        response = await session_not_found_handler(mock_request, SessionNotFoundError("s1"))
        assert response.status_code == 404
        assert _body(response) == {"detail": "Session not found: s1"}

        response = await record_not_found_handler(mock_request, RecordNotFoundError("Chat", "c1"))
        assert response.status_code == 404
        assert _body(response) == {"detail": "Chat not found: c1"}

    async def test_conflict_and_missing_configuration(self, mock_request):
        response = await record_conflict_handler(mock_request, RecordConflictError("in use"))
        assert response.status_code == 409

        response = await no_api_configuration_handler(mock_request, NoApiConfigurationError())
        assert response.status_code == 400
        assert _body(response) == {"detail": "No API configuration found"}

    async def test_http_error_keeps_vendor_status_and_body(self, mock_request):
        exc = ProviderHTTPError("rejected", status_code=401, body='{"error":"key"}', provider="openai")
        response = await provider_error_handler(mock_request, exc)
        assert response.status_code == 502
        assert _body(response) == {
            "detail": "rejected",
            "provider": "openai",
            "error_type": "ProviderHTTPError",
            "status_code": 401,
            "body": '{"error":"key"}',
        }

    async def test_response_and_streaming_errors(self, mock_request):
        body = _body(await provider_error_handler(mock_request, ProviderResponseError("bad", body="<html>")))
        assert body["body"] == "<html>"
        body = _body(await provider_error_handler(mock_request, StreamingError("cut", partial_content="hal")))
        assert body["partial_content"] == "hal"
        body = _body(await provider_error_handler(mock_request, ProviderTransportError("down", provider="ollama")))
        assert body == {"detail": "down", "provider": "ollama", "error_type": "ProviderTransportError"}


def test_setup_registers_every_handler():
    app = FastAPI()
    setup_exception_handlers(app)
    for exc_type in (
        SessionNotFoundError,
        RecordNotFoundError,
        RecordConflictError,
        NoApiConfigurationError,
        ProviderError,
        Exception,
    ):
        assert exc_type in app.exception_handlers
