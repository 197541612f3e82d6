import os
from typing import AsyncGenerator, Callable
from unittest.mock import patch

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.pool import StaticPool

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Set test database URL before importing app
os.environ["DATABASE_URL"] = TEST_DATABASE_URL


class MockProvider:
    """Stand-in vendor endpoint answering in the OpenAI chat-completions shape."""

    def __init__(self) -> None:
        self.reply = "Hello from the mock provider"
        self.requests: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = self._default

    def _default(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": [{"message": {"content": self.reply}}]})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database per test."""
    from deskmate_ai.core.database import create_all

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    from deskmate_ai.core.database import create_sessionmaker

    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()


@pytest_asyncio.fixture
async def http_client(mock_provider: MockProvider) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(mock_provider)) as client:
        yield client


@pytest.fixture
def event_bus():
    from deskmate_ai.server.services.event_bus import EventBus

    return EventBus()


@pytest.fixture
def agent_runtime(event_bus):
    from deskmate_ai.server.core.config import AgentRuntimeConfig
    from deskmate_ai.server.services.agent_runtime import AgentRuntime

    return AgentRuntime(config=AgentRuntimeConfig(command_timeout=5), emitter=event_bus)


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session_factory, http_client, event_bus, agent_runtime
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from deskmate_ai.server.main import app
    from deskmate_ai.server.services.agent_runtime import get_agent_runtime
    from deskmate_ai.server.services.deps import get_http_client, get_session_factory
    from deskmate_ai.server.services.event_bus import get_event_bus

    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_http_client] = lambda: http_client
    app.dependency_overrides[get_event_bus] = lambda: event_bus
    app.dependency_overrides[get_agent_runtime] = lambda: agent_runtime

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("deskmate_ai.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()
