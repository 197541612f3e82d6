"""
Request dependencies.

Tests override ``get_session_factory`` and ``get_http_client`` through
``app.dependency_overrides`` to run against an in-memory store and a mock
transport.
"""

from typing import Annotated, AsyncGenerator, Optional

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from deskmate_ai.core.database.session import async_session_maker

from .agent_runtime import AgentRuntime, get_agent_runtime
from .event_bus import EventBus, get_event_bus


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_maker


def get_http_client(request: Request) -> Optional[httpx.AsyncClient]:
    """Shared HTTP client for provider calls, opened by the application lifespan."""
    return getattr(request.app.state, "http_client", None)


async def get_db_session(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AsyncGenerator[AsyncSession, None]:
    async with factory() as session:
        yield session


SessionFactoryDep = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
DbSessionDep = Annotated[AsyncSession, Depends(get_db_session)]
HttpClientDep = Annotated[Optional[httpx.AsyncClient], Depends(get_http_client)]
AgentRuntimeDep = Annotated[AgentRuntime, Depends(get_agent_runtime)]
EventBusDep = Annotated[EventBus, Depends(get_event_bus)]
