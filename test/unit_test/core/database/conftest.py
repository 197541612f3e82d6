"""Test configuration for database unit tests.

Each test gets a fresh in-memory SQLite database with every table created.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel.ext.asyncio.session import AsyncSession

from deskmate_ai.core.database import ApiConfig, create_all, create_sessionmaker
from deskmate_ai.llm.config import ProviderKind


@pytest_asyncio.fixture
async def in_memory_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def in_memory_session(in_memory_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture
def make_api_config() -> Callable[..., ApiConfig]:
    """Build an unsaved provider configuration."""

    def _make(name: str = "Work", **overrides) -> ApiConfig:
        values = {
            "name": name,
            "provider": ProviderKind.openai,
            "api_key": "sk-test",
            "model": "gpt-4o-mini",
        }
        values.update(overrides)
        return ApiConfig(**values)

    return _make


@pytest.fixture
def clock() -> Callable[[int], datetime]:
    """Deterministic timestamps, ``clock(n)`` is n seconds after a fixed origin."""
    origin = datetime(2024, 1, 1, 12, 0, 0)
    return lambda seconds: origin + timedelta(seconds=seconds)
