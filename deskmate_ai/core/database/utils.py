"""
Database utility functions for engine and session management.

Functions:
- create_engine: Creates the async SQLAlchemy engine
- create_sessionmaker: Creates the async session factory
- create_all: Creates all tables from the SQLModel metadata
- seed_default_config: Inserts a default provider configuration on first start
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from deskmate_ai.core.logging_config import get_logger
from deskmate_ai.llm.config import ProviderKind

from .entities.api_configs import ApiConfig
from .repositories.api_configs import ApiConfigRepository

logger = get_logger(__name__)


def create_engine(db_url: str) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Plain ``sqlite://`` URLs are rewritten to use the ``aiosqlite`` driver.

    Args:
        db_url: Database connection URL

    Returns:
        Configured AsyncEngine instance
    """
    if db_url.startswith("sqlite://"):
        db_url = "sqlite+aiosqlite://" + db_url[len("sqlite://") :]
    return create_async_engine(db_url)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an ``async_sessionmaker`` producing SQLModel async sessions."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create all tables for the current SQLModel metadata."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def seed_default_config(
    session: AsyncSession, *, api_key: Optional[str], model: str, base_url: Optional[str] = None
) -> Optional[ApiConfig]:
    """
    Insert "Default OpenAI" as the default configuration when none exists.

    Nothing is inserted when the store already holds a configuration or no
    API key is configured.

    Returns:
        The inserted configuration, or None.
    """
    repo = ApiConfigRepository(session)
    if not api_key or await repo.count() > 0:
        return None
    config = await repo.create(
        ApiConfig(
            name="Default OpenAI",
            provider=ProviderKind.openai,
            api_key=api_key,
            base_url=base_url,
            model=model,
            temperature=0.7,
            is_default=True,
        )
    )
    logger.info(f"Seeded default provider configuration {config.id}")
    return config
