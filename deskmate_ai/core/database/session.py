"""
Global database engine and session factory.

The engine and session factory are built from ``settings.database_url`` the
first time this module is imported.
"""

from __future__ import annotations

from deskmate_ai.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker, seed_default_config

engine = create_engine(settings.database_url)
async_session_maker = create_sessionmaker(engine)


async def init_db() -> None:
    """Create the tables and seed the default provider configuration."""
    await create_all(engine)
    openai = settings.openai
    async with async_session_maker() as session:
        await seed_default_config(session, api_key=openai.api_key, model=openai.model, base_url=openai.base_url)
