"""
Persistent chat record store.

SQLModel entities for chats, messages and provider configurations, the async
repositories that operate on them, and engine/session helpers. Tables are
created at startup; there are no migrations.
"""

from .base import Base, utc_now
from .entities import ApiConfig, Chat, Message
from .errors import RecordConflictError, RecordNotFoundError, RecordStoreError
from .repositories import ApiConfigRepository, ChatOverview, ChatRepository, MessageRepository
from .utils import create_all, create_engine, create_sessionmaker, seed_default_config

__all__ = [
    "ApiConfig",
    "ApiConfigRepository",
    "Base",
    "Chat",
    "ChatOverview",
    "ChatRepository",
    "Message",
    "MessageRepository",
    "RecordConflictError",
    "RecordNotFoundError",
    "RecordStoreError",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "seed_default_config",
    "utc_now",
]
