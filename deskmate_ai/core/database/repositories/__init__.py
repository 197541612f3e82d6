"""
Repository layer for the chat record store.

Modules:
- base: AsyncBaseRepository interface and QueryBuilder utilities
- chats: Chat threads and their overview listing
- messages: Chat messages
- api_configs: Provider configurations and the single-default rule
"""

from .api_configs import ApiConfigRepository
from .base import AsyncBaseRepository, QueryBuilder
from .chats import ChatOverview, ChatRepository
from .messages import MessageRepository

__all__ = [
    "ApiConfigRepository",
    "AsyncBaseRepository",
    "ChatOverview",
    "ChatRepository",
    "MessageRepository",
    "QueryBuilder",
]
