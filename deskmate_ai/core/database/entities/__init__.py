"""
Database entity models.

Modules:
- chats: Chat threads
- messages: Messages within a chat
- api_configs: Provider configurations
"""

from .api_configs import ApiConfig
from .chats import Chat
from .messages import Message

__all__ = [
    "ApiConfig",
    "Chat",
    "Message",
]
