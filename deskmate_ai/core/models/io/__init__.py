"""
I/O models for API requests and responses.

Modules:
- agent: Agent session and action requests
- api_configs: Provider configuration I/O models
- chats: Chat, message and chat-turn I/O models
"""

from .agent import ActionRequest, PermissionRequest, SessionCreate
from .api_configs import ApiConfigCreate, ApiConfigRead, ApiConfigUpdate
from .chats import (
    ChatCreate,
    ChatRead,
    ChatSummaryRead,
    ChatUpdate,
    MessageCreate,
    MessageRead,
    SendMessageRequest,
)

__all__ = [
    "ActionRequest",
    "ApiConfigCreate",
    "ApiConfigRead",
    "ApiConfigUpdate",
    "ChatCreate",
    "ChatRead",
    "ChatSummaryRead",
    "ChatUpdate",
    "MessageCreate",
    "MessageRead",
    "PermissionRequest",
    "SendMessageRequest",
    "SessionCreate",
]
