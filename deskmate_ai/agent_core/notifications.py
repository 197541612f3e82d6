from __future__ import annotations

"""Permission-request notifications.

Before a gated operation runs, the dispatcher announces the classification
so a client can show a consent prompt. The announcement is fire-and-forget.
"""

from typing import Optional

from ..core.events import EventEmitter, NullEmitter, safe_emit
from .schemas.domain import OperationPermission

PERMISSION_REQUEST_EVENT = "permission_request"


async def announce_permission(emitter: Optional[EventEmitter], permission: OperationPermission) -> bool:
    """Emit ``{operation, description, level, details}`` for ``permission``."""
    return await safe_emit(emitter, PERMISSION_REQUEST_EVENT, permission.model_dump(mode="json"))


__all__ = [
    "PERMISSION_REQUEST_EVENT",
    "EventEmitter",
    "NullEmitter",
    "announce_permission",
    "safe_emit",
]
