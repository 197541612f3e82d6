"""Agent action runtime.

This package lets the assistant act on the local machine on behalf of the
user while keeping every action auditable.

Design overview
---------------

- ``SessionStore`` hands out ``AgentSession`` objects by id (get-or-create).
  A session owns its working directory and an append-only audit log.
- ``CapabilityDispatcher`` resolves an action name through the
  ``CapabilityRegistry``, decodes the parameters into a typed command,
  consults the ``PermissionPolicy`` for privileged operations and records
  exactly one ``AgentAction`` per call, whether it succeeded or not.
- ``PermissionPolicy`` is a pure, table-driven classifier producing
  ``Safe``/``Moderate``/``Dangerous`` tiers. ``Dangerous`` operations are
  hard-blocked by the dispatcher.

Typical usage
-------------

1. ``session = store.get_or_create("chat-1")``
2. ``action = await dispatcher.execute(session, "list_directory", {"path": "."})``
3. Inspect ``action.success`` / ``action.result`` / ``action.error_message``.
"""

from .capabilities.registry import CapabilityRegistry
from .dispatcher import CapabilityDispatcher
from .errors import (
    AgentRuntimeError,
    CollaboratorError,
    InvalidInputError,
    PermissionDeniedError,
    SessionNotFoundError,
    UnknownOperationError,
)
from .notifications import EventEmitter, NullEmitter, announce_permission, safe_emit
from .policy.permission_policy import PermissionPolicy
from .schemas.domain import (
    ActionType,
    AgentAction,
    CapabilityDescriptor,
    OperationPermission,
    PermissionCheck,
    PermissionLevel,
    SessionSnapshot,
)
from .session import AgentSession
from .session_store import SessionStore

__all__ = [
    "ActionType",
    "AgentAction",
    "AgentRuntimeError",
    "AgentSession",
    "CapabilityDescriptor",
    "CapabilityDispatcher",
    "CapabilityRegistry",
    "CollaboratorError",
    "EventEmitter",
    "InvalidInputError",
    "NullEmitter",
    "OperationPermission",
    "PermissionCheck",
    "PermissionDeniedError",
    "PermissionLevel",
    "PermissionPolicy",
    "SessionNotFoundError",
    "SessionSnapshot",
    "SessionStore",
    "UnknownOperationError",
    "announce_permission",
    "safe_emit",
]
