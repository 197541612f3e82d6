from __future__ import annotations

"""Error taxonomy of the agent action runtime.

Handlers raise these errors; the ``CapabilityDispatcher`` converts every one
of them (except ``SessionNotFoundError``) into a failed ``AgentAction`` so a
handler failure is reported as data rather than as a transport error.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .schemas.domain import OperationPermission


class AgentRuntimeError(Exception):
    """Base class for all agent runtime errors."""


class InvalidInputError(AgentRuntimeError):
    """A required parameter is missing or malformed; the operation was not attempted."""


class UnknownOperationError(AgentRuntimeError):
    """The action type is not recognized; no handler was invoked."""

    def __init__(self, action_type: str) -> None:
        super().__init__(f"unknown action type: {action_type}")
        self.action_type = action_type


class PermissionDeniedError(AgentRuntimeError):
    """The operation was classified Dangerous and was blocked before any side effect."""

    def __init__(self, permission: "OperationPermission") -> None:
        super().__init__(f"{permission.operation} requires explicit permission: {permission.description}")
        self.permission = permission


class CollaboratorError(AgentRuntimeError):
    """A filesystem, process or shell call failed.

    The message of the underlying failure is kept verbatim.
    """


class SessionNotFoundError(AgentRuntimeError):
    """No session is registered under the requested id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id
