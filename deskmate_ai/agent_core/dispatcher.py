from __future__ import annotations

"""Action dispatch for agent sessions.

``CapabilityDispatcher.execute`` walks every call through the same states:

1. *Requested*: a draft ``AgentAction`` is built with ``success=False``.
2. The action type is resolved to a capability; unknown names fail at once.
3. Raw parameters are decoded into the capability's typed command.
4. *PermissionChecked*: gated capabilities are classified by the
   ``PermissionPolicy``; a permission notice is emitted and a ``Dangerous``
   tier ends the call as *Denied* without running the handler.
5. *Executed*: the handler runs outside the session lock.
6. The completed action is appended to the session audit log and returned.

Handler failures are reported as data (``success=False``); the only error
that escapes is ``SessionNotFoundError`` from ``execute_in``.
"""

from typing import Any, List, Mapping, Optional

from ..core.logging_config import get_logger
from .capabilities.base import CapabilityContext
from .capabilities.registry import CapabilityRegistry
from .errors import AgentRuntimeError, InvalidInputError, PermissionDeniedError, UnknownOperationError
from .notifications import EventEmitter, announce_permission
from .policy.permission_policy import PermissionPolicy
from .schemas.commands import decode_command
from .schemas.domain import (
    ActionType,
    AgentAction,
    CapabilityDescriptor,
    PermissionCheck,
    PermissionLevel,
)
from .session import AgentSession
from .session_store import SessionStore

logger = get_logger(__name__)


class CapabilityDispatcher:
    """Route named actions to capability handlers and record every outcome."""

    def __init__(
        self,
        *,
        registry: Optional[CapabilityRegistry] = None,
        policy: Optional[PermissionPolicy] = None,
        emitter: Optional[EventEmitter] = None,
        command_timeout: Optional[float] = None,
    ) -> None:
        self._registry = registry or CapabilityRegistry.with_builtins()
        self._policy = policy or PermissionPolicy()
        self._emitter = emitter
        self._command_timeout = command_timeout

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    @property
    def policy(self) -> PermissionPolicy:
        return self._policy

    def capabilities(self) -> List[CapabilityDescriptor]:
        """Return the introspection catalog of every dispatchable action."""
        return self._registry.catalog()

    async def execute_in(self, store: SessionStore, session_id: str, action_type: str, parameters: Mapping[str, Any]) -> AgentAction:
        """
        Dispatch against a session looked up by id.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        return await self.execute(store.get(session_id), action_type, parameters)

    async def execute(self, session: AgentSession, action_type: str, parameters: Mapping[str, Any]) -> AgentAction:
        """
        Execute one action and append its outcome to ``session``'s audit log.

        Args:
            session: The session to act on.
            action_type: The action name, e.g. ``read_file``.
            parameters: Raw JSON-like parameter mapping.

        Returns:
            The completed ``AgentAction``; failures have ``success=False``.
        """
        params = dict(parameters or {})
        draft = AgentAction(
            action_type=action_type,
            description=f"Executing {action_type}",
            parameters=params,
            success=False,
        )

        try:
            output = await self._run(session, action_type, params)
        except AgentRuntimeError as e:
            completed = self._failed(draft, str(e))
            if isinstance(e, PermissionDeniedError):
                logger.warning(f"Denied {action_type} in session {session.id}: {e}")
        except Exception as e:
            # The call must still be recorded when a handler misbehaves.
            logger.exception(f"Unexpected failure in {action_type} for session {session.id}")
            completed = self._failed(draft, str(e) or type(e).__name__)
        else:
            completed = draft.model_copy(
                update={
                    "success": True,
                    "result": output,
                    "description": f"Successfully executed {action_type}",
                }
            )

        session.record(completed)
        logger.info(f"Action {action_type} in session {session.id} finished: success={completed.success}")
        return completed

    @staticmethod
    def _failed(draft: AgentAction, message: str) -> AgentAction:
        return draft.model_copy(
            update={
                "success": False,
                "error_message": message,
                "description": f"Failed to execute {draft.action_type}: {message}",
            }
        )

    async def _run(self, session: AgentSession, action_type: str, params: dict[str, Any]) -> Any:
        action = ActionType.parse(action_type)
        if action is None or not self._registry.has(action):
            raise UnknownOperationError(action_type)
        if action.value not in session.capabilities:
            raise InvalidInputError(f"Action not enabled for this session: {action_type}")

        capability = self._registry.get(action)
        command = decode_command(action, params)
        ctx = CapabilityContext(
            session=session,
            working_directory=session.current_directory,
            command_timeout=self._command_timeout,
        )

        gate = capability.permission_gate(ctx, command)
        if gate is not None:
            permission = self._policy.classify(gate.operation, gate.parameters)
            logger.debug(f"Classified {gate.operation} as {permission.level.value}: {permission.description}")
            await announce_permission(self._emitter, permission)
            if permission.level == PermissionLevel.dangerous:
                raise PermissionDeniedError(permission)

        result = await capability.execute(ctx, command=command)
        return result.output

    async def request_permission(self, operation: str, parameters: Mapping[str, Any]) -> PermissionCheck:
        """
        Classify an operation on behalf of a caller and announce the request.

        ``granted`` is True for ``Safe`` and ``Moderate`` tiers only.
        """
        check = self._policy.request(operation, parameters)
        logger.debug(f"Permission request for {operation}: {check.permission.level.value}, granted={check.granted}")
        await announce_permission(self._emitter, check.permission)
        return check
