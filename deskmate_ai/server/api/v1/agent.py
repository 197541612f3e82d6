"""
Agent Runtime Endpoints.

Get-or-create agent sessions, dispatch actions within them, list the
capability catalog and run standalone permission checks. A failed action is
still a successful request: the recorded ``AgentAction`` carries
``success=false`` and the error message.
"""

from typing import List, Optional

from fastapi import APIRouter, status

from deskmate_ai.agent_core import AgentAction, CapabilityDescriptor, PermissionCheck, SessionSnapshot
from deskmate_ai.core.logging_config import get_logger
from deskmate_ai.core.models.io import ActionRequest, PermissionRequest, SessionCreate
from deskmate_ai.server.services.deps import AgentRuntimeDep

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/sessions/{session_id}",
    response_model=SessionSnapshot,
    status_code=status.HTTP_200_OK,
    summary="Get Or Create Session",
    description="Return the agent session with this id, creating it when absent.",
)
async def get_or_create_session(
    session_id: str, runtime: AgentRuntimeDep, body: Optional[SessionCreate] = None
) -> SessionSnapshot:
    working_directory = body.working_directory if body else None
    session = runtime.store.get_or_create(session_id, working_directory=working_directory)
    return session.snapshot()


@router.get(
    "/sessions/{session_id}",
    response_model=SessionSnapshot,
    summary="Get Session",
    description="Snapshot of an existing agent session.",
    responses={404: {"description": "Session not found"}},
)
async def get_session(session_id: str, runtime: AgentRuntimeDep) -> SessionSnapshot:
    return runtime.store.get(session_id).snapshot()


@router.get(
    "/capabilities",
    response_model=List[CapabilityDescriptor],
    summary="List Capabilities",
    description="Catalog of every dispatchable action with its parameters.",
)
async def list_capabilities(runtime: AgentRuntimeDep) -> List[CapabilityDescriptor]:
    return runtime.dispatcher.capabilities()


@router.post(
    "/sessions/{session_id}/actions",
    response_model=AgentAction,
    summary="Execute Action",
    description="Dispatch one action within a session and return the recorded outcome.",
    responses={404: {"description": "Session not found"}},
)
async def execute_action(session_id: str, request: ActionRequest, runtime: AgentRuntimeDep) -> AgentAction:
    """
    Execute an action.

    - **action_type**: one of the names listed by ``/capabilities``.
    - **parameters**: the action's parameters; relative paths resolve against
      the session's working directory.
    """
    return await runtime.dispatcher.execute_in(runtime.store, session_id, request.action_type, request.parameters)


@router.post(
    "/permissions",
    response_model=PermissionCheck,
    summary="Check Permission",
    description="Classify an operation and announce the permission request.",
)
async def request_permission(request: PermissionRequest, runtime: AgentRuntimeDep) -> PermissionCheck:
    return await runtime.dispatcher.request_permission(request.operation, request.parameters)
