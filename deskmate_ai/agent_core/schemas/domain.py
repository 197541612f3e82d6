from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field

from .base import BaseSchema


class PermissionLevel(str, Enum):
    safe = "Safe"
    moderate = "Moderate"
    dangerous = "Dangerous"


class ActionType(str, Enum):
    list_directory = "list_directory"
    read_file = "read_file"
    write_file = "write_file"
    search_files = "search_files"
    open_file = "open_file"
    change_directory = "change_directory"
    get_file_info = "get_file_info"
    launch_application = "launch_application"
    get_installed_apps = "get_installed_apps"
    execute_command = "execute_command"
    file_operation = "file_operation"
    get_processes = "get_processes"
    kill_process = "kill_process"

    @classmethod
    def parse(cls, raw: str) -> Optional["ActionType"]:
        """Return the matching member, or ``None`` for names this runtime does not know."""
        try:
            return cls(raw)
        except ValueError:
            return None


DEFAULT_CAPABILITIES: List[str] = [a.value for a in ActionType]


class AgentAction(BaseSchema):
    """One executed or attempted operation, immutable once recorded."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    action_type: str
    description: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    result: Optional[Any] = None
    success: bool = False
    error_message: Optional[str] = None


class OperationPermission(BaseSchema):
    operation: str
    description: str
    level: PermissionLevel
    details: Dict[str, str] = Field(default_factory=dict)


class PermissionCheck(BaseSchema):
    permission: OperationPermission
    granted: bool


class CapabilityParameter(BaseSchema):
    name: str
    type: str
    description: str
    required: bool
    default: Optional[Any] = None


class CapabilityDescriptor(BaseSchema):
    name: str
    description: str
    parameters: List[CapabilityParameter] = Field(default_factory=list)


class SessionSnapshot(BaseSchema):
    id: str
    active: bool
    actions: List[AgentAction] = Field(default_factory=list)
    context: Dict[str, Any] = Field(default_factory=dict)
    current_directory: str
    capabilities: List[str] = Field(default_factory=list)
