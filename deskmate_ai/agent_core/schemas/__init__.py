"""Schemas and DTOs for the agent core."""

from .commands import COMMAND_MODELS, decode_command
from .domain import (
    DEFAULT_CAPABILITIES,
    ActionType,
    AgentAction,
    CapabilityDescriptor,
    CapabilityParameter,
    OperationPermission,
    PermissionCheck,
    PermissionLevel,
    SessionSnapshot,
)
from .records import (
    AppInfo,
    CommandResult,
    DirectoryContents,
    FileInfo,
    FileOperationType,
    FileSystemOperation,
    ProcessInfo,
    SearchResult,
)

__all__ = [
    "ActionType",
    "AgentAction",
    "AppInfo",
    "COMMAND_MODELS",
    "CapabilityDescriptor",
    "CapabilityParameter",
    "CommandResult",
    "DEFAULT_CAPABILITIES",
    "DirectoryContents",
    "FileInfo",
    "FileOperationType",
    "FileSystemOperation",
    "OperationPermission",
    "PermissionCheck",
    "PermissionLevel",
    "ProcessInfo",
    "SearchResult",
    "SessionSnapshot",
    "decode_command",
]
