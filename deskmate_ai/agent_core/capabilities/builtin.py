from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type

from ..errors import CollaboratorError
from ..operations import file_operations, system_operations
from ..schemas.base import CommandSchema
from ..schemas.commands import (
    ChangeDirectoryCommand,
    ExecuteCommandCommand,
    FileOperationCommand,
    GetFileInfoCommand,
    GetInstalledAppsCommand,
    GetProcessesCommand,
    KillProcessCommand,
    LaunchApplicationCommand,
    ListDirectoryCommand,
    OpenFileCommand,
    ReadFileCommand,
    SearchFilesCommand,
    WriteFileCommand,
)
from ..schemas.domain import ActionType, CapabilityParameter
from ..schemas.records import FileOperationType, FileSystemOperation
from .base import Capability, CapabilityContext, CapabilityResult, PermissionGate, param


def _dump_list(items: List[Any]) -> List[Dict[str, Any]]:
    return [item.model_dump(mode="json") for item in items]


@dataclass(frozen=True)
class ListDirectoryCapability(Capability):
    """List the files and sub-directories of a directory."""

    name: ActionType = ActionType.list_directory
    description: ClassVar[str] = "List files and directories in a specified path"
    command_model: ClassVar[Type[CommandSchema]] = ListDirectoryCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = (
        param("path", "string", "Directory path to list", default="."),
        param("recursive", "boolean", "Whether to list recursively", default=False),
    )

    async def execute(self, ctx: CapabilityContext, *, command: ListDirectoryCommand) -> CapabilityResult:
        contents = await asyncio.to_thread(
            file_operations.read_directory_contents, ctx.resolve(command.path), command.recursive
        )
        return CapabilityResult(output=contents.model_dump(mode="json"))


@dataclass(frozen=True)
class ReadFileCapability(Capability):
    """Read a text file."""

    name: ActionType = ActionType.read_file
    description: ClassVar[str] = "Read the contents of a text file"
    command_model: ClassVar[Type[CommandSchema]] = ReadFileCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = (
        param("path", "string", "File path to read", required=True),
    )

    async def execute(self, ctx: CapabilityContext, *, command: ReadFileCommand) -> CapabilityResult:
        contents = await asyncio.to_thread(file_operations.read_file_contents, ctx.resolve(command.path))
        return CapabilityResult(output=contents)


@dataclass(frozen=True)
class WriteFileCapability(Capability):
    """Write text to a file, creating parent directories as needed."""

    name: ActionType = ActionType.write_file
    description: ClassVar[str] = "Write content to a file"
    command_model: ClassVar[Type[CommandSchema]] = WriteFileCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = (
        param("path", "string", "File path to write", required=True),
        param("content", "string", "Content to write", required=True),
    )

    async def execute(self, ctx: CapabilityContext, *, command: WriteFileCommand) -> CapabilityResult:
        path = ctx.resolve(command.path)
        await asyncio.to_thread(file_operations.write_file_contents, path, command.content)
        return CapabilityResult(output=f"Successfully wrote to {path}")


@dataclass(frozen=True)
class SearchFilesCapability(Capability):
    """Regex search across the text files of a directory tree."""

    name: ActionType = ActionType.search_files
    description: ClassVar[str] = "Search for text patterns in files"
    command_model: ClassVar[Type[CommandSchema]] = SearchFilesCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = (
        param("pattern", "string", "Regular expression pattern to search for", required=True),
        param("directory", "string", "Directory to search in", default="."),
        param("file_extension", "string", "Only search files with this extension"),
        param("case_sensitive", "boolean", "Whether the search is case sensitive", default=False),
        param("recursive", "boolean", "Whether to search sub-directories", default=True),
        param("max_results", "number", "Maximum number of results", default=100),
    )

    async def execute(self, ctx: CapabilityContext, *, command: SearchFilesCommand) -> CapabilityResult:
        results = await asyncio.to_thread(
            file_operations.search_in_files,
            ctx.resolve(command.directory),
            command.pattern,
            command.file_extension,
            command.case_sensitive,
            command.recursive,
            command.max_results,
        )
        return CapabilityResult(output=_dump_list(results))


@dataclass(frozen=True)
class OpenFileCapability(Capability):
    """Open a file or directory with the platform's default application."""

    name: ActionType = ActionType.open_file
    description: ClassVar[str] = "Open a file with the default application"
    command_model: ClassVar[Type[CommandSchema]] = OpenFileCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = (
        param("path", "string", "File path to open", required=True),
    )

    async def execute(self, ctx: CapabilityContext, *, command: OpenFileCommand) -> CapabilityResult:
        path = ctx.resolve(command.path)
        await asyncio.to_thread(file_operations.open_with_default_app, path)
        return CapabilityResult(output=f"Opened {path} with default application")


@dataclass(frozen=True)
class ChangeDirectoryCapability(Capability):
    """
    Change the session working directory.

    The session is only mutated after the target is confirmed to be an
    existing directory.
    """

    name: ActionType = ActionType.change_directory
    description: ClassVar[str] = "Change the current working directory"
    command_model: ClassVar[Type[CommandSchema]] = ChangeDirectoryCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = (
        param("path", "string", "Directory to change to", required=True),
    )

    async def execute(self, ctx: CapabilityContext, *, command: ChangeDirectoryCommand) -> CapabilityResult:
        target = ctx.resolve(command.path)
        if not await asyncio.to_thread(os.path.isdir, target):
            raise CollaboratorError(f"Directory does not exist: {target}")
        ctx.session.set_current_directory(target)
        return CapabilityResult(output=f"Changed directory to {target}")


@dataclass(frozen=True)
class GetFileInfoCapability(Capability):
    """Return metadata for a single path."""

    name: ActionType = ActionType.get_file_info
    description: ClassVar[str] = "Get information about a file or directory"
    command_model: ClassVar[Type[CommandSchema]] = GetFileInfoCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = (
        param("path", "string", "File or directory path", required=True),
    )

    async def execute(self, ctx: CapabilityContext, *, command: GetFileInfoCommand) -> CapabilityResult:
        info = await asyncio.to_thread(file_operations.get_file_info, ctx.resolve(command.path))
        return CapabilityResult(output=info.model_dump(mode="json"))


@dataclass(frozen=True)
class LaunchApplicationCapability(Capability):
    """Start an application. Classified ``Moderate``, so it is announced but not blocked."""

    name: ActionType = ActionType.launch_application
    description: ClassVar[str] = "Launch an application"
    command_model: ClassVar[Type[CommandSchema]] = LaunchApplicationCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = (
        param("path", "string", "Application path", required=True),
        param("arguments", "array", "Command line arguments", default=[]),
    )

    def permission_gate(self, ctx: CapabilityContext, command: LaunchApplicationCommand) -> Optional[PermissionGate]:
        return PermissionGate(operation="launch_app", parameters={"path": command.path})

    async def execute(self, ctx: CapabilityContext, *, command: LaunchApplicationCommand) -> CapabilityResult:
        pid = await asyncio.to_thread(system_operations.launch_application, command.path, command.arguments)
        return CapabilityResult(
            output={"success": True, "pid": pid, "message": f"Launched application: {command.path}"}
        )


@dataclass(frozen=True)
class GetInstalledAppsCapability(Capability):
    name: ActionType = ActionType.get_installed_apps
    description: ClassVar[str] = "Get the list of installed applications"
    command_model: ClassVar[Type[CommandSchema]] = GetInstalledAppsCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = ()

    async def execute(self, ctx: CapabilityContext, *, command: GetInstalledAppsCommand) -> CapabilityResult:
        apps = await asyncio.to_thread(system_operations.get_installed_applications)
        return CapabilityResult(output=_dump_list(apps))


@dataclass(frozen=True)
class ExecuteCommandCapability(Capability):
    """
    Run a shell command in the session working directory.

    Gated by the permission policy on the literal command string.
    """

    name: ActionType = ActionType.execute_command
    description: ClassVar[str] = "Execute a terminal command"
    command_model: ClassVar[Type[CommandSchema]] = ExecuteCommandCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = (
        param("command", "string", "Command to execute", required=True),
        param("working_directory", "string", "Working directory (defaults to the session directory)"),
    )

    def permission_gate(self, ctx: CapabilityContext, command: ExecuteCommandCommand) -> Optional[PermissionGate]:
        return PermissionGate(operation="execute_command", parameters={"command": command.command})

    async def execute(self, ctx: CapabilityContext, *, command: ExecuteCommandCommand) -> CapabilityResult:
        cwd = ctx.resolve(command.working_directory) if command.working_directory else ctx.working_directory
        result = await asyncio.to_thread(
            system_operations.execute_terminal_command, command.command, cwd, ctx.command_timeout
        )
        return CapabilityResult(output=result.model_dump(mode="json"))


@dataclass(frozen=True)
class FileOperationCapability(Capability):
    """Copy, move, delete, create or rename filesystem entries. Deletion is gated."""

    name: ActionType = ActionType.file_operation
    description: ClassVar[str] = "Perform a file system operation"
    command_model: ClassVar[Type[CommandSchema]] = FileOperationCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = (
        param(
            "operation_type",
            "string",
            "One of copy, move, delete, create_directory, rename",
            required=True,
        ),
        param("source", "string", "Source path", required=True),
        param("destination", "string", "Destination path (copy, move, rename)"),
        param("recursive", "boolean", "Recurse into directories for copy/delete", default=False),
    )

    def permission_gate(self, ctx: CapabilityContext, command: FileOperationCommand) -> Optional[PermissionGate]:
        if command.operation_type != FileOperationType.delete:
            return None
        return PermissionGate(operation="delete_file", parameters={"path": ctx.resolve(command.source)})

    async def execute(self, ctx: CapabilityContext, *, command: FileOperationCommand) -> CapabilityResult:
        operation = FileSystemOperation(
            operation_type=command.operation_type,
            source=ctx.resolve(command.source),
            destination=ctx.resolve(command.destination) if command.destination else None,
            recursive=command.recursive,
        )
        summary = await asyncio.to_thread(system_operations.perform_file_operation, operation)
        return CapabilityResult(output=summary)


@dataclass(frozen=True)
class GetProcessesCapability(Capability):
    name: ActionType = ActionType.get_processes
    description: ClassVar[str] = "List running processes"
    command_model: ClassVar[Type[CommandSchema]] = GetProcessesCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = ()

    async def execute(self, ctx: CapabilityContext, *, command: GetProcessesCommand) -> CapabilityResult:
        processes = await asyncio.to_thread(system_operations.get_running_processes)
        return CapabilityResult(output=_dump_list(processes))


@dataclass(frozen=True)
class KillProcessCapability(Capability):
    """Terminate a process. Always classified ``Dangerous``."""

    name: ActionType = ActionType.kill_process
    description: ClassVar[str] = "Terminate a running process"
    command_model: ClassVar[Type[CommandSchema]] = KillProcessCommand
    parameters: ClassVar[Tuple[CapabilityParameter, ...]] = (
        param("pid", "number", "Process id to terminate", required=True),
    )

    def permission_gate(self, ctx: CapabilityContext, command: KillProcessCommand) -> Optional[PermissionGate]:
        return PermissionGate(operation="kill_process", parameters={"pid": command.pid})

    async def execute(self, ctx: CapabilityContext, *, command: KillProcessCommand) -> CapabilityResult:
        await asyncio.to_thread(system_operations.kill_process, command.pid)
        return CapabilityResult(output=f"Successfully terminated process with PID: {command.pid}")


BUILTIN_CAPABILITIES: Tuple[Capability, ...] = (
    ListDirectoryCapability(),
    ReadFileCapability(),
    WriteFileCapability(),
    SearchFilesCapability(),
    OpenFileCapability(),
    ChangeDirectoryCapability(),
    GetFileInfoCapability(),
    LaunchApplicationCapability(),
    GetInstalledAppsCapability(),
    ExecuteCommandCapability(),
    FileOperationCapability(),
    GetProcessesCapability(),
    KillProcessCapability(),
)
