from __future__ import annotations

"""Typed parameter models, one per action.

Callers send a loose JSON mapping; ``decode_command`` turns it into the
matching model once, at the dispatcher boundary, and reports any decode
failure uniformly as ``InvalidInputError``.
"""

from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import Field, ValidationError, field_validator, model_validator

from ..errors import InvalidInputError
from .base import CommandSchema
from .domain import ActionType
from .records import FileOperationType


class ListDirectoryCommand(CommandSchema):
    path: str = "."
    recursive: bool = False


class ReadFileCommand(CommandSchema):
    path: str


class WriteFileCommand(CommandSchema):
    path: str
    content: str


class SearchFilesCommand(CommandSchema):
    pattern: str
    directory: str = "."
    file_extension: Optional[str] = None
    case_sensitive: bool = False
    recursive: bool = True
    max_results: Optional[int] = Field(default=None, ge=0)


class OpenFileCommand(CommandSchema):
    path: str


class ChangeDirectoryCommand(CommandSchema):
    path: str


class GetFileInfoCommand(CommandSchema):
    path: str


class LaunchApplicationCommand(CommandSchema):
    path: str
    arguments: List[str] = Field(default_factory=list)


class GetInstalledAppsCommand(CommandSchema):
    pass


class ExecuteCommandCommand(CommandSchema):
    command: str
    working_directory: Optional[str] = None


class FileOperationCommand(CommandSchema):
    operation_type: FileOperationType
    source: str
    destination: Optional[str] = None
    recursive: bool = False

    @field_validator("operation_type", mode="before")
    @classmethod
    def _known_operation_type(cls, value: Any) -> Any:
        if isinstance(value, FileOperationType):
            return value
        try:
            return FileOperationType(value)
        except ValueError:
            raise ValueError(f"Invalid operation type: {value}") from None

    @model_validator(mode="after")
    def _destination_present(self) -> "FileOperationCommand":
        needs_destination = {FileOperationType.copy, FileOperationType.move, FileOperationType.rename}
        if self.operation_type in needs_destination and not self.destination:
            raise ValueError("Missing required parameter: destination")
        return self


class GetProcessesCommand(CommandSchema):
    pass


class KillProcessCommand(CommandSchema):
    pid: int = Field(ge=0)


COMMAND_MODELS: Dict[ActionType, Type[CommandSchema]] = {
    ActionType.list_directory: ListDirectoryCommand,
    ActionType.read_file: ReadFileCommand,
    ActionType.write_file: WriteFileCommand,
    ActionType.search_files: SearchFilesCommand,
    ActionType.open_file: OpenFileCommand,
    ActionType.change_directory: ChangeDirectoryCommand,
    ActionType.get_file_info: GetFileInfoCommand,
    ActionType.launch_application: LaunchApplicationCommand,
    ActionType.get_installed_apps: GetInstalledAppsCommand,
    ActionType.execute_command: ExecuteCommandCommand,
    ActionType.file_operation: FileOperationCommand,
    ActionType.get_processes: GetProcessesCommand,
    ActionType.kill_process: KillProcessCommand,
}


def _describe(error: Dict[str, Any]) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ()))
    if error.get("type") == "missing":
        return f"Missing required parameter: {loc}"
    if error.get("type") == "value_error":
        # Custom validators already phrase the complete message.
        return str(error.get("ctx", {}).get("error", error.get("msg", "")))
    return f"Invalid parameter '{loc}': {error.get('msg', '')}"


def decode_command(action: ActionType, parameters: Mapping[str, Any]) -> CommandSchema:
    """
    Decode a raw parameter mapping into the typed command for ``action``.

    Raises:
        InvalidInputError: If a required parameter is missing or has the wrong shape.
    """
    model = COMMAND_MODELS[action]
    try:
        return model.model_validate(dict(parameters))
    except ValidationError as e:
        raise InvalidInputError(_describe(e.errors()[0])) from e
