"""Records returned by the file and system collaborators."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import BaseSchema


class FileInfo(BaseSchema):
    name: str
    path: str
    is_directory: bool
    size: Optional[int] = None
    modified: Optional[str] = Field(default=None, description="Last modification time as an RFC 3339 timestamp.")
    file_type: Optional[str] = None


class DirectoryContents(BaseSchema):
    files: List[FileInfo] = Field(default_factory=list)
    directories: List[FileInfo] = Field(default_factory=list)
    total_files: int = 0
    total_directories: int = 0


class SearchResult(BaseSchema):
    file_path: str
    line_number: int = Field(description="1-based line number of the match.")
    line_content: str
    match_start: int
    match_end: int


class AppInfo(BaseSchema):
    name: str
    path: str
    icon: Optional[str] = None
    description: Optional[str] = None


class ProcessInfo(BaseSchema):
    pid: int
    name: str
    memory_usage: Optional[int] = None
    cpu_usage: Optional[float] = None


class CommandResult(BaseSchema):
    stdout: str
    stderr: str
    exit_code: int
    success: bool


class FileOperationType(str, Enum):
    copy = "copy"
    move = "move"
    delete = "delete"
    create_directory = "create_directory"
    rename = "rename"


class FileSystemOperation(BaseSchema):
    operation_type: FileOperationType
    source: str
    destination: Optional[str] = None
    recursive: bool = False
