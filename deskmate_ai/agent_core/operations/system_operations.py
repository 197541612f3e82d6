"""Process, application and shell collaborators used by the agent action handlers.

Like ``file_operations`` these are blocking calls. Platform-specific branches
follow ``sys.platform``: ``win32``, ``darwin`` and everything else treated as
Linux/Unix.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from ..errors import CollaboratorError
from ..schemas.records import (
    AppInfo,
    CommandResult,
    FileOperationType,
    FileSystemOperation,
    ProcessInfo,
)
from deskmate_ai.core.logging_config import get_logger

logger = get_logger(__name__)

BLOCKED_COMMAND_PATTERNS = (
    "rm -rf /",
    "format",
    "del /f",
    "deltree",
    "dd if=/dev/zero",
    "mkfs",
    "fdisk",
)


def _is_windows() -> bool:
    return sys.platform.startswith("win")


def _is_macos() -> bool:
    return sys.platform == "darwin"


def launch_application(app_path: str, args: Optional[List[str]] = None) -> int:
    """
    Start an application detached from the server and return its pid.

    Raises:
        CollaboratorError: If the path does not exist or the spawn fails.
    """
    if not Path(app_path).exists():
        raise CollaboratorError(f"Application path does not exist: {app_path}")

    arguments = list(args or [])
    if _is_windows():
        cmd = ["cmd", "/C", "start", "", app_path, *arguments]
    elif _is_macos():
        cmd = ["open", app_path]
        if arguments:
            cmd += ["--args", *arguments]
    else:
        cmd = [app_path, *arguments]

    try:
        child = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        raise CollaboratorError(f"Failed to launch application: {e}") from e
    logger.info(f"Launched application {app_path} (pid={child.pid})")
    return child.pid


def _windows_apps() -> List[AppInfo]:
    apps: List[AppInfo] = []
    local_app_data = Path(os.environ.get("USERPROFILE", "")) / "AppData" / "Local"
    for base in (Path("C:\\Program Files"), Path("C:\\Program Files (x86)"), local_app_data):
        if not base.is_dir():
            continue
        for entry in base.iterdir():
            if not entry.is_dir():
                continue
            try:
                exe = next((p for p in entry.iterdir() if p.suffix.lower() == ".exe"), None)
            except OSError:
                continue
            if exe is not None:
                apps.append(AppInfo(name=entry.name, path=str(exe)))
    return apps


def _macos_apps() -> List[AppInfo]:
    root = Path("/Applications")
    if not root.is_dir():
        return []
    return [AppInfo(name=entry.stem, path=str(entry)) for entry in root.iterdir() if entry.suffix == ".app"]


def parse_desktop_entry(contents: str) -> Optional[AppInfo]:
    """Extract the display name and executable from a ``.desktop`` file body."""
    name = ""
    exec_path = ""
    for line in contents.splitlines():
        if line.startswith("Name="):
            name = line[len("Name=") :]
        elif line.startswith("Exec="):
            parts = line[len("Exec=") :].split()
            exec_path = parts[0] if parts else ""
    if name and exec_path:
        return AppInfo(name=name, path=exec_path)
    return None


def _linux_apps() -> List[AppInfo]:
    apps: List[AppInfo] = []
    home_apps = Path(os.environ.get("HOME", "")) / ".local" / "share" / "applications"
    for base in (Path("/usr/share/applications"), Path("/usr/local/share/applications"), home_apps):
        if not base.is_dir():
            continue
        for entry in base.iterdir():
            if entry.suffix != ".desktop":
                continue
            try:
                info = parse_desktop_entry(entry.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError):
                continue
            if info is not None:
                apps.append(info)
    return apps


def get_installed_applications() -> List[AppInfo]:
    """Enumerate applications installed in the platform's conventional locations."""
    if _is_windows():
        return _windows_apps()
    if _is_macos():
        return _macos_apps()
    return _linux_apps()


def execute_terminal_command(command: str, working_dir: Optional[str] = None, timeout: Optional[float] = None) -> CommandResult:
    """
    Run a shell command and capture its output.

    Commands containing a blocked pattern are refused without being started.
    A non-zero exit status is not an error; it is reported in the result.

    Raises:
        CollaboratorError: If the command is blocked, cannot be started, or times out.
    """
    lowered = command.lower()
    if any(pattern in lowered for pattern in BLOCKED_COMMAND_PATTERNS):
        raise CollaboratorError("Command blocked: potentially dangerous operation detected")

    argv = ["cmd", "/C", command] if _is_windows() else ["sh", "-c", command]
    try:
        completed = subprocess.run(
            argv,
            cwd=working_dir,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise CollaboratorError(f"Command timed out after {e.timeout} seconds") from e
    except OSError as e:
        raise CollaboratorError(f"Failed to execute command: {e}") from e

    return CommandResult(
        stdout=completed.stdout.decode("utf-8", errors="replace"),
        stderr=completed.stderr.decode("utf-8", errors="replace"),
        exit_code=completed.returncode if completed.returncode >= 0 else -1,
        success=completed.returncode == 0,
    )


def _copy(source: Path, dest: str, recursive: bool) -> None:
    if source.is_file():
        shutil.copy2(source, dest)
    elif source.is_dir() and recursive:
        shutil.copytree(source, dest, dirs_exist_ok=True)
    elif source.is_dir():
        raise CollaboratorError("Source is a directory but recursive flag is not set")
    else:
        raise CollaboratorError(f"Source does not exist: {source}")


def perform_file_operation(operation: FileSystemOperation) -> str:
    """
    Apply a copy/move/delete/create_directory/rename operation.

    Returns:
        A one-line summary of what was done.
    """
    source = Path(operation.source)
    op = operation.operation_type
    try:
        if op == FileOperationType.copy:
            if not operation.destination:
                raise CollaboratorError("Destination required for copy operation")
            _copy(source, operation.destination, operation.recursive)
            return f"Copied {operation.source} to {operation.destination}"

        if op == FileOperationType.move:
            if not operation.destination:
                raise CollaboratorError("Destination required for move operation")
            os.rename(source, operation.destination)
            return f"Moved {operation.source} to {operation.destination}"

        if op == FileOperationType.delete:
            if source.is_file() or source.is_symlink():
                source.unlink()
            elif source.is_dir():
                if operation.recursive:
                    shutil.rmtree(source)
                else:
                    source.rmdir()
            else:
                raise CollaboratorError(f"Path does not exist: {source}")
            return f"Deleted {operation.source}"

        if op == FileOperationType.create_directory:
            source.mkdir(parents=operation.recursive, exist_ok=operation.recursive)
            return f"Created directory {operation.source}"

        if not operation.destination:
            raise CollaboratorError("New name required for rename operation")
        os.rename(source, operation.destination)
        return f"Renamed {operation.source} to {operation.destination}"
    except OSError as e:
        raise CollaboratorError(str(e)) from e


def parse_ps_output(stdout: str) -> List[ProcessInfo]:
    """Parse ``ps aux`` output, skipping the header and malformed rows."""
    processes: List[ProcessInfo] = []
    for line in stdout.splitlines()[1:]:
        parts = line.split()
        if len(parts) < 11 or not parts[1].isdigit():
            continue
        try:
            cpu: Optional[float] = float(parts[2])
        except ValueError:
            cpu = None
        memory = int(parts[5]) if parts[5].isdigit() else None
        processes.append(ProcessInfo(pid=int(parts[1]), name=parts[10], memory_usage=memory, cpu_usage=cpu))
    return processes


def parse_wmic_output(stdout: str) -> List[ProcessInfo]:
    """Parse ``wmic process get ProcessId,Name,WorkingSetSize /format:csv`` output."""
    processes: List[ProcessInfo] = []
    for line in stdout.splitlines()[2:]:
        parts = line.strip().split(",")
        if len(parts) < 4 or not parts[2].isdigit():
            continue
        memory = int(parts[3]) if parts[3].isdigit() else None
        processes.append(ProcessInfo(pid=int(parts[2]), name=parts[1], memory_usage=memory))
    return processes


def get_running_processes() -> List[ProcessInfo]:
    """List running processes using the platform's process tool."""
    if _is_windows():
        argv = ["wmic", "process", "get", "ProcessId,Name,WorkingSetSize", "/format:csv"]
    else:
        argv = ["ps", "aux"]
    try:
        completed = subprocess.run(argv, capture_output=True, check=False)
    except OSError as e:
        raise CollaboratorError(f"Failed to list processes: {e}") from e
    stdout = completed.stdout.decode("utf-8", errors="replace")
    return parse_wmic_output(stdout) if _is_windows() else parse_ps_output(stdout)


def kill_process(pid: int) -> None:
    """Forcefully terminate a process."""
    argv = ["taskkill", "/F", "/PID", str(pid)] if _is_windows() else ["kill", "-9", str(pid)]
    try:
        subprocess.run(argv, capture_output=True, check=False)
    except OSError as e:
        raise CollaboratorError(f"Failed to kill process {pid}: {e}") from e
    logger.info(f"Sent kill signal to pid {pid}")
