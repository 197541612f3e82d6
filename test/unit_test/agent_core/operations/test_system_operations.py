from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from deskmate_ai.agent_core.errors import CollaboratorError
from deskmate_ai.agent_core.operations import system_operations as so
from deskmate_ai.agent_core.schemas.records import FileOperationType, FileSystemOperation


@pytest.mark.parametrize("command", ["rm -rf /", "FORMAT c:", "mkfs.ext4 /dev/sda1", "dd if=/dev/zero of=x"])
def test_blocked_commands_are_not_started(command: str, monkeypatch: pytest.MonkeyPatch) -> None:
    def fail_run(*args, **kwargs):
        raise AssertionError("must not spawn")

    monkeypatch.setattr(subprocess, "run", fail_run)
    with pytest.raises(CollaboratorError, match="Command blocked"):
        so.execute_terminal_command(command)


def test_command_result_maps_exit_status(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(so, "_is_windows", lambda: False)
    monkeypatch.setattr(
        subprocess,
        "run",
        lambda argv, **kwargs: subprocess.CompletedProcess(argv, 3, stdout=b"out", stderr=b"err"),
    )
    result = so.execute_terminal_command("false", "/tmp")
    assert result.model_dump() == {"stdout": "out", "stderr": "err", "exit_code": 3, "success": False}


def test_signal_exit_is_reported_as_minus_one(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        subprocess, "run", lambda argv, **kwargs: subprocess.CompletedProcess(argv, -9, stdout=b"", stderr=b"")
    )
    assert so.execute_terminal_command("sleep 10").exit_code == -1


def test_timeout_becomes_collaborator_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def slow(argv, **kwargs):
        raise subprocess.TimeoutExpired(argv, kwargs.get("timeout"))

    monkeypatch.setattr(subprocess, "run", slow)
    with pytest.raises(CollaboratorError, match="timed out after 2"):
        so.execute_terminal_command("sleep 10", timeout=2)


def test_parse_desktop_entry() -> None:
    body = "[Desktop Entry]\nName=Text Editor\nExec=/usr/bin/gedit %U\nIcon=gedit\n"
    app = so.parse_desktop_entry(body)
    assert app is not None
    assert app.name == "Text Editor"
    assert app.path == "/usr/bin/gedit"
    assert so.parse_desktop_entry("[Desktop Entry]\nName=Broken\n") is None


def test_parse_ps_output_skips_header_and_short_rows() -> None:
    stdout = (
        "USER PID %CPU %MEM VSZ RSS TTY STAT START TIME COMMAND\n"
        "root 1 0.0 0.1 1000 2048 ? Ss 10:00 0:01 /sbin/init splash\n"
        "garbage line\n"
        "me 42 1.5 0.2 2000 4096 pts/0 S 10:01 0:00 python\n"
    )
    processes = so.parse_ps_output(stdout)
    assert [(p.pid, p.name, p.memory_usage, p.cpu_usage) for p in processes] == [
        (1, "/sbin/init", 2048, 0.0),
        (42, "python", 4096, 1.5),
    ]


def test_parse_wmic_output() -> None:
    stdout = "\nNode,Name,ProcessId,WorkingSetSize\nHOST,explorer.exe,100,2048\nHOST,bad,x,1\n"
    processes = so.parse_wmic_output(stdout)
    assert [(p.pid, p.name, p.memory_usage) for p in processes] == [(100, "explorer.exe", 2048)]


def test_launch_missing_application() -> None:
    with pytest.raises(CollaboratorError, match="Application path does not exist"):
        so.launch_application("/definitely/not/here")


def test_copy_directory_requires_recursive(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    op = FileSystemOperation(
        operation_type=FileOperationType.copy, source=str(tmp_path / "src"), destination=str(tmp_path / "dst")
    )
    with pytest.raises(CollaboratorError, match="recursive flag is not set"):
        so.perform_file_operation(op)


def test_copy_and_delete_recursive(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "f.txt").write_text("x")
    copy = FileSystemOperation(
        operation_type=FileOperationType.copy,
        source=str(tmp_path / "src"),
        destination=str(tmp_path / "dst"),
        recursive=True,
    )
    assert so.perform_file_operation(copy).startswith("Copied")
    assert (tmp_path / "dst" / "f.txt").read_text() == "x"

    delete = FileSystemOperation(operation_type=FileOperationType.delete, source=str(tmp_path / "src"), recursive=True)
    assert so.perform_file_operation(delete) == f"Deleted {tmp_path / 'src'}"
    assert not (tmp_path / "src").exists()


def test_delete_missing_path(tmp_path: Path) -> None:
    op = FileSystemOperation(operation_type=FileOperationType.delete, source=str(tmp_path / "ghost"))
    with pytest.raises(CollaboratorError, match="Path does not exist"):
        so.perform_file_operation(op)
