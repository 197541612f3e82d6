"""Filesystem collaborators used by the agent action handlers.

Every function here is blocking and is meant to be called from a worker
thread. Failures are raised as ``CollaboratorError`` with a human-readable
message that is surfaced verbatim in the failed ``AgentAction``.
"""

from __future__ import annotations

import mimetypes
import os
import re
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..errors import CollaboratorError
from ..schemas.records import DirectoryContents, FileInfo, SearchResult
from deskmate_ai.core.logging_config import get_logger

logger = get_logger(__name__)

BINARY_EXTENSIONS = frozenset(
    {
        "exe", "dll", "so", "dylib", "bin", "dat", "db", "sqlite", "sqlite3",
        "jpg", "jpeg", "png", "gif", "bmp", "ico", "webp", "svg",
        "mp3", "wav", "flac", "ogg", "mp4", "avi", "mkv", "mov",
        "zip", "rar", "7z", "tar", "gz", "bz2", "xz",
        "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx",
    }
)

# Only files up to this size are sniffed for NUL bytes.
SNIFF_MAX_FILE_SIZE = 8192
SNIFF_BYTES = 512


def is_binary_file(path: Path) -> bool:
    """Heuristically decide whether ``path`` holds binary content."""
    if path.suffix and path.suffix[1:].lower() in BINARY_EXTENSIONS:
        return True
    try:
        size = path.stat().st_size
    except OSError as e:
        raise CollaboratorError(f"Failed to read metadata: {e}") from e
    if size > SNIFF_MAX_FILE_SIZE:
        return False
    try:
        with path.open("rb") as fh:
            head = fh.read(SNIFF_BYTES)
    except OSError:
        return True
    return b"\x00" in head


def _file_info(path: Path) -> FileInfo:
    try:
        st = path.stat()
    except OSError as e:
        raise CollaboratorError(f"Failed to read metadata for {path}: {e}") from e

    is_directory = path.is_dir()
    modified = datetime.fromtimestamp(int(st.st_mtime), tz=timezone.utc).isoformat()

    if is_directory:
        file_type: Optional[str] = "directory"
    elif path.suffix:
        file_type = path.suffix[1:].lower()
    else:
        guessed, _ = mimetypes.guess_type(path.name)
        file_type = guessed.split("/")[0] if guessed else None

    return FileInfo(
        name=path.name,
        path=str(path),
        is_directory=is_directory,
        size=None if is_directory else st.st_size,
        modified=modified,
        file_type=file_type,
    )


def get_file_info(path: str) -> FileInfo:
    """Return metadata for a single file or directory."""
    p = Path(path)
    if not p.exists():
        raise CollaboratorError(f"Path does not exist: {p}")
    return _file_info(p)


def read_directory_contents(directory_path: str, recursive: bool = False) -> DirectoryContents:
    """
    List a directory, optionally walking it recursively.

    The root itself is never included. Both lists are sorted by name.

    Raises:
        CollaboratorError: If the path does not exist or is not a directory.
    """
    root = Path(directory_path)
    if not root.exists():
        raise CollaboratorError(f"Directory does not exist: {root}")
    if not root.is_dir():
        raise CollaboratorError(f"Path is not a directory: {root}")

    files: List[FileInfo] = []
    directories: List[FileInfo] = []

    if recursive:
        entries: List[Path] = []
        for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
            base = Path(dirpath)
            entries.extend(base / d for d in dirnames)
            entries.extend(base / f for f in filenames)
    else:
        try:
            entries = list(root.iterdir())
        except OSError as e:
            raise CollaboratorError(f"Failed to read directory: {e}") from e

    for entry in entries:
        info = _file_info(entry)
        (directories if info.is_directory else files).append(info)

    files.sort(key=lambda f: f.name)
    directories.sort(key=lambda d: d.name)
    return DirectoryContents(
        files=files,
        directories=directories,
        total_files=len(files),
        total_directories=len(directories),
    )


def _iter_candidate_files(root: Path, recursive: bool):
    if recursive:
        for dirpath, _dirnames, filenames in os.walk(root, followlinks=False):
            for name in filenames:
                yield Path(dirpath) / name
    else:
        for entry in root.iterdir():
            if entry.is_file():
                yield entry


def search_in_files(
    directory_path: str,
    pattern: str,
    file_extension: Optional[str] = None,
    case_sensitive: bool = False,
    recursive: bool = True,
    max_results: Optional[int] = None,
) -> List[SearchResult]:
    """
    Search text files under a directory for a regular expression.

    Binary files and files that cannot be decoded are skipped. When
    ``max_results`` is set the result list never grows past it.

    Raises:
        CollaboratorError: If the directory is invalid or the pattern does not compile.
    """
    root = Path(directory_path)
    if not root.is_dir():
        raise CollaboratorError(f"Invalid directory path: {root}")

    try:
        regex = re.compile(pattern, 0 if case_sensitive else re.IGNORECASE)
    except re.error as e:
        raise CollaboratorError(f"Invalid regex pattern: {e}") from e

    ext_filter = file_extension.lstrip(".").lower() if file_extension else None
    results: List[SearchResult] = []

    for file_path in _iter_candidate_files(root, recursive):
        if ext_filter is not None and file_path.suffix[1:].lower() != ext_filter:
            continue
        if is_binary_file(file_path):
            continue
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Skipping unreadable file {file_path}: {e}")
            continue

        for line_number, line in enumerate(text.splitlines(), start=1):
            for match in regex.finditer(line):
                if max_results is not None and len(results) >= max_results:
                    return results
                results.append(
                    SearchResult(
                        file_path=str(file_path),
                        line_number=line_number,
                        line_content=line,
                        match_start=match.start(),
                        match_end=match.end(),
                    )
                )
    return results


def read_file_contents(file_path: str) -> str:
    """Read a text file exactly as stored, without newline translation."""
    path = Path(file_path)
    if not path.exists():
        raise CollaboratorError(f"File does not exist: {path}")
    if not path.is_file():
        raise CollaboratorError(f"Path is not a file: {path}")
    if is_binary_file(path):
        raise CollaboratorError(f"Cannot read binary file as text: {path}")
    try:
        with path.open("r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as e:
        raise CollaboratorError(f"Failed to read file: {e}") from e


def write_file_contents(file_path: str, contents: str) -> None:
    """Write text to a file, creating any missing parent directories."""
    path = Path(file_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CollaboratorError(f"Failed to create parent directories: {e}") from e
    try:
        with path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(contents)
    except OSError as e:
        raise CollaboratorError(f"Failed to write file: {e}") from e


def _default_opener() -> List[str]:
    if sys.platform == "darwin":
        return ["open"]
    if sys.platform.startswith("win"):
        return ["cmd", "/C", "start", ""]
    return ["xdg-open"]


def open_with_default_app(path: str) -> None:
    """Hand ``path`` to the platform's default application launcher."""
    p = Path(path)
    if not p.exists():
        raise CollaboratorError(f"Path does not exist: {p}")
    try:
        subprocess.Popen(
            [*_default_opener(), str(p)],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        raise CollaboratorError(f"Failed to open file with default app: {e}") from e
