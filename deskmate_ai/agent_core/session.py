from __future__ import annotations

"""Per-session agent state.

An ``AgentSession`` owns the working directory and the append-only audit log
of one agent conversation. Both are guarded by a single per-session lock that
is only ever held for the duration of a read or an append, never across I/O.
"""

import os
import threading
import time
from typing import Any, Dict, List, Optional, Sequence

from ..core.logging_config import get_logger
from .schemas.domain import DEFAULT_CAPABILITIES, AgentAction, SessionSnapshot

logger = get_logger(__name__)


class AgentSession:
    """Working directory and audit trail of one agent session."""

    def __init__(
        self,
        session_id: str,
        *,
        working_directory: Optional[str] = None,
        capabilities: Optional[Sequence[str]] = None,
        append_attempts: int = 5,
        append_backoff: float = 0.01,
    ) -> None:
        self._id = session_id
        self._lock = threading.Lock()
        self._active = True
        self._current_directory = working_directory or os.getcwd()
        self._actions: List[AgentAction] = []
        self._context: Dict[str, Any] = {}
        self._capabilities = tuple(DEFAULT_CAPABILITIES if capabilities is None else capabilities)
        self._append_attempts = max(1, append_attempts)
        self._append_backoff = append_backoff

    @property
    def id(self) -> str:
        return self._id

    @property
    def capabilities(self) -> tuple[str, ...]:
        """Action names this session may attempt; fixed at creation."""
        return self._capabilities

    @property
    def active(self) -> bool:
        with self._lock:
            return self._active

    @property
    def current_directory(self) -> str:
        with self._lock:
            return self._current_directory

    def set_current_directory(self, path: str) -> None:
        with self._lock:
            self._current_directory = path

    def actions(self) -> List[AgentAction]:
        """Return a copy of the audit log in execution order."""
        with self._lock:
            return list(self._actions)

    def update_context(self, values: Dict[str, Any]) -> None:
        with self._lock:
            self._context.update(values)

    def record(self, action: AgentAction) -> None:
        """
        Append a completed action to the audit log.

        The lock is first tried with a bounded, doubling backoff; once the
        attempts are used up the append blocks until the lock is free, so a
        record is never dropped.
        """
        delay = self._append_backoff
        for _ in range(self._append_attempts):
            if self._lock.acquire(timeout=delay):
                break
            logger.debug(f"Audit log of session {self._id} is busy, retrying append")
            delay *= 2
        else:
            self._lock.acquire()
        try:
            self._actions.append(action)
        finally:
            self._lock.release()

    def snapshot(self) -> SessionSnapshot:
        """Return a consistent, serializable view of the session."""
        with self._lock:
            return SessionSnapshot(
                id=self._id,
                active=self._active,
                actions=list(self._actions),
                context=dict(self._context),
                current_directory=self._current_directory,
                capabilities=list(self._capabilities),
            )
