from __future__ import annotations

"""Registry of live agent sessions.

The store lock only guards insert and lookup in the id → session map. Each
``AgentSession`` carries its own lock, so work on one session never contends
with another. Sessions live for the lifetime of the process.
"""

import threading
from typing import Dict, List, Optional

from ..core.logging_config import get_logger
from .errors import SessionNotFoundError
from .session import AgentSession

logger = get_logger(__name__)


class SessionStore:
    """Concurrent get-or-create mapping of session ids to ``AgentSession``."""

    def __init__(self, *, append_attempts: int = 5, append_backoff: float = 0.01) -> None:
        self._lock = threading.Lock()
        self._sessions: Dict[str, AgentSession] = {}
        self._append_attempts = append_attempts
        self._append_backoff = append_backoff

    def get_or_create(self, session_id: str, *, working_directory: Optional[str] = None) -> AgentSession:
        """
        Return the session for ``session_id``, creating it on first reference.

        A new session starts in ``working_directory`` (default: the process
        working directory) with an empty audit log and the full default
        capability list.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = AgentSession(
                    session_id,
                    working_directory=working_directory,
                    append_attempts=self._append_attempts,
                    append_backoff=self._append_backoff,
                )
                self._sessions[session_id] = session
                logger.info(f"Created agent session {session_id} in {session.current_directory}")
            return session

    def get(self, session_id: str) -> AgentSession:
        """
        Look up an existing session.

        Raises:
            SessionNotFoundError: If no session is registered under ``session_id``.
        """
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
