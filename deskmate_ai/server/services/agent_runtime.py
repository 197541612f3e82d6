"""
Agent runtime wiring.

Provides a singleton holding the process-wide ``SessionStore`` and a
``CapabilityDispatcher`` whose permission notices go to the event bus.
"""

from __future__ import annotations

from typing import Optional

from deskmate_ai.agent_core import CapabilityDispatcher, SessionStore
from deskmate_ai.agent_core.capabilities.registry import CapabilityRegistry
from deskmate_ai.core.events import EventEmitter
from deskmate_ai.server.core.config import AgentRuntimeConfig, settings

from .event_bus import get_event_bus


class AgentRuntime:
    """The session store and dispatcher shared by every agent endpoint."""

    def __init__(self, *, config: Optional[AgentRuntimeConfig] = None, emitter: Optional[EventEmitter] = None) -> None:
        config = config or settings.agent
        self.store = SessionStore(
            append_attempts=config.audit_append_attempts,
            append_backoff=config.audit_append_backoff,
        )
        self.dispatcher = CapabilityDispatcher(
            registry=CapabilityRegistry.with_builtins(),
            emitter=emitter,
            command_timeout=config.command_timeout,
        )


_agent_runtime: Optional[AgentRuntime] = None


def get_agent_runtime() -> AgentRuntime:
    global _agent_runtime
    if _agent_runtime is None:
        _agent_runtime = AgentRuntime(emitter=get_event_bus())
    return _agent_runtime
