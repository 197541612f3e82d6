from __future__ import annotations

"""Capability protocol and execution data models.

A capability is the concrete handler behind one ``ActionType``.

The ``CapabilityDispatcher`` resolves an action through a
``CapabilityRegistry``, decodes the raw parameter bag into the capability's
typed command, applies the permission gate and finally calls ``execute``
with a ``CapabilityContext``.

Capabilities should:

- raise ``AgentRuntimeError`` subclasses on failure instead of returning
  error values,
- return JSON-compatible data in ``CapabilityResult.output``,
- avoid performing permission decisions themselves (the dispatcher gates
  privileged operations before invocation),
- never hold the session lock while doing I/O.
"""

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional, Protocol, Tuple, Type

from ..schemas.base import CommandSchema
from ..schemas.domain import ActionType, CapabilityDescriptor, CapabilityParameter

if TYPE_CHECKING:
    from ..session import AgentSession


@dataclass(frozen=True)
class CapabilityContext:
    """Execution context passed to capability implementations.

    Attributes
    ----------
    session:
        The ``AgentSession`` the action runs against.
    working_directory:
        Snapshot of the session's working directory taken before the call.
    command_timeout:
        Upper bound in seconds for shell commands.
    """

    session: "AgentSession"
    working_directory: str
    command_timeout: Optional[float] = None

    def resolve(self, path: str) -> str:
        """Resolve ``path`` against the session working directory."""
        if os.path.isabs(path):
            return os.path.normpath(path)
        return os.path.normpath(os.path.join(self.working_directory, path))


@dataclass(frozen=True)
class CapabilityResult:
    """Structured capability execution result."""

    output: Any


@dataclass(frozen=True)
class PermissionGate:
    """Operation name and parameters submitted to the permission policy."""

    operation: str
    parameters: Dict[str, Any]


class Capability(Protocol):
    """Protocol for capability implementations."""

    name: ActionType
    description: ClassVar[str]
    command_model: ClassVar[Type[CommandSchema]]
    parameters: ClassVar[Tuple[CapabilityParameter, ...]]

    def permission_gate(self, ctx: CapabilityContext, command: Any) -> Optional[PermissionGate]:
        """Return the operation to classify before execution, or ``None`` when ungated."""
        return None

    async def execute(self, ctx: CapabilityContext, *, command: Any) -> CapabilityResult: ...


def param(
    name: str, type_: str, description: str, *, required: bool = False, default: Any = None
) -> CapabilityParameter:
    """Shorthand for declaring a ``CapabilityParameter``."""
    return CapabilityParameter(name=name, type=type_, description=description, required=required, default=default)


def describe(cap: Capability) -> CapabilityDescriptor:
    """Build the introspection descriptor of a capability."""
    params: List[CapabilityParameter] = list(cap.parameters)
    return CapabilityDescriptor(name=cap.name.value, description=cap.description, parameters=params)
