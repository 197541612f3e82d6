"""
Agent runtime I/O models for API requests.

Responses reuse the runtime's own schemas (``AgentAction``,
``SessionSnapshot``, ``CapabilityDescriptor`` and ``PermissionCheck``).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class SessionCreate(BaseModel):
    """Optional initial state for a new agent session."""

    working_directory: Optional[str] = Field(default=None, description="Initial working directory")


class ActionRequest(BaseModel):
    """One action to dispatch within a session."""

    action_type: str = Field(description="Name of the action to execute")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Action parameters")


class PermissionRequest(BaseModel):
    """A standalone permission check."""

    operation: str = Field(description="Operation name to classify")
    parameters: Dict[str, Any] = Field(default_factory=dict)
