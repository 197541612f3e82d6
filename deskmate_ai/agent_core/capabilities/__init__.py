"""Capability handlers and the registry that resolves action types to them."""

from .base import Capability, CapabilityContext, CapabilityResult, PermissionGate
from .builtin import BUILTIN_CAPABILITIES
from .registry import CapabilityRegistry

__all__ = [
    "BUILTIN_CAPABILITIES",
    "Capability",
    "CapabilityContext",
    "CapabilityRegistry",
    "CapabilityResult",
    "PermissionGate",
]
