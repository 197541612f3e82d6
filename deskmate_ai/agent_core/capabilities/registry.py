from __future__ import annotations

"""Capability registry.

The registry maps an ``ActionType`` to the capability that handles it and
doubles as the introspection catalog returned to clients.

The ``CapabilityDispatcher`` uses this registry to resolve action names into
concrete handlers.
"""

from typing import Dict, Iterable, List, Optional

from ..schemas.domain import ActionType, CapabilityDescriptor
from .base import Capability, describe
from .builtin import BUILTIN_CAPABILITIES


class CapabilityRegistry:
    """
    In-memory mapping of action types to capability implementations.

    Registration order is preserved and is the order of ``catalog()``.

    Notes:
        - ``register`` overwrites any existing mapping for the action type.
        - ``get`` will raise ``KeyError`` if the capability is missing.
    """

    def __init__(self, capabilities: Optional[Iterable[Capability]] = None) -> None:
        """Initialize the registry, optionally pre-populated."""
        self._caps: Dict[ActionType, Capability] = {}
        for cap in capabilities or ():
            self.register(cap)

    @classmethod
    def with_builtins(cls) -> "CapabilityRegistry":
        """Return a registry holding every built-in capability."""
        return cls(BUILTIN_CAPABILITIES)

    def register(self, cap: Capability) -> None:
        """
        Register a capability implementation.

        Args:
            cap: The capability instance to register. It must expose a ``name`` attribute.
        """
        self._caps[cap.name] = cap

    def get(self, name: ActionType) -> Capability:
        """
        Retrieve a registered capability by action type.

        Raises:
            KeyError: If no capability is registered with the given name.
        """
        return self._caps[name]

    def has(self, name: ActionType) -> bool:
        """Check if a capability is registered."""
        return name in self._caps

    def names(self) -> List[str]:
        """Return the registered action names in registration order."""
        return [name.value for name in self._caps]

    def catalog(self) -> List[CapabilityDescriptor]:
        """
        Describe every registered capability for client introspection.

        The descriptors are informational; the dispatcher validates parameters
        through each capability's typed command model.
        """
        return [describe(cap) for cap in self._caps.values()]
