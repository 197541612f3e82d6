"""Permission policy: data-driven risk classification of agent operations."""

from .models import Escalation, MatchKind, PermissionRule, max_level
from .permission_policy import (
    DANGEROUS_COMMAND_PATTERNS,
    DEFAULT_RULES,
    SYSTEM_PATH_PREFIXES,
    PermissionPolicy,
)

__all__ = [
    "DANGEROUS_COMMAND_PATTERNS",
    "DEFAULT_RULES",
    "Escalation",
    "MatchKind",
    "PermissionPolicy",
    "PermissionRule",
    "SYSTEM_PATH_PREFIXES",
    "max_level",
]
