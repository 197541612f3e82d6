from __future__ import annotations

"""Rule table primitives for the permission policy.

A ``PermissionRule`` states the base tier of one operation and the
``Escalation`` predicates that can raise it. The rules are plain frozen data
so the table can be listed, reviewed and tested without running anything.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..schemas.domain import PermissionLevel

_ORDER = {PermissionLevel.safe: 0, PermissionLevel.moderate: 1, PermissionLevel.dangerous: 2}


def max_level(a: PermissionLevel, b: PermissionLevel) -> PermissionLevel:
    """Return the more restrictive of two tiers."""
    return a if _ORDER[a] >= _ORDER[b] else b


class MatchKind(str, Enum):
    """
    How an escalation pattern is compared against the subject parameter.

    Attributes:
        contains_ci: Case-insensitive substring match.
        prefix: Case-sensitive prefix match.
    """

    contains_ci = "contains_ci"
    prefix = "prefix"


@dataclass(frozen=True)
class Escalation:
    """Raise the tier to ``level`` when the subject matches any of ``patterns``."""

    kind: MatchKind
    patterns: Tuple[str, ...]
    level: PermissionLevel

    def matches(self, subject: str) -> bool:
        if self.kind == MatchKind.contains_ci:
            lowered = subject.lower()
            return any(p in lowered for p in self.patterns)
        return any(subject.startswith(p) for p in self.patterns)


@dataclass(frozen=True)
class PermissionRule:
    """
    Classification rule for a single operation name.

    Attributes:
        display_name: Human-readable operation name shown in consent prompts.
        level: Base tier when no escalation applies.
        subject: Parameter the escalations inspect and the description quotes.
        detail_key: Key under which the subject is reported in ``details``.
        describe: Builds the description from the subject value.
        missing_description: Description used when the subject is absent.
        missing_level: Tier used when the subject is absent.
        escalations: Predicates evaluated against the subject, in order.
        text_subject: Whether only string values count as a present subject.
    """

    display_name: str
    level: PermissionLevel
    subject: Optional[str] = None
    text_subject: bool = True
    detail_key: Optional[str] = None
    describe: Callable[[str], str] = field(default=lambda value: value)
    missing_description: str = ""
    missing_level: Optional[PermissionLevel] = None
    escalations: Tuple[Escalation, ...] = ()


def subject_text(parameters: Mapping[str, Any], key: str, *, strings_only: bool) -> Optional[str]:
    """
    Read the subject parameter as text.

    With ``strings_only`` a non-string value counts as absent; otherwise
    scalars are rendered with ``str``.
    """
    value = parameters.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if strings_only:
        return None
    return str(value)


RuleTable = Dict[str, PermissionRule]
