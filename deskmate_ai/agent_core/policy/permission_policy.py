from __future__ import annotations

"""Risk classification for privileged agent operations.

``PermissionPolicy`` maps an operation name and its parameter bag to an
``OperationPermission``. The mapping is driven entirely by a rule table:

- read-only and listing operations are absent from the table and classify
  as ``Safe``,
- state-changing but common operations (launching an application, deleting a
  non-system path) are ``Moderate``,
- shell commands with destructive keywords, deletions under system
  directories and process termination are ``Dangerous``.

Classification is pure: no I/O, no caching, identical inputs give identical
results.
"""

from typing import Any, Mapping, Optional

from ..schemas.domain import OperationPermission, PermissionCheck, PermissionLevel
from .models import Escalation, MatchKind, PermissionRule, RuleTable, max_level, subject_text

DANGEROUS_COMMAND_PATTERNS = (
    "rm -rf",
    "del /f",
    "format",
    "fdisk",
    "dd if=",
    "sudo",
    "admin",
    "registry",
    "regedit",
)

SYSTEM_PATH_PREFIXES = (
    "C:\\Windows",
    "C:\\Program Files",
    "/usr",
    "/bin",
    "/etc",
    "/System",
    "/Library",
    "/Applications",
)

_DELETE_RULE = PermissionRule(
    display_name="Delete File/Directory",
    level=PermissionLevel.moderate,
    subject="path",
    detail_key="path",
    describe=lambda path: f"Delete: {path}",
    missing_description="Delete unknown path",
    missing_level=PermissionLevel.dangerous,
    escalations=(Escalation(MatchKind.prefix, SYSTEM_PATH_PREFIXES, PermissionLevel.dangerous),),
)

_LAUNCH_RULE = PermissionRule(
    display_name="Launch Application",
    level=PermissionLevel.moderate,
    subject="path",
    detail_key="application",
    describe=lambda path: f"Launch application: {path}",
    missing_description="Launch unknown application",
)

DEFAULT_RULES: RuleTable = {
    "execute_command": PermissionRule(
        display_name="Execute Terminal Command",
        level=PermissionLevel.moderate,
        subject="command",
        detail_key="command",
        describe=lambda cmd: f"Execute command: {cmd}",
        missing_description="Execute unknown command",
        missing_level=PermissionLevel.dangerous,
        escalations=(Escalation(MatchKind.contains_ci, DANGEROUS_COMMAND_PATTERNS, PermissionLevel.dangerous),),
    ),
    "launch_app": _LAUNCH_RULE,
    "launch_application": _LAUNCH_RULE,
    "delete_file": _DELETE_RULE,
    "delete_directory": _DELETE_RULE,
    "kill_process": PermissionRule(
        display_name="Kill Process",
        level=PermissionLevel.dangerous,
        subject="pid",
        text_subject=False,
        detail_key="pid",
        describe=lambda pid: f"Terminate process with PID: {pid}",
        missing_description="Terminate unknown process",
    ),
}


class PermissionPolicy:
    """Classify operations against a rule table.

    Operation names without a rule classify as ``Safe``. This is a
    permissive default and is kept deliberately for compatibility with
    existing clients.
    """

    def __init__(self, rules: Optional[RuleTable] = None) -> None:
        self._rules: RuleTable = dict(DEFAULT_RULES if rules is None else rules)

    @property
    def rules(self) -> RuleTable:
        """Return a copy of the rule table."""
        return dict(self._rules)

    def classify(self, operation: str, parameters: Mapping[str, Any]) -> OperationPermission:
        """
        Classify one operation invocation.

        Args:
            operation: The operation name, e.g. ``execute_command``.
            parameters: The raw parameter mapping of the invocation.

        Returns:
            The computed ``OperationPermission``; never cached.
        """
        rule = self._rules.get(operation)
        if rule is None:
            return OperationPermission(
                operation=operation,
                description="Unknown operation",
                level=PermissionLevel.safe,
                details={},
            )

        subject = (
            subject_text(parameters, rule.subject, strings_only=rule.text_subject) if rule.subject else None
        )
        if subject is None:
            return OperationPermission(
                operation=rule.display_name,
                description=rule.missing_description,
                level=rule.missing_level or rule.level,
                details={},
            )

        level = rule.level
        for escalation in rule.escalations:
            if escalation.matches(subject):
                level = max_level(level, escalation.level)

        details = {rule.detail_key: subject} if rule.detail_key else {}
        return OperationPermission(
            operation=rule.display_name,
            description=rule.describe(subject),
            level=level,
            details=details,
        )

    def request(self, operation: str, parameters: Mapping[str, Any]) -> PermissionCheck:
        """
        Classify an operation and state whether it may proceed without consent.

        ``Safe`` and ``Moderate`` operations are granted; ``Dangerous`` ones are not.
        """
        permission = self.classify(operation, parameters)
        return PermissionCheck(permission=permission, granted=permission.level != PermissionLevel.dangerous)
