"""Blocking filesystem and OS collaborators invoked by the action handlers."""

from . import file_operations, system_operations

__all__ = ["file_operations", "system_operations"]
