"""Errors raised by the chat record store."""

from __future__ import annotations


class RecordStoreError(Exception):
    """Base class for record store failures."""


class RecordNotFoundError(RecordStoreError):
    """A chat, message or provider configuration does not exist."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class RecordConflictError(RecordStoreError):
    """The requested change would leave the store in an unusable state."""
