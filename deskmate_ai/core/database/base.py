"""
Base database model.

Every persisted record in the chat store derives from ``Base``.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form sqlite round-trips."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
