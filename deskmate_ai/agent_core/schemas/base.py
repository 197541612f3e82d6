"""Pydantic base schema utilities for agent core models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base Pydantic model for all agent runtime records.

    Configures common Pydantic behaviors:
    - ``populate_by_name=True``: Allow initialization by alias or field name.
    - ``extra="forbid"``: Reject unknown fields on records the runtime produces itself.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
    )


class CommandSchema(BaseModel):
    """
    Base model for typed action parameters.

    Parameter bags come from callers, so unknown keys are ignored instead of
    rejected. Validation happens once, at the dispatcher boundary.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )
