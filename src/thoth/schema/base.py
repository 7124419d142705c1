"""Shared Pydantic base class with consistent configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TypedBaseModel(BaseModel):
    """Common base for every thoth schema.

    Keeps whitespace stripping, strict field sets and arbitrary types (paths,
    frozen dataclasses) consistent across models.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        str_strip_whitespace=True,
        extra="forbid",
    )
