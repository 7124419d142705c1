"""Schemas for the analysis decision log."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import Field, field_validator

from thoth.schema.base import TypedBaseModel


class DecisionRecord(TypedBaseModel):
    """One human judgement made during an analysis."""

    id: str
    timestamp: str
    check: str
    observation: str
    decision: str
    reasoning: str
    evidence: str | None = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _timestamp_as_text(cls, value: Any) -> Any:
        # Hand-edited files may hold unquoted YAML timestamps.
        return value if value is None or isinstance(value, str) else str(value)


class DecisionTree(TypedBaseModel):
    """The whole decision log of one analysis, stored as a single YAML document."""

    analysis_id: Annotated[str, Field(min_length=1)]
    analyst: str
    description: str
    date_created: str
    decisions: list[DecisionRecord] = Field(default_factory=list)

    @field_validator("date_created", mode="before")
    @classmethod
    def _date_as_text(cls, value: Any) -> Any:
        return value if value is None or isinstance(value, str) else str(value)

    @field_validator("decisions", mode="before")
    @classmethod
    def _null_decisions(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


__all__ = ["DecisionRecord", "DecisionTree"]
