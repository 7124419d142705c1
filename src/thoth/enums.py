"""Centralized semantic enums for thoth."""

from __future__ import annotations

from enum import Enum


class Tool(str, Enum):
    """External command-line tools thoth knows how to drive."""

    GIT = "git"
    DVC = "dvc"
    DOCKER = "docker"
    QUARTO = "quarto"
    PYTHON = "python"


class OnToolFailure(str, Enum):
    """What to do when an external tool is missing or exits non-zero."""

    WARN = "warn"
    ABORT = "abort"

    @classmethod
    def parse(cls, raw: str | OnToolFailure) -> OnToolFailure:
        if isinstance(raw, OnToolFailure):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unknown tool failure policy '{raw}'. Expected one of: {choices}"
            ) from exc


class TrackingStep(str, Enum):
    """Ordered steps of a single tracking call."""

    VALIDATE = "validate"
    PROBE = "probe"
    TRACK = "track"
    STAGE = "stage"
    COMMIT = "commit"
    PUSH = "push"


class TrackingState(str, Enum):
    """Terminal states reported by the tracking orchestrator."""

    TRACKED = "tracked"
    COMMITTED = "committed"
    PUSHED = "pushed"
    FAILED = "failed"


class ExportFormat(str, Enum):
    """Document formats supported by the decision log exporter."""

    MD = "md"
    HTML = "html"
    PDF = "pdf"

    @property
    def needs_renderer(self) -> bool:
        return self is not ExportFormat.MD


class MethodsFormat(str, Enum):
    """Plain-text flavours of the generated methods section."""

    MARKDOWN = "markdown"
    TEXT = "text"
