"""Error taxonomy for thoth.

Local input problems raise :class:`ValidationError` and always abort the call.
Problems with external tools (:class:`ToolMissingError`,
:class:`ExternalCommandError`, :class:`PartialPipelineError`) are routed
through the configured :class:`~thoth.enums.OnToolFailure` policy and only
raise when that policy is ``ABORT``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from thoth.enums import TrackingStep
    from thoth.process.runner import CommandResult
    from thoth.tracking.models import TrackingReport


class ThothError(Exception):
    """Base class for every error raised by thoth."""


class ValidationError(ThothError, ValueError):
    """Bad local input: multiple paths, missing file, malformed parameter."""


class ToolMissingError(ThothError):
    """A required executable is not on PATH or is too old."""

    def __init__(self, tool: str, message: str | None = None) -> None:
        self.tool = tool
        super().__init__(message or f"{tool} is not installed or not on PATH")


class ExternalCommandError(ThothError):
    """An external tool ran and exited with a non-zero status."""

    def __init__(self, result: CommandResult, message: str | None = None) -> None:
        self.result = result
        super().__init__(message or format_command_error(result))


class PartialPipelineError(ThothError):
    """One step of track, stage, commit or push failed after earlier steps ran."""

    def __init__(
        self,
        step: TrackingStep,
        report: TrackingReport,
        cause: ThothError | None = None,
    ) -> None:
        self.step = step
        self.report = report
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Tracking of {report.target} failed at step '{step.value}'{detail}")


def format_command_error(result: CommandResult, default_msg: str | None = None) -> str:
    """Render a user-facing diagnostic for a failed command."""
    if result.missing:
        return (
            f"Command '{result.executable}' not found. Please ensure it is installed. "
            "This usually means the required tool is not installed or not in your PATH."
        )
    output = "\n".join(result.output_lines).strip()
    if output:
        return f"Command '{result.command_line}' failed with status {result.exit_status}:\n{output}"
    if default_msg:
        return default_msg
    return f"Command '{result.command_line}' failed with status {result.exit_status}"


__all__ = [
    "ExternalCommandError",
    "PartialPipelineError",
    "ThothError",
    "ToolMissingError",
    "ValidationError",
    "format_command_error",
]
