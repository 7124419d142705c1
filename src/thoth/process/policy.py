"""Routing of external tool failures according to the configured policy."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from thoth.enums import OnToolFailure
from thoth.errors import (
    ExternalCommandError,
    ThothError,
    ToolMissingError,
    format_command_error,
)
from thoth.process.runner import CommandResult


@dataclass
class FailurePolicy:
    """Warn-and-continue or abort when an external tool misbehaves.

    Validation errors never pass through here; they always abort.
    """

    on_tool_failure: OnToolFailure = OnToolFailure.WARN
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("thoth"))

    @property
    def aborts(self) -> bool:
        return self.on_tool_failure is OnToolFailure.ABORT

    def handle(self, error: ThothError) -> None:
        """Raise ``error`` under ABORT; otherwise log it as a warning."""
        if self.aborts:
            raise error
        if isinstance(error, ExternalCommandError):
            self.logger.warning(
                str(error),
                extra={
                    "context": {
                        "command": error.result.command_line,
                        "exit_status": error.result.exit_status,
                    }
                },
            )
        else:
            self.logger.warning(str(error))

    def check(self, result: CommandResult, failure_message: str) -> bool:
        """Return True when ``result`` succeeded, routing the failure otherwise."""
        if result.ok:
            return True
        if result.missing:
            self.handle(
                ToolMissingError(
                    result.executable,
                    f"{failure_message}. {format_command_error(result)}",
                )
            )
        else:
            self.handle(
                ExternalCommandError(
                    result, f"{failure_message}. {format_command_error(result)}"
                )
            )
        return False


__all__ = ["FailurePolicy"]
