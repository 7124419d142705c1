from __future__ import annotations

import logging

import pytest

from thoth.enums import OnToolFailure
from thoth.errors import (
    ExternalCommandError,
    ToolMissingError,
    ValidationError,
    format_command_error,
)
from thoth.process.policy import FailurePolicy
from thoth.process.runner import EXIT_NOT_FOUND, CommandResult

FAILED = CommandResult("/usr/bin/dvc", ("push",), 1, stderr_lines=("ERROR: no remote",))
MISSING = CommandResult("dvc", ("push",), EXIT_NOT_FOUND, missing=True)


def test_format_command_error_variants() -> None:
    assert "not found" in format_command_error(MISSING)
    assert format_command_error(FAILED).endswith("ERROR: no remote")
    silent = CommandResult("/usr/bin/git", ("push",), 1)
    assert format_command_error(silent, "Push failed") == "Push failed"
    assert format_command_error(silent) == "Command 'git push' failed with status 1"


def test_warn_policy_logs_with_context(caplog: pytest.LogCaptureFixture) -> None:
    policy = FailurePolicy(OnToolFailure.WARN, logging.getLogger("thoth.test"))
    with caplog.at_level("WARNING", logger="thoth"):
        assert policy.check(FAILED, "Failed to push") is False
    (record,) = caplog.records
    assert record.getMessage().startswith("Failed to push. Command 'dvc push'")
    assert record.context == {"command": "dvc push", "exit_status": 1}


def test_abort_policy_raises_matching_error() -> None:
    policy = FailurePolicy(OnToolFailure.ABORT)
    with pytest.raises(ExternalCommandError):
        policy.check(FAILED, "Failed to push")
    with pytest.raises(ToolMissingError):
        policy.check(MISSING, "Failed to push")


def test_success_passes_through() -> None:
    ok = CommandResult("/usr/bin/git", ("status",), 0)
    assert FailurePolicy(OnToolFailure.ABORT).check(ok, "unused")


def test_unknown_policy_name() -> None:
    with pytest.raises(ValueError, match="warn, abort"):
        OnToolFailure.parse("sometimes")
    assert OnToolFailure.parse(" ABORT ") is OnToolFailure.ABORT


def test_validation_error_is_a_value_error() -> None:
    assert issubclass(ValidationError, ValueError)
