"""Run external command-line tools and capture their output."""

# ruff: noqa: S603

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import logging
import os
from pathlib import Path
import subprocess  # nosec B404 - argv lists only, never a shell string

from thoth.errors import ExternalCommandError, ToolMissingError

EXIT_NOT_FOUND = 127

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command invocation."""

    executable: str
    args: tuple[str, ...]
    exit_status: int
    stdout_lines: tuple[str, ...] = ()
    stderr_lines: tuple[str, ...] = ()
    missing: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_status == 0

    @property
    def output_lines(self) -> list[str]:
        return [*self.stdout_lines, *self.stderr_lines]

    @property
    def command_line(self) -> str:
        """Display form of the invocation. Never handed to a shell."""
        return " ".join([Path(self.executable).name, *self.args])

    def raise_for_status(self) -> CommandResult:
        if self.missing:
            raise ToolMissingError(Path(self.executable).name)
        if not self.ok:
            raise ExternalCommandError(self)
        return self


class CommandRunner:
    """Spawns child processes synchronously without going through a shell.

    A non-zero exit never raises; callers inspect ``exit_status``. An
    executable that cannot be spawned at all is reported with status 127 and
    ``missing=True`` so callers can tell "not installed" from "failed".
    """

    def __init__(
        self,
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.cwd = Path(cwd) if cwd is not None else None
        self.env = dict(env) if env is not None else None

    def run(
        self,
        executable: str,
        args: Sequence[str] = (),
        cwd: str | Path | None = None,
    ) -> CommandResult:
        argv = [str(executable), *(str(arg) for arg in args)]
        workdir = Path(cwd) if cwd is not None else self.cwd
        env = {**os.environ, **self.env} if self.env is not None else None
        logger.debug(
            f"Running: {' '.join(argv)}",
            extra={"context": {"cwd": str(workdir) if workdir else None}},
        )
        try:
            completed = subprocess.run(  # nosec S603
                argv,
                check=False,
                capture_output=True,
                text=True,
                cwd=workdir,
                env=env,
            )
        except (FileNotFoundError, PermissionError) as exc:
            logger.debug(f"Could not spawn {executable}: {exc}")
            return CommandResult(
                executable=str(executable),
                args=tuple(argv[1:]),
                exit_status=EXIT_NOT_FOUND,
                stderr_lines=(str(exc),),
                missing=True,
            )
        result = CommandResult(
            executable=str(executable),
            args=tuple(argv[1:]),
            exit_status=completed.returncode,
            stdout_lines=tuple((completed.stdout or "").splitlines()),
            stderr_lines=tuple((completed.stderr or "").splitlines()),
        )
        logger.debug(f"{result.command_line} exited with {result.exit_status}")
        return result


__all__ = ["EXIT_NOT_FOUND", "CommandResult", "CommandRunner"]
