"""Shared plumbing for thin wrappers around command-line tools."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path
from typing import ClassVar

from thoth.config.settings import ThothConfig
from thoth.enums import Tool
from thoth.errors import ToolMissingError
from thoth.process.availability import Toolchain
from thoth.process.policy import FailurePolicy
from thoth.process.runner import CommandResult, CommandRunner


class ToolClient:
    """Runs one external tool with the configured failure policy."""

    tool: ClassVar[Tool]
    install_hint: ClassVar[str] = ""

    def __init__(
        self,
        config: ThothConfig | None = None,
        runner: CommandRunner | None = None,
        toolchain: Toolchain | None = None,
        policy: FailurePolicy | None = None,
    ) -> None:
        self.config = config or ThothConfig()
        self.runner = runner or CommandRunner(cwd=self.config.project_root)
        self.toolchain = toolchain or Toolchain(self.config, self.runner)
        self.logger = logging.getLogger(type(self).__module__)
        self.policy = policy or FailurePolicy(self.config.on_tool_failure, self.logger)

    @property
    def root(self) -> Path:
        return self.config.project_root

    def is_available(self) -> bool:
        return self.toolchain.is_available(self.tool)

    def missing_error(self) -> ToolMissingError:
        name = self.tool.value
        hint = f" Please install it first: {self.install_hint}" if self.install_hint else ""
        return ToolMissingError(name, f"{name} is not installed.{hint}")

    def run(
        self,
        args: Sequence[str],
        failure_message: str,
        cwd: Path | None = None,
    ) -> CommandResult | None:
        """Run the tool; return the result on success, None after a routed failure."""
        if not self.is_available():
            self.policy.handle(self.missing_error())
            return None
        executable = self.toolchain.executable(self.tool)
        assert executable is not None
        result = self.runner.run(executable, list(args), cwd=cwd or self.root)
        if not self.policy.check(result, failure_message):
            return None
        return result


__all__ = ["ToolClient"]
