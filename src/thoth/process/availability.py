"""Resolve external tools on PATH and check their versions."""

from __future__ import annotations

from collections.abc import Iterable
import logging
import re
import shutil

from packaging.version import InvalidVersion, Version

from thoth.config.settings import ThothConfig
from thoth.enums import Tool
from thoth.errors import ToolMissingError
from thoth.process.runner import CommandRunner

VERSION_PATTERN = re.compile(r"\d+\.\d+\.\d+")

logger = logging.getLogger(__name__)


def extract_version(lines: Iterable[str]) -> Version | None:
    """Return the first semantic version found in ``lines``, if any."""
    for line in lines:
        match = VERSION_PATTERN.search(line)
        if match is None:
            continue
        try:
            return Version(match.group(0))
        except InvalidVersion:
            return None
    return None


class Toolchain:
    """Looks up executables once per instance and answers availability queries.

    Executables are resolved with :func:`shutil.which` the first time they are
    asked for and cached afterwards. A tool that is not on PATH is reported
    unavailable without spawning anything. Version checks fail safe: when the
    version cannot be determined the tool counts as unavailable.
    """

    def __init__(
        self,
        config: ThothConfig | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.config = config or ThothConfig()
        self.runner = runner or CommandRunner(cwd=self.config.project_root)
        self._paths: dict[str, str | None] = {}
        self._versions: dict[str, Version | None] = {}

    def executable(self, tool: str | Tool) -> str | None:
        name = tool.value if isinstance(tool, Tool) else str(tool)
        if name not in self._paths:
            self._paths[name] = shutil.which(self.config.executable_for(name))
        return self._paths[name]

    def version(self, tool: str | Tool) -> Version | None:
        name = tool.value if isinstance(tool, Tool) else str(tool)
        if name in self._versions:
            return self._versions[name]
        path = self.executable(name)
        if path is None:
            return None
        result = self.runner.run(path, ["--version"])
        detected = extract_version(result.output_lines) if result.ok else None
        if detected is None:
            logger.debug(f"Could not determine {name} version from --version output")
        self._versions[name] = detected
        return detected

    def is_available(self, tool: str | Tool, min_version: str | None = None) -> bool:
        name = tool.value if isinstance(tool, Tool) else str(tool)
        if self.executable(name) is None:
            return False
        required = min_version or self.config.min_version_for(name)
        if required is None:
            return True
        try:
            minimum = Version(required)
        except InvalidVersion:
            logger.warning(f"Ignoring unparsable minimum version '{required}' for {name}")
            return False
        detected = self.version(name)
        if detected is None:
            return False
        return detected >= minimum

    def require(self, tool: str | Tool, min_version: str | None = None) -> str:
        """Return the resolved executable or raise :class:`ToolMissingError`."""
        name = tool.value if isinstance(tool, Tool) else str(tool)
        if not self.is_available(name, min_version):
            required = min_version or self.config.min_version_for(name)
            suffix = f" (>= {required})" if required else ""
            raise ToolMissingError(
                name, f"{name}{suffix} is not installed or not on PATH"
            )
        path = self.executable(name)
        assert path is not None
        return path


__all__ = ["VERSION_PATTERN", "Toolchain", "extract_version"]
