"""Pass-through wrappers around dvc subcommands."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from thoth.config.settings import ThothConfig
from thoth.enums import Tool
from thoth.errors import ValidationError
from thoth.process.arguments import build_stage_add
from thoth.process.availability import Toolchain
from thoth.process.policy import FailurePolicy
from thoth.process.runner import CommandRunner
from thoth.vcs.base import ToolClient
from thoth.vcs.git import GitClient

if TYPE_CHECKING:
    from thoth.tracking.models import PipelineStageSpec

PIPELINE_FILES = ("dvc.yaml", "dvc.lock")


def _as_list(paths: str | Path | Sequence[str | Path] | None) -> list[str]:
    if paths is None:
        return []
    if isinstance(paths, (str, Path)):
        return [str(paths)]
    return [str(path) for path in paths]


class DvcClient(ToolClient):
    """DVC commands for data tracking, remotes and pipeline stages."""

    tool = Tool.DVC
    install_hint = "https://dvc.org/doc/install"

    def __init__(
        self,
        config: ThothConfig | None = None,
        runner: CommandRunner | None = None,
        toolchain: Toolchain | None = None,
        policy: FailurePolicy | None = None,
        git: GitClient | None = None,
    ) -> None:
        super().__init__(config, runner, toolchain, policy)
        self.git = git or GitClient(self.config, self.runner, self.toolchain)

    @property
    def initialized(self) -> bool:
        return (self.root / ".dvc").is_dir()

    def init(self, quiet: bool = True, no_scm: bool = False) -> bool:
        args = [
            "init",
            *(["--quiet"] if quiet else []),
            *(["--no-scm"] if no_scm else []),
        ]
        if self.run(args, "Failed to initialize DVC") is None:
            return False
        self.logger.info(f"Initialized DVC in {self.root}")
        return True

    def ensure_initialized(self) -> bool:
        if self.initialized:
            return True
        return self.init(quiet=True)

    def add(
        self,
        paths: str | Path | Sequence[str | Path],
        message: str | None = None,
        recursive: bool = False,
        git_add: bool = True,
        force: bool = False,
    ) -> list[str]:
        """Track each path; returns the paths DVC accepted."""
        targets = _as_list(paths)
        missing = [path for path in targets if not (self.root / path).exists()]
        if missing:
            raise ValidationError(f"Paths do not exist: {', '.join(missing)}")
        tracked: list[str] = []
        for path in targets:
            args = [
                "add",
                *(["-f"] if force else []),
                *(["--recursive"] if recursive else []),
                path,
            ]
            if self.run(args, f"Failed to add {path} to DVC tracking") is None:
                continue
            sidecar = f"{path}.dvc"
            if git_add and (self.root / sidecar).exists():
                self.git.add(sidecar)
            self.logger.info(f"Added {path} to DVC tracking")
            tracked.append(path)
        if message is not None and tracked:
            self.commit(tracked)
        return tracked

    def commit(self, paths: str | Path | Sequence[str | Path]) -> bool:
        args = ["commit", "--force", "--quiet", *_as_list(paths)]
        if self.run(args, "Failed to commit changes to DVC") is None:
            return False
        self.logger.info("Committed changes to DVC")
        return True

    def push(
        self,
        paths: str | Path | Sequence[str | Path] | None = None,
        remote: str | None = None,
    ) -> bool:
        args = ["push", *(["--remote", remote] if remote else []), *_as_list(paths)]
        if self.run(args, "Failed to push data to DVC remote") is None:
            return False
        self.logger.info("Successfully pushed data to DVC remote")
        return True

    def pull(
        self,
        paths: str | Path | Sequence[str | Path] | None = None,
        remote: str | None = None,
    ) -> bool:
        args = ["pull", *(["--remote", remote] if remote else []), *_as_list(paths)]
        if self.run(args, "Failed to pull data from DVC remote") is None:
            return False
        self.logger.info("Successfully pulled data from DVC remote")
        return True

    def stage_add(self, spec: PipelineStageSpec) -> bool:
        if self.run(
            build_stage_add(spec), f"Failed to create DVC stage: {spec.name}"
        ) is None:
            return False
        self.logger.info(f"Created DVC stage: {spec.name}")
        return True

    def pipeline_files(self) -> list[str]:
        return [name for name in PIPELINE_FILES if (self.root / name).exists()]


__all__ = ["PIPELINE_FILES", "DvcClient"]
