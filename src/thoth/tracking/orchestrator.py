"""Track artifacts and pipeline stages with DVC, then commit and push with Git.

A tracking call walks validate, probe, track (or stage), commit and push.
Local input problems abort immediately with :class:`ValidationError`. Tool
problems follow the configured failure policy: under ``WARN`` they are logged
and the call still returns its input so chained calls keep going; under
``ABORT`` they surface as :class:`PartialPipelineError` naming the failed
step. Earlier successful steps are never rolled back.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from thoth.config.settings import ThothConfig
from thoth.enums import TrackingStep
from thoth.errors import (
    ExternalCommandError,
    PartialPipelineError,
    ToolMissingError,
    ValidationError,
)
from thoth.process.availability import Toolchain
from thoth.process.policy import FailurePolicy
from thoth.process.runner import CommandRunner
from thoth.tracking.models import PipelineStageSpec, TrackedArtifact, TrackingReport
from thoth.tracking.sidecar import read_sidecar_hash, sidecar_path, write_mock_sidecar
from thoth.vcs.dvc import DvcClient
from thoth.vcs.git import GitClient

PathArg = str | os.PathLike[str]

logger = logging.getLogger(__name__)


class TrackingOrchestrator:
    """Composes the runner, toolchain and git/dvc clients for one project."""

    def __init__(
        self,
        config: ThothConfig | None = None,
        runner: CommandRunner | None = None,
        toolchain: Toolchain | None = None,
    ) -> None:
        self.config = config or ThothConfig()
        self.runner = runner or CommandRunner(cwd=self.config.project_root)
        self.toolchain = toolchain or Toolchain(self.config, self.runner)
        self.policy = FailurePolicy(self.config.on_tool_failure, logger)
        self.git = GitClient(self.config, self.runner, self.toolchain, self.policy)
        self.dvc = DvcClient(
            self.config, self.runner, self.toolchain, self.policy, git=self.git
        )

    @property
    def root(self) -> Path:
        return self.config.project_root

    def resolve(self, path: PathArg) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self.root / candidate

    def track(
        self,
        path: PathArg | Sequence[PathArg],
        message: str | None = None,
        push: bool = False,
        remote: str | None = None,
        branch: str | None = None,
    ) -> Any:
        """Track a single file and return ``path`` unchanged for chaining."""
        self.track_with_report(path, message, push, remote, branch)
        return path

    def track_with_report(
        self,
        path: PathArg | Sequence[PathArg],
        message: str | None = None,
        push: bool = False,
        remote: str | None = None,
        branch: str | None = None,
    ) -> TrackingReport:
        relative = self._validate_single_file(path)
        full = self.resolve(relative)
        report = TrackingReport(target=path)
        report.record(TrackingStep.VALIDATE, True)

        if not self.dvc.is_available():
            logger.warning(
                f"DVC is not available; writing a mock tracking record for {relative}",
                extra={"context": {"path": str(relative)}},
            )
            report.mocked = True
            report.record(TrackingStep.PROBE, True, "dvc unavailable")
            report.artifacts.append(write_mock_sidecar(full))
            report.record(TrackingStep.TRACK, True, "mock sidecar")
        else:
            report.record(TrackingStep.PROBE, True)
            if not self._attempt(
                report,
                TrackingStep.TRACK,
                lambda: self._dvc_add(relative),
            ):
                return self._stopped(report)
            report.artifacts.append(self._artifact_after_add(full))

        sidecar = sidecar_path(relative)
        to_stage = [str(sidecar)]
        gitignore = sidecar.parent / ".gitignore"
        if self.resolve(gitignore).exists():
            to_stage.append(str(gitignore))
        return self._finish(report, to_stage, message, push, remote, branch)

    def stage(
        self,
        spec: PipelineStageSpec,
        message: str | None = None,
        push: bool = False,
        remote: str | None = None,
        branch: str | None = None,
    ) -> TrackingReport:
        """Register a pipeline stage and stage `dvc.yaml`/`dvc.lock` for commit."""
        if not isinstance(spec, PipelineStageSpec):
            raise ValidationError("stage() expects a PipelineStageSpec")
        self._validate_stage_name(spec.name)
        report = TrackingReport(target=spec.name)
        report.record(TrackingStep.VALIDATE, True)

        if not self.dvc.is_available():
            logger.warning(
                f"DVC is not available; stage '{spec.name}' was not registered, "
                "writing mock tracking records for its existing outputs",
                extra={"context": {"stage": spec.name}},
            )
            report.mocked = True
            report.record(TrackingStep.PROBE, True, "dvc unavailable")
            to_stage: list[str] = []
            for output in spec.output_paths:
                full = self.resolve(output)
                if full.is_file():
                    report.artifacts.append(write_mock_sidecar(full, stage=spec.name))
                    to_stage.append(str(sidecar_path(output)))
            report.record(TrackingStep.STAGE, True, "mock sidecars")
            return self._finish(report, to_stage, message, push, remote, branch)

        report.record(TrackingStep.PROBE, True)
        if not self._attempt(
            report,
            TrackingStep.STAGE,
            lambda: self.dvc.ensure_initialized() and self.dvc.stage_add(spec),
        ):
            return self._stopped(report)
        for output in spec.output_paths:
            report.artifacts.append(
                TrackedArtifact(path=self.resolve(output), stage=spec.name)
            )
        pipeline_files = self.dvc.pipeline_files()
        if pipeline_files and not message:
            # Without a commit the definition files are still staged for the user.
            if not self._attempt(
                report,
                TrackingStep.STAGE,
                lambda: bool(self.git.add(pipeline_files)),
            ):
                return self._stopped(report)
        return self._finish(report, pipeline_files, message, push, remote, branch)

    def _validate_single_file(self, path: PathArg | Sequence[PathArg]) -> Path:
        if isinstance(path, (list, tuple, set, frozenset)):
            items = list(path)
            if len(items) != 1:
                raise ValidationError(
                    "Multiple paths are not supported. Please track files individually."
                )
            path = items[0]
        if not isinstance(path, (str, os.PathLike)):
            raise ValidationError(f"Expected a file path, got {type(path).__name__}")
        relative = Path(path)
        full = self.resolve(relative)
        if not full.exists():
            raise ValidationError(f"File '{relative}' does not exist")
        if not full.is_file():
            raise ValidationError(f"'{relative}' is not a regular file")
        return relative

    def _validate_stage_name(self, name: str) -> None:
        definition = self.root / "dvc.yaml"
        if not definition.is_file():
            return
        try:
            payload = yaml.safe_load(definition.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ValidationError(f"Cannot parse {definition}: {exc}") from exc
        stages = payload.get("stages") if isinstance(payload, dict) else None
        if isinstance(stages, dict) and name in stages:
            raise ValidationError(f"Stage '{name}' already exists in dvc.yaml")

    def _dvc_add(self, relative: Path) -> bool:
        if not self.dvc.ensure_initialized():
            return False
        return bool(self.dvc.add(str(relative), git_add=False, force=True))

    def _artifact_after_add(self, full: Path) -> TrackedArtifact:
        sidecar = sidecar_path(full)
        if not sidecar.exists():
            return write_mock_sidecar(full)
        return TrackedArtifact(path=full, md5=read_sidecar_hash(sidecar), sidecar=sidecar)

    def _finish(
        self,
        report: TrackingReport,
        to_stage: list[str],
        message: str | None,
        push: bool,
        remote: str | None,
        branch: str | None,
    ) -> TrackingReport:
        if message:
            if not self._attempt(
                report,
                TrackingStep.COMMIT,
                lambda: self._commit(to_stage, message),
            ):
                return self._stopped(report)
        if push:
            if not self._attempt(
                report,
                TrackingStep.PUSH,
                lambda: self.git.push(remote, branch),
            ):
                return self._stopped(report)
        logger.info(
            f"Tracking of {report.target} finished: {report.state.value}",
            extra={"context": {"mocked": report.mocked}},
        )
        return report

    def _commit(self, to_stage: list[str], message: str) -> bool:
        if to_stage and not self.git.add(to_stage):
            return False
        return self.git.commit(message)

    def _attempt(
        self,
        report: TrackingReport,
        step: TrackingStep,
        action: Callable[[], bool],
    ) -> bool:
        try:
            ok = bool(action())
        except (ExternalCommandError, ToolMissingError) as exc:
            report.record(step, False, str(exc))
            raise PartialPipelineError(step, report, exc) from exc
        return report.record(step, ok, "" if ok else f"{step.value} failed")

    def _stopped(self, report: TrackingReport) -> TrackingReport:
        step = report.failed_step
        assert step is not None
        logger.warning(
            f"Tracking of {report.target} stopped at step '{step.value}'; "
            "earlier steps were kept",
            extra={"context": {"step": step.value}},
        )
        return report


__all__ = ["TrackingOrchestrator"]
