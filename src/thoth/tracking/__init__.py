"""DVC tracking, pipeline stages and tracked writers.

The module-level functions build a :class:`TrackingOrchestrator` from
:func:`thoth.config.load_config` on each call. Pass ``config`` to reuse an
explicit configuration instead.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sequence
from typing import Any

from thoth.config.settings import ThothConfig, load_config
from thoth.process.arguments import Scalar

from .models import (
    PipelineStageSpec,
    StepOutcome,
    TrackedArtifact,
    TrackingReport,
)
from .orchestrator import PathArg, TrackingOrchestrator
from .sidecar import file_md5, read_sidecar_hash, sidecar_path, write_mock_sidecar
from .writers import DataWriter


def _orchestrator(config: ThothConfig | None) -> TrackingOrchestrator:
    return TrackingOrchestrator(config or load_config())


def dvc_track(
    path: Any,
    message: str | None = None,
    push: bool = False,
    remote: str | None = None,
    branch: str | None = None,
    *,
    config: ThothConfig | None = None,
) -> Any:
    """Track one file with DVC and optionally commit and push; returns ``path``."""
    return _orchestrator(config).track(path, message, push, remote, branch)


def dvc_stage(
    name: str,
    cmd: str,
    deps: Iterable[str] | None = None,
    outs: Iterable[str] | None = None,
    metrics: bool | Collection[str] = False,
    plots: bool | Collection[str] = False,
    params: Mapping[str, Scalar] | None = None,
    always_changed: bool = False,
    message: str | None = None,
    *,
    config: ThothConfig | None = None,
) -> TrackingReport:
    spec = PipelineStageSpec.from_flags(
        name, cmd, deps, outs, metrics, plots, params, always_changed
    )
    return _orchestrator(config).stage(spec, message)


def write_csv_dvc(
    rows: Any,
    file: PathArg,
    message: str | None = None,
    stage_name: str | None = None,
    deps: Sequence[str] | None = None,
    params: Mapping[str, Scalar] | None = None,
    metrics: bool | Collection[str] = False,
    plots: bool | Collection[str] = False,
    cmd: str | None = None,
    fieldnames: Sequence[str] | None = None,
    *,
    config: ThothConfig | None = None,
) -> Any:
    return DataWriter(_orchestrator(config)).write_csv_dvc(
        rows, file, message, stage_name, deps, params, metrics, plots, cmd, fieldnames
    )


def write_pickle_dvc(
    obj: Any,
    file: PathArg,
    message: str | None = None,
    stage_name: str | None = None,
    deps: Sequence[str] | None = None,
    params: Mapping[str, Scalar] | None = None,
    metrics: bool | Collection[str] = False,
    plots: bool | Collection[str] = False,
    cmd: str | None = None,
    *,
    config: ThothConfig | None = None,
) -> Any:
    return DataWriter(_orchestrator(config)).write_pickle_dvc(
        obj, file, message, stage_name, deps, params, metrics, plots, cmd
    )


__all__ = [
    "DataWriter",
    "PipelineStageSpec",
    "StepOutcome",
    "TrackedArtifact",
    "TrackingOrchestrator",
    "TrackingReport",
    "dvc_stage",
    "dvc_track",
    "file_md5",
    "read_sidecar_hash",
    "sidecar_path",
    "write_csv_dvc",
    "write_mock_sidecar",
    "write_pickle_dvc",
]
