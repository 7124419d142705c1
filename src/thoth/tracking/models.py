"""Data types describing tracked artifacts, pipeline stages and call outcomes."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, ValidationError as PydanticValidationError, model_validator

from thoth.enums import TrackingState, TrackingStep
from thoth.errors import ValidationError
from thoth.process.arguments import Scalar, StageOutput
from thoth.schema.base import TypedBaseModel


@dataclass
class TrackedArtifact:
    """A file whose identity is recorded in a `.dvc` sidecar."""

    path: Path
    md5: str | None = None
    stage: str | None = None
    sidecar: Path | None = None


class PipelineStageSpec(TypedBaseModel):
    """Declarative description of one `dvc stage add` invocation."""

    name: Annotated[str, Field(min_length=1)]
    cmd: Annotated[str, Field(min_length=1)]
    deps: list[str] = Field(default_factory=list)
    outputs: list[StageOutput] = Field(default_factory=list)
    params: dict[str, Scalar] = Field(default_factory=dict)
    always_changed: bool = False

    @model_validator(mode="after")
    def _outputs_declared_once(self) -> PipelineStageSpec:
        seen: set[str] = set()
        for output in self.outputs:
            if output.path in seen:
                raise ValueError(
                    f"Output '{output.path}' is declared more than once; an output "
                    "cannot be both a plain output and a metric or plot"
                )
            seen.add(output.path)
        return self

    @property
    def output_paths(self) -> list[str]:
        return [output.path for output in self.outputs]

    @classmethod
    def build(cls, **values: Any) -> PipelineStageSpec:
        """Construct a spec, reporting bad input as :class:`ValidationError`."""
        try:
            return cls(**values)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid pipeline stage: {exc}") from exc

    @classmethod
    def from_flags(
        cls,
        name: str,
        cmd: str,
        deps: Iterable[str] | None = None,
        outs: Iterable[str] | None = None,
        metrics: bool | Collection[str] = False,
        plots: bool | Collection[str] = False,
        params: Mapping[str, Scalar] | None = None,
        always_changed: bool = False,
    ) -> PipelineStageSpec:
        """Build a spec from the flat calling convention used by the writers.

        ``metrics``/``plots`` set to True flag every output; a collection of
        paths flags those paths, appending them as outputs when not listed.
        """
        ordered = [str(path) for path in outs or ()]
        metric_paths = _flagged(metrics, ordered)
        plot_paths = _flagged(plots, ordered)
        for extra in [*metric_paths, *plot_paths]:
            if extra not in ordered:
                ordered.append(extra)
        outputs = [
            StageOutput(
                path=path,
                metric=path in metric_paths,
                plot=path in plot_paths and path not in metric_paths,
            )
            for path in dict.fromkeys(ordered)
        ]
        return cls.build(
            name=name,
            cmd=cmd,
            deps=[str(dep) for dep in deps or ()],
            outputs=outputs,
            params=dict(params or {}),
            always_changed=always_changed,
        )


def _flagged(flag: bool | Collection[str], outs: list[str]) -> list[str]:
    if isinstance(flag, bool):
        return list(outs) if flag else []
    if isinstance(flag, str):
        return [flag]
    return [str(path) for path in flag]


@dataclass
class StepOutcome:
    step: TrackingStep
    ok: bool
    detail: str = ""


@dataclass
class TrackingReport:
    """What happened during one track or stage call.

    Steps are recorded in execution order. A failed step ends the chain, but
    the effects of earlier successful steps are kept.
    """

    target: Any
    artifacts: list[TrackedArtifact] = field(default_factory=list)
    mocked: bool = False
    steps: list[StepOutcome] = field(default_factory=list)

    def record(self, step: TrackingStep, ok: bool, detail: str = "") -> bool:
        self.steps.append(StepOutcome(step, ok, detail))
        return ok

    def succeeded(self, step: TrackingStep) -> bool:
        return any(outcome.step is step and outcome.ok for outcome in self.steps)

    @property
    def failed_step(self) -> TrackingStep | None:
        for outcome in self.steps:
            if not outcome.ok:
                return outcome.step
        return None

    @property
    def state(self) -> TrackingState:
        if self.failed_step is not None:
            return TrackingState.FAILED
        if self.succeeded(TrackingStep.PUSH):
            return TrackingState.PUSHED
        if self.succeeded(TrackingStep.COMMIT):
            return TrackingState.COMMITTED
        return TrackingState.TRACKED

    @property
    def artifact(self) -> TrackedArtifact | None:
        return self.artifacts[0] if self.artifacts else None


__all__ = [
    "PipelineStageSpec",
    "StepOutcome",
    "TrackedArtifact",
    "TrackingReport",
]
