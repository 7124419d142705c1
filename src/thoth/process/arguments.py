"""Pure builders for git/dvc argument vectors.

Every function here is deterministic and side-effect free. Empty inputs
contribute no arguments at all, never a dangling flag.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
import math
from typing import TYPE_CHECKING, Union

from thoth.errors import ValidationError

if TYPE_CHECKING:
    from thoth.tracking.models import PipelineStageSpec

Scalar = Union[str, int, float, bool]


@dataclass(frozen=True)
class StringValue:
    value: str

    def format(self) -> str:
        """POSIX single-quoting, always quoted even when not strictly needed."""
        return "'" + self.value.replace("'", "'\\''") + "'"


@dataclass(frozen=True)
class NumberValue:
    value: int | float

    def format(self) -> str:
        if isinstance(self.value, float):
            if not math.isfinite(self.value):
                return repr(self.value)
            if self.value.is_integer():
                return str(int(self.value))
            # Shortest round-tripping digits, never in exponent notation.
            return format(Decimal(repr(self.value)), "f")
        return str(self.value)


@dataclass(frozen=True)
class BoolValue:
    value: bool

    def format(self) -> str:
        return "true" if self.value else "false"


ParamValue = Union[StringValue, NumberValue, BoolValue]


def param_value(raw: Scalar | ParamValue) -> ParamValue:
    """Coerce a raw scalar into its tagged variant (bool before int)."""
    if isinstance(raw, (StringValue, NumberValue, BoolValue)):
        return raw
    if isinstance(raw, bool):
        return BoolValue(raw)
    if isinstance(raw, (int, float)):
        return NumberValue(raw)
    if isinstance(raw, str):
        return StringValue(raw)
    raise ValidationError(
        f"Unsupported parameter value {raw!r} ({type(raw).__name__}); "
        "expected a string, number or boolean"
    )


@dataclass(frozen=True)
class StageOutput:
    """One declared stage output and how DVC should treat it."""

    path: str
    metric: bool = False
    plot: bool = False

    @property
    def flag(self) -> str:
        # -M excludes -o: a metric is never also declared a plain output.
        if self.metric:
            return "-M"
        if self.plot:
            return "--plots"
        return "-o"


def build_deps(paths: Iterable[str] | None) -> list[str]:
    args: list[str] = []
    for path in paths or ():
        args.extend(["-d", str(path)])
    return args


def build_outputs(outputs: Iterable[StageOutput | str] | None) -> list[str]:
    args: list[str] = []
    for output in outputs or ():
        if not isinstance(output, StageOutput):
            output = StageOutput(str(output))
        args.extend([output.flag, output.path])
    return args


def build_params(params: Mapping[str, Scalar | ParamValue] | None) -> list[str]:
    """Render ``-p name=value`` pairs in the caller's insertion order."""
    args: list[str] = []
    for name, raw in (params or {}).items():
        if not str(name).strip():
            raise ValidationError("Parameter names must be non-empty")
        args.extend(["-p", f"{name}={param_value(raw).format()}"])
    return args


def build_always_changed(flag: bool) -> list[str]:
    return ["--always-changed"] if flag else []


def build_stage_add(spec: PipelineStageSpec) -> list[str]:
    """Full ``dvc stage add`` argument vector; the command goes last, unquoted."""
    return [
        "stage",
        "add",
        "-n",
        spec.name,
        *build_deps(spec.deps),
        *build_outputs(spec.outputs),
        *build_params(spec.params),
        *build_always_changed(spec.always_changed),
        spec.cmd,
    ]


def parse_param_assignment(text: str) -> tuple[str, Scalar]:
    """Parse a ``key=value`` string from the command line into a typed pair."""
    name, sep, raw = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise ValidationError(f"Malformed parameter '{text}'; expected key=value")
    lowered = raw.strip().lower()
    if lowered in {"true", "false"}:
        return name, lowered == "true"
    for cast in (int, float):
        try:
            return name, cast(raw)
        except ValueError:
            continue
    return name, raw


__all__ = [
    "BoolValue",
    "NumberValue",
    "ParamValue",
    "Scalar",
    "StageOutput",
    "StringValue",
    "build_always_changed",
    "build_deps",
    "build_outputs",
    "build_params",
    "build_stage_add",
    "param_value",
    "parse_param_assignment",
]
