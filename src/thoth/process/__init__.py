"""External process execution: argument building, tool lookup, running."""

from __future__ import annotations

from .arguments import (
    BoolValue,
    NumberValue,
    StageOutput,
    StringValue,
    build_always_changed,
    build_deps,
    build_outputs,
    build_params,
    build_stage_add,
    param_value,
    parse_param_assignment,
)
from .availability import Toolchain, extract_version
from .runner import EXIT_NOT_FOUND, CommandResult, CommandRunner

__all__ = [
    "BoolValue",
    "CommandResult",
    "CommandRunner",
    "EXIT_NOT_FOUND",
    "NumberValue",
    "StageOutput",
    "StringValue",
    "Toolchain",
    "build_always_changed",
    "build_deps",
    "build_outputs",
    "build_params",
    "build_stage_add",
    "extract_version",
    "param_value",
    "parse_param_assignment",
]
