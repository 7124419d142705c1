"""Explicit thoth configuration parsed from `thoth.yml` and the environment.

The configuration is resolved once per process invocation and handed to every
component at construction; nothing reads process-wide option state later.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from thoth.config.defaults import (
    CONFIG_FILE_NAME,
    LOGGING_DEFAULTS,
    MIN_VERSION_DEFAULTS,
    TOOL_DEFAULTS,
    TRACKING_DEFAULTS,
)
from thoth.config.env import environment_overrides
from thoth.enums import OnToolFailure, Tool
from thoth.errors import ValidationError


@dataclass
class LoggingSettings:
    """Console and file logging options for the CLI."""

    log_level: str = str(LOGGING_DEFAULTS["log_level"])
    log_dir: Path | None = None
    log_file_name: str = str(LOGGING_DEFAULTS["log_file_name"])
    structured_logging: bool = bool(LOGGING_DEFAULTS["structured_logging"])

    def __post_init__(self) -> None:
        self.log_level = str(self.log_level).upper()
        if self.log_dir is not None:
            self.log_dir = Path(self.log_dir)


@dataclass
class ThothConfig:
    """Tool locations, failure policy and defaults shared by all components."""

    project_root: Path = field(default_factory=Path.cwd)
    tools: dict[str, str] = field(default_factory=lambda: dict(TOOL_DEFAULTS))
    min_versions: dict[str, str] = field(
        default_factory=lambda: dict(MIN_VERSION_DEFAULTS)
    )
    on_tool_failure: OnToolFailure = OnToolFailure.WARN
    git_remote: str | None = None
    git_branch: str | None = None
    decisions_dir: str = str(TRACKING_DEFAULTS["decisions_dir"])
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def __post_init__(self) -> None:
        self.project_root = Path(self.project_root)
        self.tools = {**TOOL_DEFAULTS, **{str(k): str(v) for k, v in self.tools.items()}}
        self.min_versions = {str(k): str(v) for k, v in self.min_versions.items()}
        try:
            self.on_tool_failure = OnToolFailure.parse(self.on_tool_failure)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        if isinstance(self.logging, Mapping):
            self.logging = LoggingSettings(**self.logging)

    @property
    def abort_on_tool_failure(self) -> bool:
        return self.on_tool_failure is OnToolFailure.ABORT

    def executable_for(self, tool: str | Tool) -> str:
        name = tool.value if isinstance(tool, Tool) else str(tool)
        return self.tools.get(name, name)

    def min_version_for(self, tool: str | Tool) -> str | None:
        name = tool.value if isinstance(tool, Tool) else str(tool)
        return self.min_versions.get(name)

    @classmethod
    def from_mapping(
        cls,
        raw: Mapping[str, Any],
        base_dir: Path | None = None,
    ) -> ThothConfig:
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ValidationError(f"Unknown configuration keys: {', '.join(unknown)}")
        values = dict(raw)
        if "project_root" in values and base_dir is not None:
            root = Path(values["project_root"])
            values["project_root"] = root if root.is_absolute() else base_dir / root
        for key in ("tools", "min_versions", "logging"):
            if key in values and not isinstance(values[key], Mapping):
                raise ValidationError(f"Configuration key '{key}' must be a mapping")
        try:
            return cls(**values)
        except TypeError as exc:
            raise ValidationError(f"Invalid configuration: {exc}") from exc

    @classmethod
    def load(
        cls,
        path: str | Path | None = None,
        *,
        project_root: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> ThothConfig:
        """Load overrides from a YAML file if it exists, then the environment."""
        root = Path(project_root).resolve() if project_root is not None else Path.cwd()
        resolved = Path(path) if path is not None else root / CONFIG_FILE_NAME
        raw: dict[str, Any] = {}
        if resolved.is_file():
            try:
                loaded = yaml.safe_load(resolved.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as exc:
                raise ValidationError(f"Failed to parse {resolved}: {exc}") from exc
            if not isinstance(loaded, dict):
                raise ValidationError(
                    f"Config file must contain a mapping, got {type(loaded).__name__}"
                )
            raw = loaded
        raw.setdefault("project_root", str(root))
        for dotted, value in environment_overrides(environ).items():
            _set_dotted(raw, dotted, value)
        for dotted, value in (overrides or {}).items():
            if value is not None:
                _set_dotted(raw, dotted, value)
        return cls.from_mapping(raw, base_dir=resolved.parent.resolve())


def _set_dotted(target: dict[str, Any], dotted: str, value: Any) -> None:
    head, _, tail = dotted.partition(".")
    if not tail:
        target[head] = value
        return
    nested = target.get(head)
    if not isinstance(nested, dict):
        nested = {}
        target[head] = nested
    nested[tail] = value


def load_config(
    path: str | Path | None = None,
    **kwargs: Any,
) -> ThothConfig:
    """Shortcut for :meth:`ThothConfig.load`."""
    return ThothConfig.load(path, **kwargs)


__all__ = ["LoggingSettings", "ThothConfig", "load_config"]
