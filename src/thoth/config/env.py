"""Loads environment overrides for thoth from the process and `.env` files."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import os
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class EnvOverride:
    """Describes one environment variable and the config key it overrides."""

    env_var: str
    key: str
    description: str


OVERRIDE_REGISTRY: tuple[EnvOverride, ...] = (
    EnvOverride("THOTH_ON_TOOL_FAILURE", "on_tool_failure", "warn or abort"),
    EnvOverride("THOTH_GIT", "tools.git", "git executable name or path"),
    EnvOverride("THOTH_DVC", "tools.dvc", "dvc executable name or path"),
    EnvOverride("THOTH_DOCKER", "tools.docker", "docker executable name or path"),
    EnvOverride("THOTH_QUARTO", "tools.quarto", "document renderer executable"),
    EnvOverride("THOTH_GIT_REMOTE", "git_remote", "default remote for pushes"),
    EnvOverride("THOTH_GIT_BRANCH", "git_branch", "default branch for pushes"),
    EnvOverride("THOTH_LOG_LEVEL", "logging.log_level", "console log level"),
)


def load_environment(dotenv_path: str | Path | None = None) -> None:
    """Load `.env` files when available to seed configuration overrides."""
    path = Path(dotenv_path) if dotenv_path else Path(".env")
    if path.exists():
        load_dotenv(dotenv_path=path)


def environment_overrides(
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return dotted config keys mapped to the values set in the environment."""
    source = os.environ if environ is None else environ
    return {
        spec.key: source[spec.env_var]
        for spec in OVERRIDE_REGISTRY
        if source.get(spec.env_var)
    }


__all__ = [
    "OVERRIDE_REGISTRY",
    "EnvOverride",
    "environment_overrides",
    "load_environment",
]
