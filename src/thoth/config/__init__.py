"""Configuration helpers for thoth."""

from __future__ import annotations

from .env import (
    OVERRIDE_REGISTRY,
    EnvOverride,
    environment_overrides,
    load_environment,
)
from .settings import LoggingSettings, ThothConfig, load_config

__all__ = [
    "EnvOverride",
    "LoggingSettings",
    "OVERRIDE_REGISTRY",
    "ThothConfig",
    "environment_overrides",
    "load_config",
    "load_environment",
]
