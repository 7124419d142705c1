"""Utilities package for thoth: logging setup and version lookup."""

from __future__ import annotations

from .logger_manager import LoggerConfig, LoggerManager, configure_logging
from .version import get_runtime_version

__all__ = [
    "LoggerConfig",
    "LoggerManager",
    "configure_logging",
    "get_runtime_version",
]
