"""Explicit default settings for thoth configuration."""

from __future__ import annotations

CONFIG_FILE_NAME = "thoth.yml"

TOOL_DEFAULTS: dict[str, str] = {
    "git": "git",
    "dvc": "dvc",
    "docker": "docker",
    "quarto": "quarto",
    "python": "python3",
}

MIN_VERSION_DEFAULTS: dict[str, str] = {}

TRACKING_DEFAULTS: dict[str, object] = {
    "on_tool_failure": "warn",
    "git_remote": None,
    "git_branch": None,
    "decisions_dir": "decisions",
}

LOGGING_DEFAULTS: dict[str, object] = {
    "log_level": "INFO",
    "log_dir": None,
    "log_file_name": "thoth.log",
    "structured_logging": False,
}
