"""Thin wrappers around the git and dvc command-line tools."""

from __future__ import annotations

from .base import ToolClient
from .dvc import PIPELINE_FILES, DvcClient
from .git import GitClient

__all__ = ["DvcClient", "GitClient", "PIPELINE_FILES", "ToolClient"]
