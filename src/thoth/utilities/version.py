"""Runtime version resolution helpers."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import shutil

from thoth.process.runner import CommandRunner

DISTRIBUTION_NAME = "thoth"


def _installed_version() -> str | None:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return None


def _rev_parse_short(repo_root: Path) -> str | None:
    git_exec = shutil.which("git")
    if not git_exec:
        return None
    result = CommandRunner(cwd=repo_root).run(git_exec, ["rev-parse", "--short", "HEAD"])
    if not result.ok or not result.stdout_lines:
        return None
    return result.stdout_lines[0].strip() or None


def get_runtime_version() -> str:
    """Resolve the version from package metadata, then the source checkout."""

    installed = _installed_version()
    if installed:
        return installed
    repo_root = Path(__file__).resolve().parents[3]
    short_hash = _rev_parse_short(repo_root)
    if short_hash:
        return f"dev+{short_hash}"
    return "dev+unknown"


__all__ = ["DISTRIBUTION_NAME", "get_runtime_version"]
