"""Pass-through wrappers around git subcommands."""

from __future__ import annotations

from collections.abc import Sequence
import re

from thoth.enums import Tool
from thoth.vcs.base import ToolClient

_BRANCH_MARKER = re.compile(r"^[* ]\s*")


def _as_list(paths: str | Sequence[str]) -> list[str]:
    if isinstance(paths, str):
        return [paths]
    return [str(path) for path in paths]


class GitClient(ToolClient):
    """Git commands used by tracking and scaffolding.

    Every method returns a falsy value after a failure that the policy chose
    to downgrade to a warning.
    """

    tool = Tool.GIT
    install_hint = "https://git-scm.com/downloads"

    def init(self) -> bool:
        if self.run(["init"], "Failed to initialize Git repository") is None:
            return False
        self.logger.info(f"Initialized Git repository in {self.root}")
        return True

    def add(self, paths: str | Sequence[str], force: bool = False) -> list[str]:
        targets = _as_list(paths)
        if not targets:
            return []
        args = ["add", *(["-f"] if force else []), *targets]
        if self.run(args, "Failed to add files to Git") is None:
            return []
        self.logger.info("Added files to Git staging area")
        return targets

    def commit(self, message: str, all: bool = False) -> bool:
        args = ["commit", *(["-a"] if all else []), "-m", message]
        if self.run(args, "Failed to commit changes to Git") is None:
            return False
        self.logger.info("Committed changes to Git")
        return True

    def push(self, remote: str | None = None, branch: str | None = None) -> bool:
        remote = remote or self.config.git_remote
        branch = branch or self.config.git_branch
        if branch and not remote:
            remote = "origin"
        args = ["push", *([remote] if remote else []), *([branch] if branch else [])]
        if self.run(args, "Failed to push changes to remote") is None:
            return False
        self.logger.info("Successfully pushed changes")
        return True

    def pull(self, remote: str | None = None, branch: str | None = None) -> bool:
        args = ["pull", *([remote] if remote else []), *([branch] if branch else [])]
        if self.run(args, "Failed to pull changes from remote") is None:
            return False
        self.logger.info("Successfully pulled changes")
        return True

    def status(self, short: bool = True) -> list[str] | None:
        result = self.run(
            ["status", *(["--short"] if short else [])], "Failed to get Git status"
        )
        if result is None:
            return None
        lines = list(result.stdout_lines)
        if not lines:
            self.logger.info("Working directory clean")
        return lines

    def branch(self, name: str, checkout: bool = True) -> bool:
        if self.run(["branch", name], f"Failed to create branch: {name}") is None:
            return False
        if checkout and self.run(
            ["checkout", name], f"Failed to checkout branch: {name}"
        ) is None:
            return False
        verb = "Created and checked out" if checkout else "Created"
        self.logger.info(f"{verb} branch: {name}")
        return True

    def branch_list(self, all: bool = False) -> list[str] | None:
        result = self.run(
            ["branch", *(["-a"] if all else [])], "Failed to list branches"
        )
        if result is None:
            return None
        return [
            _BRANCH_MARKER.sub("", line)
            for line in result.stdout_lines
            if line.strip()
        ]

    def checkout(self, name: str, create: bool = False) -> bool:
        args = ["checkout", *(["-b"] if create else []), name]
        if self.run(args, f"Failed to checkout branch: {name}") is None:
            return False
        self.logger.info(f"Checked out branch: {name}")
        return True

    def log(self, n: int | None = 10, oneline: bool = True) -> list[str] | None:
        if not (self.root / ".git").exists():
            self.logger.warning("Not a Git repository")
            return None
        args = ["log", *(["--oneline"] if oneline else [])]
        if n is not None:
            args.extend(["-n", str(n)])
        result = self.run(args, "Failed to get Git log")
        if result is None:
            return None
        lines = list(result.stdout_lines)
        if not lines:
            self.logger.info("No commits yet")
            return None
        return lines

    def rm_cached(self, paths: str | Sequence[str]) -> bool:
        targets = _as_list(paths)
        if not targets:
            return False
        if self.run(
            ["rm", "--cached", *targets], "Failed to remove files from Git index"
        ) is None:
            return False
        self.logger.info("Removed files from Git index")
        return True


__all__ = ["GitClient"]
