"""Scaffold a reproducible analytics project: layout, git, dvc, docker, venv, report."""

from __future__ import annotations

from collections.abc import Sequence
import dataclasses
import logging
from pathlib import Path

from thoth.config.settings import ThothConfig
from thoth.enums import Tool
from thoth.process.availability import Toolchain
from thoth.process.runner import CommandRunner
from thoth.scaffold import templates
from thoth.vcs.base import ToolClient
from thoth.vcs.dvc import DvcClient
from thoth.vcs.git import GitClient

VENV_DIRECTORY = ".venv"

logger = logging.getLogger(__name__)


class DockerClient(ToolClient):
    tool = Tool.DOCKER
    install_hint = "https://docs.docker.com/get-docker/"


class PythonClient(ToolClient):
    tool = Tool.PYTHON
    install_hint = "https://www.python.org/downloads/"

    def create_venv(self, directory: str = VENV_DIRECTORY) -> bool:
        if self.run(["-m", "venv", directory], "Failed to create virtual environment") is None:
            return False
        self.logger.info(f"Created virtual environment in {directory}")
        return True


class ProjectScaffolder:
    """Creates the project tree under ``path`` and commits each step.

    Files are only written when absent, so re-running over an existing
    project fills in what is missing and leaves edited files alone.
    """

    def __init__(
        self,
        path: str | Path,
        config: ThothConfig | None = None,
        runner: CommandRunner | None = None,
        toolchain: Toolchain | None = None,
    ) -> None:
        root = Path(path).expanduser().resolve()
        self.config = dataclasses.replace(config or ThothConfig(), project_root=root)
        self.runner = runner or CommandRunner(cwd=root)
        self.toolchain = toolchain or Toolchain(self.config, self.runner)
        clients = (self.config, self.runner, self.toolchain)
        self.git = GitClient(*clients)
        self.dvc = DvcClient(*clients, git=self.git)
        self.docker = DockerClient(*clients)
        self.python = PythonClient(*clients)

    @property
    def root(self) -> Path:
        return self.config.project_root

    def check_requirements(
        self, use_dvc: bool, use_docker: bool, use_venv: bool, git_init: bool
    ) -> None:
        """Raise :class:`ToolMissingError` for the first required tool not on PATH."""
        required = [
            (git_init, self.git),
            (use_dvc, self.dvc),
            (use_docker, self.docker),
            (use_venv, self.python),
        ]
        for wanted, client in required:
            if wanted and not client.is_available():
                raise client.missing_error()

    def create(
        self,
        use_dvc: bool = True,
        use_docker: bool = True,
        use_venv: bool = True,
        git_init: bool = True,
    ) -> Path:
        self.check_requirements(use_dvc, use_docker, use_venv, git_init)
        for directory in templates.PROJECT_DIRECTORIES:
            (self.root / directory).mkdir(parents=True, exist_ok=True)

        if git_init and not (self.root / ".git").exists():
            self.git.init()
        written = self._write(".gitignore", templates.gitignore(use_dvc))
        if use_dvc:
            written |= self._write(".dvcignore", templates.DVCIGNORE)
        for keep in templates.KEEP_FILES:
            written |= self._write(keep, "")
        if git_init and written:
            self._commit(["."], "Initial commit with project structure")

        if use_dvc and not self.dvc.initialized:
            if self.dvc.init(quiet=True, no_scm=not git_init) and git_init:
                self._commit([".dvc", ".dvcignore"], "Initialize DVC")

        if use_docker:
            written = self._write("docker/Dockerfile", templates.dockerfile())
            written |= self._write("docker/docker-compose.yml", templates.DOCKER_COMPOSE)
            if git_init and written:
                self._commit(["docker"], "Add Docker configuration")

        if use_venv:
            written = self._write("requirements.txt", templates.REQUIREMENTS)
            if not (self.root / VENV_DIRECTORY).exists():
                self.python.create_venv(VENV_DIRECTORY)
            if git_init and written:
                self._commit(["requirements.txt"], "Add Python environment requirements")

        if self._write("README.md", templates.readme(self.root.name)) and git_init:
            self._commit(["README.md"], "Add README")

        if self._write("reports/template.qmd", templates.QUARTO_REPORT) and git_init:
            self._commit(["reports"], "Add Quarto template")

        logger.info(f"Analytics project successfully created at {self.root}")
        return self.root

    def _write(self, relative: str, content: str) -> bool:
        target = self.root / relative
        if target.exists():
            logger.debug(f"Keeping existing {relative}")
            return False
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return True

    def _commit(self, paths: Sequence[str], message: str) -> bool:
        if not self.git.add(paths):
            return False
        return self.git.commit(message)


def create_analytics_project(
    path: str | Path,
    use_dvc: bool = True,
    use_docker: bool = True,
    use_venv: bool = True,
    git_init: bool = True,
    *,
    config: ThothConfig | None = None,
    runner: CommandRunner | None = None,
    toolchain: Toolchain | None = None,
) -> Path:
    """Create a new analytics project at ``path`` and return its resolved root."""
    scaffolder = ProjectScaffolder(path, config, runner, toolchain)
    return scaffolder.create(use_dvc, use_docker, use_venv, git_init)


__all__ = [
    "DockerClient",
    "ProjectScaffolder",
    "PythonClient",
    "VENV_DIRECTORY",
    "create_analytics_project",
]
