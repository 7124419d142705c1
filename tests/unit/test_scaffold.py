from __future__ import annotations

from pathlib import Path
import sys

import pytest

from thoth.config.settings import ThothConfig
from thoth.errors import ToolMissingError
from thoth.scaffold.project import ProjectScaffolder, create_analytics_project
from thoth.scaffold.templates import PROJECT_DIRECTORIES, dockerfile, gitignore


def _scaffold(tmp_path: Path, fake_runner, **flags) -> Path:
    return create_analytics_project(
        tmp_path / "analysis", config=ThothConfig(), runner=fake_runner, **flags
    )


def test_full_project_layout(tmp_path: Path, fake_runner, available_tools) -> None:
    root = _scaffold(tmp_path, fake_runner)

    assert root == (tmp_path / "analysis").resolve()
    for directory in PROJECT_DIRECTORIES:
        assert (root / directory).is_dir()
    for name in (
        ".gitignore",
        ".dvcignore",
        "data/raw/.gitkeep",
        "data/processed/.gitkeep",
        "docker/Dockerfile",
        "docker/docker-compose.yml",
        "requirements.txt",
        "README.md",
        "reports/template.qmd",
    ):
        assert (root / name).is_file(), name
    assert (root / "README.md").read_text(encoding="utf-8").startswith("# analysis\n")
    assert "!*.dvc" in (root / ".gitignore").read_text(encoding="utf-8")


def test_each_step_commits(tmp_path: Path, fake_runner, available_tools) -> None:
    _scaffold(tmp_path, fake_runner)

    commands = fake_runner.commands()
    assert commands[0] == ("git", "init")
    messages = [command[-1] for command in commands if command[:2] == ("git", "commit")]
    assert messages == [
        "Initial commit with project structure",
        "Initialize DVC",
        "Add Docker configuration",
        "Add Python environment requirements",
        "Add README",
        "Add Quarto template",
    ]
    assert ("dvc", "init", "--quiet") in commands
    assert ("python3", "-m", "venv", ".venv") in commands


def test_without_git_no_commits_and_dvc_runs_without_scm(
    tmp_path: Path, fake_runner, available_tools
) -> None:
    _scaffold(tmp_path, fake_runner, git_init=False, use_docker=False, use_venv=False)

    assert fake_runner.commands() == [("dvc", "init", "--quiet", "--no-scm")]


def test_rerun_keeps_edited_files(tmp_path: Path, fake_runner, available_tools) -> None:
    root = _scaffold(tmp_path, fake_runner, use_dvc=False, use_docker=False, use_venv=False)
    (root / "README.md").write_text("# Edited\n", encoding="utf-8")
    (root / ".git").mkdir()
    fake_runner.calls.clear()

    _scaffold(tmp_path, fake_runner, use_dvc=False, use_docker=False, use_venv=False)

    assert (root / "README.md").read_text(encoding="utf-8") == "# Edited\n"
    assert fake_runner.calls == []


@pytest.mark.parametrize(
    ("missing", "flags"),
    [
        ("dvc", {}),
        ("docker", {"use_dvc": False}),
        ("git", {"use_dvc": False, "use_docker": False}),
    ],
)
def test_missing_tool_aborts_before_writing(
    tmp_path: Path, fake_runner, available_tools, missing: str, flags: dict
) -> None:
    available_tools.discard(missing)
    with pytest.raises(ToolMissingError) as excinfo:
        _scaffold(tmp_path, fake_runner, **flags)
    assert excinfo.value.tool == missing
    assert not (tmp_path / "analysis").exists()
    assert fake_runner.calls == []


def test_unused_tools_are_not_required(tmp_path: Path, fake_runner, available_tools) -> None:
    available_tools.discard("dvc")
    available_tools.discard("docker")
    root = _scaffold(tmp_path, fake_runner, use_dvc=False, use_docker=False)
    assert not (root / ".dvcignore").exists()
    assert not (root / "docker" / "Dockerfile").exists()
    assert "!*.dvc" not in (root / ".gitignore").read_text(encoding="utf-8")


def test_dockerfile_tracks_running_python() -> None:
    expected = f"FROM python:{sys.version_info.major}.{sys.version_info.minor}-slim"
    assert dockerfile().splitlines()[0] == expected
    assert dockerfile("3.12").splitlines()[0] == "FROM python:3.12-slim"
    assert "pip install --no-cache-dir dvc" in dockerfile()


def test_gitignore_variants() -> None:
    assert "!.dvc/config" in gitignore(True)
    assert "!.dvc/config" not in gitignore(False)
    assert ".venv/" in gitignore(False)


def test_scaffolder_roots_config_at_project(tmp_path: Path, fake_runner) -> None:
    scaffolder = ProjectScaffolder(tmp_path / "p", ThothConfig(decisions_dir="notes"), fake_runner)
    assert scaffolder.root == (tmp_path / "p").resolve()
    assert scaffolder.config.decisions_dir == "notes"
