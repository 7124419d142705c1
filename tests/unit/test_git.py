from __future__ import annotations

from pathlib import Path

import pytest

from thoth.config.settings import ThothConfig
from thoth.enums import OnToolFailure
from thoth.errors import ExternalCommandError, ToolMissingError
from thoth.vcs.git import GitClient


@pytest.fixture
def git(config: ThothConfig, fake_runner, available_tools) -> GitClient:
    return GitClient(config, fake_runner)


def test_add_commit_push_argument_vectors(git: GitClient, fake_runner) -> None:
    assert git.add(["a.csv", "b.csv"], force=True) == ["a.csv", "b.csv"]
    assert git.commit("Initial commit", all=True)
    assert git.push(branch="main")
    assert fake_runner.commands() == [
        ("git", "add", "-f", "a.csv", "b.csv"),
        ("git", "commit", "-a", "-m", "Initial commit"),
        ("git", "push", "origin", "main"),
    ]


def test_push_uses_configured_defaults(project: Path, fake_runner, available_tools) -> None:
    config = ThothConfig(project_root=project, git_remote="upstream", git_branch="dev")
    assert GitClient(config, fake_runner).push()
    assert fake_runner.commands() == [("git", "push", "upstream", "dev")]


def test_empty_add_runs_nothing(git: GitClient, fake_runner) -> None:
    assert git.add([]) == []
    assert fake_runner.calls == []


def test_status_lines(git: GitClient, fake_runner) -> None:
    fake_runner.script("git", "status", stdout=[" M data.csv", "?? new.txt"])
    assert git.status() == [" M data.csv", "?? new.txt"]
    assert fake_runner.commands()[-1] == ("git", "status", "--short")


def test_branch_list_strips_markers(git: GitClient, fake_runner) -> None:
    fake_runner.script("git", "branch", stdout=["  feature", "* main", ""])
    assert git.branch_list() == ["feature", "main"]


def test_branch_creates_and_checks_out(git: GitClient, fake_runner) -> None:
    assert git.branch("feature")
    assert git.checkout("hotfix", create=True)
    assert fake_runner.commands() == [
        ("git", "branch", "feature"),
        ("git", "checkout", "feature"),
        ("git", "checkout", "-b", "hotfix"),
    ]


def test_log_outside_repository_warns(git: GitClient, fake_runner, caplog) -> None:
    with caplog.at_level("WARNING", logger="thoth"):
        assert git.log() is None
    assert "Not a Git repository" in caplog.text
    assert fake_runner.calls == []


def test_log_inside_repository(git: GitClient, fake_runner, project: Path) -> None:
    (project / ".git").mkdir()
    fake_runner.script("git", "log", stdout=["abc123 first"])
    assert git.log(n=5) == ["abc123 first"]
    assert fake_runner.commands() == [("git", "log", "--oneline", "-n", "5")]


def test_rm_cached(git: GitClient, fake_runner) -> None:
    assert git.rm_cached("data/raw.csv")
    assert fake_runner.commands() == [("git", "rm", "--cached", "data/raw.csv")]


def test_failure_warns_and_returns_falsy(git: GitClient, fake_runner, caplog) -> None:
    fake_runner.script("git", "commit", exit_status=1, stdout=["nothing to commit"])
    with caplog.at_level("WARNING", logger="thoth"):
        assert git.commit("msg") is False
    assert "Failed to commit changes to Git" in caplog.text
    assert "nothing to commit" in caplog.text


def test_failure_aborts_under_abort_policy(abort_config, fake_runner, available_tools) -> None:
    fake_runner.script("git", "pull", exit_status=128, stderr=["fatal: no remote"])
    git = GitClient(abort_config, fake_runner)
    with pytest.raises(ExternalCommandError) as excinfo:
        git.pull()
    assert excinfo.value.result.exit_status == 128


def test_missing_git_aborts_under_abort_policy(
    project: Path, fake_runner, available_tools
) -> None:
    available_tools.discard("git")
    config = ThothConfig(project_root=project, on_tool_failure=OnToolFailure.ABORT)
    with pytest.raises(ToolMissingError, match="git-scm.com"):
        GitClient(config, fake_runner).init()
