from __future__ import annotations

import os
from pathlib import Path

import pytest

from thoth.config.env import environment_overrides, load_environment
from thoth.config.settings import LoggingSettings, ThothConfig, load_config
from thoth.enums import OnToolFailure, Tool
from thoth.errors import ValidationError


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_config(project_root=tmp_path, environ={})
    assert config.project_root == tmp_path.resolve()
    assert config.on_tool_failure is OnToolFailure.WARN
    assert config.executable_for(Tool.PYTHON) == "python3"
    assert config.decisions_dir == "decisions"
    assert isinstance(config.logging, LoggingSettings)


def test_yaml_file_is_merged_with_defaults(tmp_path: Path) -> None:
    (tmp_path / "thoth.yml").write_text(
        "on_tool_failure: abort\n"
        "tools:\n  dvc: /opt/dvc/bin/dvc\n"
        "min_versions:\n  git: 2.30.0\n"
        "logging:\n  log_level: debug\n",
        encoding="utf-8",
    )
    config = load_config(project_root=tmp_path, environ={})
    assert config.abort_on_tool_failure
    assert config.executable_for("dvc") == "/opt/dvc/bin/dvc"
    assert config.executable_for("git") == "git"
    assert config.min_version_for(Tool.GIT) == "2.30.0"
    assert config.logging.log_level == "DEBUG"


def test_environment_overrides_file(tmp_path: Path) -> None:
    (tmp_path / "thoth.yml").write_text("on_tool_failure: abort\n", encoding="utf-8")
    config = load_config(
        project_root=tmp_path,
        environ={"THOTH_ON_TOOL_FAILURE": "warn", "THOTH_DVC": "dvc3", "THOTH_GIT_REMOTE": "up"},
    )
    assert config.on_tool_failure is OnToolFailure.WARN
    assert config.tools["dvc"] == "dvc3"
    assert config.git_remote == "up"


def test_explicit_overrides_win_and_none_is_ignored(tmp_path: Path) -> None:
    config = load_config(
        project_root=tmp_path,
        environ={"THOTH_LOG_LEVEL": "warning"},
        overrides={"logging.log_level": None, "on_tool_failure": "abort"},
    )
    assert config.logging.log_level == "WARNING"
    assert config.on_tool_failure is OnToolFailure.ABORT


def test_relative_project_root_resolves_against_config_file(tmp_path: Path) -> None:
    config_file = tmp_path / "conf" / "thoth.yml"
    config_file.parent.mkdir()
    config_file.write_text("project_root: ../work\n", encoding="utf-8")
    config = ThothConfig.load(config_file, environ={})
    assert config.project_root.resolve() == (tmp_path / "work").resolve()


@pytest.mark.parametrize(
    "content",
    [
        "unknown_key: 1\n",
        "- a\n- b\n",
        "on_tool_failure: explode\n",
        "tools: git\n",
        "key: [unclosed\n",
    ],
)
def test_malformed_configuration_is_rejected(tmp_path: Path, content: str) -> None:
    (tmp_path / "thoth.yml").write_text(content, encoding="utf-8")
    with pytest.raises(ValidationError):
        load_config(project_root=tmp_path, environ={})


def test_environment_overrides_skip_empty_values() -> None:
    assert environment_overrides({"THOTH_GIT": "", "THOTH_QUARTO": "q"}) == {
        "tools.quarto": "q"
    }


def test_load_environment_reads_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("THOTH_GIT_BRANCH", raising=False)
    dotenv = tmp_path / ".env"
    dotenv.write_text("THOTH_GIT_BRANCH=release\n", encoding="utf-8")
    try:
        load_environment(dotenv)
        assert environment_overrides()["git_branch"] == "release"
    finally:
        os.environ.pop("THOTH_GIT_BRANCH", None)
