from __future__ import annotations

import pytest

from thoth.config.settings import ThothConfig
from thoth.enums import Tool
from thoth.errors import ToolMissingError
from thoth.process.availability import Toolchain, extract_version


def test_extract_version_takes_first_semver() -> None:
    version = extract_version(["DVC version: 3.48.2 (pip)", "Platform: 1.2.3"])
    assert str(version) == "3.48.2"
    assert extract_version(["no version here"]) is None


def test_absent_tool_is_unavailable_without_spawning(available_tools, fake_runner) -> None:
    available_tools.discard("dvc")
    toolchain = Toolchain(ThothConfig(), fake_runner)
    assert not toolchain.is_available(Tool.DVC, min_version="1.0.0")
    assert fake_runner.calls == []


def test_lookup_is_cached_per_instance(monkeypatch: pytest.MonkeyPatch) -> None:
    lookups: list[str] = []

    def which(name: str) -> str:
        lookups.append(name)
        return f"/opt/bin/{name}"

    monkeypatch.setattr("thoth.process.availability.shutil.which", which)
    toolchain = Toolchain(ThothConfig())
    assert toolchain.executable("git") == "/opt/bin/git"
    assert toolchain.is_available(Tool.GIT)
    assert lookups == ["git"]


def test_configured_executable_name_is_used(available_tools, fake_runner) -> None:
    available_tools.add("dvc-3")
    config = ThothConfig(tools={"dvc": "dvc-3"})
    assert Toolchain(config, fake_runner).executable(Tool.DVC) == "/usr/bin/dvc-3"


@pytest.mark.parametrize(
    ("output", "exit_status", "expected"),
    [
        (["git version 2.43.0"], 0, True),
        (["git version 2.19.1"], 0, False),
        (["git version unknown"], 0, False),
        (["git version 2.43.0"], 1, False),
    ],
)
def test_min_version_check_fails_safe(
    available_tools, fake_runner, output: list[str], exit_status: int, expected: bool
) -> None:
    fake_runner.script("git", "--version", exit_status=exit_status, stdout=output)
    toolchain = Toolchain(ThothConfig(), fake_runner)
    assert toolchain.is_available(Tool.GIT, min_version="2.20.0") is expected


def test_configured_min_version_applies(available_tools, fake_runner) -> None:
    fake_runner.script("dvc", "--version", stdout=["2.0.0"])
    toolchain = Toolchain(ThothConfig(min_versions={"dvc": "3.0.0"}), fake_runner)
    assert not toolchain.is_available(Tool.DVC)


def test_require_raises_tool_missing(available_tools, fake_runner) -> None:
    available_tools.discard("quarto")
    toolchain = Toolchain(ThothConfig(), fake_runner)
    with pytest.raises(ToolMissingError) as excinfo:
        toolchain.require(Tool.QUARTO)
    assert excinfo.value.tool == "quarto"
    assert toolchain.require(Tool.GIT) == "/usr/bin/git"
