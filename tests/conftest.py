from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
import logging
from pathlib import Path

import pytest

from thoth.config.settings import ThothConfig
from thoth.enums import OnToolFailure
from thoth.process.runner import CommandResult, CommandRunner
from thoth.tracking.orchestrator import TrackingOrchestrator
from thoth.utilities.logger_manager import LoggerConfig, LoggerManager

ALL_TOOLS = frozenset({"git", "dvc", "docker", "quarto", "python3"})

Effect = Callable[[tuple[str, ...], Path | None], None]


@dataclass
class Call:
    tool: str
    args: tuple[str, ...]
    cwd: Path | None

    @property
    def subcommand(self) -> str:
        return self.args[0] if self.args else ""


@dataclass
class Scripted:
    exit_status: int = 0
    stdout: tuple[str, ...] = ()
    stderr: tuple[str, ...] = ()
    missing: bool = False
    effect: Effect | None = None


class FakeRunner(CommandRunner):
    """Records every invocation and answers from a script keyed by tool and subcommand."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[Call] = []
        self.responses: dict[tuple[str, str], Scripted] = {}

    def script(
        self,
        tool: str,
        subcommand: str,
        exit_status: int = 0,
        stdout: Iterable[str] = (),
        stderr: Iterable[str] = (),
        missing: bool = False,
        effect: Effect | None = None,
    ) -> None:
        self.responses[(tool, subcommand)] = Scripted(
            exit_status, tuple(stdout), tuple(stderr), missing, effect
        )

    def run(
        self,
        executable: str,
        args: Sequence[str] = (),
        cwd: str | Path | None = None,
    ) -> CommandResult:
        argv = tuple(str(arg) for arg in args)
        call = Call(Path(executable).name, argv, Path(cwd) if cwd else None)
        self.calls.append(call)
        scripted = self.responses.get((call.tool, call.subcommand), Scripted())
        if scripted.effect is not None:
            scripted.effect(argv, call.cwd)
        return CommandResult(
            executable=str(executable),
            args=argv,
            exit_status=scripted.exit_status,
            stdout_lines=scripted.stdout,
            stderr_lines=scripted.stderr,
            missing=scripted.missing,
        )

    def commands(self, tool: str | None = None) -> list[tuple[str, ...]]:
        return [
            (call.tool, *call.args)
            for call in self.calls
            if tool is None or call.tool == tool
        ]


@pytest.fixture
def available_tools(monkeypatch: pytest.MonkeyPatch) -> set[str]:
    """Tools visible on PATH; remove names from the set to simulate absence."""
    present = set(ALL_TOOLS)
    monkeypatch.setattr(
        "thoth.process.availability.shutil.which",
        lambda name: f"/usr/bin/{name}" if name in present else None,
    )
    return present


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def config(project: Path) -> ThothConfig:
    return ThothConfig(project_root=project)


@pytest.fixture
def abort_config(project: Path) -> ThothConfig:
    return ThothConfig(project_root=project, on_tool_failure=OnToolFailure.ABORT)


@pytest.fixture
def orchestrator(
    config: ThothConfig, fake_runner: FakeRunner, available_tools: set[str]
) -> TrackingOrchestrator:
    return TrackingOrchestrator(config, runner=fake_runner)


@pytest.fixture
def write_file(project: Path) -> Callable[..., Path]:
    def _write(relative: str, content: str = "a,b\n1,2\n") -> Path:
        target = project / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    return _write


@pytest.fixture
def logger_manager(tmp_path: Path) -> Iterator[LoggerManager]:
    manager = LoggerManager(LoggerConfig(log_dir=tmp_path / "logs"))
    yield manager
    manager.close()


@pytest.fixture(autouse=True)
def propagate_thoth_logs() -> Iterator[None]:
    # caplog listens on the root logger; the CLI may have switched propagation off.
    thoth_logger = logging.getLogger("thoth")
    previous = thoth_logger.propagate
    thoth_logger.propagate = True
    yield
    thoth_logger.propagate = previous
