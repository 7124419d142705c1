from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from thoth.main import (
    EXIT_FAILURE,
    EXIT_OK,
    EXIT_VALIDATION,
    _stage_command,
    main,
    parse_args,
)

UNSPAWNABLE_DVC = "/nonexistent/thoth-dvc"


@pytest.fixture
def cli_project(project: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(project)
    for name in ("THOTH_ON_TOOL_FAILURE", "THOTH_DVC", "THOTH_GIT", "THOTH_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return project


def test_parse_stage_add() -> None:
    args = parse_args(
        [
            "stage",
            "add",
            "-n",
            "train",
            "-d",
            "data.csv",
            "-o",
            "model.pkl",
            "-M",
            "metrics.json",
            "-p",
            "lr=0.1",
            "--always-changed",
            "python",
            "train.py",
        ]
    )
    assert args.command == "stage"
    assert args.name == "train"
    assert args.deps == ["data.csv"]
    assert args.outs == ["model.pkl"]
    assert args.metrics == ["metrics.json"]
    assert args.params == ["lr=0.1"]
    assert args.always_changed
    assert _stage_command(args.cmd) == "python train.py"


def test_parse_global_options() -> None:
    args = parse_args(["--log-level", "debug", "--on-tool-failure", "abort", "track", "x.csv"])
    assert args.log_level == "DEBUG"
    assert args.on_tool_failure == "abort"
    assert args.message is None
    assert not args.push


def test_parse_init_flags() -> None:
    args = parse_args(["init", "demo", "--no-docker", "--no-venv"])
    assert (args.use_dvc, args.use_docker, args.use_venv, args.git_init) == (
        True,
        False,
        False,
        True,
    )


def test_stage_command_keeps_a_single_argument_verbatim() -> None:
    assert _stage_command(["python train.py --fast"]) == "python train.py --fast"
    assert _stage_command(["echo", "a b"]) == "echo 'a b'"


def test_version_flag_exits_cleanly(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip()


def test_track_without_dvc_prints_state(
    cli_project: Path, available_tools, capsys: pytest.CaptureFixture[str]
) -> None:
    available_tools.discard("dvc")
    (cli_project / "data.csv").write_text("a\n1\n", encoding="utf-8")

    assert main(["track", "data.csv"]) == EXIT_OK
    assert capsys.readouterr().out.strip() == "tracked"
    assert (cli_project / "data.csv.dvc").is_file()


def test_track_missing_file_exits_with_validation_status(
    cli_project: Path, available_tools
) -> None:
    assert main(["track", "missing.csv"]) == EXIT_VALIDATION


def test_stage_without_dvc_is_mocked(
    cli_project: Path, available_tools, capsys: pytest.CaptureFixture[str]
) -> None:
    available_tools.discard("dvc")
    (cli_project / "model.pkl").write_bytes(b"weights")

    status = main(["stage", "add", "-n", "fit", "-o", "model.pkl", "-p", "lr=0.1", "python fit.py"])

    assert status == EXIT_OK
    assert capsys.readouterr().out.strip() == "tracked"
    assert (cli_project / "model.pkl.dvc").is_file()


@pytest.mark.parametrize(
    ("policy", "expected_status", "expected_out"),
    [("warn", EXIT_OK, "failed"), ("abort", EXIT_FAILURE, "")],
)
def test_on_tool_failure_option(
    cli_project: Path,
    available_tools,
    capsys: pytest.CaptureFixture[str],
    policy: str,
    expected_status: int,
    expected_out: str,
) -> None:
    (cli_project / "thoth.yml").write_text(
        yaml.safe_dump({"tools": {"dvc": UNSPAWNABLE_DVC}}), encoding="utf-8"
    )
    available_tools.add(UNSPAWNABLE_DVC)
    (cli_project / "data.csv").write_text("a\n1\n", encoding="utf-8")

    assert main(["--on-tool-failure", policy, "track", "data.csv"]) == expected_status
    assert capsys.readouterr().out.strip() == expected_out


def test_invalid_config_file(
    cli_project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (cli_project / "thoth.yml").write_text("colour: blue\n", encoding="utf-8")
    assert main(["track", "data.csv"]) == EXIT_VALIDATION
    assert "Invalid configuration" in capsys.readouterr().err


def test_decision_workflow(
    cli_project: Path, available_tools, capsys: pytest.CaptureFixture[str]
) -> None:
    assert main(
        ["decision", "init", "survey", "--analyst", "Grace", "--description", "Panel study"]
    ) == EXIT_OK
    tree_file = Path(capsys.readouterr().out.strip())
    assert tree_file == (cli_project / "decisions" / "survey_decision_tree.yaml").resolve()

    assert main(
        [
            "decision",
            "record",
            str(tree_file),
            "--check",
            "Attrition",
            "--observation",
            "12% dropped out",
            "--decision",
            "Reweight",
            "--reasoning",
            "Keep the panel representative",
        ]
    ) == EXIT_OK
    capsys.readouterr()

    assert main(["decision", "methods", str(tree_file), "--format", "text"]) == EXIT_OK
    methods = capsys.readouterr().out
    assert "Attrition:" in methods
    assert "#" not in methods

    assert main(["decision", "export", str(tree_file)]) == EXIT_OK
    assert Path(capsys.readouterr().out.strip()) == tree_file.with_suffix(".md")


def test_decision_export_without_renderer_fails(
    cli_project: Path, available_tools, capsys: pytest.CaptureFixture[str]
) -> None:
    available_tools.discard("quarto")
    main(["decision", "init", "survey", "--analyst", "Grace", "--description", "d"])
    tree_file = capsys.readouterr().out.strip()
    assert main(["decision", "export", tree_file, "--format", "html"]) == EXIT_FAILURE


def test_template_create_and_apply(
    cli_project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    report = cli_project / "report.qmd"
    report.write_text('---\ntitle: "R"\n---\n\nBody\n', encoding="utf-8")

    assert main(["template", "create", "house", "--primary-color", "#112233"]) == EXIT_OK
    assert main(["template", "apply", str(report), "house"]) == EXIT_OK
    assert "custom.css" in report.read_text(encoding="utf-8")
