"""Command-line driver for thoth."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import shlex
import sys

from thoth.config.env import load_environment
from thoth.config.settings import ThothConfig, load_config
from thoth.decisions.log import DecisionLog
from thoth.enums import ExportFormat, MethodsFormat, OnToolFailure
from thoth.errors import ThothError, ValidationError
from thoth.process.arguments import parse_param_assignment
from thoth.scaffold.project import create_analytics_project
from thoth.scaffold.quarto import (
    DEFAULT_TEMPLATES_DIR,
    apply_template_to_report,
    create_quarto_template,
)
from thoth.tracking.models import PipelineStageSpec
from thoth.tracking.orchestrator import TrackingOrchestrator
from thoth.utilities.logger_manager import configure_logging
from thoth.utilities.version import get_runtime_version

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_VALIDATION = 2

logger = logging.getLogger("thoth.cli")


def _add_track_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--message", "-m", default=None, help="Git commit message.")
    parser.add_argument("--push", action="store_true", help="Push after committing.")
    parser.add_argument("--remote", default=None, help="Git remote to push to.")
    parser.add_argument("--branch", default=None, help="Git branch to push.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="thoth",
        description="Scaffold and track reproducible analytics projects.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=get_runtime_version(),
        help="Show the runtime version and exit.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to the configuration file (YAML). Defaults to ./thoth.yml.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Console log level.",
    )
    parser.add_argument(
        "--on-tool-failure",
        default=None,
        choices=[member.value for member in OnToolFailure],
        help="Warn and continue, or abort, when git/dvc/quarto fail.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Create a new analytics project.")
    init_parser.add_argument("path", help="Directory of the new project.")
    init_parser.add_argument("--no-dvc", dest="use_dvc", action="store_false")
    init_parser.add_argument("--no-docker", dest="use_docker", action="store_false")
    init_parser.add_argument("--no-venv", dest="use_venv", action="store_false")
    init_parser.add_argument("--no-git", dest="git_init", action="store_false")

    track_parser = subparsers.add_parser("track", help="Track one file with DVC.")
    track_parser.add_argument("path", help="File to track.")
    _add_track_options(track_parser)

    stage_parser = subparsers.add_parser("stage", help="DVC pipeline stages.")
    stage_commands = stage_parser.add_subparsers(dest="stage_command", required=True)
    stage_add = stage_commands.add_parser("add", help="Register a pipeline stage.")
    stage_add.add_argument("--name", "-n", required=True, help="Stage name.")
    stage_add.add_argument("--dep", "-d", action="append", default=[], dest="deps")
    stage_add.add_argument("--out", "-o", action="append", default=[], dest="outs")
    stage_add.add_argument("--metric", "-M", action="append", default=[], dest="metrics")
    stage_add.add_argument("--plot", action="append", default=[], dest="plots")
    stage_add.add_argument(
        "--param", "-p", action="append", default=[], dest="params", metavar="KEY=VALUE"
    )
    stage_add.add_argument("--always-changed", action="store_true")
    _add_track_options(stage_add)
    stage_add.add_argument("cmd", nargs="+", help="Command the stage runs.")

    decision_parser = subparsers.add_parser("decision", help="Analysis decision log.")
    decision_commands = decision_parser.add_subparsers(
        dest="decision_command", required=True
    )
    decision_init = decision_commands.add_parser("init", help="Start a decision tree.")
    decision_init.add_argument("analysis_id")
    decision_init.add_argument("--analyst", required=True)
    decision_init.add_argument("--description", required=True)
    decision_init.add_argument("--dir", dest="directory", default=None)
    decision_record = decision_commands.add_parser("record", help="Record a decision.")
    decision_record.add_argument("file")
    decision_record.add_argument("--check", required=True)
    decision_record.add_argument("--observation", required=True)
    decision_record.add_argument("--decision", required=True)
    decision_record.add_argument("--reasoning", required=True)
    decision_record.add_argument("--evidence", default=None)
    decision_methods = decision_commands.add_parser(
        "methods", help="Print the methods section."
    )
    decision_methods.add_argument("file")
    decision_methods.add_argument(
        "--format",
        default=MethodsFormat.MARKDOWN.value,
        choices=[member.value for member in MethodsFormat],
    )
    decision_export = decision_commands.add_parser("export", help="Export the log.")
    decision_export.add_argument("file")
    decision_export.add_argument(
        "--format",
        default=ExportFormat.MD.value,
        choices=[member.value for member in ExportFormat],
    )
    decision_export.add_argument("--output", default=None)

    template_parser = subparsers.add_parser("template", help="Quarto report templates.")
    template_commands = template_parser.add_subparsers(
        dest="template_command", required=True
    )
    template_create = template_commands.add_parser("create", help="Create a template.")
    template_create.add_argument("name")
    template_create.add_argument("--logo", default=None)
    template_create.add_argument("--primary-color", default=None)
    template_create.add_argument("--secondary-color", default=None)
    template_create.add_argument("--font-family", default=None)
    template_create.add_argument("--output-dir", default=DEFAULT_TEMPLATES_DIR)
    template_apply = template_commands.add_parser("apply", help="Apply a template.")
    template_apply.add_argument("report")
    template_apply.add_argument("name")
    template_apply.add_argument("--templates-dir", default=DEFAULT_TEMPLATES_DIR)
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def _stage_command(parts: list[str]) -> str:
    # A single argument is already a complete command line.
    return parts[0] if len(parts) == 1 else shlex.join(parts)


def run_command(args: argparse.Namespace, config: ThothConfig) -> int:
    if args.command == "init":
        root = create_analytics_project(
            args.path,
            use_dvc=args.use_dvc,
            use_docker=args.use_docker,
            use_venv=args.use_venv,
            git_init=args.git_init,
            config=config,
        )
        print(root)
        return EXIT_OK

    if args.command == "track":
        report = TrackingOrchestrator(config).track_with_report(
            args.path, args.message, args.push, args.remote, args.branch
        )
        print(report.state.value)
        return EXIT_OK

    if args.command == "stage":
        params = dict(parse_param_assignment(item) for item in args.params)
        spec = PipelineStageSpec.from_flags(
            name=args.name,
            cmd=_stage_command(args.cmd),
            deps=args.deps,
            outs=args.outs,
            metrics=args.metrics,
            plots=args.plots,
            params=params,
            always_changed=args.always_changed,
        )
        report = TrackingOrchestrator(config).stage(
            spec, args.message, args.push, args.remote, args.branch
        )
        print(report.state.value)
        return EXIT_OK

    if args.command == "decision":
        log = DecisionLog(config)
        if args.decision_command == "init":
            print(log.initialize(args.analysis_id, args.analyst, args.description, args.directory))
        elif args.decision_command == "record":
            tree = log.record(
                args.file,
                args.check,
                args.observation,
                args.decision,
                args.reasoning,
                args.evidence,
            )
            print(tree.decisions[-1].id)
        elif args.decision_command == "methods":
            print(log.methods_section(args.file, args.format), end="")
        else:
            exported = log.export(args.file, args.format, args.output)
            if exported is None:
                return EXIT_FAILURE
            print(exported)
        return EXIT_OK

    if args.template_command == "create":
        print(
            create_quarto_template(
                args.name,
                logo_path=args.logo,
                primary_color=args.primary_color,
                secondary_color=args.secondary_color,
                font_family=args.font_family,
                output_dir=args.output_dir,
            )
        )
    else:
        print(apply_template_to_report(args.report, args.name, args.templates_dir))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point for thoth; returns the process exit status."""
    args = parse_args(argv)
    load_environment()
    try:
        config = load_config(
            Path(args.config) if args.config else None,
            overrides={
                "on_tool_failure": args.on_tool_failure,
                "logging.log_level": args.log_level,
            },
        )
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return EXIT_VALIDATION

    logger_manager = configure_logging(config.logging)
    logger.debug(
        "thoth command starting",
        extra={"context": {"command": args.command, "root": str(config.project_root)}},
    )
    try:
        return run_command(args, config)
    except ValidationError as exc:
        logger.error(str(exc))
        return EXIT_VALIDATION
    except ThothError as exc:
        logger.error(str(exc))
        return EXIT_FAILURE
    finally:
        logger_manager.close()


if __name__ == "__main__":
    sys.exit(main())
