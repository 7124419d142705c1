"""Decision log: record analysis judgement calls and export them as methods text."""

from __future__ import annotations

from pathlib import Path

from thoth.config.settings import ThothConfig, load_config
from thoth.enums import ExportFormat, MethodsFormat

from .log import TREE_FILE_SUFFIX, DecisionLog, decision_id, render_methods
from .models import DecisionRecord, DecisionTree
from .render import QuartoClient


def _log(config: ThothConfig | None) -> DecisionLog:
    return DecisionLog(config or load_config())


def initialize_decision_tree(
    analysis_id: str,
    analyst: str,
    description: str,
    path: str | Path = "decisions",
    *,
    config: ThothConfig | None = None,
) -> Path:
    return _log(config).initialize(analysis_id, analyst, description, path)


def record_decision(
    file_path: str | Path,
    check: str,
    observation: str,
    decision: str,
    reasoning: str,
    evidence: str | None = None,
    *,
    config: ThothConfig | None = None,
) -> DecisionTree:
    return _log(config).record(
        file_path, check, observation, decision, reasoning, evidence
    )


def load_decision_tree(
    file_path: str | Path, *, config: ThothConfig | None = None
) -> DecisionTree:
    return _log(config).load(file_path)


def generate_methods_section(
    file_path: str | Path,
    format: str | MethodsFormat = "markdown",
    *,
    config: ThothConfig | None = None,
) -> str:
    return _log(config).methods_section(file_path, format)


def export_decision_tree(
    file_path: str | Path,
    format: str | ExportFormat = "md",
    output_path: str | Path | None = None,
    *,
    config: ThothConfig | None = None,
) -> Path | None:
    return _log(config).export(file_path, format, output_path)


__all__ = [
    "TREE_FILE_SUFFIX",
    "DecisionLog",
    "DecisionRecord",
    "DecisionTree",
    "QuartoClient",
    "decision_id",
    "export_decision_tree",
    "generate_methods_section",
    "initialize_decision_tree",
    "load_decision_tree",
    "record_decision",
    "render_methods",
]
