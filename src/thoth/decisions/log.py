"""Append-only YAML log of the judgement calls made during an analysis.

Each analysis keeps one file, ``<analysis_id>_decision_tree.yaml``. Every
write reads the whole file, appends and writes it back without locking, so
two processes recording at the same time can lose one of the updates.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
import hashlib
import logging
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError
import yaml

from thoth.config.settings import ThothConfig
from thoth.decisions.models import DecisionRecord, DecisionTree
from thoth.decisions.render import QuartoClient
from thoth.enums import ExportFormat, MethodsFormat
from thoth.errors import ValidationError
from thoth.process.availability import Toolchain
from thoth.process.runner import CommandRunner

TREE_FILE_SUFFIX = "_decision_tree.yaml"

logger = logging.getLogger(__name__)


def _timestamp(moment: datetime) -> str:
    return moment.isoformat(sep=" ")


def decision_id(check: str, timestamp: str) -> str:
    """SHA-1 of the check text followed by the timestamp."""
    return hashlib.sha1(f"{check}{timestamp}".encode(), usedforsecurity=False).hexdigest()


def _parse_choice(enum_type, raw, label):
    try:
        return raw if isinstance(raw, enum_type) else enum_type(str(raw).lower())
    except ValueError as exc:
        choices = ", ".join(f"'{member.value}'" for member in enum_type)
        raise ValidationError(
            f"Unsupported {label} '{raw}'. Use {choices}."
        ) from exc


def render_methods(tree: DecisionTree, format: str | MethodsFormat = "markdown") -> str:
    fmt = _parse_choice(MethodsFormat, format, "methods format")
    parts = [
        f"## Analysis Methods for {tree.analysis_id}\n\n",
        f"### Overview\n{tree.description}\n\n",
        "### Key Decisions and Quality Control Steps\n\n",
    ]
    for record in tree.decisions:
        parts.append(
            f"* {record.check}:\n"
            f"  - Observation: {record.observation}\n"
            f"  - Decision: {record.decision}\n"
            f"  - Reasoning: {record.reasoning}\n"
        )
        if record.evidence is not None:
            parts.append(f"  - Evidence: {record.evidence}\n")
        parts.append("\n")
    methods = "".join(parts)
    if fmt is MethodsFormat.TEXT:
        methods = methods.replace("#", "")
    return methods


class DecisionLog:
    """Reads and writes decision tree files below the project root."""

    def __init__(
        self,
        config: ThothConfig | None = None,
        runner: CommandRunner | None = None,
        toolchain: Toolchain | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config or ThothConfig()
        self.renderer = QuartoClient(self.config, runner, toolchain)
        self.clock = clock

    def resolve(self, path: str | Path) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self.config.project_root / candidate

    def initialize(
        self,
        analysis_id: str,
        analyst: str,
        description: str,
        path: str | Path | None = None,
    ) -> Path:
        """Create a fresh, empty decision tree and return its file path."""
        if not analysis_id or not str(analysis_id).strip():
            raise ValidationError("analysis_id must be a non-empty string")
        if "/" in analysis_id or "\\" in analysis_id:
            raise ValidationError("analysis_id must not contain path separators")
        directory = self.resolve(path if path is not None else self.config.decisions_dir)
        directory.mkdir(parents=True, exist_ok=True)
        tree = self._build(
            DecisionTree,
            analysis_id=analysis_id,
            analyst=analyst,
            description=description,
            date_created=_timestamp(self.clock()),
        )
        file_path = directory / f"{analysis_id}{TREE_FILE_SUFFIX}"
        self.save(tree, file_path)
        logger.info(f"Decision tree initialized at {file_path}")
        return file_path

    def load(self, file_path: str | Path) -> DecisionTree:
        source = self.resolve(file_path)
        if not source.is_file():
            raise ValidationError(f"Decision tree file not found: {source}")
        try:
            payload = yaml.safe_load(source.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ValidationError(f"Failed to parse {source}: {exc}") from exc
        if not isinstance(payload, dict):
            raise ValidationError(f"{source} does not contain a decision tree")
        return self._build(DecisionTree, **payload)

    def save(self, tree: DecisionTree, file_path: str | Path) -> Path:
        target = self.resolve(file_path)
        target.write_text(
            yaml.safe_dump(
                tree.to_document(),
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            ),
            encoding="utf-8",
        )
        return target

    def record(
        self,
        file_path: str | Path,
        check: str,
        observation: str,
        decision: str,
        reasoning: str,
        evidence: str | None = None,
    ) -> DecisionTree:
        """Append one decision and rewrite the file; returns the updated tree."""
        tree = self.load(file_path)
        stamp = _timestamp(self.clock())
        tree.decisions.append(
            self._build(
                DecisionRecord,
                id=decision_id(check, stamp),
                timestamp=stamp,
                check=check,
                observation=observation,
                decision=decision,
                reasoning=reasoning,
                evidence=None if evidence is None else str(evidence),
            )
        )
        self.save(tree, file_path)
        logger.info("Decision recorded successfully")
        return tree

    def methods_section(
        self, file_path: str | Path, format: str | MethodsFormat = "markdown"
    ) -> str:
        return render_methods(self.load(file_path), format)

    def export(
        self,
        file_path: str | Path,
        format: str | ExportFormat = "md",
        output_path: str | Path | None = None,
    ) -> Path | None:
        """Write the methods section as markdown, or render it to HTML or PDF.

        Returns the output path, or None when rendering failed and the failure
        policy downgraded the error to a warning.
        """
        fmt = _parse_choice(ExportFormat, format, "export format")
        source = self.resolve(file_path)
        methods = self.methods_section(source, MethodsFormat.MARKDOWN)
        target = (
            self.resolve(output_path)
            if output_path is not None
            else source.with_suffix(f".{fmt.value}")
        ).resolve()
        target.parent.mkdir(parents=True, exist_ok=True)
        if fmt.needs_renderer:
            if not self.renderer.render_document(methods, fmt, target):
                return None
        else:
            target.write_text(methods, encoding="utf-8")
        logger.info(f"Decision tree exported to {target}")
        return target

    @staticmethod
    def _build(model, **values):
        try:
            return model(**values)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid {model.__name__}: {exc}") from exc


__all__ = ["TREE_FILE_SUFFIX", "DecisionLog", "decision_id", "render_methods"]
