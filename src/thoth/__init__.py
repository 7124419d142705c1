"""thoth: reproducible analytics projects driven by git, dvc, docker and quarto.

The package never reimplements version control or data storage; it builds
argument vectors, runs the external tools and reports what happened.
"""

from __future__ import annotations

from thoth.config import ThothConfig, load_config
from thoth.decisions import (
    DecisionLog,
    DecisionRecord,
    DecisionTree,
    export_decision_tree,
    generate_methods_section,
    initialize_decision_tree,
    load_decision_tree,
    record_decision,
)
from thoth.enums import OnToolFailure, Tool, TrackingState, TrackingStep
from thoth.errors import (
    ExternalCommandError,
    PartialPipelineError,
    ThothError,
    ToolMissingError,
    ValidationError,
)
from thoth.process import CommandResult, CommandRunner, StageOutput, Toolchain
from thoth.scaffold import (
    apply_template_to_report,
    create_analytics_project,
    create_quarto_template,
)
from thoth.tracking import (
    PipelineStageSpec,
    TrackingOrchestrator,
    TrackingReport,
    dvc_stage,
    dvc_track,
    write_csv_dvc,
    write_pickle_dvc,
)
from thoth.vcs import DvcClient, GitClient

__all__ = [
    "CommandResult",
    "CommandRunner",
    "DecisionLog",
    "DecisionRecord",
    "DecisionTree",
    "DvcClient",
    "ExternalCommandError",
    "GitClient",
    "OnToolFailure",
    "PartialPipelineError",
    "PipelineStageSpec",
    "StageOutput",
    "ThothConfig",
    "ThothError",
    "Tool",
    "ToolMissingError",
    "Toolchain",
    "TrackingOrchestrator",
    "TrackingReport",
    "TrackingState",
    "TrackingStep",
    "ValidationError",
    "apply_template_to_report",
    "create_analytics_project",
    "create_quarto_template",
    "dvc_stage",
    "dvc_track",
    "export_decision_tree",
    "generate_methods_section",
    "initialize_decision_tree",
    "load_config",
    "load_decision_tree",
    "record_decision",
    "write_csv_dvc",
    "write_pickle_dvc",
]
