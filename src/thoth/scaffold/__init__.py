"""Project scaffolding and Quarto report templates."""

from __future__ import annotations

from .project import ProjectScaffolder, create_analytics_project
from .quarto import apply_template_to_report, create_quarto_template

__all__ = [
    "ProjectScaffolder",
    "apply_template_to_report",
    "create_analytics_project",
    "create_quarto_template",
]
