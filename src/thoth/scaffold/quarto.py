"""Branded Quarto report templates and applying them to existing reports."""

from __future__ import annotations

import logging
from pathlib import Path
import shutil

import yaml

from thoth.errors import ValidationError

TEMPLATE_FILE = "_template.yml"
CSS_FILE = "custom.css"
DEFAULT_TEMPLATES_DIR = "reports/templates"
FRONT_MATTER_FENCE = "---"

logger = logging.getLogger(__name__)


def custom_css(
    primary_color: str | None = None,
    secondary_color: str | None = None,
    font_family: str | None = None,
) -> str:
    blocks = ["/* Custom styles for Quarto template */"]
    if primary_color:
        blocks.append(
            f":root {{ --primary-color: {primary_color}; }}\n\n"
            ".navbar {\n  background-color: var(--primary-color);\n}\n\n"
            ".title {\n  color: var(--primary-color);\n}"
        )
    if secondary_color:
        blocks.append(
            f":root {{ --secondary-color: {secondary_color}; }}\n\n"
            "a {\n  color: var(--secondary-color);\n}\n\n"
            ".nav-link:hover {\n  color: var(--secondary-color);\n}"
        )
    if font_family:
        blocks.append(f"body {{ font-family: {font_family}; }}")
    return "\n\n".join(blocks) + "\n"


def template_options(logo_name: str | None = None) -> dict[str, object]:
    html: dict[str, object] = {
        "theme": "cosmo",
        "css": CSS_FILE,
        "toc": True,
        "code-fold": True,
        "code-tools": True,
        "df-print": "paged",
        "fig-width": 8,
        "fig-height": 6,
        "fig-format": "png",
        "fig-dpi": 300,
    }
    if logo_name:
        html["logo"] = logo_name
    return {"format": {"html": html}}


def create_quarto_template(
    template_name: str,
    logo_path: str | Path | None = None,
    primary_color: str | None = None,
    secondary_color: str | None = None,
    font_family: str | None = None,
    output_dir: str | Path = DEFAULT_TEMPLATES_DIR,
) -> Path:
    """Write ``custom.css``, ``_template.yml`` and the logo into a template directory."""
    if not template_name or Path(template_name).name != template_name:
        raise ValidationError(f"Invalid template name: '{template_name}'")
    logo = Path(logo_path) if logo_path is not None else None
    if logo is not None and not logo.is_file():
        raise ValidationError(f"Logo file '{logo}' does not exist")

    template_dir = Path(output_dir) / template_name
    template_dir.mkdir(parents=True, exist_ok=True)
    (template_dir / CSS_FILE).write_text(
        custom_css(primary_color, secondary_color, font_family), encoding="utf-8"
    )
    if logo is not None:
        shutil.copyfile(logo, template_dir / logo.name)
    (template_dir / TEMPLATE_FILE).write_text(
        yaml.safe_dump(
            template_options(logo.name if logo else None),
            sort_keys=False,
            default_flow_style=False,
        ),
        encoding="utf-8",
    )
    logger.info(f"Quarto template created at {template_dir}")
    return template_dir


def _split_front_matter(lines: list[str]) -> tuple[int, int]:
    fences = [index for index, line in enumerate(lines) if line.strip() == FRONT_MATTER_FENCE]
    if len(fences) < 2 or fences[0] != 0:
        raise ValidationError("No valid YAML front matter found in the report")
    return fences[0], fences[1]


def apply_template_to_report(
    report_path: str | Path,
    template_name: str,
    templates_dir: str | Path = DEFAULT_TEMPLATES_DIR,
) -> Path:
    """Merge the template's options into the report's front matter.

    Keys from the template win; other front matter keys such as ``title``
    are kept. The report body is left untouched.
    """
    report = Path(report_path)
    if not report.is_file():
        raise ValidationError(f"Report '{report}' does not exist")
    template_file = Path(templates_dir) / template_name / TEMPLATE_FILE
    if not template_file.is_file():
        raise ValidationError(f"Template '{template_name}' not found in {templates_dir}")

    lines = report.read_text(encoding="utf-8").splitlines()
    start, end = _split_front_matter(lines)
    try:
        front = yaml.safe_load("\n".join(lines[start + 1 : end])) or {}
        options = yaml.safe_load(template_file.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValidationError(f"Cannot parse YAML front matter: {exc}") from exc
    if not isinstance(front, dict) or not isinstance(options, dict):
        raise ValidationError("Front matter and template must both be YAML mappings")

    front.update(options)
    merged = yaml.safe_dump(front, sort_keys=False, default_flow_style=False).splitlines()
    new_lines = [FRONT_MATTER_FENCE, *merged, *lines[end:]]
    report.write_text("\n".join(new_lines) + "\n", encoding="utf-8")
    logger.info(f"Template '{template_name}' applied to {report}")
    return report


__all__ = [
    "CSS_FILE",
    "DEFAULT_TEMPLATES_DIR",
    "TEMPLATE_FILE",
    "apply_template_to_report",
    "create_quarto_template",
    "custom_css",
    "template_options",
]
