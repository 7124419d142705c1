"""Render markdown documents to HTML or PDF with the Quarto CLI."""

from __future__ import annotations

from pathlib import Path
import shutil
import tempfile

from thoth.enums import ExportFormat, Tool
from thoth.errors import ExternalCommandError
from thoth.vcs.base import ToolClient

DOCUMENT_STEM = "decision_tree"


class QuartoClient(ToolClient):
    tool = Tool.QUARTO
    install_hint = "https://quarto.org/docs/get-started/"

    def render_document(
        self,
        body: str,
        fmt: ExportFormat,
        target: Path,
        title: str = "Decision Tree",
    ) -> bool:
        """Render ``body`` into ``target``; intermediates never outlive the call."""
        with tempfile.TemporaryDirectory(prefix="thoth_render_") as scratch:
            workdir = Path(scratch)
            source = workdir / f"{DOCUMENT_STEM}.qmd"
            source.write_text(
                f'---\ntitle: "{title}"\n---\n\n{body}', encoding="utf-8"
            )
            output_name = f"{DOCUMENT_STEM}.{fmt.value}"
            result = self.run(
                ["render", source.name, "--to", fmt.value, "--output", output_name],
                f"Failed to render {fmt.value.upper()} document",
                cwd=workdir,
            )
            if result is None:
                return False
            rendered = workdir / output_name
            if not rendered.is_file():
                self.policy.handle(
                    ExternalCommandError(
                        result, f"quarto did not produce {output_name}"
                    )
                )
                return False
            shutil.move(str(rendered), str(target))
        self.logger.info(f"Rendered {fmt.value.upper()} document to {target}")
        return True


__all__ = ["QuartoClient"]
