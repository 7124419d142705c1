"""Write data files and hand them straight to DVC tracking or a pipeline stage."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
import csv
import logging
import os
from pathlib import Path
import pickle
import shlex
import tempfile
from typing import Any

from thoth.enums import Tool
from thoth.process.arguments import Scalar
from thoth.tracking.models import PipelineStageSpec
from thoth.tracking.orchestrator import PathArg, TrackingOrchestrator

logger = logging.getLogger(__name__)


def write_csv(rows: Iterable[Any], file: Path, fieldnames: Sequence[str] | None = None) -> None:
    """Write mappings (with a header) or plain sequences (without) as CSV."""
    materialized = list(rows)
    file.parent.mkdir(parents=True, exist_ok=True)
    with open(file, "w", encoding="utf-8", newline="") as handle:
        if fieldnames is not None or (materialized and isinstance(materialized[0], Mapping)):
            header = list(fieldnames or materialized[0].keys())
            writer = csv.DictWriter(handle, fieldnames=header)
            writer.writeheader()
            writer.writerows(materialized)
        else:
            csv.writer(handle).writerows(materialized)


def stage_script_source(
    output: str,
    deps: Sequence[str] | None = None,
    params: Mapping[str, Scalar] | None = None,
) -> str:
    """Source of the throwaway script used as a stage command.

    The script reproduces the output from the first dependency when there is
    one; parameters are listed as comments for the reader of `dvc.yaml`.
    """
    lines = ["import shutil", "from pathlib import Path", ""]
    if params:
        lines.append("# Parameters:")
        lines.extend(f"# {name} = {value}" for name, value in params.items())
    if deps:
        lines.append(f"shutil.copyfile({deps[0]!r}, {output!r})")
    else:
        lines.append(f"Path({output!r}).touch()")
    return "\n".join(lines) + "\n"


@contextmanager
def ephemeral_script(source: str) -> Iterator[Path]:
    """Yield a temporary `.py` file holding ``source``; removed on every exit path."""
    handle = tempfile.NamedTemporaryFile(
        "w", prefix="dvc_stage_", suffix=".py", delete=False, encoding="utf-8"
    )
    script = Path(handle.name)
    try:
        with handle:
            handle.write(source)
        yield script
    finally:
        script.unlink(missing_ok=True)


class DataWriter:
    """Serializers that track their output right after writing it."""

    def __init__(self, orchestrator: TrackingOrchestrator | None = None) -> None:
        self.orchestrator = orchestrator or TrackingOrchestrator()

    @property
    def python(self) -> str:
        return self.orchestrator.config.executable_for(Tool.PYTHON)

    def write_csv_dvc(
        self,
        rows: Any,
        file: PathArg,
        message: str | None = None,
        stage_name: str | None = None,
        deps: Sequence[str] | None = None,
        params: Mapping[str, Scalar] | None = None,
        metrics: bool | Collection[str] = False,
        plots: bool | Collection[str] = False,
        cmd: str | None = None,
        fieldnames: Sequence[str] | None = None,
    ) -> Any:
        """Write ``rows`` to ``file`` as CSV, then track or stage it; returns ``rows``."""
        target = self.orchestrator.resolve(file)
        write_csv(rows, target, fieldnames)
        logger.info(f"Wrote CSV to {file}")
        if stage_name is None:
            self.orchestrator.track(file, message)
            return rows
        output = os.fspath(file)
        if cmd is not None:
            self._stage(stage_name, cmd, output, message, deps, params, metrics, plots)
            return rows
        with ephemeral_script(stage_script_source(output, deps, params)) as script:
            stage_cmd = f"{shlex.quote(self.python)} {shlex.quote(str(script))}"
            self._stage(stage_name, stage_cmd, output, message, deps, params, metrics, plots)
        return rows

    def write_pickle_dvc(
        self,
        obj: Any,
        file: PathArg,
        message: str | None = None,
        stage_name: str | None = None,
        deps: Sequence[str] | None = None,
        params: Mapping[str, Scalar] | None = None,
        metrics: bool | Collection[str] = False,
        plots: bool | Collection[str] = False,
        cmd: str | None = None,
        protocol: int | None = None,
    ) -> Any:
        """Pickle ``obj`` to ``file``, then track or stage it; returns ``obj``."""
        target = self.orchestrator.resolve(file)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as handle:
            pickle.dump(obj, handle, protocol=protocol)
        logger.info(f"Wrote pickle to {file}")
        if stage_name is None:
            self.orchestrator.track(file, message)
            return obj
        output = os.fspath(file)
        if cmd is None:
            source = deps[0] if deps else None
            snippet = (
                "import pickle; "
                f"obj = pickle.load(open({source!r}, 'rb')) if {source!r} else None; "
                f"pickle.dump(obj, open({output!r}, 'wb'))"
            )
            cmd = f"{shlex.quote(self.python)} -c {shlex.quote(snippet)}"
        self._stage(stage_name, cmd, output, message, deps, params, metrics, plots)
        return obj

    def _stage(
        self,
        name: str,
        cmd: str,
        output: str,
        message: str | None,
        deps: Sequence[str] | None,
        params: Mapping[str, Scalar] | None,
        metrics: bool | Collection[str],
        plots: bool | Collection[str],
    ) -> None:
        spec = PipelineStageSpec.from_flags(
            name=name,
            cmd=cmd,
            deps=deps,
            outs=[output],
            metrics=metrics,
            plots=plots,
            params=params,
        )
        self.orchestrator.stage(spec, message)


__all__ = [
    "DataWriter",
    "ephemeral_script",
    "stage_script_source",
    "write_csv",
]
