"""Read and synthesize `.dvc` sidecar files."""

from __future__ import annotations

import hashlib
from pathlib import Path

import yaml

from thoth.tracking.models import TrackedArtifact

SIDECAR_SUFFIX = ".dvc"
_CHUNK_SIZE = 1024 * 1024


def file_md5(path: str | Path) -> str:
    """MD5 of the file content, the identity DVC records for an output."""
    digest = hashlib.md5(usedforsecurity=False)
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def sidecar_path(path: str | Path) -> Path:
    target = Path(path)
    return target.with_name(target.name + SIDECAR_SUFFIX)


def write_mock_sidecar(path: str | Path, stage: str | None = None) -> TrackedArtifact:
    """Record ``path`` without DVC. Rewritten on every call, so the hash is current.

    The recorded ``path`` is the file name only, relative to the sidecar the
    way DVC itself writes it, not the path the caller passed in.
    """
    target = Path(path)
    digest = file_md5(target)
    sidecar = sidecar_path(target)
    # Paths inside a sidecar are relative to the sidecar's own directory.
    payload = {"outs": [{"md5": digest, "path": target.name}]}
    sidecar.write_text(
        yaml.safe_dump(payload, sort_keys=False, default_flow_style=False),
        encoding="utf-8",
    )
    return TrackedArtifact(path=target, md5=digest, stage=stage, sidecar=sidecar)


def read_sidecar_hash(sidecar: str | Path) -> str | None:
    """Return the md5 of the first output listed in a sidecar, if present."""
    source = Path(sidecar)
    if not source.is_file():
        return None
    try:
        payload = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError:
        return None
    outs = payload.get("outs") if isinstance(payload, dict) else None
    if not isinstance(outs, list) or not outs or not isinstance(outs[0], dict):
        return None
    value = outs[0].get("md5")
    return str(value) if value is not None else None


__all__ = [
    "SIDECAR_SUFFIX",
    "file_md5",
    "read_sidecar_hash",
    "sidecar_path",
    "write_mock_sidecar",
]
