"""Cargo manifest presence checks and loading."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .schemas.cargo import CargoManifest

MANIFEST_NAME = "Cargo.toml"


class ManifestError(RuntimeError):
    """Raised when a Cargo manifest cannot be read or does not match the expected schema."""


@dataclass(frozen=True, slots=True)
class ManifestCheck:
    entry: str
    manifest_path: Path
    ok: bool
    message: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "entry": self.entry,
            "manifest_path": str(self.manifest_path),
            "ok": self.ok,
            "message": self.message,
        }


def manifest_path_for(workspace_root: Path, entry: str) -> Path:
    return workspace_root / entry / MANIFEST_NAME


def validate_entry(workspace_root: Path, entry: str) -> ManifestCheck:
    """Confirm ``<entry>/Cargo.toml`` exists and is readable."""

    path = manifest_path_for(workspace_root, entry)
    if path.is_file() and os.access(path, os.R_OK):
        return ManifestCheck(entry=entry, manifest_path=path, ok=True)
    return ManifestCheck(
        entry=entry,
        manifest_path=path,
        ok=False,
        message=f"Error: {entry}/{MANIFEST_NAME} does not exist",
    )


def load_cargo_manifest(path: Path) -> CargoManifest:
    try:
        payload = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ManifestError(f"Unable to read {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError(f"Invalid TOML in {path}: {exc}") from exc
    try:
        return CargoManifest.model_validate(payload)
    except ValidationError as exc:
        raise ManifestError(f"Unexpected manifest layout in {path}: {exc}") from exc
