"""Check a curated publish order against the path dependencies declared in each Cargo.toml.

The publish order is maintained by hand. This module only reports entries whose
workspace-local dependencies are listed after them; it never reorders anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence

from .manifest import load_cargo_manifest, validate_entry


@dataclass(frozen=True, slots=True)
class OrderViolation:
    entry: str
    dependency: str
    dependency_entry: str
    position: int
    dependency_position: int

    @property
    def message(self) -> str:
        return (
            f"{self.entry} (position {self.position}) depends on {self.dependency} "
            f"({self.dependency_entry}, position {self.dependency_position}), which is published later"
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "entry": self.entry,
            "dependency": self.dependency,
            "dependency_entry": self.dependency_entry,
            "position": self.position,
            "dependency_position": self.dependency_position,
            "message": self.message,
        }


def check_order(workspace_root: Path, entries: Sequence[str]) -> List[OrderViolation]:
    """Return every listed dependency that appears after a crate depending on it.

    Entries whose manifest is missing are skipped here; presence is reported by
    :func:`crates_release.manifest.validate_entry`. Dev-dependencies are ignored
    because cargo strips them from the published package.
    """

    root = workspace_root.resolve()
    first_seen: Dict[Path, int] = {}
    for position, entry in enumerate(entries):
        first_seen.setdefault((root / entry).resolve(), position)

    violations: List[OrderViolation] = []
    for position, entry in enumerate(entries):
        check = validate_entry(root, entry)
        if not check.ok:
            continue
        manifest = load_cargo_manifest(check.manifest_path)
        crate_dir = check.manifest_path.parent.resolve()
        for name, spec in manifest.publish_dependencies().items():
            if not spec.path:
                continue
            dependency_dir = (crate_dir / spec.path).resolve()
            if dependency_dir == crate_dir or dependency_dir not in first_seen:
                continue
            dependency_position = first_seen[dependency_dir]
            if dependency_position > position:
                violations.append(
                    OrderViolation(
                        entry=entry,
                        dependency=spec.package or name,
                        dependency_entry=entries[dependency_position],
                        position=position,
                        dependency_position=dependency_position,
                    )
                )
    return violations
