"""Data models used while publishing a single crate."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass(slots=True)
class PublishRequest:
    workspace_root: Path
    entry: str
    manifest_path: Path
    token: str = field(repr=False)
    dry_run: bool = False

    @property
    def crate_dir(self) -> Path:
        return self.workspace_root / self.entry


@dataclass(slots=True)
class ExecutionResult:
    executor: str
    returncode: int
    command: Optional[str] = None
    logs: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0
