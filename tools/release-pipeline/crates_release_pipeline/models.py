from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class PublicationOutcome(str, Enum):
    PUBLISHED = "published"
    VALIDATION_FAILED = "validation_failed"
    EXECUTION_FAILED = "execution_failed"


class PipelineState(str, Enum):
    NOT_STARTED = "not_started"
    GATING = "gating"
    PUBLISHING = "publishing"
    SUCCESS = "success"
    SKIPPED = "skipped"
    FATAL_ERROR = "fatal_error"


@dataclass(slots=True)
class CrateResult:
    entry: str
    outcome: PublicationOutcome
    manifest_path: str
    returncode: Optional[int] = None
    message: Optional[str] = None
    logs: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "entry": self.entry,
            "outcome": self.outcome.value,
            "manifest_path": self.manifest_path,
            "returncode": self.returncode,
            "message": self.message,
            "logs": self.logs,
        }


@dataclass(slots=True)
class PipelineRun:
    state: PipelineState = PipelineState.NOT_STARTED
    message: Optional[str] = None
    results: List[CrateResult] = field(default_factory=list)
    not_attempted: List[str] = field(default_factory=list)
    history: List[str] = field(default_factory=lambda: [PipelineState.NOT_STARTED.value])
    logs: List[str] = field(default_factory=list)

    def enter(self, state: PipelineState, index: Optional[int] = None) -> None:
        self.state = state
        self.history.append(state.value if index is None else f"{state.value}:{index}")

    @property
    def exit_code(self) -> int:
        return 1 if self.state is PipelineState.FATAL_ERROR else 0

    @property
    def published(self) -> List[str]:
        return [result.entry for result in self.results if result.outcome is PublicationOutcome.PUBLISHED]

    def to_dict(self) -> Dict[str, object]:
        return {
            "state": self.state.value,
            "exit_code": self.exit_code,
            "message": self.message,
            "published": self.published,
            "results": [result.to_dict() for result in self.results],
            "not_attempted": self.not_attempted,
            "history": self.history,
            "logs": self.logs,
        }


@dataclass(slots=True)
class CheckReport:
    entries: List[str]
    missing: List[Dict[str, object]] = field(default_factory=list)
    order_violations: List[Dict[str, object]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing and not self.order_violations

    def to_dict(self) -> Dict[str, object]:
        return {
            "ok": self.ok,
            "entries": self.entries,
            "missing": self.missing,
            "order_violations": self.order_violations,
        }


@dataclass(slots=True)
class CrateStatus:
    entry: str
    name: Optional[str]
    version: Optional[str]
    published: Optional[bool]
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "entry": self.entry,
            "name": self.name,
            "version": self.version,
            "published": self.published,
            "message": self.message,
        }
