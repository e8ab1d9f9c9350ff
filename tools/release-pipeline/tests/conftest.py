from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set

import pytest

import crates_release.secrets as secrets
from crates_release.publish import ExecutionResult, PublishExecutor, PublishRequest


class RecordingExecutor(PublishExecutor):
    """Records every publish call; entries in ``fail_on`` exit with ``failure_code``."""

    name = "recording"

    def __init__(self) -> None:
        self.calls: List[str] = []
        self.requests: List[PublishRequest] = []
        self.fail_on: Set[str] = set()
        self.failure_code = 101

    def publish(self, request: PublishRequest) -> ExecutionResult:
        self.calls.append(request.entry)
        self.requests.append(request)
        if request.entry in self.fail_on:
            return ExecutionResult(executor=self.name, returncode=self.failure_code, logs=[f"failed {request.entry}"])
        return ExecutionResult(executor=self.name, returncode=0, logs=[f"published {request.entry}"])


@pytest.fixture()
def recorder() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture()
def isolated_environ(monkeypatch: pytest.MonkeyPatch) -> Dict[str, str]:
    """Give the test its own copy of ``os.environ`` so .env loading cannot leak."""

    environ = os.environ.copy()
    for name in ("TRIGGERED_BUILDKITE_TAG", "CRATES_IO_TOKEN"):
        environ.pop(name, None)
    monkeypatch.setattr(os, "environ", environ)
    return environ


@pytest.fixture()
def isolated_secrets(monkeypatch: pytest.MonkeyPatch, isolated_environ):
    monkeypatch.setattr(secrets, "_secret_specs", {})
    monkeypatch.setattr(secrets, "_resolvers", [])
    secrets.register_resolver(secrets.EnvResolver(), priority=0, name="env", source="env")
    return secrets


@pytest.fixture()
def make_crate(tmp_path: Path) -> Callable[..., Path]:
    def _make(entry: str, dependencies: Optional[Dict[str, str]] = None, version: str = "0.13.0") -> Path:
        crate_dir = tmp_path / entry
        crate_dir.mkdir(parents=True, exist_ok=True)
        lines = [
            "[package]",
            f'name = "solana-{entry.split("/")[-1]}"',
            f'version = "{version}"',
            "",
            "[dependencies]",
        ]
        lines.extend(f"{dep} = {spec}" for dep, spec in (dependencies or {}).items())
        manifest = crate_dir / "Cargo.toml"
        manifest.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return manifest

    return _make
