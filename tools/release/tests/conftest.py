from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Optional

import pytest

import crates_release.secrets as secrets


@pytest.fixture()
def isolated_secrets(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(secrets, "_secret_specs", {})
    monkeypatch.setattr(secrets, "_resolvers", [])
    secrets.register_resolver(secrets.EnvResolver(), priority=0, name="env", source="env")
    return secrets


@pytest.fixture()
def make_crate(tmp_path: Path) -> Callable[..., Path]:
    """Write ``<tmp_path>/<entry>/Cargo.toml`` with the given dependency tables."""

    def _make(
        entry: str,
        name: Optional[str] = None,
        version: str = "0.13.0",
        dependencies: Optional[Dict[str, str]] = None,
        dev_dependencies: Optional[Dict[str, str]] = None,
    ) -> Path:
        crate_dir = tmp_path / entry
        crate_dir.mkdir(parents=True, exist_ok=True)
        lines = [
            "[package]",
            f'name = "{name or "solana-" + entry.split("/")[-1]}"',
            f'version = "{version}"',
            "",
            "[dependencies]",
        ]
        lines.extend(f"{dep} = {spec}" for dep, spec in (dependencies or {}).items())
        lines.extend(["", "[dev-dependencies]"])
        lines.extend(f"{dep} = {spec}" for dep, spec in (dev_dependencies or {}).items())
        manifest = crate_dir / "Cargo.toml"
        manifest.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return manifest

    return _make
