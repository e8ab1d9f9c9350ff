"""Resolve the pinned Rust toolchain image from ``ci/rust-version.sh``."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Mapping, Optional

RUST_VERSION_SCRIPT = Path("ci") / "rust-version.sh"
DEFAULT_IMAGE_VARIABLE = "rust_stable_docker_image"

# Sources the pin the same way the CI scripts do, then prints one variable.
_PRINT_VARIABLE = 'source "$1" && printf %s "${!2}"'


class ToolchainError(RuntimeError):
    """Raised when the pinned toolchain identifier cannot be resolved."""


def resolve_toolchain_image(
    workspace_root: Path,
    variable: str = DEFAULT_IMAGE_VARIABLE,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Return ``variable`` as set by sourcing the workspace's rust-version.sh.

    ``environ`` replaces the process environment for the sourced script, so
    overrides such as ``RUST_STABLE_VERSION`` are honoured exactly as in CI.
    """

    script = workspace_root / RUST_VERSION_SCRIPT
    if not script.is_file():
        raise ToolchainError(f"Toolchain pin not found: {script}")

    env = dict(os.environ) if environ is None else {"PATH": os.environ.get("PATH", os.defpath), **environ}
    try:
        result = subprocess.run(
            ["bash", "-c", _PRINT_VARIABLE, "_", str(RUST_VERSION_SCRIPT), variable],
            cwd=str(workspace_root),
            env=env,
            check=False,
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        raise ToolchainError(f"Unable to source {script}: {exc}") from exc
    if result.returncode != 0:
        detail = result.stderr.strip() or f"exit code {result.returncode}"
        raise ToolchainError(f"Sourcing {script} failed: {detail}")

    image = result.stdout.strip()
    if not image:
        raise ToolchainError(f"'{variable}' is not assigned in {script}")
    return image
