"""Executors that run ``cargo publish`` for one crate."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .models import ExecutionResult, PublishRequest

logger = logging.getLogger(__name__)

DOCKER_RUN_SCRIPT = Path("ci") / "docker-run.sh"
TOKEN_MASK = "***"


class PublishExecutor(ABC):
    name: str

    @abstractmethod
    def publish(self, request: PublishRequest) -> ExecutionResult:
        ...


class NoOpExecutor(PublishExecutor):
    name = "noop"

    def publish(self, request: PublishRequest) -> ExecutionResult:
        return ExecutionResult(
            executor=self.name,
            returncode=0,
            logs=[f"NoOp executor selected; {request.entry} not published."],
        )


def cargo_publish_args(token: str, dry_run: bool = False) -> List[str]:
    args = ["cargo", "publish", "--token", token]
    if dry_run:
        args.append("--dry-run")
    return args


class CargoExecutor(PublishExecutor):
    """Run ``cargo publish`` on the host, inside the crate directory."""

    name = "cargo"

    def publish(self, request: PublishRequest) -> ExecutionResult:
        return _run(
            self.name,
            cargo_publish_args(request.token, request.dry_run),
            display=shlex.join(cargo_publish_args(TOKEN_MASK, request.dry_run)),
            cwd=request.crate_dir,
            token=request.token,
        )


class DockerExecutor(PublishExecutor):
    """Run ``cargo publish`` through ``ci/docker-run.sh`` in the pinned toolchain image."""

    name = "docker"

    def __init__(self, image: str) -> None:
        self.image = image

    def publish(self, request: PublishRequest) -> ExecutionResult:
        return _run(
            self.name,
            self._command(request, request.token),
            display=shlex.join(self._command(request, TOKEN_MASK)),
            cwd=request.workspace_root,
            token=request.token,
        )

    def _command(self, request: PublishRequest, token: str) -> List[str]:
        cargo_command = shlex.join(cargo_publish_args(token, request.dry_run))
        return [
            str(request.workspace_root / DOCKER_RUN_SCRIPT),
            self.image,
            "bash",
            "-exc",
            f"cd {shlex.quote(request.entry)}; {cargo_command}",
        ]


class CommandExecutor(PublishExecutor):
    """Run a user supplied shell template; the token is exported as ``CARGO_REGISTRY_TOKEN``."""

    name = "command"

    def __init__(self, command: str, image: Optional[str] = None) -> None:
        self.command = command
        self.image = image

    def publish(self, request: PublishRequest) -> ExecutionResult:
        command = self._render_command(request)
        return _run(
            self.name,
            command,
            display=mask_token(command, request.token),
            cwd=request.workspace_root,
            token=request.token,
            env={"CARGO_REGISTRY_TOKEN": request.token},
            shell=True,
        )

    def _render_command(self, request: PublishRequest) -> str:
        replacements = {
            "{crate}": shlex.quote(request.entry),
            "{manifest}": shlex.quote(str(request.manifest_path)),
            "{image}": shlex.quote(self.image or ""),
        }
        command = self.command
        for placeholder, value in replacements.items():
            command = command.replace(placeholder, value)
        return command


def mask_token(text: str, token: str) -> str:
    return text.replace(token, TOKEN_MASK) if token else text


def _run(
    executor: str,
    command: Union[str, Sequence[str]],
    *,
    display: str,
    cwd: Path,
    token: str,
    env: Optional[Dict[str, str]] = None,
    shell: bool = False,
) -> ExecutionResult:
    """Run ``command``; ``display`` is the token-free rendering used in logs and results."""

    logger.debug("Executing %s in %s", display, cwd)
    logs = [f"Executing publish command: {display}"]
    try:
        proc = subprocess.run(
            command,
            cwd=str(cwd),
            shell=shell,
            check=False,
            capture_output=True,
            text=True,
            env={**os.environ, **(env or {})},
        )
    except OSError as exc:
        logs.append(f"Unable to start publish command: {exc}")
        return ExecutionResult(executor=executor, returncode=127, command=display, logs=logs)
    if proc.stdout:
        logs.append(mask_token(proc.stdout.strip(), token))
    if proc.stderr:
        logs.append(mask_token(proc.stderr.strip(), token))
    return ExecutionResult(executor=executor, returncode=proc.returncode, command=display, logs=logs)


def build_executor(
    name: str,
    *,
    image: Optional[str] = None,
    command: Optional[str] = None,
) -> PublishExecutor:
    lowered = (name or "docker").lower()
    if lowered in ("noop", "none"):
        return NoOpExecutor()
    if lowered == "cargo":
        return CargoExecutor()
    if lowered == "docker":
        if not image:
            raise ValueError("Docker executor requires a toolchain image")
        return DockerExecutor(image=image)
    if lowered in ("cmd", "command"):
        if not command:
            raise ValueError("Command executor requires --executor-command")
        return CommandExecutor(command=command, image=image)
    raise ValueError(f"Unknown publish executor '{name}'")
