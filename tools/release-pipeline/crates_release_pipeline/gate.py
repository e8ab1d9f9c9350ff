"""Decide whether a publish run applies to the current build."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from crates_release.secrets import SecretSpec, register_secret, resolve_secret_info

TAG_ENV = "TRIGGERED_BUILDKITE_TAG"
TOKEN_ENV = "CRATES_IO_TOKEN"


class GateDecision(str, Enum):
    PROCEED = "proceed"
    SKIP = "skip"
    MISSING_CREDENTIAL = "missing_credential"


@dataclass(frozen=True)
class ReleaseContext:
    tag: Optional[str]
    token: Optional[str] = field(repr=False)
    tag_env: str = TAG_ENV
    token_env: str = TOKEN_ENV
    token_sources: str = "none"


@dataclass(frozen=True)
class GateResult:
    decision: GateDecision
    message: str

    @property
    def exit_code(self) -> int:
        return 1 if self.decision is GateDecision.MISSING_CREDENTIAL else 0


def read_release_context(*, tag_env: str = TAG_ENV, token_env: str = TOKEN_ENV) -> ReleaseContext:
    """Read the release tag from the environment and resolve the publish token."""

    register_secret(SecretSpec(name=token_env, description="crates.io publish token"))
    info = resolve_secret_info(token_env)
    return ReleaseContext(
        tag=os.getenv(tag_env) or None,
        token=info.value,
        tag_env=tag_env,
        token_env=token_env,
        token_sources=info.attempted_summary(),
    )


def should_run(context: ReleaseContext) -> GateResult:
    if not context.tag:
        return GateResult(GateDecision.SKIP, f"{context.tag_env} unset, skipped")
    if not context.token:
        return GateResult(
            GateDecision.MISSING_CREDENTIAL,
            f"{context.token_env} undefined (checked: {context.token_sources})",
        )
    return GateResult(GateDecision.PROCEED, f"Publishing crates for {context.tag_env}={context.tag}")
