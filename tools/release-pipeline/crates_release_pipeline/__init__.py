"""Ordered, fail-fast publication of workspace crates."""

from .crates import DEFAULT_CRATES, CrateListError, expand_entries, load_entries, read_crate_list
from .gate import GateDecision, GateResult, ReleaseContext, read_release_context, should_run
from .models import CrateResult, PipelineRun, PipelineState, PublicationOutcome
from .pipeline import run_publication
from .registry import RegistryError, collect_status, fetch_crate_versions

__all__ = [
    "DEFAULT_CRATES",
    "CrateListError",
    "CrateResult",
    "GateDecision",
    "GateResult",
    "PipelineRun",
    "PipelineState",
    "PublicationOutcome",
    "RegistryError",
    "ReleaseContext",
    "collect_status",
    "expand_entries",
    "fetch_crate_versions",
    "load_entries",
    "read_crate_list",
    "read_release_context",
    "run_publication",
    "should_run",
]
