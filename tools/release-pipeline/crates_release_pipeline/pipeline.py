"""Sequential, fail-fast publication of the curated crate list.

The run stops at the first crate whose manifest is missing or whose publish
command fails. Crates published before that point stay published; re-running
starts again from the first entry.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence, Union

from crates_release.manifest import ManifestError, validate_entry
from crates_release.ordering import check_order
from crates_release.publish import PublishExecutor, PublishRequest
from crates_release.toolchain import ToolchainError

from .crates import CrateListError
from .gate import GateDecision, ReleaseContext, should_run
from .models import CrateResult, PipelineRun, PipelineState, PublicationOutcome

logger = logging.getLogger(__name__)

ExecutorFactory = Callable[[], PublishExecutor]
EntriesLoader = Callable[[], Sequence[str]]


def run_publication(
    *,
    workspace_root: Path,
    entries: Union[Sequence[str], EntriesLoader],
    context: ReleaseContext,
    executor_factory: ExecutorFactory,
    dry_run: bool = False,
    verify_order: bool = False,
) -> PipelineRun:
    """Gate the run, then publish ``entries`` one at a time in the given order.

    ``entries`` may be a loader; like the executor it is only called once the
    gate passes, so a run that is not a release never reads the crate list or
    needs a toolchain image.
    """

    workspace = Path(workspace_root).resolve()
    run = PipelineRun()
    run.enter(PipelineState.GATING)

    gate = should_run(context)
    run.logs.append(gate.message)
    if gate.decision is GateDecision.SKIP:
        logger.info(gate.message)
        return _finish(run, PipelineState.SKIPPED, gate.message)
    if gate.decision is GateDecision.MISSING_CREDENTIAL:
        logger.error(gate.message)
        pending = () if callable(entries) else entries
        return _finish(run, PipelineState.FATAL_ERROR, gate.message, not_attempted=pending)

    try:
        if callable(entries):
            entries = list(entries())
    except CrateListError as exc:
        logger.error("%s", exc)
        return _finish(run, PipelineState.FATAL_ERROR, str(exc))

    try:
        executor = executor_factory()
        violations = check_order(workspace, entries) if verify_order else []
    except (ToolchainError, ManifestError, ValueError) as exc:
        logger.error("%s", exc)
        return _finish(run, PipelineState.FATAL_ERROR, str(exc), not_attempted=entries)
    if violations:
        for violation in violations:
            run.logs.append(violation.message)
            logger.error(violation.message)
        return _finish(
            run,
            PipelineState.FATAL_ERROR,
            f"Publish order violates {len(violations)} dependency constraint(s)",
            not_attempted=entries,
        )

    for index, entry in enumerate(entries):
        run.enter(PipelineState.PUBLISHING, index)
        check = validate_entry(workspace, entry)
        if not check.ok:
            logger.error(check.message)
            run.results.append(
                CrateResult(
                    entry=entry,
                    outcome=PublicationOutcome.VALIDATION_FAILED,
                    manifest_path=str(check.manifest_path),
                    message=check.message,
                )
            )
            return _finish(run, PipelineState.FATAL_ERROR, check.message, not_attempted=entries[index + 1 :])

        logger.info("-- %s", entry)
        run.logs.append(f"-- {entry}")
        result = executor.publish(
            PublishRequest(
                workspace_root=workspace,
                entry=entry,
                manifest_path=check.manifest_path,
                token=context.token or "",
                dry_run=dry_run,
            )
        )
        run.logs.extend(result.logs)
        if not result.succeeded:
            message = f"Publishing {entry} failed with exit code {result.returncode}"
            logger.error(message)
            run.results.append(
                CrateResult(
                    entry=entry,
                    outcome=PublicationOutcome.EXECUTION_FAILED,
                    manifest_path=str(check.manifest_path),
                    returncode=result.returncode,
                    message=message,
                    logs=result.logs,
                )
            )
            return _finish(run, PipelineState.FATAL_ERROR, message, not_attempted=entries[index + 1 :])

        run.results.append(
            CrateResult(
                entry=entry,
                outcome=PublicationOutcome.PUBLISHED,
                manifest_path=str(check.manifest_path),
                returncode=result.returncode,
                logs=result.logs,
            )
        )

    return _finish(run, PipelineState.SUCCESS, f"Published {len(run.results)} crate(s)")


def _finish(
    run: PipelineRun,
    state: PipelineState,
    message: str,
    *,
    not_attempted: Sequence[str] = (),
) -> PipelineRun:
    run.enter(state)
    run.message = message
    run.not_attempted = list(not_attempted)
    return run
