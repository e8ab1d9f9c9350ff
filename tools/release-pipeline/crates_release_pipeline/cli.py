from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from dotenv import load_dotenv

from crates_release.manifest import ManifestError, validate_entry
from crates_release.ordering import check_order
from crates_release.publish import PublishExecutor, build_executor
from crates_release.secrets import use_dotenv
from crates_release.toolchain import DEFAULT_IMAGE_VARIABLE, resolve_toolchain_image

from .crates import CrateListError, load_entries
from .gate import TAG_ENV, TOKEN_ENV, read_release_context
from .models import CheckReport
from .pipeline import run_publication
from .registry import CRATES_IO_API, RegistryError, collect_status

_registered_env_files: set[Path] = set()


def _load_local_env(env_file: Path) -> None:
    """Load a workspace-local .env so the tag and token can come from it."""

    if not env_file.exists():
        return
    load_dotenv(env_file, override=False)
    resolved = env_file.resolve()
    if resolved not in _registered_env_files:
        use_dotenv(resolved)
        _registered_env_files.add(resolved)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _add_list_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--crates-file", help="Ordered crate list (defaults to the built-in list).")
    parser.add_argument("--workspace-root", default=".")
    parser.add_argument("--verbose", action="store_true")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crates-release", description="Publish workspace crates in dependency order.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    publish = subparsers.add_parser("publish", help="Publish every listed crate, stopping at the first failure")
    _add_list_arguments(publish)
    publish.add_argument("--executor", default="docker", choices=["docker", "cargo", "command", "noop"])
    publish.add_argument("--executor-command", help="Shell template for the command executor ({crate}, {manifest}, {image}).")
    publish.add_argument("--image", help="Toolchain image; defaults to the pin in ci/rust-version.sh.")
    publish.add_argument("--image-variable", default=DEFAULT_IMAGE_VARIABLE)
    publish.add_argument("--tag-env", default=TAG_ENV)
    publish.add_argument("--token-env", default=TOKEN_ENV)
    publish.add_argument("--env-file", help="Path to a .env file (defaults to <workspace-root>/.env).")
    publish.add_argument("--dry-run", action=argparse.BooleanOptionalAction, default=False)
    publish.add_argument("--verify-order", action=argparse.BooleanOptionalAction, default=False)

    list_cmd = subparsers.add_parser("list", help="Print the expanded publish order")
    _add_list_arguments(list_cmd)

    check = subparsers.add_parser("check", help="Check manifests and publish order without publishing")
    _add_list_arguments(check)

    status = subparsers.add_parser("status", help="Compare local crate versions with crates.io")
    _add_list_arguments(status)
    status.add_argument("--registry-api", default=CRATES_IO_API)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    workspace = Path(args.workspace_root).resolve()
    crates_file = Path(args.crates_file) if args.crates_file else None
    if crates_file and not crates_file.is_absolute():
        crates_file = workspace / crates_file

    if args.command == "publish":
        return _run_publish(args, workspace, lambda: load_entries(crates_file))

    try:
        entries = load_entries(crates_file)
    except CrateListError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if args.command == "list":
        print(json.dumps(entries, indent=2))
        return 0
    if args.command == "check":
        return _run_check(workspace, entries)
    if args.command == "status":
        return _run_status(args, workspace, entries)

    parser.error(f"Unknown command '{args.command}'")
    return 1


def _run_publish(args: argparse.Namespace, workspace: Path, entries: Callable[[], List[str]]) -> int:
    _load_local_env(Path(args.env_file) if args.env_file else workspace / ".env")
    context = read_release_context(tag_env=args.tag_env, token_env=args.token_env)

    def _executor_factory() -> PublishExecutor:
        image = args.image
        if not image and args.executor == "docker":
            image = resolve_toolchain_image(workspace, args.image_variable)
        return build_executor(args.executor, image=image, command=args.executor_command)

    run = run_publication(
        workspace_root=workspace,
        entries=entries,
        context=context,
        executor_factory=_executor_factory,
        dry_run=args.dry_run,
        verify_order=args.verify_order,
    )
    print(json.dumps(run.to_dict(), indent=2))
    if run.exit_code:
        print(run.message, file=sys.stderr)
    return run.exit_code


def _run_check(workspace: Path, entries: List[str]) -> int:
    report = CheckReport(entries=entries)
    for entry in entries:
        check = validate_entry(workspace, entry)
        if not check.ok:
            report.missing.append(check.to_dict())
    try:
        report.order_violations = [violation.to_dict() for violation in check_order(workspace, entries)]
    except ManifestError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(json.dumps(report.to_dict(), indent=2))
    return 0 if report.ok else 1


def _run_status(args: argparse.Namespace, workspace: Path, entries: List[str]) -> int:
    try:
        statuses = collect_status(workspace, entries, api=args.registry_api)
    except (RegistryError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(json.dumps([status.to_dict() for status in statuses], indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
