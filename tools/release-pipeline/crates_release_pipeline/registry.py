"""Read-only crates.io lookups used to report which entries are already published."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Set

import requests
from requests import Response, Session
from requests.exceptions import RequestException

from crates_release.manifest import ManifestError, load_cargo_manifest, validate_entry

from .models import CrateStatus

CRATES_IO_API = "https://crates.io/api/v1"
USER_AGENT = "crates-release (release tooling)"


class RegistryError(RuntimeError):
    """Raised when the registry cannot be queried."""


def fetch_crate_versions(
    name: str,
    *,
    session: Optional[Session] = None,
    api: str = CRATES_IO_API,
) -> Set[str]:
    """Return the published version numbers of ``name`` (empty if the crate does not exist)."""

    request_session = session or requests.Session()
    url = f"{api.rstrip('/')}/crates/{name}"
    try:
        response: Response = request_session.get(
            url,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=20,
        )
    except RequestException as exc:
        raise RegistryError(f"Registry lookup for '{name}' failed: {exc}") from exc

    if response.status_code == 404:
        return set()
    if response.status_code != 200:
        raise RegistryError(f"Registry lookup for '{name}' returned {response.status_code}: {response.text or response.reason}")

    payload = response.json()
    return {str(item["num"]) for item in payload.get("versions", []) if "num" in item}


def collect_status(
    workspace_root: Path,
    entries: Sequence[str],
    *,
    session: Optional[Session] = None,
    api: str = CRATES_IO_API,
) -> List[CrateStatus]:
    request_session = session or requests.Session()
    statuses: List[CrateStatus] = []
    for entry in entries:
        check = validate_entry(workspace_root, entry)
        if not check.ok:
            statuses.append(CrateStatus(entry=entry, name=None, version=None, published=None, message=check.message))
            continue
        try:
            manifest = load_cargo_manifest(check.manifest_path)
        except ManifestError as exc:
            statuses.append(CrateStatus(entry=entry, name=None, version=None, published=None, message=str(exc)))
            continue
        if not manifest.name or not manifest.version:
            statuses.append(
                CrateStatus(entry=entry, name=None, version=None, published=None, message="No [package] section")
            )
            continue
        versions = fetch_crate_versions(manifest.name, session=request_session, api=api)
        statuses.append(
            CrateStatus(
                entry=entry,
                name=manifest.name,
                version=manifest.version,
                published=manifest.version in versions,
            )
        )
    return statuses
