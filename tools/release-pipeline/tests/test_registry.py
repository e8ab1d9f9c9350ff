from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError

from crates_release_pipeline.registry import RegistryError, collect_status, fetch_crate_versions


class _FakeResponse:
    def __init__(self, status_code: int, payload: Dict[str, object] | None = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload or {}
        self.text = text
        self.reason = "reason"

    def json(self) -> Dict[str, object]:
        return self._payload


class _FakeSession:
    def __init__(self, responses: Dict[str, _FakeResponse]) -> None:
        self.responses = responses
        self.urls: List[str] = []

    def get(self, url: str, **kwargs) -> _FakeResponse:
        self.urls.append(url)
        name = url.rsplit("/", 1)[-1]
        return self.responses.get(name, _FakeResponse(404))


def _versions(*numbers: str) -> _FakeResponse:
    return _FakeResponse(200, {"crate": {}, "versions": [{"num": number} for number in numbers]})


def test_fetch_crate_versions_collects_numbers() -> None:
    session = _FakeSession({"solana-sdk": _versions("0.12.0", "0.13.0")})

    versions = fetch_crate_versions("solana-sdk", session=session)

    assert versions == {"0.12.0", "0.13.0"}
    assert session.urls == ["https://crates.io/api/v1/crates/solana-sdk"]


def test_unknown_crate_has_no_versions() -> None:
    assert fetch_crate_versions("solana-unknown", session=_FakeSession({})) == set()


def test_registry_error_status_raises() -> None:
    session = _FakeSession({"solana-sdk": _FakeResponse(503, text="unavailable")})

    with pytest.raises(RegistryError, match="503"):
        fetch_crate_versions("solana-sdk", session=session)


def test_connection_failure_raises_registry_error() -> None:
    class _BrokenSession:
        def get(self, url: str, **kwargs):
            raise RequestsConnectionError("offline")

    with pytest.raises(RegistryError, match="offline"):
        fetch_crate_versions("solana-sdk", session=_BrokenSession())


def test_collect_status_compares_local_versions(tmp_path: Path, make_crate) -> None:
    make_crate("sdk", version="0.13.0")
    make_crate("runtime", version="0.13.0")
    session = _FakeSession({"solana-sdk": _versions("0.13.0"), "solana-runtime": _versions("0.12.0")})

    statuses = collect_status(tmp_path, ["sdk", "runtime", "wallet"], session=session)

    assert [status.published for status in statuses] == [True, False, None]
    assert statuses[0].name == "solana-sdk"
    assert statuses[2].message == "Error: wallet/Cargo.toml does not exist"
    assert statuses[1].to_dict()["version"] == "0.13.0"
