from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

# Publish order of the workspace crates.
#
# The order is significant: a crate must be published before every crate that
# depends on it. Cargo.toml files already carry this information, but the list
# is kept by hand so the release order stays reviewable; `crates-release check`
# reports entries that are listed after one of their dependents.
DEFAULT_CRATES: List[str] = [
    "kvstore",
    "logger",
    "netutil",
    "sdk",
    "keygen",
    "metrics",
    "client",
    "drone",
    "programs/{budget_api,config_api,rewards_api,storage_api,token_api,vote_api}",
    "runtime",
    "programs/{budget,bpf_loader,config,vote,rewards,storage,token,vote}",
    "vote-signer",
    "core",
    "fullnode",
    "genesis",
    "ledger-tool",
    "wallet",
    "install",
]


class CrateListError(RuntimeError):
    """Raised when the crate list cannot be read or contains malformed brace groups."""


def expand_entries(raw: Iterable[str]) -> List[str]:
    """Expand brace groups in place, keeping the written order of every entry.

    ``parent/{a,b,c}`` becomes ``parent/a``, ``parent/b``, ``parent/c``. Nothing
    is sorted or deduplicated.
    """

    entries: List[str] = []
    for token in raw:
        token = token.strip()
        if not token:
            continue
        entries.extend(expand_token(token))
    return entries


def expand_token(token: str) -> List[str]:
    open_idx = token.find("{")
    if open_idx == -1:
        if "}" in token:
            raise CrateListError(f"Unbalanced '}}' in crate entry '{token}'")
        return [token]

    prefix = token[:open_idx]
    if "}" in prefix:
        raise CrateListError(f"Unbalanced '}}' in crate entry '{token}'")

    depth = 0
    start = open_idx + 1
    close_idx = -1
    members: List[str] = []
    for idx in range(open_idx, len(token)):
        char = token[idx]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                close_idx = idx
                break
        elif char == "," and depth == 1:
            members.append(token[start:idx])
            start = idx + 1
    if close_idx == -1:
        raise CrateListError(f"Unbalanced '{{' in crate entry '{token}'")
    members.append(token[start:close_idx])
    if len(members) < 2:
        raise CrateListError(f"Brace group in '{token}' needs at least two comma-separated members")

    suffixes = expand_token(token[close_idx + 1 :])
    expanded: List[str] = []
    for member in members:
        for member_value in expand_token(member):
            for suffix in suffixes:
                expanded.append(f"{prefix}{member_value}{suffix}")
    return expanded


def read_crate_list(path: Path) -> List[str]:
    """Read raw crate tokens from a file: whitespace separated, ``#`` starts a comment."""

    if not path.exists():
        raise CrateListError(f"Crate list not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CrateListError(f"Unable to read crate list {path}: {exc}") from exc
    tokens: List[str] = []
    for line in content.splitlines():
        uncommented = line.split("#", 1)[0]
        tokens.extend(uncommented.split())
    return tokens


def load_entries(path: Path | None = None) -> List[str]:
    raw = read_crate_list(path) if path else DEFAULT_CRATES
    return expand_entries(raw)
