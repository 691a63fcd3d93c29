from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal
from urllib.parse import urlparse

# "owner/repo" GitHub shorthand
_OWNER_REPO = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")
_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)


def is_url(value: str) -> bool:
    return bool(_HTTP_URL.match(value or ""))


def is_owner_repo_shorthand(value: str) -> bool:
    return bool(_OWNER_REPO.match(value or ""))


@dataclass(frozen=True)
class RepoURL:
    """A github.com or gitlab.com repository parsed from a web or clone URL."""

    provider: Literal["github", "gitlab"]
    repo: str
    owner: str = ""  # github only
    namespace_path: str = ""  # gitlab only: "group/subgroup/repo"


def parse_repo_url(url: str) -> RepoURL | None:
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    host = (parsed.hostname or "").lower()
    path = re.sub(r"\.git$", "", parsed.path, flags=re.IGNORECASE).rstrip("/")
    parts = [p for p in path.split("/") if p]
    if not parts:
        return None
    if host == "github.com":
        if len(parts) < 2:
            return None
        return RepoURL(provider="github", owner=parts[0], repo=parts[1])
    if host == "gitlab.com":
        if "-" in parts:
            parts = parts[: parts.index("-")]
        if len(parts) < 2:
            return None
        return RepoURL(provider="gitlab", namespace_path="/".join(parts), repo=parts[-1])
    return None
