from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, unquote, urlparse

from ..errors import FetchError
from ..log import get_logger
from ._github import normalize_repo_path

if TYPE_CHECKING:
    from ._http import HttpSession

logger = get_logger(__name__)

GITLAB_HOST = "gitlab.com"
GITLAB_API = f"https://{GITLAB_HOST}/api/v4"
PER_PAGE = 100


def gitlab_raw_url(namespace_path: str, ref: str, path: str) -> str:
    return f"https://{GITLAB_HOST}/{namespace_path}/-/raw/{quote(ref, safe='')}/{path.lstrip('/')}"


@dataclass(frozen=True)
class GitLabRawLocation:
    namespace_path: str
    ref: str
    path: str


def parse_gitlab_raw_url(url: str) -> GitLabRawLocation | None:
    """Inverse of gitlab_raw_url: ``https://gitlab.com/<ns>/-/raw/<ref>/<path>``."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if (parsed.hostname or "").lower() != GITLAB_HOST:
        return None
    parts = [p for p in parsed.path.split("/") if p]
    try:
        marker = parts.index("-")
    except ValueError:
        return None
    if marker < 2 or len(parts) < marker + 3 or parts[marker + 1] != "raw":
        return None
    return GitLabRawLocation(
        namespace_path="/".join(parts[:marker]),
        ref=unquote(parts[marker + 2]),
        path="/".join(parts[marker + 3 :]),
    )


class GitLabClient:
    """GitLab repository tree API. There is no tree cache; every listing is a call."""

    def __init__(self, session: HttpSession) -> None:
        self._session = session

    def list_tree(
        self, namespace_path: str, ref: str, path: str, recursive: bool = False
    ) -> list[dict[str, Any]]:
        """List tree entries under ``path``, following ``x-next-page`` pagination.

        Raises:
            FetchError: On a failed call or a non-list body (404 for a missing path).
        """
        project = quote(namespace_path, safe="")
        url = f"{GITLAB_API}/projects/{project}/repository/tree"
        params: dict[str, str | int] = {
            "path": normalize_repo_path(path),
            "ref": ref,
            "per_page": PER_PAGE,
        }
        if recursive:
            params["recursive"] = "true"

        entries: list[dict[str, Any]] = []
        page = ""
        while True:
            if page:
                params["page"] = page
            response = self._session.get(url, params=params)
            try:
                data = response.json()
            except ValueError as e:
                raise FetchError(f"Invalid JSON at {url}: {e}", url=url) from e
            if not isinstance(data, list):
                raise FetchError(f"GitLab API unexpected response for {path}", url=url)
            entries.extend(e for e in data if isinstance(e, dict))
            page = response.headers.get("x-next-page", "").strip()
            if not page:
                return entries
            logger.debug("gitlab tree %s next page %s", path, page)

    def list_files_recursive(self, namespace_path: str, ref: str, path: str) -> list[str]:
        entries = self.list_tree(namespace_path, ref, path, recursive=True)
        return sorted(
            e["path"] for e in entries if e.get("type") == "blob" and isinstance(e.get("path"), str)
        )
