from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, urlparse

from ..errors import FetchError, RefNotFoundError
from ..log import get_logger

if TYPE_CHECKING:
    from ._http import HttpSession

logger = get_logger(__name__)

GITHUB_API = "https://api.github.com"
GITHUB_RAW_HOST = "raw.githubusercontent.com"


def github_raw_url(owner: str, repo: str, ref: str, path: str) -> str:
    return f"https://{GITHUB_RAW_HOST}/{owner}/{repo}/{ref}/{path.lstrip('/')}"


@dataclass(frozen=True)
class GitHubRawLocation:
    owner: str
    repo: str
    ref: str
    path: str  # "" when the URL names the ref root


def parse_github_raw_url(url: str) -> GitHubRawLocation | None:
    """Split a raw.githubusercontent.com URL into owner, repo, ref and file path.

    Refs containing "/" cannot be told apart from the path; the first segment wins.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if (parsed.hostname or "").lower() != GITHUB_RAW_HOST:
        return None
    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) < 3:
        return None
    return GitHubRawLocation(
        owner=parts[0], repo=parts[1], ref=parts[2], path="/".join(parts[3:])
    )


def normalize_repo_path(path: str) -> str:
    """Strip leading/trailing slashes and collapse repeats: "/a//b/" -> "a/b"."""
    return "/".join(p for p in path.split("/") if p)


def join_repo_path(*parts: str) -> str:
    """Join and normalize repo-relative paths; "" stands for the repo root."""
    joined = posixpath.normpath(posixpath.join("", *(p.lstrip("/") for p in parts)))
    return "" if joined == "." else normalize_repo_path(joined)


class GitHubClient:
    """GitHub REST calls made through a shared HttpSession."""

    def __init__(self, session: HttpSession) -> None:
        self._session = session

    @property
    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        token = self._session.github_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def get_repo_tree(self, owner: str, repo: str, ref: str) -> list[dict[str, Any]]:
        """Return the full recursive tree for a ref, fetched once per session.

        Raises:
            RefNotFoundError: The tree call returned 404.
            FetchError: Any other failure, a malformed body, or a truncated tree.
        """
        key = f"{owner}/{repo}@{ref}"
        cached = self._session.github_trees.get(key)
        if cached is not None:
            logger.debug("tree cache hit %s", key)
            return cached

        url = f"{GITHUB_API}/repos/{owner}/{repo}/git/trees/{quote(ref, safe='')}"
        try:
            data = self._session.get_json(url, headers=self._headers, params={"recursive": 1})
        except FetchError as e:
            if e.not_found:
                raise RefNotFoundError(owner, repo, ref, url=url) from e
            raise
        if not isinstance(data, dict) or not isinstance(data.get("tree"), list):
            raise FetchError(f"GitHub tree response malformed for {key}", url=url)
        if data.get("truncated"):
            raise FetchError(f"GitHub tree truncated for {key}", url=url)

        tree = [e for e in data["tree"] if isinstance(e, dict)]
        self._session.github_trees[key] = tree
        logger.debug("tree cached %s (%d entries)", key, len(tree))
        return tree

    def list_dir(self, owner: str, repo: str, ref: str, path: str) -> Any:
        """Call the contents API for ``path``. A directory yields a list of entries."""
        enc_path = quote(normalize_repo_path(path), safe="/")
        url = f"{GITHUB_API}/repos/{owner}/{repo}/contents/{enc_path}"
        return self._session.get_json(url, headers=self._headers, params={"ref": ref})

    def list_files_recursive(self, owner: str, repo: str, ref: str, path: str) -> list[str]:
        """Repo paths of every file under ``path``, from the tree cache when possible."""
        root = normalize_repo_path(path)
        try:
            tree = self.get_repo_tree(owner, repo, ref)
        except RefNotFoundError:
            raise
        except FetchError as e:
            logger.debug("tree unavailable for %s/%s@%s: %s", owner, repo, ref, e)
        else:
            prefix = root + "/"
            return sorted(
                e["path"]
                for e in tree
                if e.get("type") == "blob"
                and isinstance(e.get("path"), str)
                and e["path"].startswith(prefix)
            )

        files: list[str] = []
        pending = [root]
        while pending:
            current = pending.pop(0)
            entries = self.list_dir(owner, repo, ref, current)
            if not isinstance(entries, list):
                raise FetchError(f"GitHub API unexpected response for {current}")
            for entry in entries:
                if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
                    continue
                child = f"{current}/{entry['name']}"
                if entry.get("type") == "file":
                    files.append(child)
                elif entry.get("type") == "dir":
                    pending.append(child)
        return sorted(files)
