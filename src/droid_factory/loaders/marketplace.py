from __future__ import annotations

import json
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..errors import FetchError, LoadError
from ..fetchers import (
    HttpSession,
    github_raw_url,
    gitlab_raw_url,
    is_owner_repo_shorthand,
    is_url,
    parse_github_raw_url,
    parse_repo_url,
)
from ..log import get_logger
from ..models.context import (
    GitHubContext,
    GitLabContext,
    LocalContext,
    URLContext,
)

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger(__name__)

MANIFEST_DIR = ".claude-plugin"
MANIFEST_FILE = "marketplace.json"
MANIFEST_PATH = f"{MANIFEST_DIR}/{MANIFEST_FILE}"
DEFAULT_REFS = ("main", "master")


@dataclass(frozen=True)
class LoadedMarketplace:
    """A parsed marketplace manifest and the context for resolving its plugin sources."""

    data: dict[str, Any]
    context: LocalContext | GitHubContext | GitLabContext | URLContext

    @property
    def name(self) -> str | None:
        name = self.data.get("name")
        return name if isinstance(name, str) else None


def load_marketplace(
    source: str | Path,
    ref: str | None = None,
    session: HttpSession | None = None,
) -> LoadedMarketplace:
    """Load a marketplace manifest from a local path, GitHub shorthand, or URL.

    Accepts:
    - a directory containing .claude-plugin/marketplace.json, or the file itself
    - "owner/repo" GitHub shorthand (tries ``ref``, else main then master)
    - a raw.githubusercontent.com URL to the manifest
    - a github.com or gitlab.com repository URL
    - any other http(s) URL serving marketplace.json

    Raises:
        LoadError: When no manifest could be retrieved or parsed.
    """
    if isinstance(source, Path):
        return _load_local(source)
    if not source:
        raise LoadError("No marketplace input provided")
    if not is_url(source) and not is_owner_repo_shorthand(source):
        return _load_local(Path(source).expanduser())

    owns_session = session is None
    session = session or HttpSession()
    try:
        return _load_remote(source, ref, session)
    finally:
        if owns_session:
            session.close()


def marketplace_root(manifest_file: Path) -> Path:
    """Directory relative plugin sources resolve against.

    A manifest inside .claude-plugin/ belongs to the directory above it.
    """
    parent = manifest_file.parent
    return parent.parent if parent.name == MANIFEST_DIR else parent


def _load_local(path: Path) -> LoadedMarketplace:
    manifest = _resolve_marketplace_path(path)
    logger.debug("loading local marketplace %s", manifest)
    try:
        text = manifest.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise LoadError(f"Marketplace file not found: {manifest}", path=manifest) from e
    except OSError as e:
        raise LoadError(f"Cannot read {manifest}: {e}", path=manifest) from e
    data = _parse_manifest(text, str(manifest), path=manifest)
    base_dir = marketplace_root(manifest.resolve())
    return LoadedMarketplace(data=data, context=LocalContext(base_dir=base_dir))


def _resolve_marketplace_path(path: Path) -> Path:
    if path.is_file():
        return path
    if path.is_dir():
        candidate = path / MANIFEST_DIR / MANIFEST_FILE
        if candidate.is_file():
            return candidate
        raise LoadError(f"marketplace.json not found in {path}", path=path)
    raise LoadError(f"Marketplace path not found: {path}", path=path)


def _load_remote(source: str, ref: str | None, session: HttpSession) -> LoadedMarketplace:
    if is_owner_repo_shorthand(source):
        owner, repo = source.split("/", 1)
        return _load_with_refs(
            source,
            [ref] if ref else list(DEFAULT_REFS),
            lambda r: github_raw_url(owner, repo, r, MANIFEST_PATH),
            lambda r: GitHubContext(owner=owner, repo=repo, ref=r),
            session,
        )

    raw = parse_github_raw_url(source)
    if raw is not None:
        logger.debug("GitHub raw URL %s", source)
        data = _fetch_manifest(source, session)
        base_path = posixpath.dirname(raw.path) if raw.path else ""
        if posixpath.basename(base_path) == MANIFEST_DIR:
            base_path = posixpath.dirname(base_path)
        return LoadedMarketplace(
            data=data,
            context=GitHubContext(
                owner=raw.owner, repo=raw.repo, ref=raw.ref, base_path=base_path
            ),
        )

    repo_url = parse_repo_url(source)
    if repo_url is not None and repo_url.provider == "github":
        return _load_with_refs(
            source,
            [ref] if ref else list(DEFAULT_REFS),
            lambda r: github_raw_url(repo_url.owner, repo_url.repo, r, MANIFEST_PATH),
            lambda r: GitHubContext(owner=repo_url.owner, repo=repo_url.repo, ref=r),
            session,
        )
    if repo_url is not None and repo_url.provider == "gitlab":
        refs = [r for r in (ref, *DEFAULT_REFS) if r]
        return _load_with_refs(
            source,
            list(dict.fromkeys(refs)),
            lambda r: gitlab_raw_url(repo_url.namespace_path, r, MANIFEST_PATH),
            lambda r: GitLabContext(
                namespace_path=repo_url.namespace_path, repo=repo_url.repo, ref=r
            ),
            session,
        )

    data = _fetch_manifest(source, session)
    base_url = source[: -len("/" + MANIFEST_FILE)] if source.endswith("/" + MANIFEST_FILE) else source
    return LoadedMarketplace(data=data, context=URLContext(base_url=base_url))


def _load_with_refs(
    source: str,
    refs: list[str],
    url_for_ref: Callable[[str], str],
    context_for_ref: Callable[[str], GitHubContext | GitLabContext],
    session: HttpSession,
) -> LoadedMarketplace:
    last_error: FetchError | None = None
    for r in refs:
        url = url_for_ref(r)
        logger.debug("trying %s", url)
        try:
            text = session.get_text(url)
        except FetchError as e:
            last_error = e
            continue
        return LoadedMarketplace(data=_parse_manifest(text, url), context=context_for_ref(r))
    message = f"Failed to load marketplace from {source}"
    if last_error is not None:
        message += f": {last_error}"
    raise LoadError(message) from last_error


def _fetch_manifest(url: str, session: HttpSession) -> dict[str, Any]:
    try:
        text = session.get_text(url)
    except FetchError as e:
        raise LoadError(f"Failed to load marketplace from {url}: {e}") from e
    return _parse_manifest(text, url)


def _parse_manifest(text: str, where: str, path: Path | None = None) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(f"Invalid JSON in {where}: {e}", path=path) from e
    if not isinstance(data, dict):
        raise LoadError(f"Marketplace manifest in {where} is not a JSON object", path=path)
    return data
