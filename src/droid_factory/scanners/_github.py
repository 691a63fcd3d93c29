from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..errors import FetchError, RefNotFoundError
from ..fetchers import GitHubClient, github_raw_url, join_repo_path
from ..log import get_logger
from ..models.discovery import RESOURCE_KINDS, SKILL_MARKER, ResourceKind, ScanResult
from ..models.plugin import FileListOverride, PluginOverrides
from ._remote import RemoteEntry, RemoteScanner, is_markdown, wants_markdown

if TYPE_CHECKING:
    from ..fetchers import HttpSession
    from ..models.resolved import GitHubLocation

logger = get_logger(__name__)


class GitHubScanner(RemoteScanner):
    """Scan one GitHub plugin source, answering from the session's tree cache when possible.

    The recursive tree is fetched once per (owner, repo, ref) per session. When it is
    unavailable (error, truncated, malformed) every listing falls back to the
    contents API, one call per directory plus one per skill candidate.
    """

    provider = "GitHub"

    def __init__(
        self,
        location: GitHubLocation,
        overrides: PluginOverrides | None,
        session: HttpSession,
    ) -> None:
        super().__init__(
            location.repo, location.path, overrides, session.config.max_skill_probes
        )
        self.location = location
        self.client = GitHubClient(session)
        self.tree: list[dict[str, Any]] | None = None

    def raw_url(self, path: str) -> str:
        loc = self.location
        return github_raw_url(loc.owner, loc.repo, loc.ref, path)

    def list_entries(self, path: str) -> list[RemoteEntry] | None:
        loc = self.location
        data = self.client.list_dir(loc.owner, loc.repo, loc.ref, path)
        if not isinstance(data, list):
            return None
        return [
            RemoteEntry(
                name=e["name"],
                path=join_repo_path(path, e["name"]),
                is_dir=e.get("type") == "dir",
            )
            for e in data
            if isinstance(e, dict)
            and isinstance(e.get("name"), str)
            and e.get("type") in ("file", "dir")
        ]

    def scan(self) -> ScanResult:
        if self._needs_listing():
            loc = self.location
            try:
                self.tree = self.client.get_repo_tree(loc.owner, loc.repo, loc.ref)
            except RefNotFoundError as e:
                # A missing ref makes every listing meaningless. Explicit file lists need none.
                logger.debug("%s", e)
                result = ScanResult(errors=[str(e)])
                for kind in RESOURCE_KINDS:
                    if isinstance(self.overrides.for_kind(kind), FileListOverride):
                        result.for_kind(kind).extend(self.scan_kind(kind))
                return result
            except FetchError as e:
                logger.debug("tree unavailable for %s, using contents API: %s", loc.slug, e)
            else:
                logger.debug("loaded tree for %s (%d entries)", loc.slug, len(self.tree))
        return super().scan()

    def files_from_cache(self, path: str, kind: ResourceKind) -> list[str] | None:
        if self.tree is None:
            return None
        if not path:
            return []
        prefix = path + "/"
        urls = []
        for entry in self.tree:
            entry_path = entry.get("path")
            if entry.get("type") != "blob" or not isinstance(entry_path, str):
                continue
            if not entry_path.startswith(prefix):
                continue
            remainder = entry_path[len(prefix) :]
            if not remainder or "/" in remainder:
                continue  # direct children only
            if wants_markdown(kind) and not is_markdown(entry_path):
                continue
            urls.append(self.raw_url(entry_path))
        return urls

    def skills_from_cache(self, path: str) -> list[str] | None:
        if self.tree is None:
            return None
        if not path:
            return []
        prefix = path + "/"
        names = set()
        for entry in self.tree:
            entry_path = entry.get("path")
            if entry.get("type") != "blob" or not isinstance(entry_path, str):
                continue
            if not entry_path.startswith(prefix):
                continue
            parts = entry_path[len(prefix) :].split("/")
            if len(parts) == 2 and parts[1] == SKILL_MARKER:
                names.add(parts[0])
        return [self.raw_url(prefix + name) for name in sorted(names)]

    def _needs_listing(self) -> bool:
        return any(
            not isinstance(self.overrides.for_kind(kind), FileListOverride)
            for kind in RESOURCE_KINDS
        )


def scan_plugin_github(
    location: GitHubLocation,
    overrides: PluginOverrides | None,
    session: HttpSession,
) -> ScanResult:
    """Enumerate commands, agents, hooks and skills of a GitHub plugin source.

    A 404 listing means the directory does not exist and yields no resources.
    Other failures are recorded in ``errors``. A missing ref yields a single error.
    """
    return GitHubScanner(location, overrides, session).scan()
