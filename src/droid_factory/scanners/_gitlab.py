from __future__ import annotations

from typing import TYPE_CHECKING

from ..fetchers import GitLabClient, gitlab_raw_url, join_repo_path
from ..models.discovery import ScanResult
from ._remote import RemoteEntry, RemoteScanner

if TYPE_CHECKING:
    from ..fetchers import HttpSession
    from ..models.plugin import PluginOverrides
    from ..models.resolved import GitLabLocation


class GitLabScanner(RemoteScanner):
    """GitLab has no tree cache: every directory and skill probe is its own tree call."""

    provider = "GitLab"

    def __init__(
        self,
        location: GitLabLocation,
        overrides: PluginOverrides | None,
        session: HttpSession,
    ) -> None:
        super().__init__(
            location.repo, location.path, overrides, session.config.max_skill_probes
        )
        self.location = location
        self.client = GitLabClient(session)

    def raw_url(self, path: str) -> str:
        return gitlab_raw_url(self.location.namespace_path, self.location.ref, path)

    def list_entries(self, path: str) -> list[RemoteEntry] | None:
        loc = self.location
        entries = self.client.list_tree(loc.namespace_path, loc.ref, path)
        return [
            RemoteEntry(
                name=e["name"],
                path=e["path"] if isinstance(e.get("path"), str) else join_repo_path(path, e["name"]),
                is_dir=e.get("type") == "tree",
            )
            for e in entries
            if isinstance(e.get("name"), str) and e.get("type") in ("blob", "tree")
        ]


def scan_plugin_gitlab(
    location: GitLabLocation,
    overrides: PluginOverrides | None,
    session: HttpSession,
) -> ScanResult:
    return GitLabScanner(location, overrides, session).scan()
