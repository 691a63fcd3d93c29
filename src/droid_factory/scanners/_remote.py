from __future__ import annotations

from dataclasses import dataclass

from ..errors import FetchError
from ..fetchers import join_repo_path
from ..log import get_logger
from ..models.discovery import RESOURCE_KINDS, SKILL_MARKER, ResourceKind, ScanResult
from ..models.plugin import DirectoryOverride, FileListOverride, PluginOverrides

logger = get_logger(__name__)


@dataclass(frozen=True)
class RemoteEntry:
    """One child of a remote directory listing."""

    name: str
    path: str
    is_dir: bool


def is_markdown(path: str) -> bool:
    return path.lower().endswith(".md")


def wants_markdown(kind: ResourceKind) -> bool:
    # hooks may be shell or python scripts
    return kind in ("commands", "agents")


class RemoteScanner:
    """Per-directory listing scan shared by the GitHub and GitLab scanners.

    Subclasses supply ``list_entries`` and ``raw_url``; ``files_from_cache`` and
    ``skills_from_cache`` let a subclass answer from a cached tree instead.
    Failures are collected in ``errors`` and never raised.
    """

    provider = "remote"

    def __init__(
        self,
        repo: str,
        base_path: str,
        overrides: PluginOverrides | None,
        max_skill_probes: int,
    ) -> None:
        self.repo = repo
        self.base_path = join_repo_path(base_path)
        self.overrides = overrides or PluginOverrides()
        self.max_skill_probes = max_skill_probes
        self.errors: list[str] = []

    def raw_url(self, path: str) -> str:
        raise NotImplementedError

    def list_entries(self, path: str) -> list[RemoteEntry] | None:
        """List direct children of ``path``; None when the body is not a listing.

        Raises:
            FetchError: On a failed call (404 when the path does not exist).
        """
        raise NotImplementedError

    def files_from_cache(self, path: str, kind: ResourceKind) -> list[str] | None:
        return None

    def skills_from_cache(self, path: str) -> list[str] | None:
        return None

    def scan(self) -> ScanResult:
        result = ScanResult(errors=self.errors)
        for kind in RESOURCE_KINDS:
            result.for_kind(kind).extend(self.scan_kind(kind))
        return result

    def scan_kind(self, kind: ResourceKind) -> list[str]:
        override = self.overrides.for_kind(kind)
        if isinstance(override, FileListOverride):
            return self._from_file_list(override.paths, kind)
        path = self.section_path(kind, override)
        if kind == "skills":
            found = self.skills_from_cache(path)
            return found if found is not None else self._skills_via_api(path)
        found = self.files_from_cache(path, kind)
        return found if found is not None else self._files_via_api(path, kind)

    def section_path(self, kind: ResourceKind, override: DirectoryOverride | None) -> str:
        name = override.path if override is not None else kind
        return join_repo_path(self.base_path, name)

    def label(self, path: str) -> str:
        return f"{self.repo}/{path}"

    def _from_file_list(self, paths: tuple[str, ...], kind: ResourceKind) -> list[str]:
        urls = []
        for p in paths:
            repo_path = join_repo_path(self.base_path, p)
            if wants_markdown(kind) and not is_markdown(repo_path):
                logger.debug("override %s skipped: not markdown", p)
                continue
            urls.append(self.raw_url(repo_path))
        return urls

    def _list_or_record(self, path: str) -> list[RemoteEntry]:
        label = self.label(path)
        try:
            entries = self.list_entries(path)
        except FetchError as e:
            if e.not_found:
                logger.debug("%s path not found (%s), treating as empty", self.provider, label)
                return []
            message = f"{self.provider} API error ({label}): {e}"
            self.errors.append(message)
            logger.debug(message)
            return []
        if entries is None:
            message = f"{self.provider} API unexpected response for {label}"
            self.errors.append(message)
            logger.debug(message)
            return []
        return entries

    def _files_via_api(self, path: str, kind: ResourceKind) -> list[str]:
        return [
            self.raw_url(e.path)
            for e in self._list_or_record(path)
            if not e.is_dir and (not wants_markdown(kind) or is_markdown(e.name))
        ]

    def _skills_via_api(self, path: str) -> list[str]:
        candidates = [e for e in self._list_or_record(path) if e.is_dir]
        if len(candidates) > self.max_skill_probes:
            message = (
                f"Skill probe limit reached for {self.label(path)}: "
                f"checked {self.max_skill_probes} of {len(candidates)} directories"
            )
            self.errors.append(message)
            logger.debug(message)
            candidates = candidates[: self.max_skill_probes]

        skills = []
        for candidate in candidates:
            if self._has_skill_marker(candidate.path):
                skills.append(self.raw_url(candidate.path))
            else:
                logger.debug("%s has no %s, skipped", candidate.path, SKILL_MARKER)
        return skills

    def _has_skill_marker(self, path: str) -> bool:
        try:
            entries = self.list_entries(path)
        except FetchError as e:
            if not e.not_found:
                self.errors.append(f"{self.provider} API error ({self.label(path)}): {e}")
            return False
        return any(e.name == SKILL_MARKER and not e.is_dir for e in entries or ())
