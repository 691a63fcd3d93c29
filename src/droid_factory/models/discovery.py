from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from .resolved import GitHubResolved, GitLabResolved, LocalResolved, UnsupportedResolved

ResourceKind = Literal["commands", "agents", "hooks", "skills"]

# Scan order within a plugin
RESOURCE_KINDS: tuple[ResourceKind, ...] = ("commands", "agents", "hooks", "skills")

SKILL_MARKER = "SKILL.md"


@dataclass
class ScanResult:
    """Resource locators found for one plugin source.

    Locators are absolute local paths or raw-content URLs. Entries in
    ``skills`` are directories that contained SKILL.md when scanned; all
    other entries are single files. ``errors`` holds non-fatal failures.
    """

    commands: list[str] = field(default_factory=list)
    agents: list[str] = field(default_factory=list)
    hooks: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def for_kind(self, kind: ResourceKind) -> list[str]:
        return getattr(self, kind)


@dataclass
class DiscoveredPlugin:
    """A marketplace plugin together with everything its source scan produced.

    Attributes:
        name: Plugin name from the manifest.
        description: Plugin description from the manifest.
        resolved: Where the plugin's source resolved to.
        commands: Command file locators.
        agents: Agent file locators (installed as droids).
        hooks: Hook file locators.
        skills: Skill directory locators.
        errors: Human-readable scan failures; the other lists may still be non-empty.
    """

    name: str
    description: str
    resolved: LocalResolved | GitHubResolved | GitLabResolved | UnsupportedResolved
    commands: list[str] = field(default_factory=list)
    agents: list[str] = field(default_factory=list)
    hooks: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def for_kind(self, kind: ResourceKind) -> list[str]:
        return getattr(self, kind)

    @property
    def resource_count(self) -> int:
        return sum(len(self.for_kind(k)) for k in RESOURCE_KINDS)

    @property
    def has_resources(self) -> bool:
        return self.resource_count > 0
