from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from pathlib import Path

    from .discovery import ResourceKind

SourceType = Literal["local", "remote"]


@dataclass(frozen=True)
class InstallPlanItem:
    """One resource to copy or download.

    ``name`` is the flattened destination name; ``is_skill`` items are directories.
    """

    plugin: str
    name: str
    src: str
    src_type: SourceType
    dest: Path
    kind: ResourceKind
    is_skill: bool = False


@dataclass(frozen=True)
class UnresolvedPlugin:
    plugin: str
    reason: str


@dataclass(frozen=True)
class PlanConflict:
    """A plan item dropped because an earlier plugin already claimed its destination."""

    item: InstallPlanItem
    claimed_by: str


@dataclass
class MarketplacePlan:
    commands: list[InstallPlanItem] = field(default_factory=list)
    droids: list[InstallPlanItem] = field(default_factory=list)
    hooks: list[InstallPlanItem] = field(default_factory=list)
    skills: list[InstallPlanItem] = field(default_factory=list)
    unresolved: list[UnresolvedPlugin] = field(default_factory=list)
    conflicts: list[PlanConflict] = field(default_factory=list)

    def items(self) -> Iterator[InstallPlanItem]:
        yield from self.commands
        yield from self.droids
        yield from self.hooks
        yield from self.skills

    @property
    def is_empty(self) -> bool:
        return not (self.commands or self.droids or self.hooks or self.skills)


@dataclass(frozen=True)
class TemplatePlanItem:
    """A bundled template to copy. ``exists`` reflects the destination at plan time."""

    name: str
    src: Path
    dest: Path
    kind: Literal["commands", "agents"]
    description: str | None = None
    exists: bool = False


@dataclass
class TemplatePlan:
    commands: list[TemplatePlanItem] = field(default_factory=list)
    droids: list[TemplatePlanItem] = field(default_factory=list)

    def items(self) -> Iterator[TemplatePlanItem]:
        yield from self.commands
        yield from self.droids

    @property
    def is_empty(self) -> bool:
        return not (self.commands or self.droids)
