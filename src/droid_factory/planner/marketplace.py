from __future__ import annotations

import posixpath
import re
from typing import TYPE_CHECKING, Literal

from ..fetchers import github_raw_url, gitlab_raw_url, join_repo_path
from ..log import get_logger
from ..models.discovery import RESOURCE_KINDS, DiscoveredPlugin, ResourceKind
from ..models.plan import InstallPlanItem, MarketplacePlan, PlanConflict, UnresolvedPlugin
from ..models.plugin import DirectoryOverride
from ..models.resolved import GitHubResolved, GitLabResolved, LocalResolved, UnsupportedResolved

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from ..config import DestDirs

logger = get_logger(__name__)

FLATTEN_SEP = "__"
NO_COMPONENTS = "No components found"

_REMOTE = re.compile(r"^https?://", re.IGNORECASE)

# Resource kind -> (plan list / dest dir attribute)
_TARGETS: dict[ResourceKind, str] = {
    "commands": "commands",
    "agents": "droids",
    "hooks": "hooks",
    "skills": "skills",
}


def flatten_name(
    locator: str, directory: str, root: str | None = None, is_dir: bool = False
) -> str:
    """Destination name for a resource locator.

    The part after the resource directory (``commands/``, ``skills/``...) is kept,
    its extension dropped and nested separators joined with ``__``, so
    ``commands/workflows/plan.md`` becomes ``workflows__plan`` and can never
    collide with ``commands/plan.md``. Directory locators (skills) keep
    their full last segment. When ``root`` (the plugin's own locator
    prefix) is given, the directory is searched only below it. Locators without
    the directory fall back to their basename.

    Segments are joined as-is, so a file whose own name contains ``__``
    (``commands/a__b.md``) flattens to the same name as ``commands/a/b.md``.
    The planner records the later of two such items in ``conflicts``.
    """
    path = locator.replace("\\", "/")
    if root:
        prefix = root.replace("\\", "/").rstrip("/") + "/"
        if path.startswith(prefix):
            path = "/" + path[len(prefix) :]

    needle = "/" + join_repo_path(directory) + "/"
    idx = path.find(needle)
    rel = path[idx + len(needle) :].strip("/") if idx != -1 else ""
    if not rel:
        rel = posixpath.basename(path.rstrip("/"))

    parts = [p for p in rel.split("/") if p]
    if parts and not is_dir:
        parts[-1] = _strip_extension(parts[-1])
    return FLATTEN_SEP.join(p for p in parts if p)


def _strip_extension(name: str) -> str:
    stem, dot, _ = name.rpartition(".")
    return stem if dot and stem else name


def source_type(locator: str) -> Literal["local", "remote"]:
    return "remote" if _REMOTE.match(locator) else "local"


def plugin_root_locator(plugin: DiscoveredPlugin) -> str | None:
    """The locator prefix every resource of ``plugin`` starts with, if known."""
    resolved = plugin.resolved
    if isinstance(resolved, LocalResolved):
        return str(resolved.local_dir)
    if isinstance(resolved, GitHubResolved):
        loc = resolved.github
        return github_raw_url(loc.owner, loc.repo, loc.ref, loc.path)
    if isinstance(resolved, GitLabResolved):
        loc = resolved.gitlab
        return gitlab_raw_url(loc.namespace_path, loc.ref, loc.path)
    return None


def compute_marketplace_plan(
    selected_plugins: Literal["all"] | Sequence[str],
    discovered: list[DiscoveredPlugin],
    dest_dirs: DestDirs,
) -> MarketplacePlan:
    """Build the install plan for the selected plugins, in manifest order.

    Scan errors become ``unresolved`` entries without excluding the plugin's
    resources. A plugin with nothing found and no errors gets one ``unresolved``
    entry with its resolution failure reason. When two items would write the same
    destination, the first one planned wins and the later one is recorded in
    ``conflicts`` instead.
    """
    if selected_plugins == "all":
        selected = list(discovered)
    else:
        wanted = set(selected_plugins)
        selected = [p for p in discovered if p.name in wanted]

    plan = MarketplacePlan()
    claimed: dict[Path, str] = {}

    for plugin in selected:
        errors = [e for e in plugin.errors if e]
        plan.unresolved.extend(UnresolvedPlugin(plugin=plugin.name, reason=e) for e in errors)

        if not plugin.has_resources:
            if not errors:
                reason = (
                    plugin.resolved.reason
                    if isinstance(plugin.resolved, UnsupportedResolved)
                    else NO_COMPONENTS
                )
                plan.unresolved.append(UnresolvedPlugin(plugin=plugin.name, reason=reason))
            continue

        root = plugin_root_locator(plugin)
        for kind in RESOURCE_KINDS:
            target = _TARGETS[kind]
            dest_dir: Path = getattr(dest_dirs, target)
            directory = _section_dir(plugin, kind)
            for locator in plugin.for_kind(kind):
                item = _plan_item(plugin.name, locator, kind, directory, root, dest_dir)
                owner = claimed.get(item.dest)
                if owner is not None:
                    logger.debug("%s: %s already planned by %s", plugin.name, item.dest, owner)
                    plan.conflicts.append(PlanConflict(item=item, claimed_by=owner))
                    continue
                claimed[item.dest] = plugin.name
                getattr(plan, target).append(item)

    return plan


def _section_dir(plugin: DiscoveredPlugin, kind: ResourceKind) -> str:
    override = plugin.resolved.overrides.for_kind(kind)
    if isinstance(override, DirectoryOverride):
        return join_repo_path(override.path) or kind
    return kind


def _plan_item(
    plugin: str,
    locator: str,
    kind: ResourceKind,
    directory: str,
    root: str | None,
    dest_dir: Path,
) -> InstallPlanItem:
    name = flatten_name(locator, directory, root, is_dir=kind == "skills")
    if kind == "skills":
        dest = dest_dir / name
    elif kind == "hooks":
        dest = dest_dir / (name + _extension(locator))
    else:
        dest = dest_dir / f"{name}.md"
    return InstallPlanItem(
        plugin=plugin,
        name=name,
        src=locator,
        src_type=source_type(locator),
        dest=dest,
        kind=kind,
        is_skill=kind == "skills",
    )


def _extension(locator: str) -> str:
    base = posixpath.basename(locator.replace("\\", "/"))
    stem, dot, ext = base.rpartition(".")
    return f".{ext}" if dot and stem else ""
