from __future__ import annotations

import os
from pathlib import Path

from ..log import get_logger
from ..models.discovery import RESOURCE_KINDS, SKILL_MARKER, ResourceKind, ScanResult
from ..models.plugin import FileListOverride, PluginOverrides
from ._remote import is_markdown, wants_markdown

logger = get_logger(__name__)


def scan_plugin_local(local_dir: Path, overrides: PluginOverrides | None = None) -> ScanResult:
    """Enumerate resources under a local plugin directory.

    Commands and agents are collected recursively so nested files keep their
    relative path for flattening. Hooks are the directory's direct files; skills
    are direct subdirectories that contain SKILL.md. Results are sorted.
    """
    overrides = overrides or PluginOverrides()
    local_dir = Path(local_dir)
    if not local_dir.is_dir():
        logger.debug("local source missing: %s", local_dir)
        return ScanResult(errors=[f"Local source not found: {local_dir}"])

    result = ScanResult()
    for kind in RESOURCE_KINDS:
        override = overrides.for_kind(kind)
        try:
            if isinstance(override, FileListOverride):
                found = _from_file_list(local_dir, override.paths, kind)
            else:
                directory = _join(local_dir, override.path if override else kind)
                found = _list_kind(directory, kind)
        except OSError as e:
            result.errors.append(f"Cannot read {kind} in {local_dir}: {e}")
            continue
        result.for_kind(kind).extend(str(p) for p in found)

    logger.debug(
        "local scan %s: %d commands, %d agents, %d hooks, %d skills",
        local_dir,
        len(result.commands),
        len(result.agents),
        len(result.hooks),
        len(result.skills),
    )
    return result


def _join(base: Path, relative: str) -> Path:
    return Path(os.path.normpath(base / relative))


def _list_kind(directory: Path, kind: ResourceKind) -> list[Path]:
    if not directory.is_dir():
        return []
    if kind == "skills":
        return sorted(d for d in directory.iterdir() if d.is_dir() and is_skill_dir(d))
    if kind == "hooks":
        return sorted(f for f in directory.iterdir() if f.is_file())
    return sorted(f for f in directory.rglob("*") if f.is_file() and is_markdown(f.name))


def _from_file_list(base: Path, paths: tuple[str, ...], kind: ResourceKind) -> list[Path]:
    found = []
    for p in paths:
        candidate = _join(base, p)
        if kind == "skills":
            ok = candidate.is_dir() and is_skill_dir(candidate)
        else:
            ok = candidate.is_file() and (not wants_markdown(kind) or is_markdown(candidate.name))
        if ok:
            found.append(candidate)
        else:
            logger.debug("override %s skipped for %s", candidate, kind)
    return found


def is_skill_dir(directory: Path) -> bool:
    """True when ``directory`` directly holds a file named exactly SKILL.md."""
    return any(c.name == SKILL_MARKER and c.is_file() for c in directory.iterdir())
