from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Literal

import frontmatter  # type: ignore[import-untyped]

from ..log import get_logger
from ..models.plan import TemplatePlan, TemplatePlanItem

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..config import DestDirs

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def list_basenames(directory: Path) -> list[str]:
    """Sorted names of the ``*.md`` files directly in ``directory``, without extension."""
    if not directory.is_dir():
        return []
    return sorted(p.stem for p in directory.iterdir() if p.is_file() and p.suffix == ".md")


def resolve_selection(
    request: str | None, available: Sequence[str], kind: str
) -> list[str] | None:
    """Turn ``"all"`` or a comma list into known template names.

    Returns None when nothing was requested, so the caller can apply its default.
    Unknown names are logged as a warning and dropped; a ``.md`` suffix is accepted.
    """
    if not request:
        return None
    if request.strip() == "all":
        return list(available)
    selected: list[str] = []
    missing: list[str] = []
    for raw in request.split(","):
        name = raw.strip()
        if not name:
            continue
        normalized = name.removesuffix(".md")
        if normalized in available:
            if normalized not in selected:
                selected.append(normalized)
        else:
            missing.append(name)
    if missing:
        logger.warning("Unknown %s template(s): %s", kind, ", ".join(missing))
    return selected


def template_description(path: Path) -> str | None:
    """The ``description`` from a template's frontmatter, if it has one."""
    try:
        post = frontmatter.load(str(path))
    except Exception as e:
        logger.debug("no frontmatter for %s: %s", path, e)
        return None
    value = post.metadata.get("description")
    return str(value).strip() if value else None


def compute_template_plan(
    selected_commands: Sequence[str],
    selected_droids: Sequence[str],
    dest_dirs: DestDirs,
    templates_dir: Path = TEMPLATES_DIR,
) -> TemplatePlan:
    return TemplatePlan(
        commands=[
            _item(name, templates_dir / "commands", dest_dirs.commands, "commands")
            for name in selected_commands
        ],
        droids=[
            _item(name, templates_dir / "droids", dest_dirs.droids, "agents")
            for name in selected_droids
        ],
    )


def _item(
    name: str, src_dir: Path, dest_dir: Path, kind: Literal["commands", "agents"]
) -> TemplatePlanItem:
    src = src_dir / f"{name}.md"
    dest = dest_dir / f"{name}.md"
    return TemplatePlanItem(
        name=name,
        src=src,
        dest=dest,
        kind=kind,
        description=template_description(src) if src.is_file() else None,
        exists=dest.exists(),
    )
