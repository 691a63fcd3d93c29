from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from ..convert import convert_agent_to_droid, convert_command
from ..errors import FetchError, InstallError
from ..log import get_logger
from ._files import copy_dir, copy_file, download_skill_dir, download_to_file

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ..fetchers import HttpSession
    from ..models.plan import InstallPlanItem, TemplatePlanItem

logger = get_logger(__name__)

Status = Literal["created", "overwritten", "skipped", "failed"]


@dataclass(frozen=True)
class ItemResult:
    name: str
    kind: str
    dest: Path
    status: Status
    reason: str | None = None


@dataclass
class InstallReport:
    results: list[ItemResult] = field(default_factory=list)

    def count(self, status: Status) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def created(self) -> int:
        return self.count("created")

    @property
    def overwritten(self) -> int:
        return self.count("overwritten")

    @property
    def skipped(self) -> int:
        return self.count("skipped")

    @property
    def failed(self) -> list[ItemResult]:
        return [r for r in self.results if r.status == "failed"]


def execute_plan(
    items: Iterable[InstallPlanItem],
    session: HttpSession,
    force: bool = False,
    on_result: Callable[[ItemResult], None] | None = None,
) -> InstallReport:
    """Copy or download every plan item, converting agents and commands on the way.

    A failing item is reported as "failed" and does not stop the remaining items.
    Local sources that no longer exist are skipped.
    """
    report = InstallReport()
    for item in items:
        result = _install_item(item, session, force)
        report.results.append(result)
        if on_result is not None:
            on_result(result)
    return report


def install_templates(
    items: Iterable[TemplatePlanItem],
    force: bool = False,
    on_result: Callable[[ItemResult], None] | None = None,
) -> InstallReport:
    """Copy bundled templates as-is; they are already in Factory format."""
    report = InstallReport()
    for item in items:
        if not item.src.is_file():
            result = ItemResult(item.name, item.kind, item.dest, "skipped", "template not found")
        else:
            src, dest = item.src, item.dest
            result = _run(item.name, item.kind, dest, lambda: copy_file(src, dest, force))
        report.results.append(result)
        if on_result is not None:
            on_result(result)
    return report


def _install_item(item: InstallPlanItem, session: HttpSession, force: bool) -> ItemResult:
    transform = _transform_for(item)
    if item.src_type == "local":
        src = Path(item.src)
        if not src.exists():
            return ItemResult(item.name, item.kind, item.dest, "skipped", "source not found")
        if item.is_skill:
            return _run(item.name, item.kind, item.dest, lambda: copy_dir(src, item.dest, force))
        return _run(
            item.name, item.kind, item.dest, lambda: copy_file(src, item.dest, force, transform)
        )
    if item.is_skill:
        return _run(
            item.name,
            item.kind,
            item.dest,
            lambda: download_skill_dir(session, item.src, item.dest, force),
        )
    return _run(
        item.name,
        item.kind,
        item.dest,
        lambda: download_to_file(
            session, item.src, item.dest, force, transform, executable=item.kind == "hooks"
        ),
    )


def _transform_for(item: InstallPlanItem) -> Callable[[str], str] | None:
    if item.kind == "agents":
        return lambda text: convert_agent_to_droid(text, fallback_name=item.name)
    if item.kind == "commands":
        return convert_command
    return None


def _run(name: str, kind: str, dest: Path, write: Callable[[], str]) -> ItemResult:
    existed = dest.exists()
    try:
        outcome = write()
    except (InstallError, FetchError, OSError, ValueError) as e:
        logger.debug("install %s failed: %s", name, e)
        return ItemResult(name, kind, dest, "failed", str(e))
    if outcome == "skipped":
        return ItemResult(name, kind, dest, "skipped", "exists")
    return ItemResult(name, kind, dest, "overwritten" if existed else "created")
