from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from ..config import DestDirs
    from ..factory_settings import CustomDroidsSetting
    from ..installer import InstallReport, ItemResult
    from ..models.plan import InstallPlanItem, MarketplacePlan, TemplatePlan

CHECK = "[green]*[/green]"
ARROW = ">"


def print_lines(console: Console, lines: list[str], style: str = "yellow") -> None:
    if not lines:
        return
    console.print()
    console.print(f"[{style}]Warning:[/{style}] {escape(lines[0])}")
    for line in lines[1:]:
        console.print(escape(line))


def print_template_list(console: Console, commands: list[str], droids: list[str]) -> None:
    console.print("Available command templates:")
    _bullets(console, commands)
    console.print()
    console.print("Available droid templates:")
    _bullets(console, droids)


def print_template_plan(console: Console, plan: TemplatePlan, dest_dirs: DestDirs) -> None:
    console.print("[bold]Install plan:[/bold]")
    for title, items in (("Commands", plan.commands), ("Droids", plan.droids)):
        console.print(f"  {title}:")
        _bullets(
            console,
            [f"{item.name}{' (exists)' if item.exists else ''}" for item in items],
            indent=4,
        )
    console.print()
    console.print("Installing to:")
    if plan.commands:
        console.print(f"  {escape(str(dest_dirs.commands))}")
    if plan.droids:
        console.print(f"  {escape(str(dest_dirs.droids))}")
    existing = sum(1 for item in plan.items() if item.exists)
    new = len(plan.commands) + len(plan.droids) - existing
    console.print()
    console.print(f"Summary: {new} new, {existing} existing")


def print_marketplace_plan(
    console: Console, plan: MarketplacePlan, dest_dirs: DestDirs, verbose: bool = False
) -> None:
    console.print("[bold]Install plan (marketplace):[/bold]")
    sections: list[tuple[str, list[InstallPlanItem], Path]] = [
        ("Commands", plan.commands, dest_dirs.commands),
        ("Droids", plan.droids, dest_dirs.droids),
        ("Hooks", plan.hooks, dest_dirs.hooks),
        ("Skills", plan.skills, dest_dirs.skills),
    ]
    for title, items, _ in sections:
        console.print(f"  {title}:")
        _bullets(
            console,
            [
                f"{item.name} [{item.plugin}]" + (f" <- {item.src_type}" if verbose else "")
                for item in items
            ],
            indent=4,
        )
    if plan.unresolved:
        console.print("  Unresolved plugins:")
        _bullets(console, [f"{u.plugin} ({u.reason})" for u in plan.unresolved], indent=4)
    if plan.conflicts:
        console.print("  Skipped (destination already planned):")
        _bullets(
            console,
            [f"{c.item.name} [{c.item.plugin}], kept [{c.claimed_by}]" for c in plan.conflicts],
            indent=4,
        )
    console.print()
    console.print("Installing to:")
    for _, items, dest in sections:
        if items:
            console.print(f"  {escape(str(dest))}")


def print_conflicts(console: Console, plan: MarketplacePlan) -> None:
    if not plan.conflicts:
        return
    print_lines(
        console,
        ["Some resources share a destination; the first plugin wins:"]
        + [
            f"  - {c.item.dest.name} from {c.item.plugin} (kept {c.claimed_by})"
            for c in plan.conflicts
        ],
    )


def print_result(console: Console, result: ItemResult) -> None:
    label = {"created": "wrote  ", "overwritten": "wrote  ", "skipped": "skip   "}.get(
        result.status, "failed "
    )
    reason = f" ({result.reason})" if result.reason and result.status != "skipped" else ""
    console.print(f"{label}{escape(str(result.dest))}{escape(reason)}")


def print_summary(
    console: Console,
    report: InstallReport,
    base_dir: Path,
    custom_droids: CustomDroidsSetting,
) -> None:
    console.print(f"{ARROW} Installing to: [cyan]{escape(str(base_dir))}[/cyan]")
    enabled = custom_droids.enabled and not custom_droids.missing and not custom_droids.error
    if enabled:
        console.print(f"{CHECK} Custom droids are enabled in your settings.")
    else:
        console.print(f"{ARROW} Custom droids need to be enabled in settings.")
        console.print(
            f"{ARROW} Open /settings, Experimental, Custom Droids, or set "
            f"enableCustomDroids: true in {escape(str(custom_droids.path))}"
        )
    console.print(
        f"{CHECK} Completed: {report.created} created, {report.overwritten} overwritten, "
        f"{report.skipped} skipped."
    )
    for failed in report.failed:
        console.print(f"[red]Failed:[/red] {escape(failed.name)}: {escape(failed.reason or '')}")
    console.print(
        f"{ARROW} Next: Restart Droid (Ctrl+C then relaunch) or run /commands and press R to reload."
    )


def _bullets(console: Console, lines: list[str], indent: int = 2) -> None:
    pad = " " * indent
    if not lines:
        console.print(f"{pad}(none)")
        return
    for line in lines:
        console.print(f"{pad}- {escape(line)}")
