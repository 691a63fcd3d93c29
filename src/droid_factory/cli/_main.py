"""``droid-factory``: install Factory commands and droids from bundled templates or a marketplace."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..config import InstallerConfig
from ..discovery import discover_plugins, format_discovery_warnings, format_rate_limit_warning
from ..errors import LoadError
from ..factory_settings import read_custom_droids_setting
from ..fetchers import HttpSession
from ..installer import execute_plan, install_templates
from ..loaders import load_marketplace
from ..log import configure_logging, get_logger
from ..planner import (
    TEMPLATES_DIR,
    compute_marketplace_plan,
    compute_template_plan,
    list_basenames,
    resolve_selection,
)
from . import _output as output
from ._spinner import Spinner

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..installer import InstallReport, ItemResult

logger = get_logger(__name__)

console = Console(soft_wrap=True)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="droid-factory")
@click.option(
    "--scope",
    type=click.Choice(["personal", "project"]),
    default="personal",
    show_default=True,
    help="Install to ~/.factory or <path>/.factory.",
)
@click.option(
    "--path",
    "project_path",
    type=click.Path(file_okay=False, path_type=Path),
    help="Repository root for --scope project.",
)
@click.option("--commands", "commands_sel", help="Template commands: all or name1,name2.")
@click.option("--droids", "droids_sel", help="Template droids: all or name1,name2.")
@click.option("--no-commands", is_flag=True, help="Skip installing commands.")
@click.option("--no-droids", is_flag=True, help="Skip installing droids.")
@click.option("--only-commands", is_flag=True, help="Commands only (implies --no-droids).")
@click.option("--only-droids", is_flag=True, help="Droids only (implies --no-commands).")
@click.option("--list", "list_only", is_flag=True, help="List available templates and exit.")
@click.option("--marketplace", help="Marketplace path, owner/repo, or URL.")
@click.option("--plugins", help="Marketplace plugins: all or name1,name2.")
@click.option("--ref", help="Git ref for the marketplace (default: main, then master).")
@click.option("--force", is_flag=True, help="Overwrite existing files.")
@click.option("-y", "--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.option("--dry-run", is_flag=True, help="Show the plan without writing anything.")
@click.option("--verbose", is_flag=True, help="Print the plan and every written file.")
@click.option(
    "--debug", is_flag=True, help="Log every HTTP call and scan decision; disables the spinner."
)
@click.pass_context
def cli(
    ctx: click.Context,
    scope: str,
    project_path: Path | None,
    commands_sel: str | None,
    droids_sel: str | None,
    no_commands: bool,
    no_droids: bool,
    only_commands: bool,
    only_droids: bool,
    list_only: bool,
    marketplace: str | None,
    plugins: str | None,
    ref: str | None,
    force: bool,
    yes: bool,
    dry_run: bool,
    verbose: bool,
    debug: bool,
) -> None:
    """Install Factory custom commands and droids."""
    configure_logging(debug)
    try:
        config = InstallerConfig(
            scope=scope,
            project_path=project_path,
            force=force,
            dry_run=dry_run,
            verbose=verbose,
            debug=debug,
        )
    except ValidationError as e:
        raise click.UsageError(str(e)) from e

    try:
        if list_only:
            output.print_template_list(
                console,
                list_basenames(TEMPLATES_DIR / "commands"),
                list_basenames(TEMPLATES_DIR / "droids"),
            )
            return
        if marketplace is not None:
            code = _run_marketplace(config, marketplace, ref, plugins, yes)
        else:
            code = _run_templates(
                config,
                commands_sel,
                droids_sel,
                no_commands or only_droids,
                no_droids or only_commands,
                yes,
            )
    except (KeyboardInterrupt, click.Abort):
        console.print("\nCancelled.")
        ctx.exit(EXIT_INTERRUPTED)
    ctx.exit(code)


def _run_marketplace(
    config: InstallerConfig,
    source: str,
    ref: str | None,
    plugins: str | None,
    yes: bool,
) -> int:
    with HttpSession(config) as session:
        try:
            with Spinner(console, "Fetching marketplace...", enabled=_spin(config)):
                loaded = load_marketplace(source, ref=ref, session=session)
                discovered = discover_plugins(loaded.data, loaded.context, session=session)
        except LoadError as e:
            console.print(f"[red]Failed to load marketplace:[/red] {escape(str(e))}")
            return EXIT_FAILURE

        if not config.debug:
            output.print_lines(console, format_discovery_warnings(discovered))
            output.print_lines(console, format_rate_limit_warning(session.rate_limit))

        dest_dirs = config.dest_dirs
        plan = compute_marketplace_plan(_plugin_selection(plugins), discovered, dest_dirs)
        if config.verbose or config.dry_run:
            output.print_marketplace_plan(console, plan, dest_dirs, verbose=config.verbose)
        else:
            output.print_conflicts(console, plan)
        if config.dry_run:
            console.print("\nDry run: no files were written.")
            return 0
        if plan.is_empty:
            console.print("Nothing to install (no plugins or components selected).")
            return 0

        force = _confirm(config, yes)
        spinner = Spinner(console, "Installing...", enabled=_spin(config))
        with spinner:
            report = execute_plan(
                plan.items(), session, force=force, on_result=_result_printer(config, spinner)
            )
        if not config.debug:
            output.print_lines(console, format_rate_limit_warning(session.rate_limit))
    return _finish(config, report)


def _run_templates(
    config: InstallerConfig,
    commands_sel: str | None,
    droids_sel: str | None,
    no_commands: bool,
    no_droids: bool,
    yes: bool,
) -> int:
    available_commands = list_basenames(TEMPLATES_DIR / "commands")
    available_droids = list_basenames(TEMPLATES_DIR / "droids")
    commands = [] if no_commands else _selected(commands_sel, available_commands, "command")
    droids = [] if no_droids else _selected(droids_sel, available_droids, "droid")
    if not commands and not droids:
        console.print("Nothing to install (no commands or droids selected).")
        return 0

    dest_dirs = config.dest_dirs
    plan = compute_template_plan(commands, droids, dest_dirs)
    if config.verbose or config.dry_run:
        output.print_template_plan(console, plan, dest_dirs)
    if config.dry_run:
        console.print("\nDry run: no files were written.")
        return 0

    force = _confirm(config, yes)
    spinner = Spinner(console, "Installing...", enabled=_spin(config))
    with spinner:
        report = install_templates(
            plan.items(), force=force, on_result=_result_printer(config, spinner)
        )
    return _finish(config, report)


def _selected(request: str | None, available: list[str], kind: str) -> list[str]:
    selected = resolve_selection(request, available, kind)
    return list(available) if selected is None else selected


def _plugin_selection(plugins: str | None) -> str | list[str]:
    if plugins is None or plugins.strip() == "all":
        return "all"
    return [p.strip() for p in plugins.split(",") if p.strip()]


def _spin(config: InstallerConfig) -> bool:
    return console.is_terminal and not config.verbose and not config.debug


def _confirm(config: InstallerConfig, yes: bool) -> bool:
    """Ask before writing when interactive. Returns the effective force flag."""
    if yes or not sys.stdin.isatty() or not console.is_terminal:
        return config.force
    answer = click.prompt(
        "\nProceed? [y] Yes / [f] Force overwrite / [n] Cancel",
        default="y",
        show_default=False,
    )
    normalized = answer.strip().lower()
    if normalized in ("n", "no", "q", "quit", "exit"):
        console.print("Cancelled.")
        raise click.exceptions.Exit(0)
    if normalized in ("f", "force"):
        return True
    return config.force


def _result_printer(
    config: InstallerConfig, spinner: Spinner
) -> Callable[[ItemResult], None]:
    def on_result(result: ItemResult) -> None:
        if result.status == "failed":
            logger.debug("failed %s: %s", result.name, result.reason)
        if config.verbose or result.status == "failed":
            with spinner.paused():
                output.print_result(console, result)

    return on_result


def _finish(config: InstallerConfig, report: InstallReport) -> int:
    output.print_summary(console, report, config.base_dir, read_custom_droids_setting())
    return EXIT_FAILURE if report.failed else 0


def main() -> None:
    cli()
