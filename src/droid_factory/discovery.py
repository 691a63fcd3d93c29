"""Resolve and scan every plugin of a loaded marketplace.

Errors are data here: each plugin's scan failures land in its ``errors`` list,
and nothing past the marketplace load aborts the run.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from .fetchers import HttpSession
from .loaders import normalize_plugins
from .log import get_logger
from .models.discovery import DiscoveredPlugin, ScanResult
from .models.resolved import GitHubResolved, GitLabResolved, LocalResolved
from .resolver import resolve_plugin_source
from .scanners import scan_plugin_github, scan_plugin_gitlab, scan_plugin_local

if TYPE_CHECKING:
    from .fetchers import RateLimitInfo
    from .resolver import Context, Resolved

logger = get_logger(__name__)

TOKEN_HINT = "Consider setting GITHUB_TOKEN to increase GitHub API limits."


def discover_plugins(
    data: Any,
    context: Context,
    session: HttpSession | None = None,
) -> list[DiscoveredPlugin]:
    """Normalize, resolve and scan each plugin in manifest order.

    Never raises for a single plugin's failure: an unexpected exception during a
    scan is recorded in that plugin's ``errors`` and the next plugin is scanned.
    """
    owns_session = session is None
    session = session or HttpSession()
    try:
        discovered = []
        for plugin in normalize_plugins(data):
            resolved = resolve_plugin_source(plugin, context)
            logger.debug("plugin %s resolved to %s", plugin.name, resolved.kind)
            try:
                scan = _scan(resolved, session)
            except Exception as e:
                logger.debug("plugin %s scan failed: %s", plugin.name, e)
                scan = ScanResult(errors=[f"Scan failed: {e}"])
            logger.debug(
                "plugin %s: %d commands, %d agents, %d hooks, %d skills, %d errors",
                plugin.name,
                len(scan.commands),
                len(scan.agents),
                len(scan.hooks),
                len(scan.skills),
                len(scan.errors),
            )
            discovered.append(
                DiscoveredPlugin(
                    name=plugin.name,
                    description=plugin.description,
                    resolved=resolved,
                    commands=scan.commands,
                    agents=scan.agents,
                    hooks=scan.hooks,
                    skills=scan.skills,
                    errors=scan.errors,
                )
            )
        return discovered
    finally:
        if owns_session:
            session.close()


def _scan(resolved: Resolved, session: HttpSession) -> ScanResult:
    if isinstance(resolved, LocalResolved):
        return scan_plugin_local(resolved.local_dir, resolved.overrides)
    if isinstance(resolved, GitHubResolved):
        return scan_plugin_github(resolved.github, resolved.overrides, session)
    if isinstance(resolved, GitLabResolved):
        return scan_plugin_gitlab(resolved.gitlab, resolved.overrides, session)
    return ScanResult()


def format_discovery_warnings(discovered: list[DiscoveredPlugin]) -> list[str]:
    """Warning lines naming each plugin with errors and its first error."""
    errored = [p for p in discovered if p.errors]
    if not errored:
        return []
    lines = ["Some plugins could not be fully discovered:"]
    lines.extend(f"  - {p.name}: {p.errors[0]}" for p in errored)
    lines.append(f"  {TOKEN_HINT}")
    return lines


def format_rate_limit_warning(info: RateLimitInfo | None, now: float | None = None) -> list[str]:
    """Warning lines when the last GitHub reading shows the rate limit nearly exhausted."""
    if info is None or not info.is_low:
        return []
    lines = ["GitHub API rate limit nearly exhausted."]
    if info.limit is not None:
        lines.append(f"  Remaining {info.remaining}/{info.limit} requests for this hour.")
    else:
        lines.append(f"  Remaining requests: {info.remaining}.")
    reset_in = info.seconds_until_reset(time.time() if now is None else now)
    if reset_in is not None:
        minutes, seconds = divmod(reset_in, 60)
        lines.append(f"  Resets in ~{minutes}m {seconds}s.")
    lines.append("  Set GITHUB_TOKEN to increase limits.")
    return lines
