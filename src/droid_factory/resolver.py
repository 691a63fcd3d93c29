"""Resolve a plugin's declared source against its marketplace context.

Pure: no filesystem or network access. Every (plugin, context) pair maps to
exactly one resolved kind; unusable sources become ``UnsupportedResolved``.
"""

from __future__ import annotations

import os
from pathlib import Path

from .fetchers import join_repo_path, normalize_repo_path, parse_repo_url
from .models.context import GitHubContext, GitLabContext, LocalContext, URLContext
from .models.plugin import (
    GitHubRepoSource,
    GitURLSource,
    PluginRecord,
    RelativePathSource,
)
from .models.resolved import (
    GitHubLocation,
    GitHubResolved,
    GitLabLocation,
    GitLabResolved,
    LocalResolved,
    UnsupportedResolved,
)

DEFAULT_REF = "main"

Resolved = LocalResolved | GitHubResolved | GitLabResolved | UnsupportedResolved
Context = LocalContext | GitHubContext | GitLabContext | URLContext


def resolve_plugin_source(plugin: PluginRecord, context: Context) -> Resolved:
    overrides = plugin.overrides
    source = plugin.source

    if isinstance(source, RelativePathSource):
        return _resolve_relative(source.path, plugin.plugin_root, context, plugin)

    if isinstance(source, GitHubRepoSource):
        owner, _, repo = (source.repo or "").partition("/")
        if not source.repo:
            return UnsupportedResolved(reason="Missing GitHub repo", overrides=overrides)
        if not owner or not repo:
            return UnsupportedResolved(
                reason=f"Invalid GitHub repo: {source.repo}", overrides=overrides
            )
        return GitHubResolved(
            github=GitHubLocation(
                owner=owner,
                repo=repo.removesuffix(".git"),
                ref=_pick_ref(source.ref, context),
                path=normalize_repo_path(source.path),
            ),
            overrides=overrides,
        )

    if isinstance(source, GitURLSource):
        parsed = parse_repo_url(source.url)
        if parsed is not None and parsed.provider == "github":
            return GitHubResolved(
                github=GitHubLocation(
                    owner=parsed.owner,
                    repo=parsed.repo,
                    ref=_pick_ref(source.ref, context),
                    path=normalize_repo_path(source.path),
                ),
                overrides=overrides,
            )
        if parsed is not None and parsed.provider == "gitlab":
            return GitLabResolved(
                gitlab=GitLabLocation(
                    namespace_path=parsed.namespace_path,
                    repo=parsed.repo,
                    ref=_pick_ref(source.ref, context),
                    path=normalize_repo_path(source.path),
                ),
                overrides=overrides,
            )
        return UnsupportedResolved(reason="Unsupported git/url provider", overrides=overrides)

    return UnsupportedResolved(reason="Unknown source type", overrides=overrides)


def _resolve_relative(
    src: str, plugin_root: str, context: Context, plugin: PluginRecord
) -> Resolved:
    overrides = plugin.overrides
    if isinstance(context, LocalContext):
        local_dir = os.path.normpath(os.path.join(context.base_dir, plugin_root, src))
        return LocalResolved(local_dir=Path(local_dir), overrides=overrides)
    if isinstance(context, GitHubContext):
        return GitHubResolved(
            github=GitHubLocation(
                owner=context.owner,
                repo=context.repo,
                ref=context.ref,
                path=join_repo_path(context.base_path, plugin_root, src),
            ),
            overrides=overrides,
        )
    if isinstance(context, GitLabContext):
        return GitLabResolved(
            gitlab=GitLabLocation(
                namespace_path=context.namespace_path,
                repo=context.repo,
                ref=context.ref,
                path=join_repo_path(context.base_path, plugin_root, src),
            ),
            overrides=overrides,
        )
    return UnsupportedResolved(reason="Non-GitHub remote source path", overrides=overrides)


def _pick_ref(explicit: str | None, context: Context) -> str:
    if explicit:
        return explicit
    if isinstance(context, (GitHubContext, GitLabContext)) and context.ref:
        return context.ref
    return DEFAULT_REF
