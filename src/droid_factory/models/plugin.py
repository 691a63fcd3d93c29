"""Canonical plugin records normalized from marketplace manifest entries.

Manifest JSON is duck-typed: ``source`` may be a path string or an object, and
component overrides may be a directory string, a list of paths, or an inline
config. Both are parsed once into the tagged variants below so later stages
never inspect raw fields.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class RelativePathSource(BaseModel):
    """A path relative to the marketplace base (e.g. "./plugins/my-plugin")."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["path"] = "path"
    path: str


class GitHubRepoSource(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["github"] = "github"
    repo: str | None = None  # "owner/repo"; None when the entry omitted it
    ref: str | None = None
    path: str = ""


class GitURLSource(BaseModel):
    """A ``git`` or ``url`` source; the provider is derived from the URL host."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["git"] = "git"
    url: str = ""
    ref: str | None = None
    path: str = ""


class UnknownSource(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["unknown"] = "unknown"
    raw: Any = None


PluginSource = Annotated[
    RelativePathSource | GitHubRepoSource | GitURLSource | UnknownSource,
    Field(discriminator="kind"),
]


class DirectoryOverride(BaseModel):
    """Component directory relative to the plugin root (replaces the default dir name)."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["directory"] = "directory"
    path: str


class FileListOverride(BaseModel):
    """Explicit component paths relative to the plugin root. Skips directory listing."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["files"] = "files"
    paths: tuple[str, ...] = ()


ComponentOverride = Annotated[
    DirectoryOverride | FileListOverride,
    Field(discriminator="kind"),
]


class PluginOverrides(BaseModel):
    model_config = ConfigDict(frozen=True)
    commands: ComponentOverride | None = None
    agents: ComponentOverride | None = None
    hooks: ComponentOverride | None = None
    skills: ComponentOverride | None = None

    @field_validator("commands", "agents", "hooks", "skills", mode="before")
    @classmethod
    def _parse(cls, v: object) -> object:
        return parse_component_override(v)

    def for_kind(self, kind: str) -> DirectoryOverride | FileListOverride | None:
        return getattr(self, kind)


class PluginRecord(BaseModel):
    """One marketplace entry in canonical form. Only ``name`` is required."""

    model_config = ConfigDict(frozen=True)
    name: str
    description: str = ""
    version: str = ""
    author: str = ""
    category: str = ""
    keywords: tuple[str, ...] = ()
    license: str = ""
    homepage: str = ""
    repository: str = ""
    strict: bool = True
    plugin_root: str = ""
    source: PluginSource = Field(default_factory=UnknownSource)
    overrides: PluginOverrides = Field(default_factory=PluginOverrides)

    @field_validator("source", mode="before")
    @classmethod
    def _parse_source(cls, v: object) -> object:
        return parse_plugin_source(v)


def parse_plugin_source(raw: object) -> RelativePathSource | GitHubRepoSource | GitURLSource | UnknownSource:
    """Map a raw manifest ``source`` value to exactly one source variant."""
    if isinstance(raw, (RelativePathSource, GitHubRepoSource, GitURLSource, UnknownSource)):
        return raw
    if isinstance(raw, str):
        return RelativePathSource(path=raw)
    if isinstance(raw, dict):
        discriminator = _str(raw.get("source")) or _str(raw.get("type"))
        kind = discriminator.lower()
        if kind == "github":
            return GitHubRepoSource(
                repo=_str(raw.get("repo")) or _str(raw.get("repository")) or None,
                ref=_str(raw.get("ref")) or None,
                path=_str(raw.get("path")),
            )
        if kind in ("git", "url"):
            return GitURLSource(
                url=_str(raw.get("url")) or _str(raw.get("href")),
                ref=_str(raw.get("ref")) or None,
                path=_str(raw.get("path")),
            )
    return UnknownSource(raw=raw)


def parse_component_override(raw: object) -> DirectoryOverride | FileListOverride | None:
    if raw is None or isinstance(raw, (DirectoryOverride, FileListOverride)):
        return raw
    if isinstance(raw, dict) and raw.get("kind") in ("directory", "files"):
        # Round-tripped variant. A malformed one counts as absent.
        model = DirectoryOverride if raw["kind"] == "directory" else FileListOverride
        try:
            return model.model_validate(raw)
        except ValidationError:
            return None
    if isinstance(raw, str):
        return DirectoryOverride(path=raw) if raw.strip() else None
    if isinstance(raw, (list, tuple)):
        return FileListOverride(paths=tuple(p for p in raw if isinstance(p, str) and p))
    # Inline hook configs (dicts) and other shapes carry no component paths
    return None


def _str(value: object) -> str:
    return value if isinstance(value, str) else ""
