"""Marketplace contexts: how a plugin's relative source path is resolved."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class LocalContext(BaseModel):
    """Manifest loaded from disk; relative sources resolve against ``base_dir``."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["local"] = "local"
    base_dir: Path


class GitHubContext(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["github"] = "github"
    owner: str
    repo: str
    ref: str
    base_path: str = ""  # directory of the manifest's repo root, "" for the repo root


class GitLabContext(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["gitlab"] = "gitlab"
    namespace_path: str  # "group/subgroup/repo"
    repo: str
    ref: str
    base_path: str = ""


class URLContext(BaseModel):
    """Manifest fetched from an arbitrary URL. Cannot be enumerated as a directory."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["url"] = "url"
    base_url: str


MarketplaceContext = Annotated[
    LocalContext | GitHubContext | GitLabContext | URLContext,
    Field(discriminator="kind"),
]
