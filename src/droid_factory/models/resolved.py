"""Resolved plugin locations: where a plugin's resources actually live."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .plugin import PluginOverrides


class GitHubLocation(BaseModel):
    model_config = ConfigDict(frozen=True)
    owner: str
    repo: str
    ref: str
    path: str = ""

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}@{self.ref}"


class GitLabLocation(BaseModel):
    model_config = ConfigDict(frozen=True)
    namespace_path: str
    repo: str
    ref: str
    path: str = ""


class LocalResolved(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["local"] = "local"
    local_dir: Path
    overrides: PluginOverrides = Field(default_factory=PluginOverrides)


class GitHubResolved(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["github"] = "github"
    github: GitHubLocation
    overrides: PluginOverrides = Field(default_factory=PluginOverrides)


class GitLabResolved(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["gitlab"] = "gitlab"
    gitlab: GitLabLocation
    overrides: PluginOverrides = Field(default_factory=PluginOverrides)


class UnsupportedResolved(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["unsupported"] = "unsupported"
    reason: str
    overrides: PluginOverrides = Field(default_factory=PluginOverrides)


ResolvedSource = Annotated[
    LocalResolved | GitHubResolved | GitLabResolved | UnsupportedResolved,
    Field(discriminator="kind"),
]
