"""Installer configuration: install scope, destinations, and remote access settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Scope = Literal["personal", "project"]

FACTORY_DIR_NAME = ".factory"
GITHUB_TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


def github_token_from_env() -> str | None:
    """Return the first non-empty token from GITHUB_TOKEN or GH_TOKEN."""
    for var in GITHUB_TOKEN_ENV_VARS:
        token = (os.getenv(var) or "").strip()
        if token:
            return token
    return None


class DestDirs(BaseModel):
    """Destination directory per resource type."""

    model_config = ConfigDict(frozen=True)
    commands: Path
    droids: Path
    hooks: Path
    skills: Path

    @classmethod
    def under(cls, base_dir: Path) -> DestDirs:
        return cls(
            commands=base_dir / "commands",
            droids=base_dir / "droids",
            hooks=base_dir / "hooks",
            skills=base_dir / "skills",
        )


class InstallerConfig(BaseModel):
    """Settings for one installer invocation.

    Attributes:
        scope: "personal" installs under ~/.factory, "project" under <project_path>/.factory.
        project_path: Repository root for project scope; defaults to the working directory.
        github_token: Bearer token for GitHub API calls; read from the environment if unset.
        max_skill_probes: Upper bound on per-candidate SKILL.md probes for one skills directory.
    """

    model_config = ConfigDict(extra="forbid")
    scope: Scope = "personal"
    project_path: Path | None = None
    github_token: str | None = Field(default_factory=github_token_from_env)
    debug: bool = False
    verbose: bool = False
    force: bool = False
    dry_run: bool = False
    timeout: float = 30.0
    max_redirects: int = Field(5, ge=0)
    max_skill_probes: int = Field(50, ge=0)
    user_agent: str = "droid-factory"

    @model_validator(mode="after")
    def _blank_token_is_none(self) -> InstallerConfig:
        if self.github_token is not None and not self.github_token.strip():
            self.github_token = None
        return self

    @property
    def base_dir(self) -> Path:
        if self.scope == "project":
            root = self.project_path or Path.cwd()
            return Path(root).resolve() / FACTORY_DIR_NAME
        return Path.home() / FACTORY_DIR_NAME

    @property
    def dest_dirs(self) -> DestDirs:
        return DestDirs.under(self.base_dir)
