"""Copy and download primitives. Each returns "written" or "skipped"."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from ..errors import FetchError, InstallError
from ..fetchers import (
    GitHubClient,
    GitLabClient,
    github_raw_url,
    gitlab_raw_url,
    parse_github_raw_url,
    parse_gitlab_raw_url,
)
from ..log import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..fetchers import HttpSession

logger = get_logger(__name__)

WriteResult = Literal["written", "skipped"]

EXECUTABLE_MODE = 0o755


def _atomic_write(
    path: Path, data: bytes, mode_from: Path | None = None, mode: int | None = None
) -> None:
    """Write through a sibling temp file. Mode bits come from ``mode_from`` or ``mode``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_bytes(data)
        if mode_from is not None:
            shutil.copymode(mode_from, tmp)
        elif mode is not None:
            tmp.chmod(mode)
        tmp.replace(path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise InstallError(f"Cannot write {path}: {e}", dest=path) from e


def _apply(data: bytes, transform: Callable[[str], str] | None) -> bytes:
    if transform is None:
        return data
    return transform(data.decode("utf-8")).encode("utf-8")


def copy_file(
    src: Path,
    dest: Path,
    force: bool = False,
    transform: Callable[[str], str] | None = None,
) -> WriteResult:
    if dest.exists() and not force:
        return "skipped"
    try:
        data = src.read_bytes()
    except OSError as e:
        raise InstallError(f"Cannot read {src}: {e}", dest=dest) from e
    _atomic_write(dest, _apply(data, transform), mode_from=src)
    logger.debug("copied %s -> %s", src, dest)
    return "written"


def download_to_file(
    session: HttpSession,
    url: str,
    dest: Path,
    force: bool = False,
    transform: Callable[[str], str] | None = None,
    executable: bool = False,
) -> WriteResult:
    """Download ``url`` to ``dest``. A failed fetch leaves no file behind.

    ``executable`` marks the written file 0o755, for hook scripts.

    Raises:
        InstallError: On a non-2xx response, a network error, or a failed write.
    """
    if dest.exists() and not force:
        return "skipped"
    try:
        data = session.get_bytes(url)
    except FetchError as e:
        raise InstallError(f"Download failed for {url}: {e}", dest=dest) from e
    mode = EXECUTABLE_MODE if executable else None
    _atomic_write(dest, _apply(data, transform), mode=mode)
    logger.debug("downloaded %s -> %s", url, dest)
    return "written"


def copy_dir(src: Path, dest: Path, force: bool = False) -> WriteResult:
    if dest.exists() and not force:
        return "skipped"
    try:
        shutil.copytree(src, dest, dirs_exist_ok=True)
    except (OSError, shutil.Error) as e:
        raise InstallError(f"Cannot copy {src} to {dest}: {e}", dest=dest) from e
    logger.debug("copied dir %s -> %s", src, dest)
    return "written"


def download_skill_dir(
    session: HttpSession, url: str, dest: Path, force: bool = False
) -> WriteResult:
    """Download every file under a remote skill directory URL into ``dest``.

    If ``dest`` did not exist and any file fails, the partial directory is removed.
    """
    if dest.exists() and not force:
        return "skipped"
    created = not dest.exists()
    try:
        files = _skill_files(session, url)
        if not files:
            raise InstallError(f"No files found under {url}", dest=dest)
        for rel, file_url in files:
            data = session.get_bytes(file_url)
            _atomic_write(dest / rel, data)
    except (FetchError, InstallError) as e:
        if created:
            shutil.rmtree(dest, ignore_errors=True)
        raise InstallError(f"Skill download failed for {url}: {e}", dest=dest) from e
    logger.debug("downloaded skill %s -> %s", url, dest)
    return "written"


def _skill_files(session: HttpSession, url: str) -> list[tuple[str, str]]:
    """(path relative to the skill dir, raw URL) for each file of a remote skill."""
    gh = parse_github_raw_url(url)
    if gh is not None:
        paths = GitHubClient(session).list_files_recursive(gh.owner, gh.repo, gh.ref, gh.path)
        return [
            (_relative(p, gh.path), github_raw_url(gh.owner, gh.repo, gh.ref, p)) for p in paths
        ]
    gl = parse_gitlab_raw_url(url)
    if gl is not None:
        paths = GitLabClient(session).list_files_recursive(gl.namespace_path, gl.ref, gl.path)
        return [(_relative(p, gl.path), gitlab_raw_url(gl.namespace_path, gl.ref, p)) for p in paths]
    raise InstallError(f"Unsupported skill source: {url}")


def _relative(path: str, root: str) -> str:
    root = root.strip("/")
    return path[len(root) + 1 :] if root and path.startswith(root + "/") else path
