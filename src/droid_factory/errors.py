from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class LoadError(Exception):
    """Raised when a marketplace manifest cannot be loaded from any attempted location.

    Attributes:
        path: The local file or directory that could not be loaded, if applicable.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class FetchError(Exception):
    """Raised when a remote fetch fails (network error, non-2xx status, redirect loop).

    Attributes:
        url: The URL that failed, if applicable.
        status_code: HTTP status of the failed response, or None for transport errors.
    """

    def __init__(
        self, message: str, url: str | None = None, status_code: int | None = None
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class RefNotFoundError(FetchError):
    """Raised when the recursive tree call for a GitHub ref returns 404."""

    def __init__(self, owner: str, repo: str, ref: str, url: str | None = None) -> None:
        self.owner = owner
        self.repo = repo
        self.ref = ref
        super().__init__(
            f"GitHub ref not found: {owner}/{repo}@{ref}", url=url, status_code=404
        )


class InstallError(Exception):
    """Raised when a plan item cannot be written to its destination."""

    def __init__(self, message: str, dest: Path | None = None) -> None:
        self.dest = dest
        super().__init__(message)
