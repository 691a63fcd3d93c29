from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from ..config import InstallerConfig
from ..errors import FetchError
from ..log import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = get_logger(__name__)

RATE_LIMIT_LOW_WATERMARK = 5


@dataclass(frozen=True)
class RateLimitInfo:
    """Rate-limit headers from the most recent response that carried any."""

    limit: int | None
    remaining: int | None
    reset: int | None  # epoch seconds
    fetched_at: float

    @property
    def is_low(self) -> bool:
        return self.remaining is not None and self.remaining <= RATE_LIMIT_LOW_WATERMARK

    def seconds_until_reset(self, now: float | None = None) -> int | None:
        if self.reset is None:
            return None
        now = time.time() if now is None else now
        return max(0, round(self.reset - now))


def rate_limit_from_headers(headers: Mapping[str, str]) -> RateLimitInfo | None:
    limit = headers.get("x-ratelimit-limit")
    remaining = headers.get("x-ratelimit-remaining")
    reset = headers.get("x-ratelimit-reset")
    if limit is None and remaining is None and reset is None:
        return None
    return RateLimitInfo(
        limit=_to_int(limit),
        remaining=_to_int(remaining),
        reset=_to_int(reset),
        fetched_at=time.time(),
    )


def _to_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class HttpSession:
    """Per-invocation HTTP state: one client, the last rate-limit reading, and the tree cache.

    Requests are issued sequentially; nothing here is shared across sessions, so
    tests can build independent sessions without leaking cached trees.
    """

    def __init__(
        self,
        config: InstallerConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config or InstallerConfig()
        self.rate_limit: RateLimitInfo | None = None
        # "owner/repo@ref" -> flat tree entries
        self.github_trees: dict[str, list[dict[str, Any]]] = {}
        self._client = httpx.Client(
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
            timeout=self.config.timeout,
            headers={"User-Agent": self.config.user_agent},
            event_hooks={"response": [self._on_response]},
            transport=transport,
        )

    @property
    def github_token(self) -> str | None:
        return self.config.github_token

    def get(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str | int] | None = None,
    ) -> httpx.Response:
        """GET ``url`` and return the final 2xx response.

        Raises:
            FetchError: On transport failure, too many redirects, or a non-2xx status.
        """
        logger.debug("GET %s %s", url, dict(params) if params else "")
        try:
            response = self._client.get(url, headers=headers, params=params)
        except httpx.TooManyRedirects as e:
            raise FetchError(f"Too many redirects fetching {url}", url=url) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Network error fetching {url}: {e}", url=url) from e
        if not response.is_success:
            final_url = str(response.url)
            logger.debug("HTTP %s for %s", response.status_code, final_url)
            raise FetchError(
                f"HTTP {response.status_code} for {final_url}",
                url=final_url,
                status_code=response.status_code,
            )
        return response

    def get_text(self, url: str, headers: Mapping[str, str] | None = None) -> str:
        return self.get(url, headers=headers).text

    def get_bytes(self, url: str, headers: Mapping[str, str] | None = None) -> bytes:
        return self.get(url, headers=headers).content

    def get_json(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str | int] | None = None,
    ) -> Any:
        response = self.get(url, headers=headers, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON at {url}: {e}", url=url) from e

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpSession:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _on_response(self, response: httpx.Response) -> None:
        logger.debug("status %s %s", response.status_code, response.request.url)
        if response.is_redirect:
            logger.debug("redirect -> %s", response.headers.get("location"))
        info = rate_limit_from_headers(response.headers)
        if info is not None:
            self.rate_limit = info
