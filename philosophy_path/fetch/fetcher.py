"""
HTTP page fetching.

Both helpers use a synchronous httpx client, retry with a linear back-off
and respect environment proxy settings when trust_env is enabled. They
never raise; failures are reported through the returned value.
"""

from __future__ import annotations

from dataclasses import dataclass
import time
from urllib.parse import urljoin

import httpx


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was requested
        status_code: HTTP status code, or None if request failed before getting response
        text: The response body text, or None on error
        error: Error message if fetch failed, None on success
        final_url: URL of the last response after redirects
    """
    url: str
    status_code: int | None
    text: str | None
    error: str | None
    final_url: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300


def fetch_url(
    url: str,
    timeout: float,
    retries: int,
    user_agent: str,
    trust_env: bool,
) -> FetchResult:
    """Fetch a URL using httpx with retry logic.

    Redirects are followed. Transport errors are retried; an HTTP error
    status is returned as-is with ``error`` describing it.

    Args:
        url: The URL to fetch
        timeout: Request timeout in seconds
        retries: Number of retry attempts after initial failure
        user_agent: User-Agent header string
        trust_env: Whether to respect system proxy settings from environment

    Returns:
        FetchResult with text on success or error message on failure
    """
    headers = {"User-Agent": user_agent}
    last_error: str | None = None

    for attempt in range(retries + 1):
        try:
            with httpx.Client(
                timeout=timeout,
                headers=headers,
                follow_redirects=True,
                trust_env=trust_env,
            ) as client:
                resp = client.get(url)
            if resp.is_success:
                return FetchResult(
                    url=url,
                    status_code=resp.status_code,
                    text=resp.text,
                    error=None,
                    final_url=str(resp.url),
                )
            return FetchResult(
                url=url,
                status_code=resp.status_code,
                text=None,
                error=f"HTTPStatusError: {resp.status_code}",
                final_url=str(resp.url),
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            last_error = f"{type(exc).__name__}: {exc}"
            if attempt < retries:
                # Back-off: 0.5s, 1.0s, 1.5s...
                time.sleep(0.5 * (attempt + 1))

    return FetchResult(url=url, status_code=None, text=None, error=last_error)


def resolve_redirect(
    url: str,
    timeout: float,
    retries: int,
    user_agent: str,
    trust_env: bool,
) -> FetchResult:
    """Request ``url`` without following redirects and report where it points.

    ``final_url`` holds the absolute ``Location`` of a redirect response.
    A response without a redirect leaves ``final_url`` unset and sets
    ``error``.
    """
    headers = {"User-Agent": user_agent}
    last_error: str | None = None

    for attempt in range(retries + 1):
        try:
            with httpx.Client(
                timeout=timeout,
                headers=headers,
                follow_redirects=False,
                trust_env=trust_env,
            ) as client:
                resp = client.get(url)
            location = resp.headers.get("location")
            if resp.is_redirect and location:
                return FetchResult(
                    url=url,
                    status_code=resp.status_code,
                    text=None,
                    error=None,
                    final_url=urljoin(url, location),
                )
            return FetchResult(
                url=url,
                status_code=resp.status_code,
                text=None,
                error=f"No redirect from {url} (status {resp.status_code})",
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            last_error = f"{type(exc).__name__}: {exc}"
            if attempt < retries:
                time.sleep(0.5 * (attempt + 1))

    return FetchResult(url=url, status_code=None, text=None, error=last_error)
