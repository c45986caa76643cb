"""Blocking HTTP fetcher for catalog search pages."""

from __future__ import annotations

import httpx
from loguru import logger

from pkglist.errors import FetchError

_DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; pkglist/1.0)",
}


def fetch_page(url: str, *, timeout: float = 30.0) -> str:
    """Fetch *url* once and return the response body as text.

    There is no retry: the first transport failure or 4xx/5xx status is
    reported to the caller.

    Raises:
        FetchError: If the request could not be completed.
    """
    logger.debug("GET {}", url)
    try:
        with httpx.Client(
            headers=_DEFAULT_HEADERS,
            timeout=timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
            return response.text
    except httpx.HTTPError as exc:
        raise FetchError(f"{url}: {exc}") from exc
