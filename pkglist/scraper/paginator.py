"""Result-count request and sequential page retrieval.

The first request (offset 0) is only used to read the ``<N> packages found``
banner.  The page loop then requests ``total // page_size + 1`` windows at
offsets ``page_size, 2 * page_size, ...``; the last window may lie past the
end of the results and then yields no entries.
"""

from __future__ import annotations

import re
from typing import Callable, List

from loguru import logger

from pkglist.errors import CountFetchError, FetchError, PageFetchError
from pkglist.scraper.models import PageRequest, RawCorpus, UrlBuilder

Fetch = Callable[[str], str]

_COUNT_RE = re.compile(r"(\d[\d,.]*)\s+packages\s+found", re.IGNORECASE)


def parse_total_count(body: str) -> int:
    """Return the number from ``<N> packages found`` in *body*, or ``0``.

    A missing banner is not an error (the search simply has no count); the
    caller then fetches a single page.
    """
    match = _COUNT_RE.search(body)
    if not match:
        return 0
    return int(re.sub(r"[,.]", "", match.group(1)))


def fetch_count(url_builder: UrlBuilder, fetch: Fetch) -> int:
    """Fetch the first result window and read the total result count.

    Raises:
        CountFetchError: If the count request fails.
    """
    url = url_builder(0)
    try:
        body = fetch(url)
    except FetchError as exc:
        raise CountFetchError(str(exc)) from exc
    total = parse_total_count(body)
    logger.info("Catalog reports {} package(s)", total)
    return total


def page_requests(total_count: int, page_size: int) -> List[PageRequest]:
    """Return the page windows to fetch for *total_count* results."""
    if total_count < 0:
        raise ValueError(f"total_count must be non-negative, got {total_count}")
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    pages = total_count // page_size + 1
    return [PageRequest(offset=(index + 1) * page_size, page_size=page_size) for index in range(pages)]


def fetch_all(
    total_count: int,
    page_size: int,
    url_builder: UrlBuilder,
    fetch: Fetch,
) -> RawCorpus:
    """Fetch every page window in order and accumulate the bodies.

    Raises:
        PageFetchError: On the first failed page; nothing further is fetched.
    """
    corpus = RawCorpus()
    requests = page_requests(total_count, page_size)
    for number, request in enumerate(requests, start=1):
        url = request.url(url_builder)
        try:
            body = fetch(url)
        except FetchError as exc:
            raise PageFetchError(f"page {number}/{len(requests)} at offset {request.offset}: {exc}") from exc
        logger.debug("Page {}/{} (offset {}): {} bytes", number, len(requests), request.offset, len(body))
        corpus.append(body)
    return corpus
