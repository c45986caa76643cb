"""Scraper package — page fetching, orphan filtering and name extraction."""

from pkglist.scraper.extractor import extract_names
from pkglist.scraper.fetcher import fetch_page
from pkglist.scraper.models import PageRequest, RawCorpus
from pkglist.scraper.orphans import remove_orphan_blocks
from pkglist.scraper.paginator import fetch_all, fetch_count, page_requests, parse_total_count

__all__ = [
    "fetch_page",
    "fetch_count",
    "fetch_all",
    "page_requests",
    "parse_total_count",
    "remove_orphan_blocks",
    "extract_names",
    "PageRequest",
    "RawCorpus",
]
