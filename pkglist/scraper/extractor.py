"""Package-name extraction from filtered search-result markup."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Pattern


@lru_cache(maxsize=8)
def _anchor_pattern(prefix: str) -> Pattern[str]:
    """Match ``<a href="{prefix}...">NAME</a>`` and capture ``NAME``."""
    return re.compile(
        r'<a\s[^>]*href=["\']' + re.escape(prefix) + r'[^"\']*["\'][^>]*>([^<]+)</a>',
        re.IGNORECASE,
    )


def extract_names(lines: Iterable[str], prefix: str = "/packages/") -> List[str]:
    """Return the link text of the first package anchor on each line.

    Lines without a package anchor are skipped.  Names keep document order
    and duplicates are passed through unchanged.
    """
    pattern = _anchor_pattern(prefix)
    names: List[str] = []
    for line in lines:
        match = pattern.search(line)
        if match:
            names.append(match.group(1))
    return names
