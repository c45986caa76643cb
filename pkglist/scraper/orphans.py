"""Removal of orphaned entries from concatenated search-result markup.

Each result entry spans a fixed number of lines, the first of which carries
the maintainer cell.  When that cell holds the orphan marker, the whole
entry is dropped.
"""

from __future__ import annotations

import re
from typing import Iterable, List


def remove_orphan_blocks(
    lines: Iterable[str],
    marker: str = "orphan",
    block_size: int = 6,
) -> List[str]:
    """Drop every *block_size*-line block that starts on a *marker* line.

    Single forward pass: lines inside a dropped block are never re-checked
    for the marker.  A truncated block at the end drops what is left.
    """
    if block_size < 1:
        raise ValueError(f"block_size must be at least 1, got {block_size}")
    pattern = re.compile(re.escape(marker), re.IGNORECASE)
    kept: List[str] = []
    skip = 0
    for line in lines:
        if skip:
            skip -= 1
            continue
        if pattern.search(line):
            skip = block_size - 1
            continue
        kept.append(line)
    return kept
