"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, List

UrlBuilder = Callable[[int], str]


@dataclass(frozen=True)
class PageRequest:
    """One result window of the catalog search."""

    offset: int
    page_size: int

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be non-negative, got {self.offset}")
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    def url(self, builder: UrlBuilder) -> str:
        return builder(self.offset)


@dataclass
class RawCorpus:
    """Page bodies in fetch order.  Append-only."""

    fragments: List[str] = field(default_factory=list)

    def append(self, body: str) -> None:
        self.fragments.append(body)

    def __len__(self) -> int:
        return len(self.fragments)

    @property
    def text(self) -> str:
        return "\n".join(self.fragments)

    def lines(self) -> Iterator[str]:
        """Yield every line of every fragment, preserving fetch order.

        Fragments are split independently so a body without a trailing
        newline never merges with the first line of the next page.
        """
        for fragment in self.fragments:
            yield from fragment.splitlines()
