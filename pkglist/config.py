"""Centralised settings for the pkglist updater.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

``Settings`` is frozen: build one at start-up and pass it into the pipeline.
Use :func:`dataclasses.replace` to derive a variant (e.g. a different data
directory from the CLI).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_SEARCH_URL = (
    "https://aur.archlinux.org/packages?O={offset}"
    "&SeB=nd&K=&outdated=&SB=n&SO=a&PP=250"
)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    data_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("PKGLIST_DATA_DIR", Path.home() / ".pkglist")
        )
    )

    @property
    def list_path(self) -> Path:
        """The live package list, one name per line."""
        return self.data_dir / "packages.txt"

    @property
    def backup_path(self) -> Path:
        """Snapshot of the list as of the last successful run."""
        return self.data_dir / "packages.txt.bak"

    @property
    def scratch_dir(self) -> Path:
        return self.data_dir / "tmp"

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------
    search_url: str = field(
        default_factory=lambda: os.environ.get("PKGLIST_SEARCH_URL", DEFAULT_SEARCH_URL)
    )
    page_size: int = field(
        default_factory=lambda: int(os.environ.get("PKGLIST_PAGE_SIZE", "250"))
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("PKGLIST_REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Result parsing
    # ------------------------------------------------------------------
    orphan_marker: str = field(
        default_factory=lambda: os.environ.get("PKGLIST_ORPHAN_MARKER", "orphan")
    )
    entry_lines: int = field(
        default_factory=lambda: int(os.environ.get("PKGLIST_ENTRY_LINES", "6"))
    )
    package_prefix: str = field(
        default_factory=lambda: os.environ.get("PKGLIST_PACKAGE_PREFIX", "/packages/")
    )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    notify: bool = field(default_factory=lambda: _env_flag("PKGLIST_NOTIFY", "true"))

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {self.page_size}")
        if self.entry_lines < 1:
            raise ValueError(f"entry_lines must be at least 1, got {self.entry_lines}")
        if not self.orphan_marker:
            raise ValueError("orphan_marker must not be empty")
        try:
            self.page_url(0)
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(
                f"search_url may only use the {{offset}} placeholder: {self.search_url!r}"
            ) from exc

    def page_url(self, offset: int) -> str:
        """Render the search URL for the result window starting at *offset*."""
        return self.search_url.format(offset=offset)
