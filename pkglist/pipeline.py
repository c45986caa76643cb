"""Fetch → filter → extract → commit, run as a single transaction.

Usage::

    from pkglist.config import Settings
    from pkglist.pipeline import run_update

    result = run_update(Settings())
    raise SystemExit(int(result.status))

Every stage raises a :class:`~pkglist.errors.PipelineError` subclass on
failure.  :func:`run_update` catches them in one place and hands the status
to :func:`rollback_and_finish`, which is called exactly once per run.  Any
other exception still restores the backup and removes the scratch directory
before it propagates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Callable, List, Optional

from loguru import logger

from pkglist.config import Settings
from pkglist.errors import PipelineError, Status
from pkglist.reporting.log import RunLog, write_status
from pkglist.scraper.extractor import extract_names
from pkglist.scraper.fetcher import fetch_page
from pkglist.scraper.orphans import remove_orphan_blocks
from pkglist.scraper.paginator import Fetch, fetch_all, fetch_count
from pkglist.storage.commit import CommitManager

Notifier = Callable[[Status], object]


class RunState(str, Enum):
    INIT = "init"
    SCRATCH_READY = "scratch_ready"
    BACKED_UP = "backed_up"
    FETCHED = "fetched"
    FILTERED = "filtered"
    EXTRACTED = "extracted"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass
class RunResult:
    status: Status
    state: RunState
    names: List[str] = field(default_factory=list)
    pages: int = 0
    orphan_lines: int = 0

    @property
    def ok(self) -> bool:
        return self.status.ok


def rollback_and_finish(
    store: CommitManager,
    status: Status,
    run_log: Optional[RunLog] = None,
    notifier: Optional[Notifier] = None,
) -> Status:
    """Terminal step of every run, successful or not.

    On failure the live list is restored from the backup, even if
    :meth:`CommitManager.commit` already did so.  The status is then logged,
    the notifier is called and the scratch directory is removed.
    """
    if not status.ok:
        store.rollback()
    write_status(status, run_log)
    if notifier is not None:
        try:
            notifier(status)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Notifier raised: {}", exc)
    store.cleanup()
    return status


def run_update(
    settings: Settings,
    fetch: Optional[Fetch] = None,
    run_log: Optional[RunLog] = None,
    notifier: Optional[Notifier] = None,
) -> RunResult:
    """Refresh the persisted package list from the catalog.

    Args:
        settings: Run configuration.
        fetch: ``url -> body`` callable.  Defaults to :func:`fetch_page`
            with ``settings.request_timeout``.
        run_log: The run's log file, dumped to stderr on failure.
        notifier: Called once with the terminal status.
    """
    fetch = fetch or partial(fetch_page, timeout=settings.request_timeout)
    store = CommitManager(settings)
    result = RunResult(status=Status.SUCCESS, state=RunState.INIT)

    try:
        try:
            store.begin()
        finally:
            if store.scratch_ready:
                result.state = RunState.SCRATCH_READY
        result.state = RunState.BACKED_UP

        total = fetch_count(settings.page_url, fetch)
        corpus = fetch_all(total, settings.page_size, settings.page_url, fetch)
        result.pages = len(corpus)
        result.state = RunState.FETCHED

        lines = list(corpus.lines())
        filtered = remove_orphan_blocks(lines, settings.orphan_marker, settings.entry_lines)
        result.orphan_lines = len(lines) - len(filtered)
        result.state = RunState.FILTERED
        logger.info("Dropped {} line(s) of orphaned entries", result.orphan_lines)

        names = extract_names(filtered, settings.package_prefix)
        result.state = RunState.EXTRACTED
        logger.info("Extracted {} package name(s) from {} page(s)", len(names), result.pages)

        store.commit(names)
        result.names = names
        result.state = RunState.COMMITTED
    except PipelineError as exc:
        logger.error("Run failed in state {}: {}", result.state.value, exc)
        result.status = exc.status
        result.state = RunState.FAILED
    except Exception:
        logger.exception("Unexpected error in state {}", result.state.value)
        result.state = RunState.FAILED
        store.rollback()
        store.cleanup()
        raise

    rollback_and_finish(store, result.status, run_log, notifier)
    return result
