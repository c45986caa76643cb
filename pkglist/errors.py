"""Exit statuses and the exception hierarchy for a pipeline run.

Every stage failure is raised as a :class:`PipelineError` subclass carrying
its :class:`Status`.  The pipeline entry-point catches them in one place and
turns them into the process exit code.
"""

from __future__ import annotations

from enum import IntEnum


class Status(IntEnum):
    SUCCESS = 0
    SCRATCH_FAILED = 1
    BACKUP_FAILED = 2
    LIST_WRITE_FAILED = 3
    COUNT_FETCH_FAILED = 4
    PAGE_FETCH_FAILED = 5
    LOG_INIT_FAILED = 99

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @property
    def ok(self) -> bool:
        return self is Status.SUCCESS


_MESSAGES = {
    Status.SUCCESS: "Package list updated.",
    Status.SCRATCH_FAILED: "Could not create the temporary scratch directory.",
    Status.BACKUP_FAILED: "Could not back up the existing package list.",
    Status.LIST_WRITE_FAILED: "Could not write the new package list; backup restored.",
    Status.COUNT_FETCH_FAILED: "Could not fetch the result count page.",
    Status.PAGE_FETCH_FAILED: "Could not fetch a result page.",
    Status.LOG_INIT_FAILED: "Could not initialise logging; nothing was attempted.",
}


class PkglistError(Exception):
    """Base class for all pkglist errors."""


class FetchError(PkglistError):
    """A single HTTP transport attempt failed."""


class PipelineError(PkglistError):
    """A run stage failed; ``status`` is the terminal exit status."""

    status: Status = Status.SUCCESS

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.status.message)
        self.detail = detail


class ScratchError(PipelineError):
    status = Status.SCRATCH_FAILED


class BackupError(PipelineError):
    status = Status.BACKUP_FAILED


class ListWriteError(PipelineError):
    status = Status.LIST_WRITE_FAILED


class CountFetchError(PipelineError):
    status = Status.COUNT_FETCH_FAILED


class PageFetchError(PipelineError):
    status = Status.PAGE_FETCH_FAILED


class LogInitError(PipelineError):
    status = Status.LOG_INIT_FAILED
