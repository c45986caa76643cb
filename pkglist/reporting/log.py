"""Per-run log file handling (loguru).

The CLI calls :func:`setup_logging` once before a run.  Library modules only
ever use ``from loguru import logger``; whatever sinks are configured here
receive their records.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from pkglist.errors import LogInitError, Status

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


@dataclass
class RunLog:
    """The log file of a single run and the loguru sink writing to it."""

    path: Path
    handler_id: int

    def dump(self) -> str:
        """Return everything logged to this run's file so far."""
        if not self.path.exists():
            return ""
        return self.path.read_text(encoding="utf-8")

    def close(self) -> None:
        try:
            logger.remove(self.handler_id)
        except ValueError:
            # Already removed.
            pass


def _newest_log(log_dir: Path) -> Optional[Path]:
    logs = [p for p in log_dir.glob("*.log") if p.is_file()]
    return max(logs, key=lambda p: p.stat().st_mtime, default=None)


def setup_logging(log_dir: Path, level: str = "DEBUG") -> RunLog:
    """Add a file sink for this run under *log_dir*.

    loguru fills in the ``{time}`` part of the file name and uses the same
    pattern to delete run logs older than the retention period.

    Raises:
        LogInitError: If the directory or the log file cannot be created.
    """
    pattern = log_dir / "{time:YYYYMMDD-HHmmss}.log"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler_id = logger.add(
            pattern,
            format=_FORMAT,
            retention="10 days",
            encoding="utf-8",
            level=level,
            buffering=1,  # line-buffered
        )
    except (OSError, ValueError) as exc:
        raise LogInitError(f"{pattern}: {exc}") from exc

    path = _newest_log(log_dir)
    if path is None:
        logger.remove(handler_id)
        raise LogInitError(f"no log file was created under {log_dir}")
    return RunLog(path=path, handler_id=handler_id)


def write_status(status: Status, run_log: Optional[RunLog] = None) -> None:
    """Record the terminal *status* of a run.

    On failure the whole run log is also written to stderr so the operator
    sees it immediately rather than only in the file.
    """
    if status.ok:
        logger.success("[{}] {}", int(status), status.message)
        return

    logger.error("[{}] {}", int(status), status.message)
    if run_log is not None:
        sys.stderr.write(run_log.dump())
        sys.stderr.flush()
