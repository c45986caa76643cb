"""Best-effort desktop notifications via ``notify-send``."""

from __future__ import annotations

import shutil
import subprocess

from loguru import logger

from pkglist.errors import Status

_APP_NAME = "pkglist"


def notify(status: Status) -> bool:
    """Show a desktop notification for *status*.

    Returns ``True`` when the notification was handed to ``notify-send``.
    A missing binary or a failing call is logged and otherwise ignored.
    """
    binary = shutil.which("notify-send")
    if binary is None:
        logger.debug("notify-send not found; skipping desktop notification")
        return False

    urgency = "normal" if status.ok else "critical"
    summary = "Package list updated" if status.ok else f"Package list update failed ({int(status)})"
    cmd = [binary, "--app-name", _APP_NAME, "--urgency", urgency, summary, status.message]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=10)
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("notify-send failed: {}", exc)
        return False
    if result.returncode != 0:
        logger.debug("notify-send exited with {}: {}", result.returncode, result.stderr.strip())
        return False
    return True
