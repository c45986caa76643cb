"""Reporting package — run log files and desktop notifications."""

from pkglist.reporting.log import RunLog, setup_logging, write_status
from pkglist.reporting.notify import notify

__all__ = ["RunLog", "setup_logging", "write_status", "notify"]
