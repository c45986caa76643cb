"""Transactional replacement of the persisted package list.

A run calls :meth:`CommitManager.begin` before fetching anything, which
snapshots the live list into the backup file and clears the live path.
:meth:`CommitManager.commit` then installs the new list, and
:meth:`CommitManager.rollback` puts the backup back on any failure.

Files are written into the scratch directory first and moved into place
with :func:`os.replace`, so the live path only ever holds a complete list.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable, List

from loguru import logger

from pkglist.config import Settings
from pkglist.errors import BackupError, ListWriteError, ScratchError


def _write_list(path: Path, names: Iterable[str]) -> None:
    """Write *names* to *path*, one per line, UTF-8."""
    lines = list(names)
    text = "\n".join(lines) + ("\n" if lines else "")
    path.write_text(text, encoding="utf-8")


def read_list(path: Path) -> List[str]:
    """Read a persisted package list back into memory."""
    return path.read_text(encoding="utf-8").splitlines()


class CommitManager:
    """Owns the live list, its backup and the scratch directory for a run.

    ``scratch_ready`` and ``backed_up`` record how far :meth:`begin` got.
    :meth:`rollback` only restores a backup taken by this run; before that
    point the live list has not been touched.
    """

    def __init__(self, settings: Settings) -> None:
        self.list_path = settings.list_path
        self.backup_path = settings.backup_path
        self.scratch_dir = settings.scratch_dir
        self.scratch_ready = False
        self.backed_up = False

    # ------------------------------------------------------------------
    # Transaction steps
    # ------------------------------------------------------------------
    def prepare_scratch(self) -> None:
        """Recreate an empty scratch directory.

        Raises:
            ScratchError: If the directory cannot be removed or created.
        """
        try:
            if self.scratch_dir.exists():
                shutil.rmtree(self.scratch_dir)
            self.scratch_dir.mkdir(parents=True)
        except OSError as exc:
            raise ScratchError(f"{self.scratch_dir}: {exc}") from exc
        self.scratch_ready = True
        logger.debug("Scratch directory ready at {}", self.scratch_dir)

    def backup(self) -> None:
        """Move the live list aside into the backup slot.

        Does nothing when there is no live list yet.

        Raises:
            BackupError: If the copy or removal fails.
        """
        if not self.list_path.exists():
            logger.info("No existing list at {}; nothing to back up", self.list_path)
            return
        try:
            shutil.copyfile(self.list_path, self.backup_path)
            self.list_path.unlink()
        except OSError as exc:
            raise BackupError(f"{self.list_path} -> {self.backup_path}: {exc}") from exc
        self.backed_up = True
        logger.info("Backed up {} to {}", self.list_path, self.backup_path)

    def begin(self) -> None:
        """Prepare scratch space and back up the current list."""
        self.prepare_scratch()
        self.backup()

    def commit(self, names: List[str]) -> None:
        """Install *names* as the new live list.

        On failure the backup is restored before the error is raised.

        Raises:
            ListWriteError: If the new list could not be written.
        """
        staged = self.scratch_dir / self.list_path.name
        try:
            _write_list(staged, names)
            os.replace(staged, self.list_path)
        except OSError as exc:
            logger.error("Writing {} failed: {}", self.list_path, exc)
            self.rollback()
            raise ListWriteError(f"{self.list_path}: {exc}") from exc
        logger.info("Wrote {} package name(s) to {}", len(names), self.list_path)

    def rollback(self) -> bool:
        """Restore the live list from the backup.

        Safe to call more than once.  Returns ``False`` when this run took no
        backup, or when the restore itself failed.
        """
        if not self.backed_up:
            logger.info("No backup taken this run; live list left as is")
            return False
        if not self.backup_path.exists():
            logger.warning("No backup at {}; live list left as is", self.backup_path)
            return False
        staged = self.list_path.with_name(self.list_path.name + ".restore")
        try:
            self.list_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.backup_path, staged)
            os.replace(staged, self.list_path)
        except OSError as exc:
            logger.error("Restoring {} from {} failed: {}", self.list_path, self.backup_path, exc)
            return False
        logger.info("Restored {} from {}", self.list_path, self.backup_path)
        return True

    def cleanup(self) -> None:
        """Remove the scratch directory."""
        if not self.scratch_dir.exists():
            return
        try:
            shutil.rmtree(self.scratch_dir)
        except OSError as exc:
            logger.warning("Could not remove scratch directory {}: {}", self.scratch_dir, exc)
