"""pkglist CLI — entry-point for updating and inspecting the package list.

Usage:
    python cli/main.py --help

Commands:
    update  → fetch the catalog and replace the persisted list
    show    → print the persisted list (or its backup)
    status  → print file locations and entry counts

``update`` exits with the run status code (0 on success, 1–5 for a failed
stage, 99 when logging could not be set up).  Every command exits 78 when
the configuration is invalid.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from pkglist.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import dataclasses
from typing import Optional

import typer
from loguru import logger

from pkglist.config import Settings
from pkglist.errors import LogInitError, Status
from pkglist.pipeline import run_update
from pkglist.reporting import notify, setup_logging
from pkglist.storage import read_list

app = typer.Typer(
    name="pkglist",
    help="Maintain a local list of non-orphaned catalog packages.",
    no_args_is_help=True,
)

# sysexits EX_CONFIG; 1-5 and 99 are run statuses.
_CONFIG_ERROR = 78


def _settings(data_dir: Optional[Path]) -> Settings:
    try:
        settings = Settings()
        if data_dir is not None:
            settings = dataclasses.replace(settings, data_dir=data_dir)
    except ValueError as exc:
        typer.echo(f"[config] {exc}", err=True)
        raise typer.Exit(code=_CONFIG_ERROR)
    return settings


@app.command("update")
def update(
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Override the data directory."),
    no_notify: bool = typer.Option(False, "--no-notify", help="Skip the desktop notification."),
) -> None:
    """Fetch every result page and replace the persisted package list."""
    settings = _settings(data_dir)

    # The run log is the only sink; failures are replayed to stderr from it.
    logger.remove()
    try:
        run_log = setup_logging(settings.log_dir)
    except LogInitError as exc:
        typer.echo(f"[update] {Status.LOG_INIT_FAILED.message} ({exc})", err=True)
        raise typer.Exit(code=int(Status.LOG_INIT_FAILED))

    notifier = notify if settings.notify and not no_notify else None
    typer.echo(f"[update] Fetching {settings.page_url(0)!r} …")
    try:
        result = run_update(settings, run_log=run_log, notifier=notifier)
    finally:
        run_log.close()

    if result.ok:
        typer.echo(f"[update] Pages  : {result.pages}")
        typer.echo(f"[update] Names  : {len(result.names)}")
        typer.echo(f"[update] Written: {settings.list_path}")
    else:
        typer.echo(f"[update] Failed ({int(result.status)}): {result.status.message}", err=True)
        typer.echo(f"[update] Log    : {run_log.path}", err=True)
    raise typer.Exit(code=int(result.status))


@app.command("show")
def show(
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Override the data directory."),
    backup: bool = typer.Option(False, "--backup", help="Show the backup instead of the live list."),
) -> None:
    """Print the persisted package list, one name per line."""
    settings = _settings(data_dir)
    path = settings.backup_path if backup else settings.list_path
    if not path.exists():
        typer.echo(f"[show] No list at {path}.", err=True)
        raise typer.Exit(code=1)
    for name in read_list(path):
        typer.echo(name)


@app.command("status")
def status(
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Override the data directory."),
) -> None:
    """Show where the list and its backup live and how many names each holds."""
    settings = _settings(data_dir)
    for label, path in (("list", settings.list_path), ("backup", settings.backup_path)):
        if path.exists():
            typer.echo(f"  {label:<7}{path}  ({len(read_list(path))} names)")
        else:
            typer.echo(f"  {label:<7}{path}  (missing)")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
