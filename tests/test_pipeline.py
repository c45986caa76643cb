"""End-to-end tests for ``run_update``.

The catalog is served by ``respx`` so the real ``fetch_page`` / ``httpx``
path is exercised.  Notifications are captured with a plain list.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import httpx
import pytest
import respx

from pkglist.config import Settings
from pkglist.errors import BackupError, ScratchError, Status
from pkglist.pipeline import RunState, rollback_and_finish, run_update
from pkglist.storage import CommitManager

_SEARCH = "https://catalog.test/packages"


def _entry(name: str, orphan: bool = False) -> str:
    return "\n".join(
        [
            '<tr class="orphan">' if orphan else "<tr>",
            f'  <td><a href="/packages/{name}">{name}</a></td>',
            "  <td>2.3-1</td>",
            "  <td>1.07</td>",
            "  <td>Example package</td>",
            "</tr>",
        ]
    )


def _page(*entries: str) -> str:
    return "<table>\n" + "\n".join(entries) + "\n</table>\n"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=tmp_path / "data",
        search_url=_SEARCH + "?O={offset}&PP=250",
        page_size=250,
        notify=False,
    )


@pytest.fixture
def seeded(settings: Settings) -> bytes:
    """An existing list from a previous successful run."""
    settings.data_dir.mkdir(parents=True)
    content = "previous-one\nprevious-two\n".encode("utf-8")
    settings.list_path.write_bytes(content)
    return content


def _route(offset: int):
    return respx.get(_SEARCH, params={"O": str(offset)})


class TestRunUpdate:
    def test_small_catalog_end_to_end(self, settings: Settings) -> None:
        notified: List[Status] = []
        with respx.mock:
            count_page = _route(0).mock(
                return_value=httpx.Response(200, text="<p>3 packages found.</p>")
            )
            page = _route(250).mock(
                return_value=httpx.Response(
                    200, text=_page(_entry("kept-pkg"), _entry("abandoned", orphan=True))
                )
            )
            result = run_update(settings, notifier=notified.append)

        assert result.status is Status.SUCCESS
        assert result.state is RunState.COMMITTED
        assert count_page.call_count == 1
        assert page.call_count == 1
        assert result.names == ["kept-pkg"]
        assert settings.list_path.read_text(encoding="utf-8") == "kept-pkg\n"
        assert notified == [Status.SUCCESS]
        assert not settings.scratch_dir.exists()

    def test_multi_page_keeps_page_order(self, settings: Settings) -> None:
        with respx.mock:
            _route(0).mock(return_value=httpx.Response(200, text="260 packages found"))
            _route(250).mock(return_value=httpx.Response(200, text=_page(_entry("b"), _entry("a"))))
            _route(500).mock(return_value=httpx.Response(200, text=_page(_entry("c"))))
            result = run_update(settings)

        assert result.ok
        assert result.pages == 2
        assert result.names == ["b", "a", "c"]

    def test_previous_list_becomes_backup(self, settings: Settings, seeded: bytes) -> None:
        with respx.mock:
            _route(0).mock(return_value=httpx.Response(200, text="1 packages found"))
            _route(250).mock(return_value=httpx.Response(200, text=_page(_entry("fresh"))))
            result = run_update(settings)

        assert result.ok
        assert settings.backup_path.read_bytes() == seeded
        assert settings.list_path.read_text() == "fresh\n"

    def test_page_failure_restores_previous_list(self, settings: Settings, seeded: bytes) -> None:
        notified: List[Status] = []
        with respx.mock:
            _route(0).mock(return_value=httpx.Response(200, text="10 packages found"))
            _route(250).mock(side_effect=httpx.ConnectError)
            result = run_update(settings, notifier=notified.append)

        assert result.status is Status.PAGE_FETCH_FAILED
        assert int(result.status) == 5
        assert result.state is RunState.FAILED
        assert settings.list_path.read_bytes() == seeded
        assert notified == [Status.PAGE_FETCH_FAILED]

    def test_count_failure(self, settings: Settings, seeded: bytes) -> None:
        with respx.mock:
            _route(0).mock(return_value=httpx.Response(500))
            result = run_update(settings)

        assert result.status is Status.COUNT_FETCH_FAILED
        assert settings.list_path.read_bytes() == seeded

    def test_missing_count_fetches_one_page(self, settings: Settings) -> None:
        calls: List[str] = []

        def fetch(url: str) -> str:
            calls.append(url)
            return "<p>Search results</p>" if "O=0" in url else _page(_entry("only"))

        result = run_update(settings, fetch=fetch)

        assert result.ok
        assert len(calls) == 2
        assert result.names == ["only"]

    def test_commit_failure_restores_before_reporting(
        self, settings: Settings, seeded: bytes, monkeypatch
    ) -> None:
        seen_at_report: List[bytes] = []

        def fail(path, names):
            raise OSError("No space left on device")

        def record(status, run_log=None):
            seen_at_report.append(settings.list_path.read_bytes())

        monkeypatch.setattr("pkglist.storage.commit._write_list", fail)
        monkeypatch.setattr("pkglist.pipeline.write_status", record)

        result = run_update(settings, fetch=lambda url: "0 packages found")

        assert result.status is Status.LIST_WRITE_FAILED
        assert seen_at_report == [seeded]
        assert settings.backup_path.read_bytes() == seeded
        assert settings.list_path.read_bytes() == seeded

    def test_notifier_errors_do_not_fail_run(self, settings: Settings) -> None:
        def broken(status):
            raise RuntimeError("no display")

        result = run_update(settings, fetch=lambda url: "", notifier=broken)
        assert result.ok

    def test_unexpected_error_restores_list_and_propagates(
        self, settings: Settings, seeded: bytes
    ) -> None:
        notified: List[Status] = []

        def fetch(url: str) -> str:
            if "O=0" in url:
                return "10 packages found"
            raise RuntimeError("decoder blew up")

        with pytest.raises(RuntimeError, match="decoder blew up"):
            run_update(settings, fetch=fetch, notifier=notified.append)

        assert settings.list_path.read_bytes() == seeded
        assert settings.backup_path.read_bytes() == seeded
        assert not settings.scratch_dir.exists()
        assert notified == []

    def test_runs_through_begin(self, settings: Settings, monkeypatch) -> None:
        calls: List[str] = []
        original = CommitManager.begin

        def spy(self):
            calls.append("begin")
            original(self)

        monkeypatch.setattr(CommitManager, "begin", spy)
        result = run_update(settings, fetch=lambda url: "0 packages found")

        assert result.ok
        assert calls == ["begin"]

    def test_scratch_failure_keeps_live_list_over_stale_backup(
        self, settings: Settings, seeded: bytes, monkeypatch
    ) -> None:
        settings.backup_path.write_text("stale\n", encoding="utf-8")

        def fail(self):
            raise ScratchError("read-only file system")

        monkeypatch.setattr(CommitManager, "prepare_scratch", fail)
        result = run_update(settings, fetch=lambda url: "0 packages found")

        assert result.status is Status.SCRATCH_FAILED
        assert settings.list_path.read_bytes() == seeded
        assert settings.backup_path.read_text() == "stale\n"

    def test_backup_failure_after_scratch(
        self, settings: Settings, seeded: bytes, monkeypatch
    ) -> None:
        states: List[Status] = []

        def fail(self):
            raise BackupError("disk full")

        def record(status, run_log=None):
            states.append(status)

        monkeypatch.setattr(CommitManager, "backup", fail)
        monkeypatch.setattr("pkglist.pipeline.write_status", record)
        result = run_update(settings, fetch=lambda url: "0 packages found")

        assert result.status is Status.BACKUP_FAILED
        assert states == [Status.BACKUP_FAILED]
        assert settings.list_path.read_bytes() == seeded
        assert not settings.scratch_dir.exists()


class TestRollbackAndFinish:
    def test_success_does_not_touch_list(self, settings: Settings, seeded: bytes) -> None:
        store = CommitManager(settings)
        store.begin()
        store.commit(["new"])

        assert rollback_and_finish(store, Status.SUCCESS) is Status.SUCCESS
        assert settings.list_path.read_text() == "new\n"

    def test_failure_restores_backup(self, settings: Settings, seeded: bytes) -> None:
        store = CommitManager(settings)
        store.begin()

        assert rollback_and_finish(store, Status.PAGE_FETCH_FAILED) is Status.PAGE_FETCH_FAILED
        assert settings.list_path.read_bytes() == seeded
