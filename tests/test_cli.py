"""Tests for the phonespecs CLI (crawl, phone, db commands)."""

from __future__ import annotations

import signal
import sqlite3
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli.main import EXIT_INTERRUPTED, app
from cli.rendering import render_specs
from phonespecs.db import get_connection, init_db
from phonespecs.db.records import insert_record, list_records
from phonespecs.errors import FetchError, Interrupted
from phonespecs.pipeline import RunStats, run_pipeline
from phonespecs.scraper.cancel import StopSignal
from phonespecs.scraper.models import Page, PhoneRecord

runner = CliRunner()


@pytest.fixture
def db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the default database at a temp file."""
    path = tmp_path / "phones.db"
    monkeypatch.setattr("phonespecs.config.settings.db_override", str(path))
    return path


@pytest.fixture
def opened(monkeypatch: pytest.MonkeyPatch) -> list[sqlite3.Connection]:
    """Record every connection the crawl command opens."""
    connections: list[sqlite3.Connection] = []

    def _get_connection(db=None):
        conn = get_connection(db)
        connections.append(conn)
        return conn

    monkeypatch.setattr("cli.main.get_connection", _get_connection)
    return connections


def _is_closed(conn: sqlite3.Connection) -> bool:
    try:
        conn.execute("SELECT 1")
    except sqlite3.ProgrammingError:
        return True
    return False


# ---------------------------------------------------------------------------
# crawl
# ---------------------------------------------------------------------------

class TestCrawl:
    def test_success_exits_zero_and_persists(
        self, db_path: Path, opened: list, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fake_run(sink, catalog_url=None, **kwargs):
            sink.put(PhoneRecord("Alpha", "A1", "https://e.com/a1", {"phone_name": "X"}))
            return RunStats(manufacturers=1, phones=1, saved=1)

        monkeypatch.setattr("cli.main.run_pipeline", fake_run)
        result = runner.invoke(app, ["crawl"])

        assert result.exit_code == 0, result.output
        assert "Database connection closed" in result.output
        assert _is_closed(opened[0])

        conn = get_connection(db_path)
        try:
            assert [p.model for p in list_records(conn)] == ["A1"]
        finally:
            conn.close()

    def test_no_arguments_runs_crawl(
        self, db_path: Path, opened: list, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[str | None] = []

        def fake_run(sink, catalog_url=None, **kwargs):
            calls.append(catalog_url)
            return RunStats()

        monkeypatch.setattr("cli.main.run_pipeline", fake_run)
        result = runner.invoke(app, [])

        assert result.exit_code == 0, result.output
        assert calls == [None]

    def test_catalog_url_option_is_passed(
        self, db_path: Path, opened: list, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[str | None] = []

        def fake_run(sink, catalog_url=None, **kwargs):
            calls.append(catalog_url)
            return RunStats()

        monkeypatch.setattr("cli.main.run_pipeline", fake_run)
        result = runner.invoke(app, ["crawl", "--catalog-url", "https://e.com/makers"])

        assert result.exit_code == 0, result.output
        assert calls == ["https://e.com/makers"]

    def test_catalog_failure_exits_one(
        self, db_path: Path, opened: list, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fake_run(sink, catalog_url=None, **kwargs):
            raise FetchError("https://e.com/makers", "gave up after 3 attempt(s)", attempts=3)

        monkeypatch.setattr("cli.main.run_pipeline", fake_run)
        result = runner.invoke(app, ["crawl"])

        assert result.exit_code == 1
        assert "Could not retrieve manufacturer links" in result.output
        assert _is_closed(opened[0])

    def test_interrupt_exits_130_and_closes_db(
        self, db_path: Path, opened: list, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fake_run(sink, catalog_url=None, **kwargs):
            raise Interrupted("stop requested")

        monkeypatch.setattr("cli.main.run_pipeline", fake_run)
        result = runner.invoke(app, ["crawl"])

        assert result.exit_code == EXIT_INTERRUPTED
        assert "interrupted" in result.output
        assert _is_closed(opened[0])

    def test_sigint_during_pacing_stops_and_closes_db(
        self, db_path: Path, opened: list, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        base = "https://catalog.example.com"
        pages = {
            f"{base}/makers.php3": '<div class="makers"><ul><li><a href="alpha.php">Alpha</a></li></ul></div>',
            f"{base}/alpha.php": (
                '<div class="section-body"><ul>'
                '<li><a href="a1.php">A1</a></li><li><a href="a2.php">A2</a></li>'
                "</ul></div>"
            ),
            f"{base}/a1.php": '<h1 class="specs-phone-name">X</h1>',
            f"{base}/a2.php": '<h1 class="specs-phone-name">Y</h1>',
        }
        fetched: list[str] = []

        def fetch(url: str) -> Page:
            fetched.append(url)
            return Page.from_html(url, pages[url])

        class SigintDuringSleep(StopSignal):
            def sleep(self, seconds: float) -> None:
                # Deliver Ctrl-C through whatever handler the command installed.
                signal.getsignal(signal.SIGINT)(signal.SIGINT, None)
                super().sleep(seconds)

        def run_with_site(sink, catalog_url=None, **kwargs):
            return run_pipeline(sink, catalog_url, fetch=fetch, pacing_delay=0.5, **kwargs)

        handler_before = signal.getsignal(signal.SIGINT)
        monkeypatch.setattr("cli.main.StopSignal", SigintDuringSleep)
        monkeypatch.setattr("cli.main.run_pipeline", run_with_site)
        result = runner.invoke(app, ["crawl", "--catalog-url", f"{base}/makers.php3"])

        assert result.exit_code == EXIT_INTERRUPTED, result.output
        assert fetched == [f"{base}/makers.php3", f"{base}/alpha.php", f"{base}/a1.php"]
        assert _is_closed(opened[0])
        assert signal.getsignal(signal.SIGINT) is handler_before

        conn = get_connection(db_path)
        try:
            assert [p.model for p in list_records(conn)] == ["A1"]
        finally:
            conn.close()

    def test_unexpected_error_is_reported(
        self, db_path: Path, opened: list, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fake_run(sink, catalog_url=None, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr("cli.main.run_pipeline", fake_run)
        result = runner.invoke(app, ["crawl"])

        assert result.exit_code == 1
        assert "boom" in result.output
        assert _is_closed(opened[0])

    def test_stop_signal_is_passed_to_pipeline(
        self, db_path: Path, opened: list, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        seen: dict = {}

        def fake_run(sink, catalog_url=None, **kwargs):
            seen.update(kwargs)
            return RunStats()

        monkeypatch.setattr("cli.main.run_pipeline", fake_run)
        runner.invoke(app, ["crawl"])

        assert seen["stop"].stopped is False


# ---------------------------------------------------------------------------
# phone
# ---------------------------------------------------------------------------

class TestPhone:
    def test_prints_specs(self, monkeypatch: pytest.MonkeyPatch) -> None:
        html = """\
<h1 class="specs-phone-name">Nokia 3310</h1>
<div id="specs-list"><table>
  <tr><th>Battery</th></tr>
  <tr><td class="nfo">Type</td><td class="vcenter">Li-Ion 1200 mAh</td></tr>
</table></div>
"""
        monkeypatch.setattr(
            "cli.main.fetch_page", lambda url: Page.from_html(url, html)
        )
        result = runner.invoke(app, ["phone", "https://e.com/nokia_3310.php"])

        assert result.exit_code == 0, result.output
        assert "2 spec(s)" in result.output
        assert "battery_type" in result.output
        assert "Li-Ion 1200 mAh" in result.output

    def test_fetch_failure_exits_one(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail(url):
            raise FetchError(url, "gave up after 3 attempt(s)", attempts=3)

        monkeypatch.setattr("cli.main.fetch_page", fail)
        result = runner.invoke(app, ["phone", "https://e.com/x.php"])
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# db
# ---------------------------------------------------------------------------

class TestDbCommands:
    def test_init_creates_file(self, tmp_path: Path) -> None:
        path = tmp_path / "fresh.db"
        result = runner.invoke(app, ["db", "init", "--db", str(path)])
        assert result.exit_code == 0, result.output
        assert path.exists()
        assert "(schema v1)" in result.output

    def test_list_and_count(self, tmp_path: Path) -> None:
        path = tmp_path / "phones.db"
        conn = get_connection(path)
        init_db(conn)
        insert_record(conn, PhoneRecord("Samsung", "Galaxy S24", "https://e.com/s24", {"a": "1"}))
        insert_record(conn, PhoneRecord("Apple", "iPhone 15", "https://e.com/i15", {}))
        conn.close()

        result = runner.invoke(app, ["db", "list", "--db", str(path), "-m", "Samsung"])
        assert result.exit_code == 0, result.output
        assert "Galaxy S24" in result.output
        assert "iPhone 15" not in result.output

        result = runner.invoke(app, ["db", "count", "--db", str(path)])
        assert "[db count] 2" in result.output

    def test_list_empty(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["db", "list", "--db", str(tmp_path / "empty.db")])
        assert result.exit_code == 0
        assert "No phones found" in result.output


class TestRenderSpecs:
    def test_aligns_columns(self) -> None:
        text = render_specs({"phone_name": "X", "display_type": "AMOLED"})
        assert text.splitlines() == [
            "phone_name    X",
            "display_type  AMOLED",
        ]

    def test_flattens_multiline_values(self) -> None:
        assert render_specs({"nfc": "Yes\n(market dependent)"}) == "nfc  Yes (market dependent)"

    def test_empty(self) -> None:
        assert render_specs({}) == "(no specifications)"
