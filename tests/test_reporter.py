"""Tests for RunStats and Reporter."""

from __future__ import annotations

import io
from pathlib import Path

from rich.console import Console

from mathmirror.reporter import Outcome, Reporter, RunStats


def _reporter(**kwargs) -> tuple[Reporter, io.StringIO]:
    buffer = io.StringIO()
    return Reporter(Console(file=buffer, width=300, color_system=None), **kwargs), buffer


class TestRunStats:
    """Test RunStats tracking."""

    def test_init_defaults(self) -> None:
        stats = RunStats()

        assert stats.as_dict() == {
            "directories": 0,
            "copied": 0,
            "rendered": 0,
            "skipped": 0,
            "failed": 0,
            "total": 0,
        }
        assert stats.failures == []

    def test_each_outcome_counts_once(self) -> None:
        stats = RunStats()
        path = Path("/site/x")

        for outcome in Outcome:
            stats.increment(outcome, path, reason="r")

        assert stats.directories == 1
        assert stats.copied == 1
        assert stats.rendered == 1
        assert stats.skipped == 1
        assert stats.failed == 1
        assert stats.total == 5

    def test_failure_recorded(self) -> None:
        stats = RunStats()

        stats.increment(Outcome.FAILED, Path("/site/bad.html"), reason="cannot render")

        assert stats.failures[0].path == Path("/site/bad.html")
        assert stats.failures[0].reason == "cannot render"


class TestReporterOutput:
    """Test per-file line gating."""

    def test_default_prints_all_file_lines(self) -> None:
        reporter, buffer = _reporter()

        reporter.record(Outcome.RENDERED, Path("/s/a.html"))
        reporter.record(Outcome.COPIED, Path("/s/b.css"))
        reporter.record(Outcome.SKIPPED, Path("/s/c.js"))
        reporter.record(Outcome.DIRECTORY, Path("/s/d"))

        text = buffer.getvalue()
        assert "RENDER: /s/a.html" in text
        assert "COPY: /s/b.css" in text
        assert "SKIP: /s/c.js" in text
        assert "/s/d" not in text

    def test_quiet_keeps_render_lines(self) -> None:
        reporter, buffer = _reporter(quiet=True)

        reporter.record(Outcome.RENDERED, Path("/s/a.html"))
        reporter.record(Outcome.COPIED, Path("/s/b.css"))
        reporter.record(Outcome.SKIPPED, Path("/s/c.js"))

        text = buffer.getvalue()
        assert "RENDER:" in text
        assert "COPY:" not in text
        assert "SKIP:" not in text

    def test_quieter_prints_nothing(self) -> None:
        reporter, buffer = _reporter(quieter=True)

        reporter.record(Outcome.RENDERED, Path("/s/a.html"))
        reporter.record(Outcome.FAILED, Path("/s/b.html"), "bad tex")

        assert buffer.getvalue() == ""
        assert reporter.stats.total == 2

    def test_failure_line_has_reason(self) -> None:
        reporter, buffer = _reporter(quiet=True)

        reporter.record(Outcome.FAILED, Path("/s/b.html"), "bad [tex]")

        assert "FAIL: /s/b.html (bad [tex])" in buffer.getvalue()


class TestSummary:
    """Test the final summary."""

    def test_summary_table(self) -> None:
        reporter, _ = _reporter()
        reporter.record(Outcome.COPIED, Path("/s/a"))

        table = reporter.summary_table()

        assert [column.header for column in table.columns] == [
            "Directories",
            "Copied",
            "Rendered",
            "Skipped",
            "Failed",
            "Total",
        ]
        assert table.row_count == 1

    def test_print_summary_lists_failures(self) -> None:
        reporter, buffer = _reporter(quieter=True)
        reporter.record(Outcome.FAILED, Path("/s/b.html"), "bad tex")

        reporter.print_summary()

        text = buffer.getvalue()
        assert "Completed" in text
        assert "1 file(s) failed" in text
        assert "/s/b.html: bad tex" in text
