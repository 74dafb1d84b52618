"""Run statistics and per-file progress output."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mathmirror.models import FileFailure


class Outcome(str, Enum):
    DIRECTORY = "directory"
    RENDERED = "rendered"
    COPIED = "copied"
    SKIPPED = "skipped"
    FAILED = "failed"


_LABELS = {
    Outcome.RENDERED: "[bold red]RENDER:[/bold red]",
    Outcome.COPIED: "[bold yellow]COPY:[/bold yellow]",
    Outcome.SKIPPED: "[bold green]SKIP:[/bold green]",
    Outcome.FAILED: "[bold magenta]FAIL:[/bold magenta]",
}


@dataclass(slots=True)
class RunStats:
    directories: int = 0
    copied: int = 0
    rendered: int = 0
    skipped: int = 0
    failed: int = 0
    total: int = 0
    failures: list[FileFailure] = field(default_factory=list)

    def increment(self, outcome: Outcome, path: Path, reason: str | None = None) -> None:
        self.total += 1
        if outcome is Outcome.DIRECTORY:
            self.directories += 1
        elif outcome is Outcome.RENDERED:
            self.rendered += 1
        elif outcome is Outcome.COPIED:
            self.copied += 1
        elif outcome is Outcome.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1
            self.failures.append(FileFailure(path=path, reason=reason or "unknown error"))

    def as_dict(self) -> dict[str, int]:
        return {
            "directories": self.directories,
            "copied": self.copied,
            "rendered": self.rendered,
            "skipped": self.skipped,
            "failed": self.failed,
            "total": self.total,
        }


class Reporter:
    """Tallies outcomes and prints the per-file lines the verbosity flags allow."""

    def __init__(self, console: Console | None = None, *, quiet: bool = False, quieter: bool = False) -> None:
        self.console = console or Console()
        self.quiet = quiet
        self.quieter = quieter
        self.stats = RunStats()

    def record(self, outcome: Outcome, path: Path, reason: str | None = None) -> None:
        self.stats.increment(outcome, path, reason)
        if self._should_print(outcome):
            line = f"{_LABELS[outcome]} {escape(str(path))}"
            if reason:
                line += f" ({escape(reason)})"
            self.console.print(line)

    def _should_print(self, outcome: Outcome) -> bool:
        if outcome is Outcome.DIRECTORY or self.quieter:
            return False
        if outcome in (Outcome.COPIED, Outcome.SKIPPED):
            return not self.quiet
        return True

    def summary_table(self) -> Table:
        table = Table(show_header=True, header_style="bold magenta")
        for name in self.stats.as_dict():
            table.add_column(name.capitalize())
        table.add_row(*(str(value) for value in self.stats.as_dict().values()))
        return table

    def print_summary(self) -> None:
        self.console.print("[bold green]> Completed.[/bold green]")
        self.console.print(self.summary_table())
        if self.stats.failures:
            self.console.print(f"[bold red]{len(self.stats.failures)} file(s) failed:[/bold red]")
            for failure in self.stats.failures:
                self.console.print(f"  {escape(str(failure.path))}: {escape(failure.reason)}")
