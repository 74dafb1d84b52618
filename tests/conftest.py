"""Shared fixtures."""

from __future__ import annotations

import io
from html import escape
from typing import Iterable

import pytest
from rich.console import Console

from mathmirror.errors import RenderError
from mathmirror.reporter import Reporter


class StubEngine:
    """Typesetting engine that records calls and emits placeholder SVG."""

    def __init__(self, fail_on: Iterable[str] = ()) -> None:
        self.calls: list[tuple[str, bool]] = []
        self.fail_on = set(fail_on)

    def convert(self, tex: str, *, display: bool) -> str:
        self.calls.append((tex, display))
        if tex in self.fail_on:
            raise RenderError(tex, "stub rejected expression")
        kind = "display" if display else "inline"
        return f'<svg class="stub-{kind}" data-tex="{escape(tex)}"></svg>'

    def style_sheet(self) -> str:
        return "svg.stub-inline { vertical-align: middle; }"


@pytest.fixture
def engine() -> StubEngine:
    return StubEngine()


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO) -> Reporter:
    return Reporter(Console(file=output, width=300, color_system=None))


@pytest.fixture
def failing_engine() -> StubEngine:
    """Engine that rejects the expression ``bad``."""
    return StubEngine(fail_on={"bad"})
