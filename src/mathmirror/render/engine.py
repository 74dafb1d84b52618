"""TeX to SVG typesetting.

The default engine uses matplotlib's mathtext, which needs no LaTeX
installation. Any object with ``convert`` and ``style_sheet`` can stand in
for it (see ``MathEngine``).
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from typing import Dict, Protocol, Tuple

import matplotlib
from matplotlib.figure import Figure

from mathmirror.errors import RenderError

logger = logging.getLogger(__name__)

INLINE_CLASS = "math-inline"
DISPLAY_CLASS = "math-display"
BLOCK_CLASS = "math-block"

_BASE_RULES = (
    f"svg.{INLINE_CLASS}, svg.{DISPLAY_CLASS} {{ overflow: visible; }}",
)
_INLINE_RULES = (
    f"svg.{INLINE_CLASS} {{ display: inline-block; vertical-align: middle; }}",
)
_DISPLAY_RULES = (
    f".{BLOCK_CLASS} {{ display: block; text-align: center; margin: 1em 0; }}",
    f"svg.{DISPLAY_CLASS} {{ display: inline-block; max-width: 100%; }}",
)


class MathEngine(Protocol):
    """Collaborator that turns TeX into markup for the substitution engine."""

    def convert(self, tex: str, *, display: bool) -> str:
        ...

    def style_sheet(self) -> str:
        ...


@dataclass(slots=True)
class EngineConfig:
    fontset: str = "cm"
    inline_size: float = 11.0
    display_size: float = 14.0
    pad_inches: float = 0.02
    hashsalt: str = "mathmirror"


def normalize_tex(tex: str) -> str:
    """Collapse whitespace (including newlines) and escape dollars not already escaped."""
    return re.sub(r"(?<!\\)\$", r"\\$", " ".join(tex.split()))


def _first_line(exc: Exception) -> str:
    lines = str(exc).strip().splitlines()
    return lines[0] if lines else "parse error"


class MathtextSvgEngine:
    """Render TeX expressions to inline SVG using matplotlib mathtext.

    A single instance is meant to live for a whole run: rendered
    expressions are cached and the style sheet accumulates the rules of
    every mode used so far.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self._cache: Dict[Tuple[str, bool], str] = {}
        self._rules: list[str] = list(_BASE_RULES)

    def convert(self, tex: str, *, display: bool) -> str:
        source = normalize_tex(tex)
        key = (source, display)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        self._use_rules(_DISPLAY_RULES if display else _INLINE_RULES)
        if not source:
            markup = ""
        else:
            markup = self._render(source, display=display)
        self._cache[key] = markup
        return markup

    def style_sheet(self) -> str:
        return "\n".join(self._rules)

    def _use_rules(self, rules: Tuple[str, ...]) -> None:
        for rule in rules:
            if rule not in self._rules:
                self._rules.append(rule)

    def _render(self, source: str, *, display: bool) -> str:
        cfg = self.config
        size = cfg.display_size if display else cfg.inline_size
        rc = {
            "mathtext.fontset": cfg.fontset,
            "svg.fonttype": "path",
            "svg.hashsalt": cfg.hashsalt,
        }
        buffer = io.StringIO()
        with matplotlib.rc_context(rc):
            fig = Figure(figsize=(0.01, 0.01))
            fig.text(0, 0, f"${source}$", fontsize=size)
            try:
                fig.savefig(
                    buffer,
                    format="svg",
                    bbox_inches="tight",
                    pad_inches=cfg.pad_inches,
                    transparent=True,
                    metadata={"Date": None},
                )
            except ValueError as exc:
                logger.debug("mathtext rejected %r: %s", source, exc)
                raise RenderError(source, _first_line(exc)) from exc

        output = buffer.getvalue()
        # drop the XML declaration and DOCTYPE, keep the <svg> element
        start = output.find("<svg")
        if start < 0:
            raise RenderError(source, "no SVG produced")
        svg = output[start:].strip()
        css_class = DISPLAY_CLASS if display else INLINE_CLASS
        return svg.replace("<svg ", f'<svg class="{css_class}" ', 1)
