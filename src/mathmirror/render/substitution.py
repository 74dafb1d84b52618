"""Replace TeX math in an HTML document with rendered SVG markup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from html import escape
from typing import Tuple

from bs4 import BeautifulSoup
from bs4.element import Doctype, NavigableString, PageElement, PreformattedString, Tag

from mathmirror.config import DEFAULT_MARKER_CLASS
from mathmirror.models import MathSpan
from mathmirror.render.engine import BLOCK_CLASS, MathEngine
from mathmirror.render.spans import has_math, split_math, unescape_dollars

LOGGER = logging.getLogger(__name__)

PARSER = "html.parser"
STYLE_ID = "math-svg-styles"
EXCLUDED_TAGS = frozenset({"script", "code", "pre"})
# skipped as well when a document has no <body> and is walked from its root
HEAD_TAGS = frozenset({"head", "title"})
DISPLAY_STYLE = "display: block; text-align: center; margin: 1em 0;"


@dataclass(slots=True)
class _WalkState:
    spans: int = 0
    blocks: int = 0

    @property
    def modified(self) -> bool:
        return bool(self.spans or self.blocks)


class MathSubstituter:
    """Walks a parsed document and splices rendered math into it.

    Text nodes are matched one at a time; delimiters split across several
    nodes by other markup are not joined. ``script``, ``code`` and ``pre``
    subtrees are never entered.
    """

    def __init__(self, engine: MathEngine, *, marker_class: str = DEFAULT_MARKER_CLASS) -> None:
        self.engine = engine
        self.marker_class = marker_class

    def render_document(self, html: str) -> Tuple[str, bool]:
        """Return ``(html, modified)``.

        When nothing was rendered the input string is returned untouched so
        the caller can copy the original bytes.
        """
        soup = BeautifulSoup(html, PARSER)
        state = _WalkState()
        if soup.body is not None:
            self._visit(soup.body, state, EXCLUDED_TAGS)
        else:
            self._visit(soup, state, EXCLUDED_TAGS | HEAD_TAGS)

        if not state.modified:
            return html, False

        LOGGER.debug("Rendered %d span(s) and %d block(s)", state.spans, state.blocks)
        self._inject_styles(soup)
        return str(soup), True

    def _visit(self, node: PageElement, state: _WalkState, excluded: frozenset[str]) -> None:
        if isinstance(node, NavigableString):
            # comments, doctypes and CDATA are never math
            if not isinstance(node, PreformattedString):
                self._substitute_text(node, state)
            return
        if not isinstance(node, Tag):
            return

        if self.marker_class in (node.get("class") or []):
            markup = self._display_markup(node.get_text())
            self._replace_with_markup(node, markup)
            state.blocks += 1
        elif node.name not in excluded:
            for child in list(node.children):
                self._visit(child, state, excluded)

    def _substitute_text(self, node: NavigableString, state: _WalkState) -> None:
        text = str(node)
        if not has_math(text):
            return

        segments = split_math(text)
        spans = [segment for segment in segments if isinstance(segment, MathSpan)]

        parts = []
        for segment in segments:
            if isinstance(segment, MathSpan):
                if segment.display:
                    parts.append(self._display_markup(segment.tex))
                else:
                    parts.append(self.engine.convert(segment.tex, display=False))
            else:
                parts.append(escape(unescape_dollars(segment), quote=False))

        self._replace_with_markup(node, "".join(parts))
        state.spans += len(spans)

    def _display_markup(self, tex: str) -> str:
        svg = self.engine.convert(tex, display=True)
        return f'<span class="{BLOCK_CLASS}" style="{DISPLAY_STYLE}">{svg}</span>'

    @staticmethod
    def _replace_with_markup(node: PageElement, markup: str) -> None:
        fragment = BeautifulSoup(markup, PARSER)
        children = list(fragment.contents)
        if children:
            node.replace_with(*children)
        else:
            node.extract()

    def _inject_styles(self, soup: BeautifulSoup) -> None:
        head = soup.head
        if head is None:
            head = soup.new_tag("head")
            container = soup.html or soup
            container.insert(_after_doctype(container), head)

        style = head.find("style", attrs={"id": STYLE_ID})
        if style is None:
            style = soup.new_tag("style", attrs={"id": STYLE_ID})
            head.append(style)
        style.string = self.engine.style_sheet()


def _after_doctype(container: Tag) -> int:
    """Index just past a leading doctype, so it stays the first node."""
    for index, child in enumerate(container.contents):
        if isinstance(child, Doctype):
            return index + 1
        if not (isinstance(child, NavigableString) and not child.strip()):
            break
    return 0
