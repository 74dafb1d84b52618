"""Locate TeX math spans inside a single text node."""

from __future__ import annotations

import re
from typing import List, Union

from mathmirror.models import MathSpan

DISPLAY_MATH = re.compile(r"\$\$(.*?)\$\$", re.DOTALL)
INLINE_MATH = re.compile(r"(?<!\\)\$([^$]+?)\$")

Segment = Union[str, MathSpan]


def _split(text: str, pattern: re.Pattern[str], display: bool) -> List[Segment]:
    segments: List[Segment] = []
    pos = 0
    for match in pattern.finditer(text):
        if match.start() > pos:
            segments.append(text[pos : match.start()])
        segments.append(MathSpan(tex=match.group(1), display=display))
        pos = match.end()
    if pos < len(text):
        segments.append(text[pos:])
    return segments


def split_math(text: str) -> List[Segment]:
    """Split ``text`` into literal strings and math spans, in order.

    Display math is resolved first over the whole text; inline math is then
    only searched in the literal text left between display spans, so
    ``$$a+b$$`` is never read as two inline spans.
    """
    segments: List[Segment] = []
    for segment in _split(text, DISPLAY_MATH, display=True):
        if isinstance(segment, MathSpan):
            segments.append(segment)
        else:
            segments.extend(_split(segment, INLINE_MATH, display=False))
    return segments


def has_math(text: str) -> bool:
    return bool(DISPLAY_MATH.search(text) or INLINE_MATH.search(text))


def unescape_dollars(text: str) -> str:
    r"""Turn escaped ``\$`` delimiters back into literal dollar signs."""
    return text.replace("\\$", "$")
