"""Exception types raised by mathmirror."""

from __future__ import annotations

from pathlib import Path


class MathMirrorError(Exception):
    """Base class for all mathmirror errors."""


class ConfigurationError(MathMirrorError):
    """The run cannot start: roots are missing, invalid or overlapping."""


class MirrorIOError(MathMirrorError):
    """Reading, writing or stat-ing a specific path failed."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = Path(path)
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"{self.path}: {reason}")


class RenderError(MathMirrorError):
    """The typesetting engine rejected a TeX expression."""

    def __init__(self, tex: str, reason: str) -> None:
        self.tex = tex
        self.reason = reason
        super().__init__(f"cannot render {tex!r}: {reason}")
