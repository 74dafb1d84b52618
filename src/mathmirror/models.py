"""Core mathmirror data models."""

from __future__ import annotations

import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class EntryKind(str, Enum):
    DIRECTORY = "directory"
    FILE = "file"


@dataclass(slots=True, frozen=True)
class TraversalEntry:
    """A source path, its kind and where it lands in the mirror tree."""

    source: Path
    kind: EntryKind
    destination: Path

    @classmethod
    def from_path(cls, source: Path, source_root: Path, dest_root: Path) -> "TraversalEntry":
        """Stat ``source`` and map it below ``dest_root``.

        Raises ``OSError`` when the entry cannot be stat-ed.
        """
        mode = source.stat().st_mode
        kind = EntryKind.DIRECTORY if stat.S_ISDIR(mode) else EntryKind.FILE
        return cls(source=source, kind=kind, destination=mirror_path(source, source_root, dest_root))

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


def mirror_path(source: Path, source_root: Path, dest_root: Path) -> Path:
    """Replace the ``source_root`` prefix of ``source`` with ``dest_root``."""
    return dest_root.joinpath(source.relative_to(source_root))


@dataclass(slots=True, frozen=True)
class MathSpan:
    """TeX source matched inside a single text node."""

    tex: str
    display: bool


@dataclass(slots=True, frozen=True)
class FileFailure:
    """A file that could not be rendered, with a short reason."""

    path: Path
    reason: str
