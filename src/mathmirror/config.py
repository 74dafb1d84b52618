"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from mathmirror.errors import ConfigurationError

BASE_DIR_ENV = "BLOG_BASE_DIR"
DEFAULT_CACHE_FILENAME = "math-cache.json"
DEFAULT_MARKER_CLASS = "latex-block"


def _get_default_dir(name: str, environ: Mapping[str, str] | None = None) -> Path | None:
    """Resolve ``$BLOG_BASE_DIR/<name>`` if the variable is set."""
    env = os.environ if environ is None else environ
    base = env.get(BASE_DIR_ENV)
    if not base:
        return None
    return Path(base) / name


def _overlaps(a: Path, b: Path) -> bool:
    return a == b or a in b.parents or b in a.parents


@dataclass(slots=True)
class AppConfig:
    source_dir: Path | None = None
    dest_dir: Path | None = None
    force: bool = False
    quiet: bool = False
    quieter: bool = False
    cache_filename: str = DEFAULT_CACHE_FILENAME
    reserved_suffixes: tuple[str, ...] = (".md5",)
    marker_class: str = DEFAULT_MARKER_CLASS

    def __post_init__(self) -> None:
        if self.source_dir is None:
            self.source_dir = _get_default_dir("public")
        if self.dest_dir is None:
            self.dest_dir = _get_default_dir("rendered-public")

    @property
    def cache_path(self) -> Path:
        if self.dest_dir is None:
            raise ConfigurationError("destination directory is not set")
        return Path(self.dest_dir) / self.cache_filename

    def is_reserved(self, path: Path) -> bool:
        return path.name.endswith(self.reserved_suffixes)

    def validate(self) -> None:
        """Resolve both roots to absolute paths and check they can be mirrored."""
        if self.source_dir is None:
            raise ConfigurationError(
                f"no source directory given and ${BASE_DIR_ENV} is not set"
            )
        if self.dest_dir is None:
            raise ConfigurationError(
                f"no destination directory given and ${BASE_DIR_ENV} is not set"
            )

        source = Path(self.source_dir).expanduser().resolve()
        dest = Path(self.dest_dir).expanduser().resolve()
        if not source.exists():
            raise ConfigurationError(f"source directory not found: {source}")
        if not source.is_dir():
            raise ConfigurationError(f"source is not a directory: {source}")
        if _overlaps(source, dest):
            raise ConfigurationError(
                f"source and destination must be disjoint trees: {source} / {dest}"
            )
        self.source_dir = source
        self.dest_dir = dest
