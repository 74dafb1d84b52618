"""Persistent content-fingerprint cache."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict

from mathmirror.utils.files import atomic_write_text, compute_sha256

LOGGER = logging.getLogger(__name__)


class FingerprintCache:
    """Maps absolute source paths to the SHA-256 digest seen on the last run.

    Entries for deleted sources are kept; the file only ever grows.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.entries: Dict[str, str] = {}

    def load(self) -> Dict[str, str]:
        """Read the persisted mapping; a missing or corrupt file yields ``{}``."""
        self.entries = {}
        if not self.path.exists():
            LOGGER.debug("No fingerprint cache at %s, starting cold", self.path)
            return self.entries

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            LOGGER.warning("Ignoring corrupt fingerprint cache %s: %s", self.path, exc)
            return self.entries

        if not isinstance(data, dict) or not all(
            isinstance(key, str) and isinstance(value, str) for key, value in data.items()
        ):
            LOGGER.warning("Ignoring fingerprint cache %s: not a path-to-digest object", self.path)
            return self.entries

        self.entries = data
        LOGGER.debug("Loaded %d fingerprint(s) from %s", len(data), self.path)
        return self.entries

    @staticmethod
    def key_for(source: Path) -> str:
        return str(Path(source).absolute())

    def fingerprint(self, source: Path) -> str:
        return compute_sha256(source)

    def is_unchanged(self, source: Path) -> bool:
        """Compare ``source`` with its stored digest.

        A changed digest is written into the mapping before returning, so the
        mapping is mutated after any call that returns ``False``.
        """
        key = self.key_for(source)
        digest = self.fingerprint(source)
        same = self.entries.get(key) == digest
        if not same:
            self.entries[key] = digest
        return same

    def discard(self, source: Path) -> None:
        self.entries.pop(self.key_for(source), None)

    def persist(self) -> None:
        """Overwrite the cache file with the current mapping."""
        atomic_write_text(self.path, json.dumps(self.entries, indent=2, sort_keys=True) + "\n")
        LOGGER.debug("Persisted %d fingerprint(s) to %s", len(self.entries), self.path)
