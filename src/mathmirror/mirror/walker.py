"""Mirror a source tree into a destination tree, rendering math on the way."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from mathmirror.config import AppConfig
from mathmirror.errors import MirrorIOError, RenderError
from mathmirror.mirror.cache import FingerprintCache
from mathmirror.models import TraversalEntry
from mathmirror.render.substitution import MathSubstituter
from mathmirror.reporter import Outcome, Reporter, RunStats
from mathmirror.utils.files import ensure_dir, iter_tree

LOGGER = logging.getLogger(__name__)

HTML_SUFFIX = ".html"


@dataclass(slots=True)
class RunContext:
    """Mutable state of a single run, handed to every traversal step."""

    source_root: Path
    dest_root: Path
    cache: FingerprintCache
    reporter: Reporter
    force: bool = False


def _io_error(exc: OSError, fallback: Path) -> MirrorIOError:
    path = Path(exc.filename) if exc.filename else fallback
    return MirrorIOError(path, exc)


class TreeMirror:
    """Coordinates traversal, change detection and per-file transforms."""

    def __init__(
        self,
        substituter: MathSubstituter,
        config: AppConfig,
        *,
        reporter: Reporter | None = None,
    ) -> None:
        self.substituter = substituter
        self.config = config
        self.reporter = reporter or Reporter(quiet=config.quiet, quieter=config.quieter)

    def run(self) -> RunStats:
        """Process every entry below the source root.

        Raises ``ConfigurationError`` before touching anything if the roots
        are unusable, and ``MirrorIOError`` on the first I/O failure. The
        fingerprint cache is persisted in both the success and the I/O
        failure case.
        """
        self.config.validate()
        source_root = Path(self.config.source_dir)
        dest_root = Path(self.config.dest_dir)

        cache = FingerprintCache(self.config.cache_path)
        cache.load()
        context = RunContext(
            source_root=source_root,
            dest_root=dest_root,
            cache=cache,
            reporter=self.reporter,
            force=self.config.force,
        )

        try:
            ensure_dir(dest_root)
        except OSError as exc:
            raise _io_error(exc, dest_root) from exc

        try:
            try:
                paths = list(iter_tree(source_root))
            except OSError as exc:
                raise _io_error(exc, source_root) from exc

            LOGGER.info("Found %d entries under %s", len(paths), source_root)
            for path in paths:
                self._process(path, context)
        except MirrorIOError as exc:
            LOGGER.error("Aborting run: %s", exc)
            raise
        finally:
            try:
                cache.persist()
            except OSError as exc:
                raise _io_error(exc, cache.path) from exc

        return self.reporter.stats

    def _process(self, path: Path, context: RunContext) -> None:
        try:
            entry = TraversalEntry.from_path(path, context.source_root, context.dest_root)
        except OSError as exc:
            raise _io_error(exc, path) from exc

        if entry.is_dir:
            try:
                ensure_dir(entry.destination)
            except OSError as exc:
                raise _io_error(exc, entry.destination) from exc
            context.reporter.record(Outcome.DIRECTORY, entry.source)
            return

        if self.config.is_reserved(entry.source):
            LOGGER.debug("Ignoring reserved file %s", entry.source)
            return

        try:
            unchanged = context.cache.is_unchanged(entry.source)
        except OSError as exc:
            raise _io_error(exc, entry.source) from exc

        if unchanged and not context.force:
            context.reporter.record(Outcome.SKIPPED, entry.source)
            return

        try:
            outcome = self._transfer(entry)
        except RenderError as exc:
            context.cache.discard(entry.source)
            LOGGER.error("Failed to render %s: %s", entry.source, exc)
            context.reporter.record(Outcome.FAILED, entry.source, str(exc))
            return
        except OSError as exc:
            context.cache.discard(entry.source)
            raise _io_error(exc, entry.source) from exc

        context.reporter.record(outcome, entry.source)

    def _transfer(self, entry: TraversalEntry) -> Outcome:
        ensure_dir(entry.destination.parent)
        if entry.source.name.endswith(HTML_SUFFIX):
            return self._render_html(entry)
        shutil.copyfile(entry.source, entry.destination)
        return Outcome.COPIED

    def _render_html(self, entry: TraversalEntry) -> Outcome:
        raw = entry.source.read_bytes()
        try:
            html = raw.decode("utf-8")
        except UnicodeDecodeError:
            LOGGER.warning("%s is not valid UTF-8, copying it unchanged", entry.source)
            entry.destination.write_bytes(raw)
            return Outcome.COPIED

        output, modified = self.substituter.render_document(html)
        if not modified:
            entry.destination.write_bytes(raw)
            return Outcome.COPIED

        entry.destination.write_bytes(output.encode("utf-8"))
        return Outcome.RENDERED
