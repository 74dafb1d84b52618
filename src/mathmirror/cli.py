"""Command line interface for mathmirror."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from mathmirror.config import BASE_DIR_ENV, AppConfig
from mathmirror.errors import ConfigurationError, MirrorIOError
from mathmirror.mirror.walker import TreeMirror
from mathmirror.render.engine import MathtextSvgEngine
from mathmirror.render.substitution import MathSubstituter
from mathmirror.reporter import Reporter


console = Console()
app = typer.Typer(help="mathmirror - render TeX math in a site tree to SVG")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@app.command()
def render(
    src_dir: Optional[Path] = typer.Option(
        None, "--src-dir", help=f"Source directory (default: ${BASE_DIR_ENV}/public)"
    ),
    dest_dir: Optional[Path] = typer.Option(
        None, "--dest-dir", help=f"Destination directory (default: ${BASE_DIR_ENV}/rendered-public)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Render every file, ignoring the cache"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Print render messages only"),
    quieter: bool = typer.Option(False, "--quieter", help="Do not print per-file messages"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Mirror SRC_DIR into DEST_DIR, rendering math in HTML files to SVG."""
    _setup_logging(verbose)
    config = AppConfig(
        source_dir=src_dir,
        dest_dir=dest_dir,
        force=force,
        quiet=quiet,
        quieter=quieter,
    )
    try:
        config.validate()
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    reporter = Reporter(console, quiet=quiet, quieter=quieter)
    substituter = MathSubstituter(MathtextSvgEngine(), marker_class=config.marker_class)
    mirror = TreeMirror(substituter, config, reporter=reporter)

    console.print(
        f"[bold yellow]> Start processing:[/bold yellow] "
        f"{escape(str(config.source_dir))} -> {escape(str(config.dest_dir))}"
    )
    try:
        mirror.run()
    except MirrorIOError as exc:
        reporter.print_summary()
        console.print(f"[bold red]Aborted:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    reporter.print_summary()
