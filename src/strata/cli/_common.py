"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..analysis import AnalysisEngine, CorpusAnalysis
from ..config import StrataConfig, load_config
from ..formatters import BaseFormatter, get_formatter

console = Console()

FORMATS = ("rich", "json")


def resolve_config(
    config: Optional[Path] = None,
    workers: Optional[int] = None,
    timeout: Optional[float] = None,
) -> StrataConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if workers is not None:
        overrides["workers"] = workers
    if timeout is not None:
        overrides["timeout_seconds"] = timeout
    return load_config(config_file=config, **overrides)


def resolve_formatter(fmt: str) -> BaseFormatter:
    if fmt not in FORMATS:
        console.print(f"[red]Error:[/red] unknown format {fmt!r} (choose from {', '.join(FORMATS)})")
        raise typer.Exit(2)
    return get_formatter(fmt)


def run_analysis(path: Path, config: StrataConfig) -> CorpusAnalysis:
    return AnalysisEngine(path, config).run()
