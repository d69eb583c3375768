"""Main analysis command: per-file metrics, layers and rewrite estimate."""

from pathlib import Path
from typing import Optional

import typer

from ..exceptions import StrataError
from ..formatters import RenderOptions
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config, resolve_formatter, run_analysis


@app.command()
def analyze(
    path: Path = typer.Argument(
        Path("."),
        help="Path to the C/C++ source tree (or a single file)",
        exists=True,
        file_okay=True,
        dir_okay=True,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (human-readable) or json",
    ),
    top: Optional[int] = typer.Option(
        None,
        "--top",
        "-n",
        help="Only list the N highest-scoring files",
        min=1,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Parallel workers",
        min=1,
        max=32,
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Soft per-file extraction deadline in seconds",
        min=0.1,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append a DEBUG log of the run (including per-file skip reasons) to this file",
        dir_okay=False,
        writable=True,
    ),
):
    """
    Estimate complexity and rewrite time for every file.

    Files are ranked by complexity score and tagged with a priority tier;
    skipped files (generated, binary, tables) are listed with the reason.

    [bold cyan]Examples:[/bold cyan]

      strata analyze /path/to/project

      strata analyze . --top 20

      strata analyze . --format json > triage.json
    """
    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    formatter = resolve_formatter(fmt)

    try:
        settings = resolve_config(config=config, workers=workers, timeout=timeout)
        result = run_analysis(path, settings)
        formatter.render(result, RenderOptions(top=top))

    except typer.Exit:
        raise
    except StrataError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(e.exit_code)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
