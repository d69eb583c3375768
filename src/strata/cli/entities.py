"""Entity command: classified classes/structs and their relationships."""

from pathlib import Path
from typing import Optional

import typer

from ..classification.models import Layer
from ..exceptions import StrataError
from ..formatters import RenderOptions
from ..formatters.base import VIEW_ENTITIES
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config, resolve_formatter, run_analysis


def _parse_layer(value: Optional[str]) -> Optional[Layer]:
    if value is None:
        return None
    try:
        return Layer(value.lower())
    except ValueError:
        choices = ", ".join(layer.value for layer in Layer)
        raise typer.BadParameter(f"{value!r} is not a layer (choose from {choices})")


@app.command()
def entities(
    path: Path = typer.Argument(
        Path("."),
        help="Path to the C/C++ source tree (or a single file)",
        exists=True,
        file_okay=True,
        dir_okay=True,
    ),
    layer: Optional[str] = typer.Option(
        None,
        "--layer",
        "-l",
        help="Only show one layer: core, interface, derived or utility",
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (human-readable) or json",
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
    List classified entities with the rule that fired and relation counts.

    Also reports names that are referenced but never defined, and names
    defined in several files with disagreeing layers.

    [bold cyan]Examples:[/bold cyan]

      strata entities /path/to/project

      strata entities . --layer interface

      strata entities . --format json
    """
    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    layer_filter = _parse_layer(layer)
    formatter = resolve_formatter(fmt)

    try:
        settings = resolve_config(config=config, workers=workers)
        result = run_analysis(path, settings)
        formatter.render(result, RenderOptions(view=VIEW_ENTITIES, layer=layer_filter))

    except typer.Exit:
        raise
    except StrataError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(e.exit_code)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
