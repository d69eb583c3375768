"""CLI entry point: registers all subcommands."""

import typer

app = typer.Typer(
    name="strata",
    help="Strata - C/C++ codebase triage: layers, relationships and rewrite estimates",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .entities import entities as _entities  # noqa: F401, E402
