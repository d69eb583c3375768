"""
Logging configuration for Strata.

Only the ``strata`` logger tree is configured, so embedding applications
keep control of the root logger. Console records go through rich on
stderr, next to the tables on stdout. An optional log file always
receives DEBUG records, which include the per-file skip and error
reasons of a run.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "strata"

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Configure the strata logger for a CLI run.

    Calling it again replaces the handlers of the previous call.

    Args:
        verbose: Show DEBUG records on the console
        quiet: Show only ERROR records on the console
        log_file: Append a full DEBUG log of the run to this file

    Returns:
        The configured ``strata`` logger
    """
    if quiet:
        console_level = logging.ERROR
    elif verbose:
        console_level = logging.DEBUG
    else:
        console_level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_path=verbose,
    )
    console_handler.setLevel(console_level)
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    logger.setLevel(logging.DEBUG if log_file is not None else console_level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger inside the strata tree.

    Args:
        name: Module name (e.g., 'strata.graph.builder'); names outside the
              tree are prefixed with 'strata.'. None returns the root strata logger.
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)

    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)
