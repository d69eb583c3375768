"""Public API for Strata.

Example:
    >>> from strata import analyze
    >>>
    >>> result = analyze("/path/to/cpp/project")
    >>> result.summary.total_time
    EstimatedTime(hours=412, minutes=35)
    >>>
    >>> # With overrides
    >>> result = analyze("/path/to/cpp/project", workers=4, timeout_seconds=5)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .analysis import AnalysisEngine, CorpusAnalysis
from .config import load_config
from .exceptions import InvalidPathError
from .logging_config import get_logger

logger = get_logger(__name__)


def analyze(
    path: str = ".",
    config_file: Optional[Path] = None,
    **overrides: Any,
) -> CorpusAnalysis:
    """Analyze a C/C++ source tree.

    1. Load configuration (auto-discover TOML + apply overrides)
    2. Discover source files
    3. Extract, classify and register entities
    4. Estimate and summarize

    Args:
        path: Path to the source root, or a single file (default: current directory)
        config_file: Optional explicit config file path
        **overrides: Configuration overrides (e.g., workers=4)

    Returns:
        CorpusAnalysis with modules, entity graph, summary and priorities

    Raises:
        InvalidPathError: If path doesn't exist
        StrataError: If configuration is invalid
    """
    root = Path(path)
    if not root.exists():
        raise InvalidPathError(root, "does not exist")

    config = load_config(config_file=config_file, **overrides)
    logger.info(f"Starting analysis of {root}")

    return AnalysisEngine(root, config).run()
