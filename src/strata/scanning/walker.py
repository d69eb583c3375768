"""Source discovery: finds C/C++ files under a root directory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

from ..config import DEFAULT_CONFIG, StrataConfig
from ..exceptions import InvalidPathError
from ..logging_config import get_logger

logger = get_logger(__name__)


def should_skip_file(filepath: Path, exclude_patterns: Iterable[str]) -> bool:
    """
    Check if a file should be skipped based on exclusion patterns.

    Args:
        filepath: Path relative to the scan root
        exclude_patterns: Glob patterns to exclude

    Returns:
        True if file should be skipped
    """
    parts = filepath.parts
    for pattern in exclude_patterns:
        if filepath.match(pattern):
            return True
        # "build/*" also excludes anything nested under build/
        if pattern.endswith("/*"):
            prefix = Path(pattern[:-2])
            if any(Path(*parts[: i + 1]).match(str(prefix)) for i in range(len(parts) - 1)):
                return True
    return False


def discover_sources(root_dir: Path, config: Optional[StrataConfig] = None) -> list[Path]:
    """
    Find source files under ``root_dir``.

    Args:
        root_dir: Directory to scan (a single file is returned as-is)
        config: Extensions, exclusions, size and count limits

    Returns:
        Sorted list of file paths

    Raises:
        InvalidPathError: If ``root_dir`` does not exist
    """
    config = config or DEFAULT_CONFIG
    root_dir = Path(root_dir)
    if not root_dir.exists():
        raise InvalidPathError(root_dir, "does not exist")
    if root_dir.is_file():
        return [root_dir]

    ext_set = {e.lower() for e in config.source_extensions}
    found: list[Path] = []
    skipped = 0

    for dirpath, dirnames, filenames in os.walk(root_dir, followlinks=config.follow_symlinks):
        dirnames.sort()
        for filename in sorted(filenames):
            filepath = Path(dirpath) / filename
            if filepath.suffix.lower() not in ext_set:
                continue

            if should_skip_file(filepath.relative_to(root_dir), config.exclude_patterns):
                skipped += 1
                logger.debug(f"Skipped (pattern): {filepath}")
                continue

            try:
                size = filepath.stat().st_size
            except OSError as e:
                logger.warning(f"Cannot stat {filepath}: {e}")
                continue
            if size > config.max_file_size_bytes:
                skipped += 1
                logger.debug(f"Skipped (size): {filepath} ({size} bytes)")
                continue

            found.append(filepath)

    found.sort()
    if len(found) > config.max_files:
        logger.warning(f"Reached max files limit ({config.max_files})")
        found = found[: config.max_files]

    logger.info(f"Discovered {len(found)} source files ({skipped} excluded)")
    return found
