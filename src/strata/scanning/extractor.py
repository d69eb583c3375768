"""FileExtractor: produces a FileExtraction for every discovered source file.

Per file:
    1. Read bytes; unreadable or empty files are ``error:<reason>``
    2. Binary sniff and admission filter on the raw text
    3. Parse with tree-sitter under a soft deadline
    4. Count structure and extract classified entities

The syntax tree is a local of ``extract_from_tree``'s caller and is dropped
as soon as the plain-data FileExtraction is built.

Usage:
    extractor = FileExtractor(config)
    results = extractor.extract_all(file_paths, root_dir)
    # results is dict[path, FileExtraction], sorted by path
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from threading import Lock
from typing import Any, Optional

from ..classification.classifier import LayerClassifier
from ..config import DEFAULT_CONFIG, StrataConfig
from ..exceptions import AdmissionSkip, ExtractionError, ReadError
from ..logging_config import get_logger
from .admission import REASON_BINARY, AdmissionFilter, is_binary
from .counter import count_structure
from .entities import extract_entities
from .models import AdmissionStatus, FileExtraction
from .nodes import Deadline
from .treesitter_parser import CppParser

logger = get_logger(__name__)

# Default worker count: use CPU count, capped at 8 to avoid overwhelming I/O
_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)


def extract_from_tree(
    root: Any,
    path: str,
    content: str,
    classifier: LayerClassifier,
    std_prefixes: tuple[str, ...] = ("std::",),
    deadline: Optional[Deadline] = None,
) -> FileExtraction:
    """Build a FileExtraction from a parsed tree's root node."""
    counted = count_structure(root, content, deadline)
    entities = extract_entities(root, path, classifier, std_prefixes, deadline)
    return FileExtraction(
        path=path,
        counts=counted.counts,
        includes=counted.includes,
        entities=entities,
        flow=counted.flow,
        templates=counted.templates,
        function_tasks=counted.function_tasks,
        callback_tasks=counted.callback_tasks,
    )


class FileExtractor:
    """Extracts FileExtraction records from C/C++ source files.

    Attributes:
        ok_count: Files extracted successfully
        skipped_count: Files skipped (binary, admission, parse, timeout)
        error_count: Files that could not be read or failed unexpectedly
    """

    def __init__(
        self,
        config: Optional[StrataConfig] = None,
        classifier: Optional[LayerClassifier] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.classifier = classifier or LayerClassifier(self.config.naming)
        self._parser = CppParser()
        self._filter = AdmissionFilter(self.config.admission)
        self._max_workers = self.config.workers or _DEFAULT_WORKERS
        self._lock = Lock()
        self.ok_count = 0
        self.skipped_count = 0
        self.error_count = 0

    def extract(self, file_path: Path, root_dir: Path) -> FileExtraction:
        """Extract one file. Never raises for per-file failures.

        Args:
            file_path: Path to the file
            root_dir: Root directory for relative path calculation

        Returns:
            FileExtraction; failures carry a status and reason
        """
        rel_path = _relative(file_path, root_dir)
        try:
            result = self._extract(file_path, rel_path)
        except ExtractionError as e:
            logger.debug(f"{rel_path}: {e.status}:{e.reason}")
            result = FileExtraction.failed(rel_path, AdmissionStatus(e.status), e.reason)
        except Exception as e:
            logger.warning(f"Unexpected error extracting {rel_path}: {e}")
            result = FileExtraction.failed(rel_path, AdmissionStatus.ERROR, type(e).__name__)
        self._record(result)
        return result

    def extract_source(self, content: str, path: str = "<memory>") -> FileExtraction:
        """Extract from in-memory source text, applying admission and the deadline."""
        try:
            self._filter.check(content, path)
            result = self._extract_text(content, path)
        except ExtractionError as e:
            result = FileExtraction.failed(path, AdmissionStatus(e.status), e.reason)
        self._record(result)
        return result

    def _extract(self, file_path: Path, rel_path: str) -> FileExtraction:
        try:
            raw = file_path.read_bytes()
        except OSError as e:
            raise ReadError(file_path, e.strerror or type(e).__name__)
        if not raw:
            raise ReadError(file_path, "empty")
        if is_binary(raw, self.config.admission.binary_sniff_bytes):
            raise AdmissionSkip(file_path, REASON_BINARY)

        content = raw.decode("utf-8", errors="replace")
        self._filter.check(content, file_path)
        return self._extract_text(content, rel_path)

    def _extract_text(self, content: str, path: str) -> FileExtraction:
        deadline = Deadline(self.config.timeout_seconds, path)
        tree = self._parser.parse(content.encode("utf-8"), path)
        deadline.check()
        return extract_from_tree(
            tree.root_node,
            path,
            content,
            self.classifier,
            self.config.naming.std_namespace_prefixes,
            deadline,
        )

    def _record(self, result: FileExtraction) -> None:
        with self._lock:
            if result.status is AdmissionStatus.OK:
                self.ok_count += 1
            elif result.status is AdmissionStatus.SKIPPED:
                self.skipped_count += 1
            else:
                self.error_count += 1

    def extract_all(
        self,
        file_paths: list[Path],
        root_dir: Path,
        parallel: bool = True,
    ) -> dict[str, FileExtraction]:
        """Extract all files.

        Args:
            file_paths: List of file paths to process
            root_dir: Root directory for relative path calculation
            parallel: Use parallel processing (default: True)

        Returns:
            Dict mapping relative path to FileExtraction, in sorted path order
        """
        results: dict[str, FileExtraction] = {}

        if not parallel or len(file_paths) < self.config.parallel_threshold:
            # Sequential for small batches (parallel overhead not worth it)
            for file_path in file_paths:
                extraction = self.extract(file_path, root_dir)
                results[extraction.path] = extraction
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                futures = {executor.submit(self.extract, fp, root_dir): fp for fp in file_paths}
                for future in as_completed(futures):
                    fp = futures[future]
                    try:
                        extraction = future.result()
                    except Exception as e:
                        rel_path = _relative(fp, root_dir)
                        logger.warning(f"Worker failed on {rel_path}: {e}")
                        extraction = FileExtraction.failed(
                            rel_path, AdmissionStatus.ERROR, type(e).__name__
                        )
                    results[extraction.path] = extraction

        logger.info(
            f"Extraction complete: {self.ok_count} ok, {self.skipped_count} skipped, "
            f"{self.error_count} errors"
        )
        return dict(sorted(results.items()))


def _relative(file_path: Path, root_dir: Path) -> str:
    try:
        return file_path.relative_to(root_dir).as_posix()
    except ValueError:
        return file_path.as_posix()
