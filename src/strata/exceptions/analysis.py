"""Per-file extraction errors: reading, parsing, admission, timeouts.

None of these abort a batch. The extractor catches them and records the
outcome on the file's ModuleRecord: ``ReadError`` becomes ``error:<reason>``,
the others become ``skipped:<reason>``.
"""

from pathlib import Path

from .base import StrataError


class ExtractionError(StrataError):
    """Base class for errors raised while extracting a single file."""

    #: Status recorded on the ModuleRecord when this error ends extraction.
    status = "error"

    def __init__(self, filepath: Path, reason: str, message: str):
        super().__init__(message, filepath=filepath, reason=reason)
        self.filepath = filepath
        self.reason = reason


class ReadError(ExtractionError):
    """Raised when a file cannot be read or is empty."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(filepath, reason, f"Cannot read file: {filepath}")


class ParseError(ExtractionError):
    """Raised when no syntax tree could be produced for a file."""

    status = "skipped"

    def __init__(self, filepath: Path, reason: str):
        super().__init__(filepath, reason, f"Failed to parse file: {filepath}")


class AdmissionSkip(ExtractionError):
    """Raised when the admission filter excludes a file."""

    status = "skipped"

    def __init__(self, filepath: Path, reason: str):
        super().__init__(filepath, reason, f"Skipped by admission filter: {filepath}")


class ExtractionTimeout(ExtractionError):
    """Raised when a file's extraction runs past its soft deadline."""

    status = "skipped"

    def __init__(self, filepath: Path, seconds: float):
        super().__init__(
            filepath, "timeout", f"Extraction exceeded {seconds:g}s: {filepath}"
        )
        self.seconds = seconds
