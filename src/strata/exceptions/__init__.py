"""Exception hierarchy for Strata."""

from .analysis import (
    AdmissionSkip,
    ExtractionError,
    ExtractionTimeout,
    ParseError,
    ReadError,
)
from .base import StrataError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "StrataError",
    "ExtractionError",
    "ReadError",
    "ParseError",
    "AdmissionSkip",
    "ExtractionTimeout",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
