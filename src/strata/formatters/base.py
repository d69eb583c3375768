"""Base formatter interface for Strata output rendering."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..analysis.models import CorpusAnalysis
from ..classification.models import Layer

VIEW_FILES = "files"
VIEW_ENTITIES = "entities"


@dataclass(frozen=True)
class RenderOptions:
    """What to show.

    Attributes:
        view: ``files`` (per-file metrics) or ``entities`` (entity graph)
        top: Limit the file table to the N highest-scoring files
        layer: Only show entities of this layer
    """

    view: str = VIEW_FILES
    top: Optional[int] = None
    layer: Optional[Layer] = None


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, analysis: CorpusAnalysis, options: RenderOptions = RenderOptions()) -> None:
        """Write the rendered analysis to stdout."""

    @abstractmethod
    def format(self, analysis: CorpusAnalysis, options: RenderOptions = RenderOptions()) -> str:
        """Return formatted string representation of the analysis."""
