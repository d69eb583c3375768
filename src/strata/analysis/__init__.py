"""Analysis orchestration: from a source tree to a CorpusAnalysis."""

from .engine import AnalysisEngine, file_layer
from .models import CorpusAnalysis

__all__ = ["AnalysisEngine", "CorpusAnalysis", "file_layer"]
