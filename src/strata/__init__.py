"""
Strata - C/C++ codebase triage for rewrite planning

Classifies every class and struct of a legacy corpus into an architectural
layer, links them by inheritance and usage, and estimates per-file
complexity and rewrite time.
"""

__version__ = "0.1.0"

from .analysis import AnalysisEngine, CorpusAnalysis
from .api import analyze
from .classification import Layer, LayerClassifier
from .graph import EntityGraph, EntityRecord, ModuleRecord, RegistryBuilder

__all__ = [
    "analyze",  # Main entry point
    "AnalysisEngine",
    "CorpusAnalysis",
    "EntityGraph",
    "EntityRecord",
    "Layer",
    "LayerClassifier",
    "ModuleRecord",
    "RegistryBuilder",
]
