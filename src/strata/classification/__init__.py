"""Layer classification: ordered heuristic rules over entity shape and name."""

from .classifier import LayerClassifier, classify_file_name
from .models import EntityShape, Layer
from .rules import LAYER_RULES, ClassificationRule, NamePatterns

__all__ = [
    "ClassificationRule",
    "EntityShape",
    "LAYER_RULES",
    "Layer",
    "LayerClassifier",
    "NamePatterns",
    "classify_file_name",
]
