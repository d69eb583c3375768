"""Complexity scoring, rewrite-time estimation and corpus rollups."""

from .estimator import Estimator
from .models import EstimatedTime, FileMetrics

__all__ = [
    "EstimatedTime",
    "Estimator",
    "FileMetrics",
]
