"""Corpus-level rollups: total estimate, layer/status counts, file prioritization."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

import numpy as np

from ..classification.models import Layer
from ..config import EstimateWeights
from ..graph.models import EntityGraph, ModuleRecord
from ..scanning.models import AdmissionStatus
from .models import EstimatedTime

PRIORITY_HIGH = "high"
PRIORITY_MEDIUM = "medium"
PRIORITY_LOW = "low"


@dataclass(frozen=True)
class FilePriority:
    """Rank of one admitted file by complexity score.

    Attributes:
        path: File path
        score: Complexity score
        estimated_time: Rewrite estimate
        percentile: Share of admitted files scoring at or below this one (0-100)
        tier: ``high`` (>= 90th percentile), ``medium`` (>= median) or ``low``
    """

    path: str
    score: float
    estimated_time: EstimatedTime
    percentile: float
    tier: str


@dataclass(frozen=True)
class CorpusSummary:
    """Totals over every file and entity of one analysis run."""

    total_files: int = 0
    status_counts: dict[str, int] = field(default_factory=dict)
    layer_counts: dict[str, int] = field(default_factory=dict)
    total_loc: int = 0
    total_score: float = 0.0
    total_time: EstimatedTime = field(default_factory=EstimatedTime)
    work_weeks: int = 0
    unresolved_count: int = 0
    conflict_count: int = 0


def work_weeks(total: EstimatedTime, week_hours: float = 40.0) -> int:
    """Whole work weeks needed for ``total``, rounded up."""
    return math.ceil(total.total_hours / week_hours)


def summarize(
    modules: Iterable[ModuleRecord],
    graph: EntityGraph,
    weights: Optional[EstimateWeights] = None,
) -> CorpusSummary:
    weights = weights or EstimateWeights()
    modules = list(modules)

    status_counts = Counter(m.status.value for m in modules)
    layer_counts = Counter(e.layer.value for e in graph.entities.values())
    total_time = EstimatedTime.total(m.metrics.estimated_time for m in modules)

    return CorpusSummary(
        total_files=len(modules),
        status_counts={s.value: status_counts.get(s.value, 0) for s in AdmissionStatus},
        layer_counts={layer.value: layer_counts.get(layer.value, 0) for layer in Layer},
        total_loc=sum(m.metrics.loc for m in modules),
        total_score=float(sum(m.metrics.complexity_score for m in modules)),
        total_time=total_time,
        work_weeks=work_weeks(total_time, weights.work_week_hours),
        unresolved_count=len(graph.unresolved_names),
        conflict_count=len(graph.layer_conflicts),
    )


def rank_by_complexity(modules: Iterable[ModuleRecord]) -> list[FilePriority]:
    """Admitted files ordered by descending score (ties by path), with priority tiers.

    When every file scores the same, the 90th percentile equals the median
    and nothing is marked high.
    """
    admitted = [m for m in modules if m.status is AdmissionStatus.OK]
    if not admitted:
        return []

    scores = np.array([m.metrics.complexity_score for m in admitted], dtype=float)
    p50 = float(np.percentile(scores, 50))
    p90 = float(np.percentile(scores, 90))
    ordered_scores = np.sort(scores)

    priorities = []
    for module, score in zip(admitted, scores):
        at_or_below = int(np.searchsorted(ordered_scores, score, side="right"))
        if score >= p90 and p90 > p50:
            tier = PRIORITY_HIGH
        elif score >= p50:
            tier = PRIORITY_MEDIUM
        else:
            tier = PRIORITY_LOW
        priorities.append(
            FilePriority(
                path=module.path,
                score=float(score),
                estimated_time=module.metrics.estimated_time,
                percentile=100.0 * at_or_below / len(scores),
                tier=tier,
            )
        )

    priorities.sort(key=lambda p: (-p.score, p.path))
    return priorities
