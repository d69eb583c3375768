"""Estimation models: rewrite-time values and per-file metrics."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

from ..scanning.models import StructureCounts


@dataclass(frozen=True)
class EstimatedTime:
    """Whole hours plus minutes in 0..59."""

    hours: int = 0
    minutes: int = 0

    def __post_init__(self) -> None:
        if self.hours < 0:
            raise ValueError(f"hours must be non-negative, got {self.hours}")
        if not 0 <= self.minutes <= 59:
            raise ValueError(f"minutes must be in 0..59, got {self.minutes}")

    @classmethod
    def from_hours(cls, hours: float) -> EstimatedTime:
        """Split fractional hours; minutes round half-up and 60 carries into hours."""
        hours = max(0.0, hours)
        whole = math.floor(hours)
        minutes = math.floor((hours - whole) * 60 + 0.5)
        if minutes >= 60:
            whole += 1
            minutes -= 60
        return cls(hours=int(whole), minutes=int(minutes))

    @classmethod
    def total(cls, times: Iterable[EstimatedTime]) -> EstimatedTime:
        """Sum hours and minutes separately, carrying whole hours out of the minutes."""
        hours = 0
        minutes = 0
        for t in times:
            hours += t.hours
            minutes += t.minutes
        return cls(hours=hours + minutes // 60, minutes=minutes % 60)

    @property
    def total_hours(self) -> float:
        return self.hours + self.minutes / 60

    def __str__(self) -> str:
        return f"{self.hours}h {self.minutes:02d}m"


@dataclass(frozen=True)
class FileMetrics:
    """Counts, complexity score and rewrite estimate for one file."""

    loc: int = 0
    functions: int = 0
    classes: int = 0
    templates: int = 0
    conditionals: int = 0
    loops: int = 0
    includes: int = 0
    complexity_score: float = 0.0
    estimated_time: EstimatedTime = field(default_factory=EstimatedTime)

    @classmethod
    def zero(cls) -> FileMetrics:
        """Metrics of a skipped or errored file."""
        return cls()

    @classmethod
    def from_counts(
        cls, counts: StructureCounts, complexity_score: float, estimated_time: EstimatedTime
    ) -> FileMetrics:
        return cls(
            loc=counts.loc,
            functions=counts.functions,
            classes=counts.classes,
            templates=counts.templates,
            conditionals=counts.conditionals,
            loops=counts.loops,
            includes=counts.includes,
            complexity_score=complexity_score,
            estimated_time=estimated_time,
        )
