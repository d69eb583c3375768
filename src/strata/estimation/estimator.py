"""Complexity score and rewrite-time estimate for one extracted file.

Time model (hours):
    entities       layer base hours + entity LOC x 15 s, per entity
    control flow   per if/loop, by the number of lines it spans
    templates      base + extra parameters + specializations + constraints
    review         5 s per line of the file
    overhead       testing + documentation ratios of Core and Utility entity time

The score is a weighted sum of counts and classified entities.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..classification.models import Layer
from ..config import EstimateWeights
from ..scanning.models import (
    ExtractedEntity,
    FileExtraction,
    FlowSpan,
    StructureCounts,
    TemplateFacts,
)
from .models import EstimatedTime, FileMetrics


class Estimator:
    """Applies an EstimateWeights cost model to FileExtraction records."""

    def __init__(self, weights: Optional[EstimateWeights] = None) -> None:
        self.weights = weights or EstimateWeights()

    def layer_hours(self, layer: Layer) -> float:
        w = self.weights
        return {
            Layer.CORE: w.core_hours,
            Layer.UTILITY: w.utility_hours,
            Layer.INTERFACE: w.interface_hours,
            Layer.DERIVED: w.derived_hours,
        }[layer]

    def entity_hours(self, entity: ExtractedEntity) -> float:
        return self.layer_hours(entity.layer) + entity.loc * self.weights.entity_line_seconds / 3600

    def control_flow_hours(self, flow: Iterable[FlowSpan]) -> float:
        w = self.weights
        minutes = 0.0
        for span in flow:
            tiers = w.conditional_minutes if span.kind == "conditional" else w.loop_minutes
            if span.lines <= w.small_span_lines:
                minutes += tiers[0]
            elif span.lines <= w.medium_span_lines:
                minutes += tiers[1]
            else:
                minutes += tiers[2]
        return minutes / 60

    def template_hours(self, templates: Iterable[TemplateFacts]) -> float:
        w = self.weights
        minutes = 0.0
        for t in templates:
            minutes += w.template_base_minutes
            minutes += w.template_param_minutes * max(0, t.parameter_count - 1)
            minutes += w.specialization_minutes * t.specialization_count
            if t.has_constraint:
                minutes += w.constraint_minutes
        return minutes / 60

    def review_hours(self, loc: int) -> float:
        return loc * self.weights.review_line_seconds / 3600

    def overhead_hours(self, entities: Iterable[ExtractedEntity]) -> float:
        """Testing and documentation time, charged on Core and Utility entities only."""
        w = self.weights
        base = sum(
            self.entity_hours(e) for e in entities if e.layer in (Layer.CORE, Layer.UTILITY)
        )
        return base * (w.testing_ratio + w.documentation_ratio)

    def total_hours(self, extraction: FileExtraction) -> float:
        entities = extraction.entities
        return (
            sum(self.entity_hours(e) for e in entities)
            + self.control_flow_hours(extraction.flow)
            + self.template_hours(extraction.templates)
            + self.review_hours(extraction.counts.loc)
            + self.overhead_hours(entities)
        )

    def complexity_score(
        self, counts: StructureCounts, entities: Iterable[ExtractedEntity]
    ) -> float:
        w = self.weights
        per_layer = {
            Layer.CORE: w.score_core,
            Layer.UTILITY: w.score_utility,
            Layer.INTERFACE: w.score_interface,
            Layer.DERIVED: w.score_derived,
        }
        return (
            w.score_function * counts.functions
            + sum(per_layer[e.layer] for e in entities)
            + w.score_template * counts.templates
            + w.score_conditional * counts.conditionals
            + w.score_loop * counts.loops
            + w.score_include * counts.includes
        )

    def estimate(self, extraction: FileExtraction) -> FileMetrics:
        """FileMetrics for one file; files that were not admitted get zero metrics."""
        if not extraction.admitted:
            return FileMetrics.zero()
        return FileMetrics.from_counts(
            extraction.counts,
            complexity_score=self.complexity_score(extraction.counts, extraction.entities),
            estimated_time=EstimatedTime.from_hours(self.total_hours(extraction)),
        )
