"""Result of one analysis run."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from ..estimation.summary import CorpusSummary, FilePriority
from ..graph.models import EntityGraph, ModuleRecord


@dataclass(frozen=True)
class CorpusAnalysis:
    """Immutable architectural model of a corpus.

    Attributes:
        root: Analyzed root directory
        modules: File path -> ModuleRecord, in path order
        graph: Entity graph after both registry passes
        summary: Corpus totals
        priorities: Admitted files ranked by complexity score
    """

    root: str
    modules: Mapping[str, ModuleRecord] = field(default_factory=lambda: MappingProxyType({}))
    graph: EntityGraph = field(default_factory=lambda: EntityGraph({}, {}))
    summary: CorpusSummary = field(default_factory=CorpusSummary)
    priorities: tuple[FilePriority, ...] = ()

    @property
    def unclassified_files(self) -> list[str]:
        return self.graph.unclassified_files(self.modules.values())
