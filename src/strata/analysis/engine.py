"""Analysis engine: runs the triage pipeline over a source tree.

Pipeline:
  Discover → Extract (parallel, per file)
           → Register entities (sorted path order)
           → Build graph (back-references)
           → Estimate per file
           → Summarize + prioritize
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from ..classification.classifier import LayerClassifier, classify_file_name
from ..classification.models import Layer
from ..config import DEFAULT_CONFIG, StrataConfig
from ..estimation.estimator import Estimator
from ..estimation.summary import rank_by_complexity, summarize
from ..graph.builder import RegistryBuilder
from ..graph.models import EntityGraph, ModuleRecord
from ..logging_config import get_logger
from ..scanning.extractor import FileExtractor
from ..scanning.models import FileExtraction
from ..scanning.walker import discover_sources
from .models import CorpusAnalysis

logger = get_logger(__name__)


def file_layer(extraction: FileExtraction, graph: EntityGraph) -> Optional[Layer]:
    """File-granularity layer.

    The entity named after the file wins (``Parser.h`` → ``Parser``), then
    the first entity in the file; files without entities fall back to
    file-name hints and may stay unknown (None).
    """
    if not extraction.admitted:
        return None
    stem = Path(extraction.path).stem
    names = [e.name for e in extraction.entities]
    if stem in names and stem in graph:
        return graph[stem].layer
    if names:
        first = graph.get(names[0])
        return first.layer if first is not None else extraction.entities[0].layer
    return classify_file_name(extraction.path)


class AnalysisEngine:
    """Executes the triage pipeline for one root directory."""

    def __init__(self, root_dir: Path | str, config: Optional[StrataConfig] = None) -> None:
        self.root_dir = Path(root_dir)
        self.config = config or DEFAULT_CONFIG
        self.classifier = LayerClassifier(self.config.naming)
        self.estimator = Estimator(self.config.estimate)

    def run(self, parallel: bool = True) -> CorpusAnalysis:
        """Discover, extract and model the corpus under ``root_dir``."""
        files = discover_sources(self.root_dir, self.config)
        root = self.root_dir if self.root_dir.is_dir() else self.root_dir.parent
        extractor = FileExtractor(self.config, self.classifier)
        extractions = extractor.extract_all(files, root, parallel=parallel)
        return self.model(extractions)

    def model(self, extractions: Mapping[str, FileExtraction]) -> CorpusAnalysis:
        """Build the corpus model from already-extracted files."""
        builder = RegistryBuilder()
        for path in sorted(extractions):
            builder.register(path, extractions[path].entities)
        graph = builder.build()

        modules: dict[str, ModuleRecord] = {}
        for path in sorted(extractions):
            extraction = extractions[path]
            modules[path] = ModuleRecord(
                path=path,
                status=extraction.status,
                reason=extraction.reason,
                metrics=self.estimator.estimate(extraction),
                includes=extraction.includes,
                entities=tuple(e.name for e in extraction.entities),
                file_layer=file_layer(extraction, graph),
                function_tasks=extraction.function_tasks,
                callback_tasks=extraction.callback_tasks,
            )

        summary = summarize(modules.values(), graph, self.config.estimate)
        priorities = tuple(rank_by_complexity(modules.values()))
        logger.info(
            f"Analysis complete: {summary.total_files} files, {len(graph)} entities, "
            f"estimate {summary.total_time} (~{summary.work_weeks} work weeks)"
        )
        return CorpusAnalysis(
            root=str(self.root_dir),
            modules=MappingProxyType(modules),
            graph=graph,
            summary=summary,
            priorities=priorities,
        )
