"""End-to-end tests for the analysis engine on a small C++ corpus."""

import pytest

from strata import analyze
from strata.analysis import AnalysisEngine, CorpusAnalysis
from strata.classification import Layer
from strata.config import StrataConfig
from strata.exceptions import InvalidPathError
from strata.scanning.models import AdmissionStatus, FunctionTask


@pytest.fixture
def result(corpus):
    return AnalysisEngine(corpus).run(parallel=False)


class TestCorpusModel:
    """Modules, entities and relationships of the fixture corpus."""

    def test_modules_in_path_order(self, result):
        assert list(result.modules) == [
            "include/Canvas.h",
            "include/Renderer.h",
            "src/Generated.h",
            "src/GooList.h",
            "src/PixelMap.cpp",
            "src/main.cpp",
        ]

    def test_generated_file_placeholder(self, result):
        module = result.modules["src/Generated.h"]
        assert module.status is AdmissionStatus.SKIPPED
        assert module.status_label == "skipped:generated"
        assert module.entities == ()
        assert module.metrics.loc == 0
        assert module.metrics.complexity_score == 0
        assert "Table" not in result.graph

    def test_entity_layers(self, result):
        layers = {name: e.layer for name, e in result.graph.entities.items()}
        assert layers == {
            "Canvas": Layer.CORE,
            "GooList": Layer.UTILITY,
            "IRenderer": Layer.INTERFACE,
            "PixelMapImpl": Layer.DERIVED,
        }

    def test_back_references(self, result):
        graph = result.graph
        assert graph["GooList"].used_by == frozenset({"Canvas"})
        assert graph["Canvas"].used_by == frozenset({"PixelMapImpl"})
        assert graph.unresolved_names == frozenset({"PixelMap"})

    def test_file_layers(self, result):
        modules = result.modules
        assert modules["include/Canvas.h"].file_layer is Layer.CORE
        assert modules["include/Renderer.h"].file_layer is Layer.INTERFACE
        assert modules["src/PixelMap.cpp"].file_layer is Layer.DERIVED
        assert modules["src/main.cpp"].file_layer is None
        assert result.unclassified_files == ["src/main.cpp"]

    def test_function_tasks_recorded(self, result):
        assert result.modules["src/main.cpp"].function_tasks == (FunctionTask("main", 3, 9),)
        assert result.modules["src/main.cpp"].callback_tasks == ()
        assert result.modules["src/Generated.h"].function_tasks == ()

    def test_includes_recorded(self, result):
        assert result.modules["include/Renderer.h"].includes == ("memory", "Canvas.h")

    def test_modules_read_only(self, result):
        with pytest.raises(TypeError):
            result.modules["new.h"] = result.modules["src/main.cpp"]


class TestSummary:
    """Corpus rollups."""

    def test_status_counts(self, result):
        assert result.summary.status_counts == {"ok": 5, "skipped": 1, "error": 0}

    def test_total_time_is_sum_of_files(self, result):
        minutes = sum(
            m.metrics.estimated_time.hours * 60 + m.metrics.estimated_time.minutes
            for m in result.modules.values()
        )
        total = result.summary.total_time
        assert total.hours * 60 + total.minutes == minutes

    def test_priorities_cover_admitted_files(self, result):
        assert len(result.priorities) == 5
        scores = [p.score for p in result.priorities]
        assert scores == sorted(scores, reverse=True)


class TestEngineBehavior:
    """Determinism and entry points."""

    def test_parallel_matches_sequential(self, corpus):
        config = StrataConfig(parallel_threshold=1, workers=3)
        sequential = AnalysisEngine(corpus, config).run(parallel=False)
        parallel = AnalysisEngine(corpus, config).run(parallel=True)
        assert dict(sequential.modules) == dict(parallel.modules)
        assert dict(sequential.graph.entities) == dict(parallel.graph.entities)

    def test_single_file(self, corpus):
        result = AnalysisEngine(corpus / "include" / "Canvas.h").run()
        assert list(result.modules) == ["Canvas.h"]

    def test_analyze_api(self, corpus):
        result = analyze(str(corpus), workers=2)
        assert isinstance(result, CorpusAnalysis)
        assert len(result.graph) == 4

    def test_analyze_missing_path(self, tmp_path):
        with pytest.raises(InvalidPathError):
            analyze(str(tmp_path / "missing"))
