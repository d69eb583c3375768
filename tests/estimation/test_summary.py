"""Tests for corpus summaries and complexity ranking."""

import pytest

from strata.classification import Layer
from strata.estimation.models import EstimatedTime, FileMetrics
from strata.estimation.summary import (
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    rank_by_complexity,
    summarize,
    work_weeks,
)
from strata.graph import EntityGraph, EntityRecord, ModuleRecord
from strata.scanning.models import AdmissionStatus


def _module(path, score=0.0, time=EstimatedTime(), loc=0, status=AdmissionStatus.OK):
    return ModuleRecord(
        path=path,
        status=status,
        reason=None if status is AdmissionStatus.OK else "generated",
        metrics=FileMetrics(loc=loc, complexity_score=score, estimated_time=time),
    )


class TestWorkWeeks:
    """Test work_weeks rounding."""

    def test_rounds_up(self):
        assert work_weeks(EstimatedTime(81, 0)) == 3

    def test_exact(self):
        assert work_weeks(EstimatedTime(80, 0)) == 2

    def test_minutes_count(self):
        assert work_weeks(EstimatedTime(40, 1)) == 2

    def test_zero(self):
        assert work_weeks(EstimatedTime()) == 0


class TestSummarize:
    """Test summarize()."""

    def test_totals(self):
        modules = [
            _module("a.h", 10.0, EstimatedTime(1, 45), loc=100),
            _module("b.h", 5.0, EstimatedTime(2, 30), loc=50),
            _module("gen.h", status=AdmissionStatus.SKIPPED),
        ]
        graph = EntityGraph(
            {
                "A": EntityRecord("A", Layer.CORE, "default-core", "a.h", uses=frozenset({"Missing"})),
                "B": EntityRecord("B", Layer.UTILITY, "utility-name", "b.h"),
            },
            {},
        )
        summary = summarize(modules, graph)
        assert summary.total_files == 3
        assert summary.total_loc == 150
        assert summary.total_time == EstimatedTime(4, 15)
        assert summary.work_weeks == 1
        assert summary.status_counts == {"ok": 2, "skipped": 1, "error": 0}
        assert summary.layer_counts == {"core": 1, "interface": 0, "derived": 0, "utility": 1}
        assert summary.unresolved_count == 1
        assert summary.total_score == pytest.approx(15.0)


class TestRankByComplexity:
    """Test rank_by_complexity() ordering and tiers."""

    def test_descending_with_tiers(self):
        modules = [_module(f"f{i:02d}.cpp", float(i)) for i in range(1, 11)]
        ranked = rank_by_complexity(modules)
        assert [p.path for p in ranked][:3] == ["f10.cpp", "f09.cpp", "f08.cpp"]
        tiers = {p.path: p.tier for p in ranked}
        assert tiers["f10.cpp"] == PRIORITY_HIGH
        assert tiers["f06.cpp"] == PRIORITY_MEDIUM
        assert tiers["f05.cpp"] == PRIORITY_LOW
        assert ranked[0].percentile == pytest.approx(100.0)

    def test_equal_scores_not_high(self):
        ranked = rank_by_complexity([_module(f"f{i}.cpp", 3.0) for i in range(4)])
        assert {p.tier for p in ranked} == {PRIORITY_MEDIUM}
        assert [p.path for p in ranked] == ["f0.cpp", "f1.cpp", "f2.cpp", "f3.cpp"]

    def test_skipped_files_excluded(self):
        modules = [_module("a.cpp", 2.0), _module("gen.h", status=AdmissionStatus.SKIPPED)]
        assert [p.path for p in rank_by_complexity(modules)] == ["a.cpp"]

    def test_empty(self):
        assert rank_by_complexity([]) == []
