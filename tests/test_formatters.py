"""Tests for output formatters."""

import json

import pytest

from strata.analysis import AnalysisEngine
from strata.classification import Layer
from strata.formatters import JsonFormatter, RenderOptions, RichFormatter, get_formatter
from strata.formatters.base import VIEW_ENTITIES
from strata.formatters.json_formatter import to_dict


@pytest.fixture
def result(corpus):
    return AnalysisEngine(corpus).run(parallel=False)


def test_get_formatter():
    assert isinstance(get_formatter("json"), JsonFormatter)
    assert isinstance(get_formatter("rich"), RichFormatter)
    with pytest.raises(ValueError):
        get_formatter("yaml")


def test_files_view_dict(result):
    data = to_dict(result, RenderOptions(top=1))
    assert len(data["priorities"]) == 1
    assert len(data["modules"]) == 6
    assert "entities" not in data
    canvas = next(m for m in data["modules"] if m["path"] == "include/Canvas.h")
    assert canvas["layer"] == "core"
    assert canvas["entities"] == ["Canvas"]
    main = next(m for m in data["modules"] if m["path"] == "src/main.cpp")
    assert main["functions"] == [{"name": "main", "line_start": 3, "line_end": 9}]
    assert main["callbacks"] == []


def test_entities_view_dict(result):
    data = to_dict(result, RenderOptions(view=VIEW_ENTITIES, layer=Layer.UTILITY))
    assert [e["name"] for e in data["entities"]] == ["GooList"]
    assert data["entities"][0]["used_by"] == ["Canvas"]
    assert data["layer_conflicts"] == {}
    assert "modules" not in data


def test_json_format_is_valid(result):
    text = JsonFormatter().format(result)
    assert json.loads(text)["summary"]["total_files"] == 6


def test_rich_format_text(result):
    text = RichFormatter().format(result, RenderOptions(view=VIEW_ENTITIES))
    assert "Entities" in text
    assert "IRenderer" in text
    assert "pure-virtual-method" in text
    assert "Depends on" in text
