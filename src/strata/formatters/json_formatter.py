"""JSON formatter for Strata."""

from __future__ import annotations

import json
from typing import Any

from ..analysis.models import CorpusAnalysis
from ..estimation.models import EstimatedTime
from ..graph.models import EntityRecord, ModuleRecord
from .base import VIEW_ENTITIES, BaseFormatter, RenderOptions


def _time(t: EstimatedTime) -> dict[str, int]:
    return {"hours": t.hours, "minutes": t.minutes}


def module_to_dict(module: ModuleRecord) -> dict[str, Any]:
    m = module.metrics
    return {
        "path": module.path,
        "status": module.status_label,
        "layer": module.file_layer.value if module.file_layer else None,
        "metrics": {
            "loc": m.loc,
            "functions": m.functions,
            "classes": m.classes,
            "templates": m.templates,
            "conditionals": m.conditionals,
            "loops": m.loops,
            "includes": m.includes,
            "complexity_score": m.complexity_score,
            "estimated_time": _time(m.estimated_time),
        },
        "includes": list(module.includes),
        "entities": list(module.entities),
        "functions": [
            {"name": f.name, "line_start": f.line_start, "line_end": f.line_end}
            for f in module.function_tasks
        ],
        "callbacks": [
            {
                "parent_function": c.parent_function,
                "line_start": c.line_start,
                "line_end": c.line_end,
            }
            for c in module.callback_tasks
        ],
    }


def entity_to_dict(entity: EntityRecord) -> dict[str, Any]:
    return {
        "name": entity.name,
        "layer": entity.layer.value,
        "rule": entity.rule,
        "layer_source": entity.layer_source,
        "methods": [
            {
                "name": m.name,
                "line_start": m.line_start,
                "line_end": m.line_end,
                "is_virtual": m.is_virtual,
            }
            for m in entity.methods
        ],
        "loc": entity.loc,
        "inherits_from": sorted(entity.inherits_from),
        "uses": sorted(entity.uses),
        "used_by": sorted(entity.used_by),
        "occurrences": sorted(entity.occurrences),
    }


def to_dict(analysis: CorpusAnalysis, options: RenderOptions = RenderOptions()) -> dict[str, Any]:
    """Plain-data form of an analysis, suitable for ``json.dumps``."""
    s = analysis.summary
    data: dict[str, Any] = {
        "root": analysis.root,
        "summary": {
            "total_files": s.total_files,
            "status_counts": s.status_counts,
            "layer_counts": s.layer_counts,
            "total_loc": s.total_loc,
            "total_score": s.total_score,
            "total_time": _time(s.total_time),
            "work_weeks": s.work_weeks,
            "unresolved_count": s.unresolved_count,
            "conflict_count": s.conflict_count,
        },
    }

    if options.view == VIEW_ENTITIES:
        entities = analysis.graph.entities.values()
        if options.layer is not None:
            entities = [e for e in entities if e.layer is options.layer]
        data["entities"] = [entity_to_dict(e) for e in entities]
        data["unresolved_names"] = sorted(analysis.graph.unresolved_names)
        data["layer_conflicts"] = {
            name: sorted(layer.value for layer in layers)
            for name, layers in analysis.graph.layer_conflicts.items()
        }
        return data

    priorities = list(analysis.priorities)
    if options.top is not None:
        priorities = priorities[: options.top]
    data["priorities"] = [
        {
            "path": p.path,
            "score": p.score,
            "percentile": round(p.percentile, 1),
            "tier": p.tier,
            "estimated_time": _time(p.estimated_time),
        }
        for p in priorities
    ]
    data["modules"] = [module_to_dict(m) for m in analysis.modules.values()]
    data["unclassified_files"] = analysis.unclassified_files
    return data


class JsonFormatter(BaseFormatter):
    """Render an analysis as JSON."""

    def render(self, analysis: CorpusAnalysis, options: RenderOptions = RenderOptions()) -> None:
        print(self.format(analysis, options))

    def format(self, analysis: CorpusAnalysis, options: RenderOptions = RenderOptions()) -> str:
        return json.dumps(to_dict(analysis, options), indent=2)
