"""Tests for the two-pass registry: back-references, idempotence, merge order."""

import itertools

import pytest

from strata.classification import EntityShape, Layer
from strata.graph import EntityGraph, ModuleRecord, RegistryBuilder
from strata.scanning.models import AdmissionStatus, ExtractedEntity, MethodInfo


def _entity(name, layer=Layer.CORE, uses=(), bases=(), methods=(), rule="default-core"):
    return ExtractedEntity(
        name=name,
        shape=EntityShape(name=name, declares_base_type=bool(bases)),
        layer=layer,
        rule=rule,
        methods=tuple(methods),
        inherits_from=frozenset(bases),
        uses=frozenset(uses),
    )


FILES = {
    "a/Canvas.h": [_entity("Canvas", uses={"GooList", "std_thing"})],
    "b/PixelMap.cpp": [
        _entity("PixelMapImpl", Layer.DERIVED, uses={"Canvas"}, bases={"PixelMap"}),
    ],
    "c/GooList.h": [_entity("GooList", Layer.UTILITY)],
    "d/Canvas_extra.cpp": [_entity("Canvas", uses={"PixelMapImpl"})],
}


def _build(order):
    builder = RegistryBuilder()
    for path in order:
        builder.register(path, FILES[path])
    return builder.build()


def _snapshot(graph):
    return dict(graph.entities), dict(graph.layer_conflicts), graph.unresolved_names


class TestBackReferences:
    """used_by is exactly the inverse of uses ∪ inherits_from over registered names."""

    def test_used_by(self):
        graph = _build(sorted(FILES))
        assert graph["GooList"].used_by == frozenset({"Canvas"})
        assert graph["Canvas"].used_by == frozenset({"PixelMapImpl"})
        assert graph["PixelMapImpl"].used_by == frozenset({"Canvas"})

    def test_inverse_holds_for_every_pair(self):
        graph = _build(sorted(FILES))
        for a, b in itertools.product(graph, repeat=2):
            ref = a in graph[b].uses or a in graph[b].inherits_from
            assert (b in graph[a].used_by) == ref

    def test_inheritance_creates_back_reference(self):
        builder = RegistryBuilder()
        builder.register("base.h", [_entity("PixelMap")])
        builder.register("impl.h", [_entity("PixelMapImpl", bases={"PixelMap"})])
        graph = builder.build()
        assert graph["PixelMap"].used_by == frozenset({"PixelMapImpl"})

    def test_dangling_references_kept(self):
        graph = _build(sorted(FILES))
        assert "PixelMap" in graph["PixelMapImpl"].inherits_from
        assert "std_thing" in graph["Canvas"].uses
        assert graph.unresolved_names == frozenset({"PixelMap", "std_thing"})

    def test_depends_on_only_registered(self):
        graph = _build(sorted(FILES))
        assert graph["PixelMapImpl"].depends_on == frozenset({"Canvas"})

    def test_build_recomputes_from_scratch(self):
        builder = RegistryBuilder()
        builder.register("a.h", [_entity("A", uses={"B"})])
        first = builder.build()
        assert first["A"].used_by == frozenset()
        builder.register("b.h", [_entity("B", uses={"A"})])
        second = builder.build()
        assert second["A"].used_by == frozenset({"B"})
        assert second["B"].used_by == frozenset({"A"})
        assert first["A"].used_by == frozenset()


class TestRegistration:
    """Pass-1 merge semantics."""

    def test_relations_union_across_files(self):
        graph = _build(sorted(FILES))
        canvas = graph["Canvas"]
        assert canvas.uses == frozenset({"GooList", "std_thing", "PixelMapImpl"})
        assert canvas.occurrences == frozenset({"a/Canvas.h", "d/Canvas_extra.cpp"})

    def test_registration_is_idempotent(self):
        once = _build(sorted(FILES))
        twice = _build(sorted(FILES) + sorted(FILES))
        assert _snapshot(once) == _snapshot(twice)

    def test_order_independent(self):
        expected = _snapshot(_build(sorted(FILES)))
        for order in itertools.permutations(FILES):
            assert _snapshot(_build(order)) == expected

    def test_smallest_path_supplies_layer_and_methods(self):
        m1 = (MethodInfo("draw", 1, 3),)
        m2 = (MethodInfo("draw", 10, 20), MethodInfo("clear", 21, 22))
        for order in (("z/Shape.h", "a/Shape.h"), ("a/Shape.h", "z/Shape.h")):
            builder = RegistryBuilder()
            entities = {
                "a/Shape.h": [_entity("Shape", Layer.INTERFACE, methods=m1, rule="interface-name")],
                "z/Shape.h": [_entity("Shape", Layer.CORE, methods=m2)],
            }
            for path in order:
                builder.register(path, entities[path])
            shape = builder.build()["Shape"]
            assert shape.layer is Layer.INTERFACE
            assert shape.rule == "interface-name"
            assert shape.layer_source == "a/Shape.h"
            assert shape.methods == m1
            assert shape.loc == 3

    def test_layer_conflicts(self):
        builder = RegistryBuilder()
        builder.register("a.h", [_entity("Shape", Layer.INTERFACE)])
        builder.register("b.h", [_entity("Shape", Layer.CORE)])
        builder.register("c.h", [_entity("Point", Layer.DERIVED)])
        builder.register("d.h", [_entity("Point", Layer.DERIVED)])
        graph = builder.build()
        assert dict(graph.layer_conflicts) == {"Shape": frozenset({Layer.INTERFACE, Layer.CORE})}

    def test_layer_conflict_within_one_file(self):
        builder = RegistryBuilder()
        builder.register("doc.h", [_entity("Impl", Layer.DERIVED), _entity("Impl", Layer.CORE)])
        graph = builder.build()
        assert graph.layer_conflicts["Impl"] == frozenset({Layer.DERIVED, Layer.CORE})
        assert graph["Impl"].layer is Layer.DERIVED

    def test_layer_conflict_within_one_file_survives_merge(self):
        a, b = RegistryBuilder(), RegistryBuilder()
        a.register("doc.h", [_entity("Impl", Layer.DERIVED), _entity("Impl", Layer.CORE)])
        b.merge(a)
        assert b.build().layer_conflicts["Impl"] == frozenset({Layer.DERIVED, Layer.CORE})


class TestMerge:
    """Combining partial registries."""

    def test_merge_equals_single_builder(self):
        expected = _snapshot(_build(sorted(FILES)))
        paths = sorted(FILES)
        for split in range(len(paths) + 1):
            left, right = RegistryBuilder(), RegistryBuilder()
            for path in paths[:split]:
                left.register(path, FILES[path])
            for path in paths[split:]:
                right.register(path, FILES[path])
            right.merge(left)
            assert _snapshot(right.build()) == expected

    def test_merge_is_commutative(self):
        a, b = RegistryBuilder(), RegistryBuilder()
        a.register("d/Canvas_extra.cpp", FILES["d/Canvas_extra.cpp"])
        b.register("a/Canvas.h", FILES["a/Canvas.h"])
        b.register("c/GooList.h", FILES["c/GooList.h"])
        ab, ba = RegistryBuilder(), RegistryBuilder()
        ab.merge(a)
        ab.merge(b)
        ba.merge(b)
        ba.merge(a)
        assert _snapshot(ab.build()) == _snapshot(ba.build())

    def test_merge_does_not_alias_other(self):
        a, b = RegistryBuilder(), RegistryBuilder()
        b.register("x.h", [_entity("X", uses={"Y"})])
        a.merge(b)
        a.register("y.h", [_entity("X", uses={"Z"})])
        assert b.build()["X"].uses == frozenset({"Y"})


class TestEntityGraph:
    """Read-only graph view."""

    def test_immutable_mapping(self):
        graph = _build(sorted(FILES))
        with pytest.raises(TypeError):
            graph.entities["New"] = graph["Canvas"]

    def test_records_frozen(self):
        graph = _build(sorted(FILES))
        with pytest.raises(AttributeError):
            graph["Canvas"].layer = Layer.UTILITY

    def test_by_layer(self):
        graph = _build(sorted(FILES))
        assert [e.name for e in graph.by_layer(Layer.UTILITY)] == ["GooList"]

    def test_unclassified_files(self):
        graph = EntityGraph({}, {})
        modules = [
            ModuleRecord(path="main.cpp"),
            ModuleRecord(path="Canvas.h", file_layer=Layer.CORE),
            ModuleRecord(path="gen.h", status=AdmissionStatus.SKIPPED, reason="generated"),
        ]
        assert graph.unclassified_files(modules) == ["main.cpp"]

    def test_status_label(self):
        assert ModuleRecord(path="x.h").status_label == "ok"
        skipped = ModuleRecord(path="x.h", status=AdmissionStatus.SKIPPED, reason="hex-table")
        assert skipped.status_label == "skipped:hex-table"
