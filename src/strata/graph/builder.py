"""Two-pass entity registry.

Pass 1 (``register``/``merge``) accumulates entities per bare name across
files. Pass 2 (``build``) recomputes ``used_by`` from scratch and freezes
everything into an EntityGraph.

Usage:
    builder = RegistryBuilder()
    for path, extraction in sorted(extractions.items()):
        builder.register(path, extraction.entities)
    graph = builder.build()
"""

from __future__ import annotations

from typing import Iterable

from ..classification.models import Layer
from ..logging_config import get_logger
from ..scanning.models import ExtractedEntity, MethodInfo
from .models import EntityGraph, EntityRecord

logger = get_logger(__name__)


class _Entry:
    """Mutable pass-1 state for one entity name."""

    __slots__ = (
        "name",
        "layer",
        "rule",
        "source",
        "methods",
        "inherits_from",
        "uses",
        "layers_by_file",
    )

    def __init__(self, name: str, source: str, entity: ExtractedEntity) -> None:
        self.name = name
        self.layer = entity.layer
        self.rule = entity.rule
        self.source = source
        self.methods: tuple[MethodInfo, ...] = entity.methods
        self.inherits_from: set[str] = set(entity.inherits_from)
        self.uses: set[str] = set(entity.uses)
        self.layers_by_file: dict[str, set[Layer]] = {source: {entity.layer}}

    def absorb(self, source: str, layer: Layer, rule: str, methods: tuple[MethodInfo, ...]) -> None:
        # The smallest path supplies the declaration; ties keep the first seen.
        if source < self.source:
            self.source = source
            self.layer = layer
            self.rule = rule
            self.methods = methods

    def copy(self) -> _Entry:
        clone = _Entry.__new__(_Entry)
        for slot in self.__slots__:
            setattr(clone, slot, getattr(self, slot))
        clone.inherits_from = set(self.inherits_from)
        clone.uses = set(self.uses)
        clone.layers_by_file = {path: set(layers) for path, layers in self.layers_by_file.items()}
        return clone

    @property
    def occurrences(self) -> frozenset[str]:
        return frozenset(self.layers_by_file)


class RegistryBuilder:
    """Accumulates entities by bare name; idempotent and order-independent."""

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def register(self, file_path: str, entities: Iterable[ExtractedEntity]) -> None:
        """Pass 1: add or merge every entity defined in ``file_path``."""
        for entity in entities:
            entry = self._entries.get(entity.name)
            if entry is None:
                self._entries[entity.name] = _Entry(entity.name, file_path, entity)
                continue
            entry.absorb(file_path, entity.layer, entity.rule, entity.methods)
            entry.inherits_from |= entity.inherits_from
            entry.uses |= entity.uses
            entry.layers_by_file.setdefault(file_path, set()).add(entity.layer)

    def merge(self, other: RegistryBuilder) -> None:
        """Fold another partial registry into this one."""
        for name, theirs in other._entries.items():
            entry = self._entries.get(name)
            if entry is None:
                self._entries[name] = theirs.copy()
                continue
            entry.absorb(theirs.source, theirs.layer, theirs.rule, theirs.methods)
            entry.inherits_from |= theirs.inherits_from
            entry.uses |= theirs.uses
            for path, layers in theirs.layers_by_file.items():
                entry.layers_by_file.setdefault(path, set()).update(layers)

    def build(self) -> EntityGraph:
        """Pass 2: recompute back-references and freeze the registry.

        ``used_by`` is rebuilt from scratch on every call, so calling
        ``build`` again after more registrations gives a consistent graph.
        """
        used_by: dict[str, set[str]] = {name: set() for name in self._entries}
        for name, entry in self._entries.items():
            for target in entry.uses | entry.inherits_from:
                if target in used_by:
                    used_by[target].add(name)

        records: dict[str, EntityRecord] = {}
        conflicts: dict[str, frozenset[Layer]] = {}
        for name, entry in self._entries.items():
            references = entry.uses | entry.inherits_from
            records[name] = EntityRecord(
                name=name,
                layer=entry.layer,
                rule=entry.rule,
                layer_source=entry.source,
                methods=entry.methods,
                inherits_from=frozenset(entry.inherits_from),
                uses=frozenset(entry.uses),
                used_by=frozenset(used_by[name]),
                depends_on=frozenset(r for r in references if r in self._entries),
                occurrences=entry.occurrences,
            )
            layers = frozenset().union(*entry.layers_by_file.values())
            if len(layers) > 1:
                conflicts[name] = layers

        graph = EntityGraph(records, conflicts)
        logger.info(
            f"Registry built: {len(graph)} entities, {len(graph.unresolved_names)} unresolved names, "
            f"{len(conflicts)} layer conflicts"
        )
        return graph
