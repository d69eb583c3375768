"""Graph records: per-file modules, per-name entities, and the frozen entity graph.

Relations are name-keyed. An entity's ``uses`` and ``inherits_from`` may
name things that were never registered (std types, macros, free
functions); those stay on the record and show up in
``EntityGraph.unresolved_names``. ``used_by`` only ever holds registered names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from ..classification.models import Layer
from ..estimation.models import FileMetrics
from ..scanning.models import AdmissionStatus, CallbackTask, FunctionTask, MethodInfo


@dataclass(frozen=True)
class ModuleRecord:
    """One analyzed file.

    Attributes:
        path: Path relative to the analysis root
        status: Admission outcome
        reason: Skip/error reason, None when admitted
        metrics: Counts, score and estimate (zero unless admitted)
        includes: ``#include`` targets in source order
        entities: Names of entities defined in this file
        file_layer: File-granularity layer, None when unknown
        function_tasks: Every function definition, in source order
        callback_tasks: Lambdas passed as call arguments, in source order
    """

    path: str
    status: AdmissionStatus = AdmissionStatus.OK
    reason: Optional[str] = None
    metrics: FileMetrics = field(default_factory=FileMetrics)
    includes: tuple[str, ...] = ()
    entities: tuple[str, ...] = ()
    file_layer: Optional[Layer] = None
    function_tasks: tuple[FunctionTask, ...] = ()
    callback_tasks: tuple[CallbackTask, ...] = ()

    @property
    def status_label(self) -> str:
        """``ok``, ``skipped:<reason>`` or ``error:<reason>``."""
        if self.status is AdmissionStatus.OK:
            return self.status.value
        return f"{self.status.value}:{self.reason}"

    @property
    def stem(self) -> str:
        return PurePath(self.path).stem


@dataclass(frozen=True)
class EntityRecord:
    """One entity name across the corpus, after both registry passes.

    ``layer``, ``rule`` and ``methods`` come from the declaration in the
    lexicographically smallest file path (``layer_source``); relations are
    unions over every file the name was registered from.
    """

    name: str
    layer: Layer
    rule: str
    layer_source: str
    methods: tuple[MethodInfo, ...] = ()
    inherits_from: frozenset[str] = frozenset()
    uses: frozenset[str] = frozenset()
    used_by: frozenset[str] = frozenset()
    depends_on: frozenset[str] = frozenset()
    occurrences: frozenset[str] = frozenset()

    @property
    def loc(self) -> int:
        return sum(m.line_span for m in self.methods)

    @property
    def references(self) -> frozenset[str]:
        """Everything this entity points at: uses plus bases."""
        return self.uses | self.inherits_from


class EntityGraph:
    """Read-only view of the registry after the back-reference pass."""

    def __init__(
        self,
        entities: Mapping[str, EntityRecord],
        layer_conflicts: Mapping[str, frozenset[Layer]],
    ) -> None:
        self._entities = MappingProxyType(dict(sorted(entities.items())))
        self._conflicts = MappingProxyType(dict(sorted(layer_conflicts.items())))
        referenced: set[str] = set()
        for record in self._entities.values():
            referenced |= record.references
        self._unresolved = frozenset(referenced - self._entities.keys())

    @property
    def entities(self) -> Mapping[str, EntityRecord]:
        return self._entities

    @property
    def unresolved_names(self) -> frozenset[str]:
        """Names referenced by some entity but never registered."""
        return self._unresolved

    @property
    def layer_conflicts(self) -> Mapping[str, frozenset[Layer]]:
        """Names registered from several files with disagreeing layers."""
        return self._conflicts

    def get(self, name: str) -> Optional[EntityRecord]:
        return self._entities.get(name)

    def by_layer(self, layer: Layer) -> list[EntityRecord]:
        return [e for e in self._entities.values() if e.layer is layer]

    def unclassified_files(self, modules: Iterable[ModuleRecord]) -> list[str]:
        """Admitted files with no known layer, to be rendered as "unknown"."""
        return sorted(
            m.path
            for m in modules
            if m.status is AdmissionStatus.OK and m.file_layer is None
        )

    def __getitem__(self, name: str) -> EntityRecord:
        return self._entities[name]

    def __contains__(self, name: object) -> bool:
        return name in self._entities

    def __iter__(self) -> Iterator[str]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)
