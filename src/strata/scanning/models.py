"""Plain-data results of per-file extraction.

Everything here is derived from a syntax tree and outlives it: the tree
itself is never stored on any of these objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..classification.models import EntityShape, Layer


class AdmissionStatus(Enum):
    """Outcome of extracting one file."""

    OK = "ok"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class MethodInfo:
    """A method declared or defined in an entity body."""

    name: str
    line_start: int
    line_end: int
    is_virtual: bool = False

    @property
    def line_span(self) -> int:
        return max(1, self.line_end - self.line_start + 1)


@dataclass(frozen=True)
class ExtractedEntity:
    """A classified class/struct as seen in one file.

    Attributes:
        name: Bare entity name
        shape: Facts the classifier used
        layer: Assigned layer
        rule: Name of the classification rule that fired
        methods: Methods in declaration order
        inherits_from: Base type names (qualified and simple forms)
        uses: Type and call-target names referenced from member functions
    """

    name: str
    shape: EntityShape
    layer: Layer
    rule: str
    methods: tuple[MethodInfo, ...] = ()
    inherits_from: frozenset[str] = frozenset()
    uses: frozenset[str] = frozenset()

    @property
    def loc(self) -> int:
        """Lines of code attributed to the entity: the summed method spans."""
        return sum(m.line_span for m in self.methods)


@dataclass(frozen=True)
class FunctionTask:
    """A function definition, listed as a unit of rewrite work."""

    name: str
    line_start: int
    line_end: int


@dataclass(frozen=True)
class CallbackTask:
    """A lambda passed as a call argument, listed with the call that receives it."""

    parent_function: str
    line_start: int
    line_end: int


@dataclass(frozen=True)
class FlowSpan:
    """A conditional or loop node and the number of lines it spans."""

    kind: str  # "conditional" or "loop"
    lines: int


@dataclass(frozen=True)
class TemplateFacts:
    """Shape of one template declaration, as needed by the time estimate."""

    parameter_count: int = 0
    specialization_count: int = 0
    has_constraint: bool = False


@dataclass(frozen=True)
class StructureCounts:
    """Structural node-kind counts for one file."""

    loc: int = 0
    functions: int = 0
    classes: int = 0
    templates: int = 0
    conditionals: int = 0
    loops: int = 0
    includes: int = 0


@dataclass(frozen=True)
class FileExtraction:
    """Everything extracted from one file.

    Skipped and errored files carry zero counts and no entities, only the
    status and a reason.
    """

    path: str
    status: AdmissionStatus = AdmissionStatus.OK
    reason: Optional[str] = None
    counts: StructureCounts = field(default_factory=StructureCounts)
    includes: tuple[str, ...] = ()
    entities: tuple[ExtractedEntity, ...] = ()
    flow: tuple[FlowSpan, ...] = ()
    templates: tuple[TemplateFacts, ...] = ()
    function_tasks: tuple[FunctionTask, ...] = ()
    callback_tasks: tuple[CallbackTask, ...] = ()

    @classmethod
    def failed(cls, path: str, status: AdmissionStatus, reason: str) -> FileExtraction:
        return cls(path=path, status=status, reason=reason)

    @property
    def admitted(self) -> bool:
        return self.status is AdmissionStatus.OK

    @property
    def status_label(self) -> str:
        """``ok``, ``skipped:<reason>`` or ``error:<reason>``."""
        if self.status is AdmissionStatus.OK:
            return self.status.value
        return f"{self.status.value}:{self.reason}"
