"""Classification models: architectural layers and the entity facts they are derived from."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Layer(Enum):
    """Architectural role assigned to a class or struct.

    CORE: concrete, behaviorally rich units and polymorphic abstraction points
    INTERFACE: pure-virtual / declaration-only contracts
    DERIVED: leaf implementations, pimpl classes, data-only types
    UTILITY: helpers, math, string/unicode, config and constant holders
    """

    CORE = "core"
    INTERFACE = "interface"
    DERIVED = "derived"
    UTILITY = "utility"

    @property
    def label(self) -> str:
        """Display form, e.g. "Core"."""
        return self.value.capitalize()


@dataclass(frozen=True)
class EntityShape:
    """Structural facts about one entity, the sole input of the classifier.

    Attributes:
        name: Bare entity name (no namespace qualification)
        declaring_file_name: Base name of the file the entity was declared in
        method_count: Methods declared or defined in the body
        implemented_method_count: Methods with a body
        has_pure_virtual_method: Any method declared ``= 0``
        all_methods_virtual: Non-empty method set, every method virtual
        has_virtual_method: At least one virtual method
        has_operator_overload: At least one ``operator`` method
        has_template_method: At least one member template
        declares_base_type: Has a base-class clause
    """

    name: str
    declaring_file_name: str = ""
    method_count: int = 0
    implemented_method_count: int = 0
    has_pure_virtual_method: bool = False
    all_methods_virtual: bool = False
    has_virtual_method: bool = False
    has_operator_overload: bool = False
    has_template_method: bool = False
    declares_base_type: bool = False
