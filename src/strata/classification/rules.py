"""Ordered rule tables for layer classification.

First matching rule wins. The entity table encodes this precedence:

1. INTERFACE: pure virtual method, all methods virtual, interface name,
   or methods declared but none implemented
2. UTILITY: utility name convention
3. With a base type: impl idiom -> DERIVED, virtual method -> CORE,
   otherwise DERIVED
4. Without a base type: no methods or impl idiom -> DERIVED, otherwise CORE

The file-name table is only consulted when a file yields no entity at all.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Pattern

from ..config import NamingConventions
from .models import EntityShape, Layer

# Interface naming: IRenderer, FooInterface, AbstractBar
INTERFACE_NAME_PATTERNS = (
    re.compile(r"^I[A-Z]"),
    re.compile(r"Interface$"),
    re.compile(r"^Abstract"),
)

# Utility naming. "Factory" anywhere in the name lands here only when the
# interface suffix table did not claim it first.
UTILITY_NAME_PATTERNS = (
    re.compile(r"^Goo"),
    re.compile(r"Util"),
    re.compile(r"Helper"),
    re.compile(r"Factory"),
    re.compile(r"Unicode"),
    re.compile(r"Types$"),
    re.compile(r"Constants$"),
    re.compile(r"Math$"),
    re.compile(r"^UTF"),
    re.compile(r"Config$"),
)

# Private implementation / pimpl idiom
IMPL_NAME_PATTERNS = (
    re.compile(r"Impl$"),
    re.compile(r"_private"),
    re.compile(r"Private$"),
)


@dataclass(frozen=True)
class NamePatterns:
    """Compiled name-convention tables used by rule predicates."""

    interface: tuple[Pattern[str], ...]
    utility: tuple[Pattern[str], ...]
    impl: tuple[Pattern[str], ...]

    @classmethod
    def from_conventions(cls, naming: Optional[NamingConventions] = None) -> NamePatterns:
        naming = naming or NamingConventions()
        suffixes = tuple(re.compile(re.escape(s) + "$") for s in naming.interface_suffixes)
        return cls(
            interface=INTERFACE_NAME_PATTERNS
            + suffixes
            + _compile(naming.extra_interface_patterns),
            utility=UTILITY_NAME_PATTERNS + _compile(naming.extra_utility_patterns),
            impl=IMPL_NAME_PATTERNS + _compile(naming.extra_impl_patterns),
        )

    def is_interface_name(self, name: str) -> bool:
        return _matches(self.interface, name)

    def is_utility_name(self, name: str) -> bool:
        return _matches(self.utility, name)

    def is_impl_name(self, name: str) -> bool:
        return _matches(self.impl, name)


def _compile(patterns: Iterable[str]) -> tuple[Pattern[str], ...]:
    return tuple(re.compile(p) for p in patterns)


def _matches(patterns: Iterable[Pattern[str]], name: str) -> bool:
    return any(p.search(name) for p in patterns)


Predicate = Callable[[EntityShape, NamePatterns], bool]


@dataclass(frozen=True)
class ClassificationRule:
    """One row of a rule table: when ``predicate`` holds, the entity gets ``layer``."""

    name: str
    layer: Layer
    predicate: Predicate

    def matches(self, shape: EntityShape, names: NamePatterns) -> bool:
        return self.predicate(shape, names)


def _declarations_only(shape: EntityShape, names: NamePatterns) -> bool:
    return shape.method_count > 0 and shape.implemented_method_count == 0


LAYER_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        "pure-virtual-method",
        Layer.INTERFACE,
        lambda s, n: s.has_pure_virtual_method,
    ),
    ClassificationRule(
        "all-methods-virtual",
        Layer.INTERFACE,
        lambda s, n: s.all_methods_virtual and s.method_count > 0,
    ),
    ClassificationRule(
        "interface-name",
        Layer.INTERFACE,
        lambda s, n: n.is_interface_name(s.name),
    ),
    ClassificationRule("declarations-only", Layer.INTERFACE, _declarations_only),
    ClassificationRule(
        "utility-name",
        Layer.UTILITY,
        lambda s, n: n.is_utility_name(s.name),
    ),
    ClassificationRule(
        "derived-impl-idiom",
        Layer.DERIVED,
        lambda s, n: s.declares_base_type and n.is_impl_name(s.name),
    ),
    ClassificationRule(
        "derived-polymorphic",
        Layer.CORE,
        lambda s, n: s.declares_base_type and s.has_virtual_method,
    ),
    ClassificationRule(
        "derived-leaf",
        Layer.DERIVED,
        lambda s, n: s.declares_base_type,
    ),
    ClassificationRule(
        "data-only",
        Layer.DERIVED,
        lambda s, n: s.method_count == 0,
    ),
    ClassificationRule(
        "impl-idiom",
        Layer.DERIVED,
        lambda s, n: n.is_impl_name(s.name),
    ),
    ClassificationRule("default-core", Layer.CORE, lambda s, n: True),
)


# (rule name, predicate on the file's base name, layer)
FILE_NAME_RULES: tuple[tuple[str, Callable[[str], bool], Layer], ...] = (
    ("file-impl-idiom", lambda f: "_private" in f or _stem(f).endswith("Impl"), Layer.DERIVED),
    ("file-utility", lambda f: "UTF" in f or "Math" in f or "Types" in f, Layer.UTILITY),
    ("file-object-header", lambda f: "Object.h" in f, Layer.CORE),
    (
        "file-writer-or-codec",
        lambda f: ("Writer" in f and "ImgWriter" not in f)
        or "JPEG" in f
        or "PNG" in f
        or "JBIG2" in f,
        Layer.DERIVED,
    ),
)


def _stem(file_name: str) -> str:
    return file_name.rsplit(".", 1)[0] if "." in file_name else file_name
