"""Entity extraction: classes and structs with a body, as classified EntityShapes.

For each entity the extractor collects
    - methods (defined, declared, and member templates) with virtual flags
    - base types from the base-class clause
    - uses: type identifiers and call targets inside member function
      definitions, minus the entity itself and std-qualified names
"""

from __future__ import annotations

import re
from pathlib import PurePath
from typing import Any, Iterable, Optional

from ..classification.classifier import LayerClassifier
from ..classification.models import EntityShape
from .counter import TYPE_KINDS, _function_declarator
from .models import ExtractedEntity, MethodInfo
from .nodes import Deadline, end_line, iter_descendants, node_text, start_line

_VIRTUAL = re.compile(r"\bvirtual\b")
_PURE_VIRTUAL = re.compile(r"=\s*0\s*;?\s*$")
_IDENTIFIER = re.compile(r"^[A-Za-z_]\w*$")

_DECLARATION_KINDS = ("field_declaration", "declaration")
_MEMBER_KINDS = ("function_definition", "template_declaration") + _DECLARATION_KINDS
# Conditional-compilation blocks; members inside any branch belong to the class
_PREPROC_KINDS = frozenset(
    {"preproc_if", "preproc_ifdef", "preproc_else", "preproc_elif", "preproc_elifdef"}
)


def extract_entities(
    root: Any,
    file_name: str,
    classifier: LayerClassifier,
    std_prefixes: Iterable[str] = ("std::",),
    deadline: Optional[Deadline] = None,
) -> tuple[ExtractedEntity, ...]:
    """Extract and classify every class/struct with a body under ``root``.

    Forward declarations and anonymous types are skipped.
    """
    declaring_file = PurePath(file_name).name
    prefixes = tuple(std_prefixes)
    entities: list[ExtractedEntity] = []

    for node in iter_descendants(root, deadline):
        if node.type not in TYPE_KINDS:
            continue
        if node.child_by_field_name("body") is None:
            continue
        name_node = node.child_by_field_name("name")
        if name_node is None:
            continue
        name = simple_name(name_node)
        if not name:
            continue
        entities.append(
            _extract_entity(node, name, declaring_file, classifier, prefixes, deadline)
        )

    return tuple(entities)


def simple_name(node: Any) -> str:
    """Rightmost plain name of a (possibly qualified or templated) name node."""
    if node.type in ("qualified_identifier", "template_type"):
        inner = node.child_by_field_name("name")
        if inner is not None:
            return simple_name(inner)
    return node_text(node).strip()


def _extract_entity(
    node: Any,
    name: str,
    declaring_file: str,
    classifier: LayerClassifier,
    std_prefixes: tuple[str, ...],
    deadline: Optional[Deadline] = None,
) -> ExtractedEntity:
    body = node.child_by_field_name("body")
    methods: list[MethodInfo] = []
    implemented = 0
    pure_virtual = False
    operator_overload = False
    template_method = False
    definitions: list[Any] = []

    for member in _members(body):
        if member.type == "template_declaration":
            template_method = True
            inner = [
                c
                for c in member.named_children
                if c.type in ("function_definition",) + _DECLARATION_KINDS
            ]
            if not inner:
                continue
            member = inner[0]

        declarator = _function_declarator(member)
        if declarator is None:
            continue
        if _is_deleted(member):
            continue

        method_name = node_text(declarator.child_by_field_name("declarator")).strip()
        header = _header_text(member)
        methods.append(
            MethodInfo(
                name=method_name,
                line_start=start_line(member),
                line_end=end_line(member),
                is_virtual=bool(_VIRTUAL.search(header)),
            )
        )
        if method_name.startswith("operator"):
            operator_overload = True

        if member.type == "function_definition":
            implemented += 1
            if member.child_by_field_name("body") is not None:
                definitions.append(member)
        elif _PURE_VIRTUAL.search(node_text(member)):
            pure_virtual = True

    clause = _base_class_clause(node)
    inherits_from = base_names(clause) if clause is not None else frozenset()

    shape = EntityShape(
        name=name,
        declaring_file_name=declaring_file,
        method_count=len(methods),
        implemented_method_count=implemented,
        has_pure_virtual_method=pure_virtual,
        all_methods_virtual=bool(methods) and all(m.is_virtual for m in methods),
        has_virtual_method=any(m.is_virtual for m in methods),
        has_operator_overload=operator_overload,
        has_template_method=template_method,
        declares_base_type=clause is not None,
    )
    rule = classifier.explain(shape)

    return ExtractedEntity(
        name=name,
        shape=shape,
        layer=rule.layer,
        rule=rule.name,
        methods=tuple(methods),
        inherits_from=inherits_from,
        uses=_collect_uses(definitions, name, std_prefixes, deadline),
    )


def _members(body: Any) -> list[Any]:
    """Member declarations and definitions in source order.

    Members inside every branch of (nested) ``#if``/``#ifdef`` blocks count.
    """
    members: list[Any] = []
    for child in body.named_children:
        if child.type in _MEMBER_KINDS:
            members.append(child)
        elif child.type in _PREPROC_KINDS:
            members.extend(_members(child))
    return members


def _is_deleted(member: Any) -> bool:
    return any(c.type == "delete_method_clause" for c in member.children)


def _header_text(member: Any) -> str:
    """Text of a member up to its body, so keywords inside the body don't count."""
    body = member.child_by_field_name("body")
    text = member.text or b""
    if body is not None:
        text = text[: body.start_byte - member.start_byte]
    return text.decode("utf-8", errors="replace")


def _base_class_clause(node: Any) -> Optional[Any]:
    for child in node.children:
        if child.type == "base_class_clause":
            return child
    return None


def base_names(clause: Any) -> frozenset[str]:
    """Base type names from a base-class clause.

    Qualified bases contribute both the qualified and the simple name
    (``ns::Base`` and ``Base``); template bases contribute the template
    name only, not their arguments. Access specifiers are ignored.
    """
    names: set[str] = set()

    def visit(node: Any) -> None:
        for child in node.named_children:
            if child.type == "template_argument_list":
                continue
            if child.type == "qualified_identifier":
                names.add(node_text(child).split("<", 1)[0].strip())
                leaf = simple_name(child)
                if leaf:
                    names.add(leaf)
                continue
            if child.type == "type_identifier":
                names.add(node_text(child))
                continue
            visit(child)

    visit(clause)
    return frozenset(n for n in names if n)


def _collect_uses(
    definitions: list[Any],
    own_name: str,
    std_prefixes: tuple[str, ...],
    deadline: Optional[Deadline] = None,
) -> frozenset[str]:
    uses: set[str] = set()
    for definition in definitions:
        for node in iter_descendants(definition, deadline):
            if node.type == "type_identifier":
                if _is_std_qualified(node, std_prefixes):
                    continue
                uses.add(node_text(node))
            elif node.type == "call_expression":
                target = call_target(node, std_prefixes)
                if target:
                    uses.add(target)
    uses.discard(own_name)
    return frozenset(uses)


def call_target(call: Any, std_prefixes: Iterable[str] = ("std::",)) -> Optional[str]:
    """Entity-level name a call refers to, or None.

    ``Foo::bar()`` and ``Foo<int>::bar()`` give ``Foo``; ``helper()`` gives
    ``helper``. Member calls through an object and std-qualified calls give None.
    """
    function = call.child_by_field_name("function")
    if function is None or function.type == "field_expression":
        return None
    text = node_text(function).strip()
    if any(text.startswith(p) for p in std_prefixes):
        return None
    head = text.split("::", 1)[0].split("<", 1)[0].strip()
    if not _IDENTIFIER.match(head):
        return None
    return head


def _is_std_qualified(node: Any, std_prefixes: tuple[str, ...]) -> bool:
    parent = node.parent
    while parent is not None and parent.type in ("qualified_identifier", "template_type"):
        if parent.type == "qualified_identifier" and any(
            node_text(parent).startswith(p) for p in std_prefixes
        ):
            return True
        parent = parent.parent
    return False
