"""Metrics counter: one traversal of a file's tree, counting structural node kinds.

Besides the counts it collects the data the time estimate needs later
(control-flow spans, template facts, include targets) and the per-file task
lists (every function definition, every lambda passed to a call), so the
tree can be dropped as soon as extraction finishes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .models import CallbackTask, FlowSpan, FunctionTask, StructureCounts, TemplateFacts
from .nodes import (
    Deadline,
    descendants_of_type,
    end_line,
    iter_descendants,
    line_span,
    node_text,
    start_line,
)

FUNCTION_KINDS = frozenset({"function_definition"})
TYPE_KINDS = frozenset({"class_specifier", "struct_specifier"})
TEMPLATE_KINDS = frozenset({"template_declaration"})
CONDITIONAL_KINDS = frozenset({"if_statement"})
LOOP_KINDS = frozenset({"for_statement", "for_range_loop", "while_statement", "do_statement"})
INCLUDE_KINDS = frozenset({"preproc_include"})
CALL_KINDS = frozenset({"call_expression"})


@dataclass(frozen=True)
class CountResult:
    counts: StructureCounts
    includes: tuple[str, ...]
    flow: tuple[FlowSpan, ...]
    templates: tuple[TemplateFacts, ...]
    function_tasks: tuple[FunctionTask, ...] = ()
    callback_tasks: tuple[CallbackTask, ...] = ()


def count_lines(content: str) -> int:
    """Line count as newline-separated segments (a trailing newline adds one)."""
    if not content:
        return 0
    return content.count("\n") + 1


def count_structure(root: Any, content: str, deadline: Optional[Deadline] = None) -> CountResult:
    """Count node kinds under ``root`` and collect estimate inputs.

    Types are counted only when they have a body; forward declarations
    are not types of this file.
    """
    functions = classes = templates = conditionals = loops = 0
    includes: list[str] = []
    flow: list[FlowSpan] = []
    template_facts: list[TemplateFacts] = []
    function_tasks: list[FunctionTask] = []
    callback_tasks: list[CallbackTask] = []

    for node in iter_descendants(root, deadline):
        kind = node.type
        if kind in FUNCTION_KINDS:
            functions += 1
            function_tasks.append(
                FunctionTask(function_name(node), start_line(node), end_line(node))
            )
        elif kind in TYPE_KINDS:
            if node.child_by_field_name("body") is not None:
                classes += 1
        elif kind in TEMPLATE_KINDS:
            templates += 1
            template_facts.append(template_facts_of(node, deadline))
        elif kind in CONDITIONAL_KINDS:
            conditionals += 1
            flow.append(FlowSpan("conditional", line_span(node)))
        elif kind in LOOP_KINDS:
            loops += 1
            flow.append(FlowSpan("loop", line_span(node)))
        elif kind in INCLUDE_KINDS:
            target = include_target(node)
            if target:
                includes.append(target)
        elif kind in CALL_KINDS:
            callback_tasks.extend(callbacks_of(node))

    counts = StructureCounts(
        loc=count_lines(content),
        functions=functions,
        classes=classes,
        templates=templates,
        conditionals=conditionals,
        loops=loops,
        includes=len(includes),
    )
    return CountResult(
        counts=counts,
        includes=tuple(includes),
        flow=tuple(flow),
        templates=tuple(template_facts),
        function_tasks=tuple(function_tasks),
        callback_tasks=tuple(callback_tasks),
    )


def include_target(node: Any) -> Optional[str]:
    """Header named by a ``#include``, without quotes or angle brackets."""
    path = node.child_by_field_name("path")
    if path is None:
        return None
    target = node_text(path).strip().strip('<>"')
    return target or None


def function_name(node: Any) -> str:
    """Declared name of a function definition (``Foo::bar``, ``operator==``)."""
    declarator = _function_declarator(node)
    if declarator is None:
        return "anonymous"
    return node_text(declarator.child_by_field_name("declarator")).strip() or "anonymous"


def callbacks_of(call: Any) -> list[CallbackTask]:
    """Lambdas passed directly as arguments to ``call``."""
    args = call.child_by_field_name("arguments")
    if args is None:
        return []
    parent = node_text(call.child_by_field_name("function")).strip() or "unknown"
    return [
        CallbackTask(parent, start_line(arg), end_line(arg))
        for arg in args.named_children
        if arg.type == "lambda_expression"
    ]


def template_facts_of(node: Any, deadline: Optional[Deadline] = None) -> TemplateFacts:
    """Parameter count, specializations and constraints of a template declaration.

    A specialization is a class/struct whose name carries template
    arguments (``template<> class Foo<int>``) or a function whose declarator
    names a template instance (``template<> void f<int>()``).
    """
    params = node.child_by_field_name("parameters")
    parameter_count = 0
    if params is not None:
        parameter_count = sum(1 for p in params.named_children if p.type != "comment")

    specializations = 0
    for child in node.named_children:
        if child.type in TYPE_KINDS:
            name = child.child_by_field_name("name")
            if name is not None and name.type == "template_type":
                specializations += 1
        elif child.type in ("function_definition", "declaration"):
            declarator = _function_declarator(child)
            if declarator is not None:
                target = declarator.child_by_field_name("declarator")
                if target is not None and target.type == "template_function":
                    specializations += 1

    has_constraint = bool(descendants_of_type(node, "requires_clause", deadline))

    return TemplateFacts(
        parameter_count=parameter_count,
        specialization_count=specializations,
        has_constraint=has_constraint,
    )


def _function_declarator(node: Any) -> Optional[Any]:
    """Follow the declarator chain of a definition/declaration to its function_declarator."""
    current = node.child_by_field_name("declarator")
    while current is not None and current.type != "function_declarator":
        nxt = current.child_by_field_name("declarator")
        if nxt is None:
            named = [c for c in current.named_children if c.type != "type_qualifier"]
            nxt = named[0] if named else None
        current = nxt
    return current
