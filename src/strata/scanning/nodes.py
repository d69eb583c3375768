"""Helpers over tree-sitter nodes: traversal, text, line spans, soft deadlines."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from ..exceptions import ExtractionTimeout

# Check the deadline once per this many visited nodes
_DEADLINE_STRIDE = 512


class Deadline:
    """Soft per-file time budget, checked cooperatively during traversal."""

    def __init__(self, seconds: float, filepath: Path | str = "<memory>") -> None:
        self.seconds = seconds
        self.filepath = Path(filepath)
        self._expires = time.monotonic() + seconds

    @property
    def expired(self) -> bool:
        return time.monotonic() > self._expires

    def check(self) -> None:
        """Raise ExtractionTimeout once the budget is spent."""
        if self.expired:
            raise ExtractionTimeout(self.filepath, self.seconds)


def iter_descendants(node: Any, deadline: Optional[Deadline] = None) -> Iterator[Any]:
    """Yield every descendant of ``node`` in document order (pre-order), excluding ``node``."""
    if deadline is not None:
        deadline.check()
    stack = list(reversed(node.children))
    visited = 0
    while stack:
        current = stack.pop()
        yield current
        visited += 1
        if deadline is not None and visited % _DEADLINE_STRIDE == 0:
            deadline.check()
        if current.child_count:
            stack.extend(reversed(current.children))


def descendants_of_type(
    node: Any, kinds: Iterable[str] | str, deadline: Optional[Deadline] = None
) -> list[Any]:
    """All descendants whose type is in ``kinds``."""
    wanted = {kinds} if isinstance(kinds, str) else set(kinds)
    return [n for n in iter_descendants(node, deadline) if n.type in wanted]


def node_text(node: Optional[Any]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def start_line(node: Any) -> int:
    """1-indexed first line of the node."""
    return node.start_point[0] + 1


def end_line(node: Any) -> int:
    """1-indexed last line of the node."""
    return node.end_point[0] + 1


def line_span(node: Any) -> int:
    """Number of source lines the node covers."""
    return node.end_point[0] - node.start_point[0] + 1
