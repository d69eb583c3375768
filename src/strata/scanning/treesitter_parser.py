"""Tree-sitter C++ parser wrapper.

Usage:
    parser = CppParser()
    tree = parser.parse(code_bytes, path)
    root = tree.root_node
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

import tree_sitter
import tree_sitter_cpp

from ..exceptions import ParseError
from ..logging_config import get_logger

logger = get_logger(__name__)

CPP_LANGUAGE = tree_sitter.Language(tree_sitter_cpp.language())


class CppParser:
    """Parses C/C++ source into tree-sitter trees.

    tree-sitter parsers are not safe to share between threads, so each
    thread gets its own parser instance.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def _parser(self) -> Any:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = tree_sitter.Parser(CPP_LANGUAGE)
            self._local.parser = parser
        return parser

    def parse(self, code: bytes, filepath: Path | str = "<memory>") -> Any:
        """Parse code and return the syntax tree.

        tree-sitter recovers from syntax errors with ERROR nodes; such trees
        are still returned. Only a missing tree is a failure.

        Raises:
            ParseError: If no tree could be produced
        """
        try:
            tree = self._parser().parse(code)
        except (ValueError, TypeError, RuntimeError) as e:
            raise ParseError(Path(filepath), f"parse-failed: {e}")

        if tree is None or tree.root_node is None:
            raise ParseError(Path(filepath), "parse-failed")

        if tree.root_node.has_error:
            logger.debug(f"Syntax errors recovered while parsing {filepath}")
        return tree
