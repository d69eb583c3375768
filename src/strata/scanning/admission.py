"""File admission filter.

Runs on raw source text before parsing and rejects files that look
auto-generated or are mostly data: generation markers, headers crammed with
class declarations or deleted methods, and hex-to-string mapping tables.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from ..config import AdmissionThresholds
from ..exceptions import AdmissionSkip

_PRAGMA = re.compile(r"#pragma")
_CLASS_DECL = re.compile(r"\bclass\s+\w+")
_DELETED_METHOD = re.compile(r"=\s*delete\b")
_HEX_TABLE_ENTRY = re.compile(r"""\{\s*0x[0-9a-fA-F]+\s*,\s*["'][^"']+["']\s*\}""")

# Skip reasons recorded as ``skipped:<reason>``
REASON_BINARY = "binary"
REASON_GENERATED = "generated"
REASON_TYPE_DENSE = "type-dense"
REASON_DELETED_METHODS = "deleted-methods"
REASON_HEX_TABLE = "hex-table"


def is_binary(raw: bytes, sniff_bytes: int = 1024) -> bool:
    """True if a NUL byte appears in the first ``sniff_bytes`` bytes."""
    return b"\x00" in raw[:sniff_bytes]


class AdmissionFilter:
    """Decides whether a file's content should be extracted at all."""

    def __init__(self, thresholds: Optional[AdmissionThresholds] = None) -> None:
        self.thresholds = thresholds or AdmissionThresholds()

    def evaluate(self, content: str) -> Optional[str]:
        """Return the skip reason for ``content``, or None to admit it."""
        t = self.thresholds

        if any(marker in content for marker in t.generated_markers):
            return REASON_GENERATED

        pragma_count = len(_PRAGMA.findall(content))
        class_count = len(_CLASS_DECL.findall(content))
        if (pragma_count > t.pragma_limit and class_count > t.dense_type_limit) or (
            class_count > t.type_limit
        ):
            return REASON_TYPE_DENSE

        if len(_DELETED_METHOD.findall(content)) > t.deleted_method_limit:
            return REASON_DELETED_METHODS

        if len(_HEX_TABLE_ENTRY.findall(content)) > t.hex_table_limit:
            return REASON_HEX_TABLE

        return None

    def check(self, content: str, filepath: Path | str = "<memory>") -> None:
        """Raise AdmissionSkip if ``content`` should not be extracted."""
        reason = self.evaluate(content)
        if reason is not None:
            raise AdmissionSkip(Path(filepath), reason)
