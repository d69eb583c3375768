"""Per-file extraction: discovery, admission, parsing, counting and entity extraction."""

from .admission import AdmissionFilter, is_binary
from .counter import count_structure
from .entities import extract_entities
from .extractor import FileExtractor, extract_from_tree
from .models import (
    AdmissionStatus,
    CallbackTask,
    ExtractedEntity,
    FileExtraction,
    FlowSpan,
    FunctionTask,
    MethodInfo,
    StructureCounts,
    TemplateFacts,
)
from .treesitter_parser import CppParser
from .walker import discover_sources

__all__ = [
    "AdmissionFilter",
    "AdmissionStatus",
    "CallbackTask",
    "CppParser",
    "ExtractedEntity",
    "FileExtraction",
    "FileExtractor",
    "FlowSpan",
    "FunctionTask",
    "MethodInfo",
    "StructureCounts",
    "TemplateFacts",
    "count_structure",
    "discover_sources",
    "extract_entities",
    "extract_from_tree",
    "is_binary",
]
