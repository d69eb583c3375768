"""Relationship graph: name-keyed entity registry with back-references."""

from .builder import RegistryBuilder
from .models import EntityGraph, EntityRecord, ModuleRecord

__all__ = [
    "EntityGraph",
    "EntityRecord",
    "ModuleRecord",
    "RegistryBuilder",
]
