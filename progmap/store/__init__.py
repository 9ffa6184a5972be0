"""Mapping state package for progmap.

This package contains the in-memory state produced by a matching pass:
- MappingStore: Current classification per distinct input value
- count_occurrences: Row counts per distinct input value
"""

from .mapping_store import MappingStore
from .occurrence_counter import count_occurrences

__all__ = [
    "MappingStore",
    "count_occurrences",
]
