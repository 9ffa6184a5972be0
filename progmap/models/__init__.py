"""
Models package for progmap.

This package provides convenient imports for all data models:
- MappingStatus: Enum for the confident / uncertain / unmapped bands
- MappingFilter: Enum used to query the mapping store
- MatchResult: Best candidate and score for an input value
- Mapping: Classification of an input value
- MappingEntry: Reporting row
- MappingSummary: Totals per status
- ColumnDetection: Detected header names
- TabularData: Loaded tabular rows
- ExportSummary: Export outcome
"""

from .mapping_status import MappingFilter, MappingStatus
from .data_models import (
    ColumnDetection,
    ExportSummary,
    Mapping,
    MappingEntry,
    MappingSummary,
    MatchResult,
    TabularData,
)

__all__ = [
    "MappingStatus",
    "MappingFilter",
    "MatchResult",
    "Mapping",
    "MappingEntry",
    "MappingSummary",
    "ColumnDetection",
    "TabularData",
    "ExportSummary",
]
