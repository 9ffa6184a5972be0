"""
Core data models for progmap.

This module contains the following dataclasses:
- MatchResult: Best candidate and score for one input value
- Mapping: Current classification of one input value
- MappingEntry: Reporting row (value, mapping, occurrence count)
- MappingSummary: Entry totals per status
- ColumnDetection: Header names detected for the interesting columns
- TabularData: Headers and rows loaded from a CSV/XLSX file
- ExportSummary: Result of writing the mapped data set
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .mapping_status import MappingStatus


@dataclass(frozen=True)
class MatchResult:
    """Result of scoring one input value against the canonical list."""
    best_candidate: Optional[str]     # Highest-scoring canonical program (None if none scored > 0)
    score: int                        # Similarity score (0-100)


@dataclass
class Mapping:
    """Classification of one distinct input value.

    A confident mapping must name a target program; an unmapped one may
    carry no target at all.

    Raises:
        ValueError: If the score is outside 0-100 or a confident mapping
            has no target.
    """
    mapped_to: Optional[str]          # Canonical program (None when unmapped)
    score: int                        # Similarity score (0-100), 100 for manual mappings
    status: MappingStatus             # Classification band

    def __post_init__(self) -> None:
        if not 0 <= self.score <= 100:
            raise ValueError(f"score must be between 0 and 100, got {self.score}")
        if self.status is MappingStatus.CONFIDENT and self.mapped_to is None:
            raise ValueError("A confident mapping requires a target program")


@dataclass
class MappingEntry:
    """Reporting row for one distinct input value."""
    value: str                        # Trimmed raw program value
    mapping: Mapping                  # Current classification
    count: int                        # Number of source rows with this value


@dataclass
class MappingSummary:
    """Number of store entries in each status."""
    confident: int = 0
    uncertain: int = 0
    unmapped: int = 0

    @property
    def total(self) -> int:
        return self.confident + self.uncertain + self.unmapped


@dataclass
class ColumnDetection:
    """Header names detected for each column of interest (None if not found)."""
    program: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    contact_id: Optional[str] = None
    database: Optional[str] = None


@dataclass
class TabularData:
    """Rows loaded from a tabular file, every cell already converted to text."""
    headers: List[str]
    rows: List[Dict[str, str]] = field(default_factory=list)
    source: Optional[Path] = None


@dataclass
class ExportSummary:
    """Outcome of an export."""
    output_path: Path                 # File that was written
    rows_written: int                 # Data rows (header excluded)
    mapped_values: int                # Distinct input values that had a target
