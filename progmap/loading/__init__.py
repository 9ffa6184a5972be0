"""Input loading package for progmap.

This package contains the collaborators that feed the matching engine:
- parse_reference_text / load_reference_file: Canonical program list
- read_table: CSV and Excel data files
- detect_columns: Header heuristics for the program column and friends
"""

from .column_detector import COLUMN_PATTERNS, detect_columns, unique_databases
from .reference_loader import load_reference_file, parse_dax_datatable, parse_reference_text
from .tabular_reader import TabularReadError, cell_to_text, read_table

__all__ = [
    "COLUMN_PATTERNS",
    "TabularReadError",
    "cell_to_text",
    "detect_columns",
    "load_reference_file",
    "parse_dax_datatable",
    "parse_reference_text",
    "read_table",
    "unique_databases",
]
