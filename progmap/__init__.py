"""Program Mapper - Reconciliation of free-text program names.

A Python application for mapping the program names typed into form
submissions onto an official program catalog using fuzzy matching and
manual overrides.
"""

__version__ = "1.0.0"

from .models import (
    ColumnDetection,
    ExportSummary,
    Mapping,
    MappingEntry,
    MappingFilter,
    MappingStatus,
    MappingSummary,
    MatchResult,
    TabularData,
)

__all__ = [
    "__version__",
    "ColumnDetection",
    "ExportSummary",
    "Mapping",
    "MappingEntry",
    "MappingFilter",
    "MappingStatus",
    "MappingSummary",
    "MatchResult",
    "TabularData",
]


def main() -> None:
    """Entry point for the progmap CLI application.

    This function is called when the `progmap` command is invoked after
    package installation via pip. It imports and runs the Typer app
    from the progmap.cli module.
    """
    from progmap.cli import app
    app()
