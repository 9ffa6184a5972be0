"""Export operations package for progmap.

This package provides the ExportWriter class for producing the mapped data
set, either with every original column kept or in the compact three-column
layout.

Example:
    >>> from progmap.operations import ExportWriter
    >>> writer = ExportWriter(store)
    >>> rows = writer.build_export_rows(data.rows, "Program")
    >>> writer.write(rows, data.headers, Path("mapped.xlsx"))
"""

from .export_writer import COMPACT_HEADERS, ExportWriter

__all__ = ["COMPACT_HEADERS", "ExportWriter"]
