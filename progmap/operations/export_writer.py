"""
Export of the mapped data set for progmap.

This module contains the ExportWriter class, which replaces every row's
program value with its mapped canonical program and writes the result as an
Excel workbook or a CSV file.
"""

import csv
import logging
from datetime import date
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from progmap.models import ColumnDetection, ExportSummary
from progmap.store import MappingStore

# Configure module logger
logger = logging.getLogger("progmap.export")

COMPACT_HEADERS = ["Contact ID", "Email", "Program"]


class ExportWriter:
    """
    Builds and writes the transformed row set.

    Rows are never modified in place; every build method returns new dicts.
    """

    SHEET_TITLE = "Mapped Programs"
    HEADER_FILL = "6366F1"
    HEADER_FONT_COLOR = "FFFFFF"
    HEADER_BORDER_COLOR = "000000"
    CELL_BORDER_COLOR = "E5E5E5"
    COMPACT_WIDTHS = {"Contact ID": 15, "Email": 40, "Program": 50}
    DEFAULT_WIDTH = 20

    def __init__(self, store: MappingStore) -> None:
        self.store = store

    def resolve(self, raw_value: Optional[str]) -> str:
        """
        Return the export value for one raw program cell.

        The mapped target when the value has one, otherwise the original
        trimmed value ("" for blank cells).
        """
        if raw_value is None:
            return ""
        trimmed = str(raw_value).strip()
        if not trimmed:
            return ""
        mapping = self.store.get(trimmed)
        if mapping is not None and mapping.mapped_to:
            return mapping.mapped_to
        return trimmed

    def build_export_rows(
        self, rows: Sequence[Mapping[str, str]], program_field: str
    ) -> List[Dict[str, str]]:
        """
        Copy every row with its program field replaced by the resolved value.

        Parameters:
            rows: Source rows.
            program_field: Field holding the program value.

        Returns:
            New row dicts in source order, all original fields kept.
        """
        exported = []
        for row in rows:
            new_row = dict(row)
            new_row[program_field] = self.resolve(row.get(program_field))
            exported.append(new_row)
        return exported

    def build_compact_rows(
        self, rows: Sequence[Mapping[str, str]], detection: ColumnDetection
    ) -> List[Dict[str, str]]:
        """
        Build the three-column layout: contact id, email and mapped program.

        Columns that were not detected export as empty strings.
        """
        if detection.program is None:
            raise ValueError("Program column is required for export")

        def cell(row: Mapping[str, str], field: Optional[str]) -> str:
            if field is None or row.get(field) is None:
                return ""
            return str(row[field])

        return [
            {
                "Contact ID": cell(row, detection.contact_id),
                "Email": cell(row, detection.email),
                "Program": self.resolve(row.get(detection.program)),
            }
            for row in rows
        ]

    def write(
        self,
        rows: Sequence[Mapping[str, str]],
        headers: Sequence[str],
        output_path: Path,
    ) -> ExportSummary:
        """
        Write rows to ``output_path`` as .xlsx or .csv.

        Parameters:
            rows: Rows to write.
            headers: Column order.
            output_path: Destination; its extension selects the format.

        Returns:
            ExportSummary describing what was written.

        Raises:
            ValueError: If the extension is neither .xlsx nor .csv.
            OSError: If the file cannot be written.
        """
        output_path = Path(output_path)
        suffix = output_path.suffix.lower()

        if suffix == ".xlsx":
            self._write_xlsx(rows, headers, output_path)
        elif suffix == ".csv":
            self._write_csv(rows, headers, output_path)
        else:
            raise ValueError(
                f"Unsupported export format '{suffix}'; expected .xlsx or .csv"
            )

        mapped_values = sum(1 for _, mapping in self.store.query() if mapping.mapped_to)
        logger.info(f"Exported {len(rows)} rows to {output_path}")

        return ExportSummary(
            output_path=output_path,
            rows_written=len(rows),
            mapped_values=mapped_values,
        )

    @staticmethod
    def default_output_path(directory: Path, today: Optional[date] = None) -> Path:
        """Return ``mapped_programs_YYYY-MM-DD.xlsx`` inside ``directory``."""
        today = today or date.today()
        return Path(directory) / f"mapped_programs_{today.isoformat()}.xlsx"

    def _write_csv(
        self, rows: Sequence[Mapping[str, str]], headers: Sequence[str], output_path: Path
    ) -> None:
        with open(output_path, "w", encoding="utf-8-sig", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(headers), extrasaction="ignore")
            writer.writeheader()
            for row in rows:
                writer.writerow(row)

    def _write_xlsx(
        self, rows: Sequence[Mapping[str, str]], headers: Sequence[str], output_path: Path
    ) -> None:
        wb = Workbook()
        ws = wb.active
        ws.title = self.SHEET_TITLE

        header_font = Font(bold=True, color=self.HEADER_FONT_COLOR)
        header_fill = PatternFill(
            start_color=self.HEADER_FILL, end_color=self.HEADER_FILL, fill_type="solid"
        )
        header_side = Side(style="thin", color=self.HEADER_BORDER_COLOR)
        cell_side = Side(style="thin", color=self.CELL_BORDER_COLOR)
        header_border = Border(left=header_side, right=header_side, top=header_side, bottom=header_side)
        cell_border = Border(left=cell_side, right=cell_side, top=cell_side, bottom=cell_side)

        for col, header in enumerate(headers, start=1):
            c = ws.cell(row=1, column=col)
            self._set_text(c, header)
            c.font = header_font
            c.fill = header_fill
            c.border = header_border
            c.alignment = Alignment(horizontal="center", vertical="center")
            letter = c.column_letter
            ws.column_dimensions[letter].width = self.COMPACT_WIDTHS.get(header, self.DEFAULT_WIDTH)

        for row_idx, row in enumerate(rows, start=2):
            for col, header in enumerate(headers, start=1):
                c = ws.cell(row=row_idx, column=col)
                self._set_text(c, row.get(header, ""))
                c.border = cell_border
                c.alignment = Alignment(
                    horizontal="center" if col == 1 else "left", vertical="center"
                )

        wb.save(output_path)

    @staticmethod
    def _set_text(cell, value: Optional[str]) -> None:
        """
        Store a value as a plain text cell.

        Characters Excel rejects are dropped, and text starting with "=" is
        kept as a string instead of becoming a formula.
        """
        text = ILLEGAL_CHARACTERS_RE.sub("", "" if value is None else str(value))
        cell.value = text
        if text.startswith("="):
            cell.data_type = "s"
