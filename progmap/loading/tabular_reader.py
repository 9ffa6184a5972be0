"""Reading of tabular input files (CSV and Excel).

Every cell is converted to text on load, so downstream code only ever sees
strings. Blank headers are named ``__EMPTY``, ``__EMPTY_1``... and repeated
headers get a numeric suffix, the way spreadsheet exports usually name them.
"""

import csv
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from progmap.models import TabularData

CSV_EXTENSIONS = {".csv"}
EXCEL_EXTENSIONS = {".xlsx", ".xlsm"}


class TabularReadError(ValueError):
    """Raised when a tabular file cannot be turned into rows."""


def cell_to_text(value: Any) -> str:
    """Convert a raw cell value to its text form.

    Args:
        value: Value read from a CSV or Excel cell.

    Returns:
        "" for None, "2024" for the float 2024.0, ISO format for dates,
        ``str(value)`` otherwise.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _unique_headers(raw_headers: Sequence[Any]) -> List[str]:
    headers: List[str] = []
    seen: Dict[str, int] = {}
    for raw in raw_headers:
        name = cell_to_text(raw).strip() or "__EMPTY"
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        headers.append(name)
    return headers


def _build_rows(headers: List[str], records: Iterable[Sequence[Any]]) -> List[Dict[str, str]]:
    rows: List[Dict[str, str]] = []
    for record in records:
        values = [cell_to_text(v) for v in record]
        if not any(v.strip() for v in values):
            continue
        values = values[: len(headers)] + [""] * (len(headers) - len(values))
        rows.append(dict(zip(headers, values)))
    return rows


def _read_csv(path: Path) -> List[List[str]]:
    with open(path, "r", encoding="utf-8-sig", newline="") as handle:
        sample = handle.read(4096)
        handle.seek(0)
        try:
            dialect = csv.Sniffer().sniff(sample, delimiters=",;\t")
        except csv.Error:
            dialect = csv.excel
        return list(csv.reader(handle, dialect))


def _read_excel(path: Path) -> List[List[Any]]:
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        if not workbook.worksheets:
            return []
        sheet = workbook.worksheets[0]
        return [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def read_table(path: Path) -> TabularData:
    """Load the first sheet of a CSV or Excel file.

    Args:
        path: File to read; the first row holds the headers.

    Returns:
        TabularData with text cells and fully blank rows skipped.

    Raises:
        FileNotFoundError: If the file does not exist.
        TabularReadError: If the extension is unsupported, the file cannot
            be parsed, or it has no header or no data rows.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in CSV_EXTENSIONS | EXCEL_EXTENSIONS:
        raise TabularReadError(
            f"Unsupported file type '{suffix}'; expected .csv, .xlsx or .xlsm"
        )

    try:
        if suffix in CSV_EXTENSIONS:
            records = _read_csv(path)
        else:
            records = _read_excel(path)
    except (csv.Error, UnicodeDecodeError, BadZipFile, InvalidFileException, KeyError) as e:
        raise TabularReadError(f"Cannot parse {path.name}: {e}") from e

    if not records or not any(cell_to_text(v).strip() for v in records[0]):
        raise TabularReadError(f"File has no header row: {path.name}")

    headers = _unique_headers(records[0])
    rows = _build_rows(headers, records[1:])
    if not rows:
        raise TabularReadError(f"File has no data rows: {path.name}")

    return TabularData(headers=headers, rows=rows, source=path)
