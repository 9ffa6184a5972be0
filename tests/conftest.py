"""Pytest fixtures for progmap tests."""

import csv
import io
import tempfile
from pathlib import Path
from typing import Dict, Generator, List, Sequence

import pytest
from openpyxl import Workbook
from rich.console import Console

from progmap.models import TabularData
from progmap.orchestration import MappingSession
from progmap.store import MappingStore
from progmap.ui import MappingTUI


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: end-to-end workflow tests")


# Canonical list and rows used by the end-to-end scenario
LAW_MEDICINE_PROGRAMS = ["Law", "Medicine"]
LAW_MEDICINE_VALUES = ["Law", "Law", "MED", "law", "Medicine"]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for isolated test environments.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def make_table(values: Sequence[str], field: str = "prog") -> TabularData:
    """Build TabularData with one row per value and a name column."""
    rows = [
        {"Name": f"Person {idx}", field: value}
        for idx, value in enumerate(values, start=1)
    ]
    return TabularData(headers=["Name", field], rows=rows)


def write_csv(path: Path, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> Path:
    """Write a UTF-8 CSV file and return its path."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(headers)
        writer.writerows(rows)
    return path


def write_xlsx(path: Path, headers: Sequence[object], rows: Sequence[Sequence[object]]) -> Path:
    """Write a single-sheet workbook and return its path."""
    wb = Workbook()
    ws = wb.active
    ws.append(list(headers))
    for row in rows:
        ws.append(list(row))
    wb.save(path)
    return path


@pytest.fixture
def law_medicine_table() -> TabularData:
    """Five rows: Law, Law, MED, law, Medicine in field 'prog'."""
    return make_table(LAW_MEDICINE_VALUES)


@pytest.fixture
def law_medicine_session(law_medicine_table: TabularData) -> MappingSession:
    """Session loaded with the Law/Medicine scenario, before matching."""
    session = MappingSession()
    session.load_reference_list(LAW_MEDICINE_PROGRAMS)
    session.load_table(law_medicine_table)
    session.set_program_field("prog")
    return session


@pytest.fixture
def review_session() -> MappingSession:
    """Matched session with one confident, one uncertain and one unmapped value.

    Law -> Law (100), Nursin -> Nursing (86), MED -> unmapped (38).
    """
    session = MappingSession()
    session.load_reference_list(["Law", "Medicine", "Nursing"])
    session.load_table(make_table(["Law", "Nursin", "MED"], field="Program"))
    session.run_matching()
    return session


@pytest.fixture
def matched_store() -> MappingStore:
    """Store after a pass over Law / law / MED / Medicine."""
    store = MappingStore()
    store.run_matching_pass(["Law", "law", "MED", "Medicine"], LAW_MEDICINE_PROGRAMS)
    return store


@pytest.fixture
def tui_with_output() -> tuple:
    """MappingTUI writing into a StringIO, without color codes.

    Returns:
        Tuple of (MappingTUI instance, StringIO for reading output).
    """
    output = io.StringIO()
    console = Console(file=output, force_terminal=False, no_color=True, width=120)
    return MappingTUI(console=console), output


@pytest.fixture
def programs_file(temp_dir: Path) -> Path:
    path = temp_dir / "programs.txt"
    path.write_text("Law\nMedicine\n", encoding="utf-8")
    return path


@pytest.fixture
def submissions_csv(temp_dir: Path) -> Path:
    """CSV with contact id, email and program columns."""
    return write_csv(
        temp_dir / "submissions.csv",
        ["ID Contacto", "Email", "Programa de Interés"],
        [
            ["1", "ana@example.com", "Law"],
            ["2", "ben@example.com", "law"],
            ["3", "cai@example.com", "MED"],
            ["4", "dee@example.com", "Medicine"],
            ["5", "eve@example.com", "Law"],
        ],
    )
