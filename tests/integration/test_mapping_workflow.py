"""
Integration tests for the end-to-end mapping workflow.

Tests cover:
- DAX reference list + Excel submissions through to an Excel export
- Occurrence counting and per-target aggregation
- Overrides surviving into the export and the run log
- Re-running matching after the reference list changes
"""

from pathlib import Path

import pytest
from openpyxl import load_workbook

from progmap.loading import read_table
from progmap.models import MappingFilter, MappingStatus
from progmap.operations import ExportWriter
from progmap.orchestration import MappingLogger, MappingSession

# Import from conftest through tests package
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from conftest import write_xlsx

DAX_PROGRAMS = '''Programas = DATATABLE(
    "Programa", STRING,
    "Nivel", STRING,
    {
        {"Administración de Empresas", "Pregrado"},
        {"Derecho", "Pregrado"},
        {"Enfermería", "Pregrado"},
        {"Marketing 2024", "Posgrado"}
    }
)'''


@pytest.fixture
def submissions_xlsx(temp_dir: Path) -> Path:
    return write_xlsx(
        temp_dir / "submissions.xlsx",
        ["ID Contacto", "Email", "Teléfono", "Programa de Interés", "IdDatabase"],
        [
            [101, "ana@example.com", "3001234567", "administracion_de  empresas", 2],
            [102, "ben@example.com", "3007654321", "Derecho", 10],
            [103, "cai@example.com", None, "DERECHO ", 2],
            [104, "dee@example.com", None, "Enfermeria", 1],
            [105, "eve@example.com", None, "Marketing 2023", 10],
            [106, "fay@example.com", None, "Enfermera", 1],
            [107, "gus@example.com", None, "Quimica", 2],
            [108, "hal@example.com", None, None, 2],
        ],
    )


@pytest.mark.integration
class TestMappingWorkflow:
    """Full run from input files to export."""

    def test_match_review_export(self, temp_dir: Path, submissions_xlsx: Path):
        session = MappingSession()
        programs_path = temp_dir / "programs.dax"
        programs_path.write_text(DAX_PROGRAMS, encoding="utf-8")

        session.load_reference_file(programs_path)
        detection = session.load_table(read_table(submissions_xlsx))

        assert session.programs[0] == "Administración de Empresas"
        assert detection.program == "Programa de Interés"
        assert detection.contact_id == "ID Contacto"
        assert detection.phone == "Teléfono"
        assert session.unique_databases() == ["1", "2", "10"]

        summary = session.run_matching()

        # Blank program cell is not counted
        assert sum(session.counts.values()) == 7
        assert session.store.get("administracion_de  empresas").mapped_to == "Administración de Empresas"
        assert session.store.get("DERECHO").score == 100
        assert session.store.get("Marketing 2023").score == 95
        assert session.store.get("Enfermeria").score == 100
        # "enfermera" vs "enfermeria": one insertion over ten characters
        assert session.store.get("Enfermera").status == MappingStatus.CONFIDENT
        assert session.store.get("Enfermera").score == 90
        assert session.store.get("Quimica").status == MappingStatus.UNMAPPED
        assert summary.total == 7

        assert session.target_counts()["Derecho"] == 2
        assert [e.value for e in session.entries(MappingFilter.UNMAPPED)] == ["Quimica"]

        session.override("Quimica", target="Enfermería")
        headers, rows = session.export_rows(compact=True)
        output = temp_dir / "clean.xlsx"
        export = ExportWriter(session.store).write(rows, headers, output)

        assert export.rows_written == 8
        ws = load_workbook(output).active
        exported = [r for r in ws.iter_rows(min_row=2, values_only=True)]
        assert exported[0] == ("101", "ana@example.com", "Administración de Empresas")
        assert exported[4][2] == "Marketing 2024"
        assert exported[6][2] == "Enfermería"
        assert exported[7][2] in ("", None)

        log_path = temp_dir / "run.log"
        with MappingLogger(log_path, mode="EXPORT") as log:
            log.log_header()
            log.log_reference_list(programs_path, session.programs)
            log.log_input(submissions_xlsx, len(session.data.rows), session.detection,
                          session.unique_databases())
            log.log_matching_phase(session.summary(), session.entries())
            log.log_overrides(session.overrides)
            log.log_export(export)
            log.log_summary(2)

        content = log_path.read_text(encoding="utf-8")
        assert "Canonical programs: 4" in content
        assert "Databases found: 1, 2, 10" in content
        assert "- Quimica -> Enfermería (confident)" in content
        assert "Rows written: 8" in content

    def test_rematch_after_reference_change(self, law_medicine_session: MappingSession):
        law_medicine_session.run_matching()
        law_medicine_session.override("MED", target="Medicine")

        law_medicine_session.load_reference_list(["Law", "Medicine", "MED"])
        summary = law_medicine_session.run_matching()

        assert summary.unmapped == 0
        assert law_medicine_session.store.get("MED").mapped_to == "MED"
        assert law_medicine_session.overrides == []
