"""Tests for loading the canonical program list."""

from pathlib import Path

import pytest

from progmap.loading import load_reference_file, parse_dax_datatable, parse_reference_text

DAX_TEXT = '''Programs = DATATABLE(
    "Program", STRING,
    "Level", STRING,
    {
        {"Business Administration", "Undergraduate"},
        {"Law", "Undergraduate"},
        { " Nursing " , "Graduate" }
    }
)'''


class TestParseDaxDatatable:

    def test_extracts_first_quoted_value(self):
        assert parse_dax_datatable(DAX_TEXT) == ["Business Administration", "Law", "Nursing"]

    def test_plain_lines_are_not_dax(self):
        assert parse_dax_datatable("Law\nMedicine") is None

    def test_quotes_without_rows(self):
        assert parse_dax_datatable('Program "A"\nLaw') is None

    def test_rows_without_keyword(self):
        assert parse_dax_datatable('{"Law", "Undergraduate"},') == ["Law"]


class TestParseReferenceText:

    def test_plain_lines(self):
        text = "  Law \n\nMedicine\n   \nNursing\n"
        assert parse_reference_text(text) == ["Law", "Medicine", "Nursing"]

    def test_dax_preferred(self):
        assert parse_reference_text(DAX_TEXT)[0] == "Business Administration"

    def test_quoted_text_falls_back_to_lines(self):
        assert parse_reference_text('Program "A"\nLaw') == ['Program "A"', "Law"]

    def test_windows_line_endings(self):
        assert parse_reference_text("Law\r\nMedicine\r\n") == ["Law", "Medicine"]

    def test_empty(self):
        assert parse_reference_text("   \n ") == []

    def test_duplicates_kept(self):
        assert parse_reference_text("Law\nLaw") == ["Law", "Law"]


class TestLoadReferenceFile:

    def test_reads_file_with_bom(self, temp_dir: Path):
        path = temp_dir / "programs.txt"
        path.write_text("Law\nMedicine\n", encoding="utf-8-sig")
        assert load_reference_file(path) == ["Law", "Medicine"]

    def test_reads_dax_file(self, temp_dir: Path):
        path = temp_dir / "programs.dax"
        path.write_text(DAX_TEXT, encoding="utf-8")
        assert load_reference_file(path) == ["Business Administration", "Law", "Nursing"]

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError):
            load_reference_file(temp_dir / "missing.txt")

    def test_empty_file(self, temp_dir: Path):
        path = temp_dir / "empty.txt"
        path.write_text("\n\n", encoding="utf-8")
        with pytest.raises(ValueError, match="empty"):
            load_reference_file(path)
