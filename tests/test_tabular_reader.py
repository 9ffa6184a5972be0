"""Tests for reading CSV and Excel input files."""

from datetime import date, datetime
from pathlib import Path

import pytest

from conftest import write_csv, write_xlsx
from progmap.loading import TabularReadError, cell_to_text, read_table


class TestCellToText:

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, ""),
            ("Law", "Law"),
            (2024, "2024"),
            (2024.0, "2024"),
            (1.5, "1.5"),
            (True, "TRUE"),
            (datetime(2024, 1, 2), "2024-01-02"),
            (datetime(2024, 1, 2, 9, 30), "2024-01-02 09:30:00"),
            (date(2024, 1, 2), "2024-01-02"),
        ],
    )
    def test_conversion(self, value, expected):
        assert cell_to_text(value) == expected


class TestReadCsv:

    def test_comma_separated(self, temp_dir: Path):
        path = write_csv(
            temp_dir / "data.csv",
            ["Name", "Program"],
            [["Ana", "Law"], ["Ben", ""], ["", ""]],
        )
        data = read_table(path)

        assert data.headers == ["Name", "Program"]
        assert data.rows == [
            {"Name": "Ana", "Program": "Law"},
            {"Name": "Ben", "Program": ""},
        ]
        assert data.source == path

    def test_semicolon_separated(self, temp_dir: Path):
        path = temp_dir / "data.csv"
        path.write_text("Name;Program\nAna;Law\nBen;Medicine\n", encoding="utf-8")
        data = read_table(path)

        assert data.headers == ["Name", "Program"]
        assert data.rows[1] == {"Name": "Ben", "Program": "Medicine"}

    def test_single_column(self, temp_dir: Path):
        path = temp_dir / "data.csv"
        path.write_text("Program\nLaw\nMedicine\n", encoding="utf-8")
        data = read_table(path)

        assert data.headers == ["Program"]
        assert [r["Program"] for r in data.rows] == ["Law", "Medicine"]

    def test_bom_removed_from_header(self, temp_dir: Path):
        path = temp_dir / "data.csv"
        path.write_text("Program,Email\nLaw,a@b.co\n", encoding="utf-8-sig")
        assert read_table(path).headers == ["Program", "Email"]

    def test_short_rows_padded(self, temp_dir: Path):
        path = temp_dir / "data.csv"
        path.write_text("Name,Program,Email\nAna,Law\n", encoding="utf-8")
        assert read_table(path).rows == [{"Name": "Ana", "Program": "Law", "Email": ""}]

    def test_empty_file(self, temp_dir: Path):
        path = temp_dir / "data.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(TabularReadError, match="no header"):
            read_table(path)

    def test_header_only(self, temp_dir: Path):
        path = temp_dir / "data.csv"
        path.write_text("Name,Program\n", encoding="utf-8")
        with pytest.raises(TabularReadError, match="no data rows"):
            read_table(path)


class TestReadExcel:

    def test_first_sheet_with_numbers_and_blank_header(self, temp_dir: Path):
        path = write_xlsx(
            temp_dir / "data.xlsx",
            ["Program", "Year", None],
            [["Law", 2024, "x"], [None, None, None], ["Medicine", 2023.0, None]],
        )
        data = read_table(path)

        assert data.headers == ["Program", "Year", "__EMPTY"]
        assert data.rows == [
            {"Program": "Law", "Year": "2024", "__EMPTY": "x"},
            {"Program": "Medicine", "Year": "2023", "__EMPTY": ""},
        ]

    def test_duplicate_headers_suffixed(self, temp_dir: Path):
        path = write_xlsx(temp_dir / "data.xlsx", ["Program", "Program"], [["Law", "Medicine"]])
        data = read_table(path)

        assert data.headers == ["Program", "Program_1"]
        assert data.rows[0] == {"Program": "Law", "Program_1": "Medicine"}

    def test_corrupt_workbook(self, temp_dir: Path):
        path = temp_dir / "broken.xlsx"
        path.write_bytes(b"this is not a zip archive")
        with pytest.raises(TabularReadError, match="Cannot parse"):
            read_table(path)


class TestReadTableErrors:

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError):
            read_table(temp_dir / "missing.csv")

    def test_unsupported_extension(self, temp_dir: Path):
        path = temp_dir / "data.txt"
        path.write_text("Program\nLaw\n", encoding="utf-8")
        with pytest.raises(TabularReadError, match="Unsupported"):
            read_table(path)

    def test_is_a_value_error(self):
        assert issubclass(TabularReadError, ValueError)
