"""MappingLogger for recording a reconciliation run in a structured log file.

The log is plain text, split into sections separated by a line of 65 '='
characters: header, reference list, input, matching phase, overrides,
export and summary.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Tuple

from progmap.models import (
    ColumnDetection,
    ExportSummary,
    Mapping,
    MappingEntry,
    MappingSummary,
)


class MappingLogger:
    """Logger for mapping runs with structured output format.

    Usage:
        with MappingLogger(mode="MATCH ONLY") as logger:
            logger.log_header()
            logger.log_reference_list(programs_path, programs)
            logger.log_input(data_path, row_count, detection)
            logger.log_matching_phase(summary, entries)
            logger.log_overrides(overrides)
            logger.log_export(export_summary)
            logger.log_summary(duration_seconds)

    Attributes:
        SEPARATOR: The 65-character separator line used between sections.
    """

    SEPARATOR = "=" * 65
    TITLE = "Program Mapper - Mapping Log"

    def __init__(
        self,
        log_file_path: Optional[Path] = None,
        mode: str = "MATCH ONLY",
    ) -> None:
        """Initialize the MappingLogger.

        Args:
            log_file_path: Optional path for the log file. If not provided,
                generates a timestamped filename in the current directory.
            mode: Run mode written in the header ("MATCH ONLY" or "EXPORT").

        Raises:
            OSError: If the log file path is not writable.
        """
        self._mode = mode
        self._start_timestamp = datetime.now()
        self._file_handle: Optional[TextIO] = None

        if log_file_path is None:
            timestamp_str = self._start_timestamp.strftime("%Y-%m-%d_%H-%M-%S")
            self._log_file_path = Path.cwd() / f"mapping_log_{timestamp_str}.log"
        else:
            self._log_file_path = Path(log_file_path)

        self._validate_path()

    def _validate_path(self) -> None:
        """Validate that the log file's parent directory is writable.

        Raises:
            OSError: If the parent directory doesn't exist or is not writable.
        """
        parent = self._log_file_path.parent
        if not parent.exists():
            raise OSError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise OSError(f"Parent path is not a directory: {parent}")
        try:
            test_file = parent / f".progmap_test_{id(self)}"
            test_file.touch()
            test_file.unlink()
        except PermissionError:
            raise OSError(f"Permission denied: cannot write to {parent}")

    def __enter__(self) -> "MappingLogger":
        """Open the log file for writing.

        Raises:
            OSError: If the file cannot be opened for writing.
        """
        try:
            self._file_handle = open(self._log_file_path, "w", encoding="utf-8")
        except OSError as e:
            raise OSError(f"Cannot open log file for writing: {e}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the log file, even if an exception occurred."""
        self.close()

    def close(self) -> None:
        if self._file_handle is not None:
            try:
                self._file_handle.close()
            except OSError as e:
                print(f"Warning: Error closing log file: {e}", file=sys.stderr)
            finally:
                self._file_handle = None

    def get_log_path(self) -> Path:
        return self._log_file_path

    def log_header(self) -> None:
        """Write the title, timestamp and mode."""
        self._write_separator()
        self._write_line(self.TITLE)
        self._write_separator()
        self._write_line(f"Timestamp: {self._format_timestamp(self._start_timestamp)}")
        self._write_line(f"Mode: {self._mode}")
        self._write_line("")

    def log_reference_list(self, source: Optional[Path], programs: Sequence[str]) -> None:
        """Write the reference list section.

        Args:
            source: File the list was loaded from (None if given inline).
            programs: Canonical program names.
        """
        self._write_section("REFERENCE LIST")
        self._write_line(f"Source: {source if source is not None else '(inline)'}")
        self._write_line(f"Canonical programs: {len(programs)}")
        self._write_line("")

    def log_input(
        self,
        source: Optional[Path],
        row_count: int,
        detection: ColumnDetection,
        databases: Optional[Sequence[str]] = None,
    ) -> None:
        """Write the input file section with the detected columns."""
        self._write_section("INPUT")
        self._write_line(f"Source: {source if source is not None else '(inline)'}")
        self._write_line(f"Rows: {row_count:,}")
        self._write_line("Detected columns:")
        self._write_line(f"Program: {detection.program or 'not detected'}", indent=2)
        self._write_line(f"Email: {detection.email or 'not detected'}", indent=2)
        self._write_line(f"Phone: {detection.phone or 'not detected'}", indent=2)
        self._write_line(f"Contact ID: {detection.contact_id or 'not detected'}", indent=2)
        self._write_line(f"Database: {detection.database or 'not detected'}", indent=2)
        if databases:
            self._write_line(f"Databases found: {', '.join(databases)}")
        self._write_line("")

    def log_matching_phase(self, summary: MappingSummary, entries: List[MappingEntry]) -> None:
        """Write the summary counts and one line per distinct value.

        Args:
            summary: Totals per status.
            entries: Reporting rows in store order.
        """
        self._write_section("MATCHING PHASE")
        self._write_line(f"Distinct values: {summary.total}")
        self._write_line(f"Confident: {summary.confident}")
        self._write_line(f"Uncertain: {summary.uncertain}")
        self._write_line(f"Unmapped: {summary.unmapped}")
        self._write_line("")

        if entries:
            self._write_line("Mappings:")
        for entry in entries:
            self._write_line(
                f"[{entry.mapping.status.value}] {entry.value} -> "
                f"{self._format_target(entry.mapping)} "
                f"({entry.mapping.score}%, {entry.count} rows)",
                indent=2,
            )
        if entries:
            self._write_line("")

    def log_overrides(self, overrides: Sequence[Tuple[str, Mapping]]) -> None:
        """Write one line per manual override, in the order they were applied."""
        if not overrides:
            return
        self._write_section("OVERRIDES")
        for value, mapping in overrides:
            self._write_line(
                f"- {value} -> {self._format_target(mapping)} ({mapping.status.value})"
            )
        self._write_line("")

    def log_export(self, export: ExportSummary) -> None:
        self._write_section("EXPORT")
        self._write_line(f"Output: {export.output_path}")
        self._write_line(f"Rows written: {export.rows_written:,}")
        self._write_line(f"Values with a target: {export.mapped_values}")
        self._write_line("")

    def log_errors(self, errors: Sequence[str]) -> None:
        """Write the options or actions that could not be applied."""
        if not errors:
            return
        self._write_section("ERRORS")
        self._write_line(f"Total errors: {len(errors)}")
        self._write_line("Errors:")
        for error in errors:
            self._write_line(f"- {error}", indent=2)
        self._write_line("")

    def log_summary(self, duration_seconds: float) -> None:
        """Write the closing section."""
        self._write_section("SUMMARY")
        self._write_line(f"Duration: {self._format_duration(duration_seconds)}")
        self._write_line("")
        self._write_line(f"Log file: {self._log_file_path}")
        self._write_separator()

    def _format_target(self, mapping: Mapping) -> str:
        return mapping.mapped_to if mapping.mapped_to else "(unmapped)"

    def _format_duration(self, seconds: float) -> str:
        """Format duration as "45s", "5m 23s" or "1h 5m 30s"."""
        total_seconds = int(seconds)

        if total_seconds < 60:
            return f"{total_seconds}s"

        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        secs = total_seconds % 60

        if hours > 0:
            return f"{hours}h {minutes}m {secs}s"
        return f"{minutes}m {secs}s"

    def _format_timestamp(self, dt: datetime) -> str:
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    def _write_section(self, title: str) -> None:
        self._write_separator()
        self._write_line(title)
        self._write_separator()

    def _write_separator(self) -> None:
        self._write_line(self.SEPARATOR)

    def _write_line(self, text: str, indent: int = 0) -> None:
        """Write a line with optional indentation.

        Args:
            text: The text to write.
            indent: Number of spaces to indent the line.
        """
        if self._file_handle is None:
            print(
                f"Warning: Attempted to write to closed log file: {text}",
                file=sys.stderr,
            )
            return

        try:
            self._file_handle.write(" " * indent + text + "\n")
        except OSError as e:
            print(f"Warning: Error writing to log file: {e}", file=sys.stderr)
