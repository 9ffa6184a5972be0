"""MappingSession for coordinating one program reconciliation session.

This module provides the MappingSession class that owns all state of a
session: the canonical program list, the loaded data file, the detected
columns, the occurrence counts and the mapping store. Front ends (the CLI,
the TUI, batch scripts) drive it through plain synchronous calls.

Example:
    from progmap.loading import read_table
    from progmap.orchestration import MappingSession

    session = MappingSession()
    session.load_reference_text("Law\\nMedicine")
    session.load_table(read_table(Path("submissions.xlsx")))
    summary = session.run_matching()
    session.override("MED", target="Medicine")
    headers, rows = session.export_rows()
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from progmap.loading import (
    detect_columns,
    load_reference_file,
    parse_reference_text,
    unique_databases,
)
from progmap.models import (
    ColumnDetection,
    Mapping,
    MappingEntry,
    MappingFilter,
    MappingSummary,
    TabularData,
)
from progmap.operations import COMPACT_HEADERS, ExportWriter
from progmap.store import MappingStore, count_occurrences

logger = logging.getLogger("progmap.session")


class MappingSession:
    """Explicit session state for reconciling program names.

    The session is created empty. The reference list and the data file can
    be loaded in any order; matching is possible once both are present and
    a program column is known.

    Attributes:
        store: MappingStore holding the current classifications.
        overrides: Manual changes applied since the last matching pass, as
            (value, new mapping) pairs in the order they were made.
    """

    def __init__(self, store: Optional[MappingStore] = None) -> None:
        self.store = store if store is not None else MappingStore()
        self.overrides: List[Tuple[str, Mapping]] = []
        self._programs: List[str] = []
        self._data: Optional[TabularData] = None
        self._detection = ColumnDetection()
        self._counts: Dict[str, int] = {}

    # ------------------------------------------------------------------
    # Reference list
    # ------------------------------------------------------------------

    @property
    def programs(self) -> List[str]:
        return list(self._programs)

    def load_reference_list(self, programs: Sequence[str]) -> List[str]:
        """Replace the canonical list with trimmed, non-empty names."""
        self._programs = [p.strip() for p in programs if p and p.strip()]
        logger.debug(f"Loaded {len(self._programs)} canonical programs")
        return self.programs

    def load_reference_text(self, text: str) -> List[str]:
        """Parse plain-line or DAX DATATABLE text into the canonical list."""
        return self.load_reference_list(parse_reference_text(text))

    def load_reference_file(self, path) -> List[str]:
        """Load the canonical list from a file (see load_reference_file)."""
        return self.load_reference_list(load_reference_file(path))

    # ------------------------------------------------------------------
    # Input data
    # ------------------------------------------------------------------

    @property
    def data(self) -> Optional[TabularData]:
        return self._data

    @property
    def detection(self) -> ColumnDetection:
        return self._detection

    @property
    def program_field(self) -> Optional[str]:
        return self._detection.program

    @property
    def counts(self) -> Dict[str, int]:
        return dict(self._counts)

    def load_table(self, data: TabularData) -> ColumnDetection:
        """Attach a loaded data file and detect its columns.

        Any previous matching results belong to the previous file and are
        discarded.
        """
        self.reset_input()
        self._data = data
        self._detection = detect_columns(data.headers)
        logger.debug(
            f"Loaded {len(data.rows)} rows, program column: {self._detection.program}"
        )
        return self._detection

    def reset_input(self) -> None:
        """Forget the data file, its columns, counts and mappings."""
        self._data = None
        self._detection = ColumnDetection()
        self._counts = {}
        self.overrides = []
        self.store.clear()

    def set_program_field(self, header: str) -> None:
        """Choose the program column explicitly.

        Raises:
            ValueError: If no data is loaded or ``header`` is not one of its
                headers.
        """
        if self._data is None:
            raise ValueError("No data file loaded")
        if header not in self._data.headers:
            raise ValueError(
                f"Column '{header}' not found; available: {', '.join(self._data.headers)}"
            )
        self._detection.program = header

    def unique_databases(self) -> List[str]:
        """Distinct values of the detected database column."""
        if self._data is None or self._detection.database is None:
            return []
        return unique_databases(self._data.rows, self._detection.database)

    def is_ready(self) -> bool:
        """True when programs, data and a program column are all available."""
        return bool(self._programs) and self._data is not None and self.program_field is not None

    # ------------------------------------------------------------------
    # Matching and overrides
    # ------------------------------------------------------------------

    def count_values(self) -> Dict[str, int]:
        """Occurrence counts of the program column, without matching.

        Raises:
            ValueError: If no data or no program column is available.
        """
        if self._data is None:
            raise ValueError("No data file loaded")
        if self.program_field is None:
            raise ValueError("Program column not detected; choose it explicitly")
        return count_occurrences(self._data.rows, self.program_field)

    def run_matching(
        self, progress_callback: Optional[Callable[[int], None]] = None
    ) -> MappingSummary:
        """Count occurrences and run a full matching pass.

        Args:
            progress_callback: Optional function called with the number of
                distinct values processed so far.

        Returns:
            MappingSummary of the fresh store.

        Raises:
            ValueError: If the session is not ready. Existing results are
                left untouched in that case.
        """
        if not self._programs:
            raise ValueError("No canonical programs loaded")
        counts = self.count_values()
        self.store.run_matching_pass(counts.keys(), self._programs, progress_callback)
        self._counts = counts
        self.overrides = []

        summary = self.store.summary_counts()
        logger.info(
            f"Matched {summary.total} distinct values: {summary.confident} confident, "
            f"{summary.uncertain} uncertain, {summary.unmapped} unmapped"
        )
        return summary

    def override(
        self,
        value: str,
        target: Optional[str] = None,
        leave_unmapped: bool = False,
    ) -> bool:
        """Manually remap one value; see MappingStore.override."""
        changed = self.store.override(value, target=target, leave_unmapped=leave_unmapped)
        if changed:
            self.overrides.append((value, self.store.get(value)))
            logger.debug(f"Override: {value!r} -> {self.store.get(value).mapped_to!r}")
        return changed

    # ------------------------------------------------------------------
    # Reporting and export
    # ------------------------------------------------------------------

    def entries(self, mapping_filter: MappingFilter = MappingFilter.ALL) -> List[MappingEntry]:
        """Reporting rows: value, mapping and row count, in store order."""
        return [
            MappingEntry(value=value, mapping=mapping, count=self._counts.get(value, 0))
            for value, mapping in self.store.query(mapping_filter)
        ]

    def summary(self) -> MappingSummary:
        return self.store.summary_counts()

    def target_counts(self) -> Dict[str, int]:
        """Rows per mapped canonical program, aggregated over input variants."""
        totals: Dict[str, int] = {}
        for value, mapping in self.store.query():
            if mapping.mapped_to:
                totals[mapping.mapped_to] = totals.get(mapping.mapped_to, 0) + self._counts.get(value, 0)
        return totals

    def export_rows(self, compact: bool = False) -> Tuple[List[str], List[Dict[str, str]]]:
        """Build the transformed row set.

        Args:
            compact: Produce only contact id, email and program columns.

        Returns:
            Tuple of (headers, rows).

        Raises:
            ValueError: If no data or no program column is available.
        """
        if self._data is None:
            raise ValueError("No data file loaded")
        if self.program_field is None:
            raise ValueError("Program column not detected; choose it explicitly")

        writer = ExportWriter(self.store)
        if compact:
            return list(COMPACT_HEADERS), writer.build_compact_rows(self._data.rows, self._detection)
        return list(self._data.headers), writer.build_export_rows(self._data.rows, self.program_field)
