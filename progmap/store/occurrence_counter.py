"""Occurrence counting of program values across source rows."""

from typing import Any, Dict, Iterable, Mapping


def count_occurrences(rows: Iterable[Mapping[str, Any]], program_field: str) -> Dict[str, int]:
    """Tally how many rows carry each distinct trimmed program value.

    Rows without the field, or whose value is blank once trimmed, are
    skipped. Keys keep first-seen order.

    Args:
        rows: Source rows, each a mapping from field name to cell value.
        program_field: Name of the field holding the program value.

    Returns:
        Dict mapping each trimmed value to its positive row count.

    Example:
        >>> count_occurrences([{"prog": " Law"}, {"prog": "Law"}, {"prog": ""}], "prog")
        {'Law': 2}
    """
    counts: Dict[str, int] = {}
    for row in rows:
        raw = row.get(program_field)
        if raw is None:
            continue
        value = str(raw).strip()
        if not value:
            continue
        counts[value] = counts.get(value, 0) + 1
    return counts
