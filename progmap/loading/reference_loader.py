"""Loading of the canonical program list.

The list is either plain text with one program per line, or a Power BI DAX
``DATATABLE`` definition whose rows look like ``{"Program Name", "Type"},``.
In the DAX case the first quoted value of each row is the program name.

Example:
    >>> parse_reference_text('DATATABLE("Name", STRING, {{"Law", "Pregrado"}})')
    ['Law']
    >>> parse_reference_text("Law\\n\\n  Medicine  \\n")
    ['Law', 'Medicine']
"""

import re
from pathlib import Path
from typing import List, Optional

_DAX_ROW_PATTERN = re.compile(r'\{\s*"([^"]+)"\s*,\s*"([^"]+)"\s*\}')


def parse_dax_datatable(text: str) -> Optional[List[str]]:
    """Extract program names from DAX DATATABLE text.

    Args:
        text: Raw reference text.

    Returns:
        Program names in row order, or None if the text does not look like
        DAX or no row could be extracted.
    """
    if "DATATABLE" not in text and "{" not in text and '"' not in text:
        return None

    programs = []
    for match in _DAX_ROW_PATTERN.finditer(text):
        name = match.group(1).strip()
        if name:
            programs.append(name)

    return programs or None


def parse_reference_text(text: str) -> List[str]:
    """Parse reference text, trying the DAX format before plain lines."""
    text = text.strip()
    programs = parse_dax_datatable(text)
    if programs is not None:
        return programs
    return [line.strip() for line in text.splitlines() if line.strip()]


def load_reference_file(path: Path) -> List[str]:
    """Read and parse a reference list file.

    Args:
        path: UTF-8 text file (a BOM is tolerated).

    Returns:
        Canonical program names in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file contains no program names.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Reference list not found: {path}")

    with open(path, "r", encoding="utf-8-sig") as f:
        programs = parse_reference_text(f.read())

    if not programs:
        raise ValueError(f"Reference list is empty: {path}")
    return programs
