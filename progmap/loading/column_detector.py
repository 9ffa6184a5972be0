"""Header heuristics for locating the interesting columns of a data file.

Headers are compared in normalized form (lower case, no accents), so
"Programa de Interés" and "programa_de_interes" are treated alike. Detection
falls back to None for any column that no header matches; callers can then
ask the user to pick the program column explicitly.
"""

import math
from typing import Dict, List, Mapping, Sequence, Tuple

from progmap.matching import normalize
from progmap.models import ColumnDetection

COLUMN_PATTERNS: Dict[str, Tuple[str, ...]] = {
    "program": ("program", "programa", "interes", "carrera"),
    "email": ("email", "mail", "correo", "eml"),
    "phone": ("tel", "phone", "celular", "telefono", "whatsapp"),
    "database": ("iddatabase", "database", "base"),
}


def _contains_any(header: str, patterns: Sequence[str]) -> bool:
    return any(pattern in header for pattern in patterns)


def detect_columns(headers: Sequence[str]) -> ColumnDetection:
    """Guess which headers hold the program, email, phone, contact id and database.

    A header mentioning both "program" and "interes" always wins the program
    column; otherwise the first header matching a program keyword is used.
    The other columns take the last matching header.

    Args:
        headers: Header names in file order.

    Returns:
        ColumnDetection with the original (not normalized) header names.
    """
    detected = ColumnDetection()

    for header in headers:
        normalized = normalize(header)

        if "program" in normalized and "interes" in normalized:
            detected.program = header
        elif detected.program is None and _contains_any(normalized, COLUMN_PATTERNS["program"]):
            detected.program = header

        if _contains_any(normalized, COLUMN_PATTERNS["email"]):
            detected.email = header

        if _contains_any(normalized, COLUMN_PATTERNS["phone"]):
            detected.phone = header

        if "id" in normalized and "contacto" in normalized:
            detected.contact_id = header

        if _contains_any(normalized, COLUMN_PATTERNS["database"]):
            detected.database = header

    return detected


def _database_sort_key(value: str) -> Tuple[int, float, str]:
    try:
        number = float(value)
    except ValueError:
        return (1, 0.0, value)
    if not math.isfinite(number):
        return (1, 0.0, value)
    return (0, number, value)


def unique_databases(rows: Sequence[Mapping[str, str]], field: str) -> List[str]:
    """Distinct non-empty values of ``field``, numeric ones first in numeric order."""
    values = {
        str(row[field]).strip()
        for row in rows
        if row.get(field) is not None and str(row[field]).strip()
    }
    return sorted(values, key=_database_sort_key)
