"""String normalization and similarity scoring for program names.

The score is evaluated as a chain of rules, first match wins:
    1. Normalized forms are equal (100)
    2. Normalized forms are equal once a trailing year is removed (95)
    3. Levenshtein similarity over the normalized forms (0-100)

Example:
    >>> similarity("Administración_de  Empresas", "administracion de empresas")
    100
    >>> similarity("Marketing 2023", "Marketing 2024")
    95
    >>> similarity("Nursin", "Nursing")
    86
"""

import re
import unicodedata
from typing import Any

from rapidfuzz.distance import Levenshtein

EXACT_SCORE = 100
YEAR_STRIPPED_SCORE = 95

# Combining diacritical marks block (accents left behind by NFD)
_DIACRITICS_PATTERN = re.compile("[\u0300-\u036f]")
_WHITESPACE_PATTERN = re.compile(r"\s+")
# Cohort suffix such as "Accounting 2024"
_TRAILING_YEAR_PATTERN = re.compile(r"\s*[0-9]{4}\s*$")


def normalize(value: Any) -> str:
    """Canonicalize a raw string for comparison.

    Lower-cases, strips accents, turns underscores into spaces, collapses
    whitespace runs and trims. ``None`` and empty values give ``""``;
    anything else that is not a string is stringified first.

    Args:
        value: Raw value to normalize.

    Returns:
        The normalized string.
    """
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    if not text:
        return ""

    text = unicodedata.normalize("NFD", text.lower())
    text = _DIACRITICS_PATTERN.sub("", text)
    text = text.replace("_", " ")
    text = _WHITESPACE_PATTERN.sub(" ", text)
    return text.strip()


def strip_year(normalized: str) -> str:
    """Remove a trailing four-digit year token from a normalized string."""
    return _TRAILING_YEAR_PATTERN.sub("", normalized).strip()


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance with unit cost for insert, delete and substitute."""
    return Levenshtein.distance(a, b)


def similarity(a: Any, b: Any) -> int:
    """Compute a 0-100 similarity score between two program names.

    Args:
        a: First name (raw, normalized internally).
        b: Second name (raw, normalized internally).

    Returns:
        Integer score in [0, 100]. The edit-distance ratio is rounded half
        up using exact integer arithmetic, so 62.5 becomes 63.
    """
    norm1 = normalize(a)
    norm2 = normalize(b)

    if norm1 == norm2:
        return EXACT_SCORE

    if strip_year(norm1) == strip_year(norm2):
        return YEAR_STRIPPED_SCORE

    max_len = max(len(norm1), len(norm2))
    if max_len == 0:
        return EXACT_SCORE

    distance = levenshtein_distance(norm1, norm2)
    # round((max_len - distance) / max_len * 100), half up
    return (200 * (max_len - distance) + max_len) // (2 * max_len)
