"""Program matching package for progmap.

This package contains the fuzzy-matching engine used to reconcile free-text
program names with the canonical program list.

Example:
    >>> from progmap.matching import ProgramMatcher, similarity
    >>> similarity("Accounting 2024", "Accounting")
    95
    >>> ProgramMatcher().match("Law", ["Law", "Medicine"]).status.value
    'confident'
"""

from .classifier import (
    CONFIDENT_THRESHOLD,
    UNCERTAIN_THRESHOLD,
    classify,
    score_band,
)
from .program_matcher import ProgramMatcher
from .scoring import levenshtein_distance, normalize, similarity, strip_year

__all__ = [
    "CONFIDENT_THRESHOLD",
    "UNCERTAIN_THRESHOLD",
    "ProgramMatcher",
    "classify",
    "levenshtein_distance",
    "normalize",
    "score_band",
    "similarity",
    "strip_year",
]
